"""
Tests for feature class / feature code ordering.
"""

from __future__ import annotations

import pytest

from geoname_resolver.taxonomy import (
    FEATURE_CLASS_ORDER,
    FEATURE_CLASS_RANKS,
    FEATURE_CODE_ORDER,
    FIELD_FEATURE_CLASS,
    FIELD_FEATURE_CODE,
    UNKNOWN_RANK_GAP,
    TaxonomyComparator,
    compare_feature_classes,
    compare_feature_codes,
    comparator_for,
    feature_class_rank,
    feature_code_rank,
)


class TestFeatureClass:
    def test_total_order(self):
        assert FEATURE_CLASS_ORDER == ("A", "P", "S", "T", "L", "H", "R", "V", "U")
        for earlier, later in zip(FEATURE_CLASS_ORDER, FEATURE_CLASS_ORDER[1:]):
            assert compare_feature_classes(earlier, later) < 0
            assert compare_feature_classes(later, earlier) > 0

    def test_rank_lookup(self):
        assert feature_class_rank("A") == 0
        assert feature_class_rank("U") == 8
        assert feature_class_rank(" P ") == 1

    def test_unknown_class(self):
        assert feature_class_rank("X") is None
        assert feature_class_rank("") is None
        assert feature_class_rank(None) is None

    def test_known_before_unknown(self):
        assert compare_feature_classes("U", "X") == -UNKNOWN_RANK_GAP
        assert compare_feature_classes("X", "A") == UNKNOWN_RANK_GAP

    def test_unknowns_equal(self):
        assert compare_feature_classes("X", "Y") == 0
        assert compare_feature_classes("", "Q") == 0

    def test_gap_exceeds_rank_spread(self):
        spread = max(FEATURE_CLASS_RANKS.values()) - min(FEATURE_CLASS_RANKS.values())
        assert UNKNOWN_RANK_GAP > spread
        assert abs(compare_feature_classes("A", "U")) < UNKNOWN_RANK_GAP


class TestFeatureCode:
    def test_curated_order(self):
        for earlier, later in zip(FEATURE_CODE_ORDER, FEATURE_CODE_ORDER[1:]):
            assert feature_code_rank(earlier) < feature_code_rank(later)

    def test_administrative_importance(self):
        assert compare_feature_codes("PCLI", "ADM1") < 0
        assert compare_feature_codes("ADM1", "ADM2") < 0
        assert compare_feature_codes("PPLC", "PPL") < 0
        assert compare_feature_codes("PPL", "PPLC") > 0

    def test_same_code_equal(self):
        assert compare_feature_codes("PPL", "PPL") == 0

    def test_known_beats_unknown(self):
        # last curated code still beats any unknown
        assert compare_feature_codes(FEATURE_CODE_ORDER[-1], "PPLZ") == -UNKNOWN_RANK_GAP
        assert compare_feature_codes("NEWCODE", "TERR") == UNKNOWN_RANK_GAP

    def test_unknowns_equal(self):
        assert compare_feature_codes("NEWCODE", "OTHER") == 0
        assert feature_code_rank("ll") is None


class TestComparator:
    def test_bound_to_field(self):
        assert comparator_for(FIELD_FEATURE_CLASS)("A", "P") < 0
        assert comparator_for(FIELD_FEATURE_CODE)("PPLC", "PPL") < 0

    def test_rejects_other_fields(self):
        with pytest.raises(ValueError):
            TaxonomyComparator("population")
        with pytest.raises(ValueError):
            comparator_for("name")

    def test_sort_key(self):
        codes = ["XYZ", "PPL", "ADM2", "ABC", "PCLI", "PPLC"]
        ordered = sorted(codes, key=comparator_for(FIELD_FEATURE_CODE).sort_key())
        assert ordered[:4] == ["PCLI", "ADM2", "PPLC", "PPL"]
        # unknowns keep their relative order (stable sort, compare equal)
        assert ordered[4:] == ["XYZ", "ABC"]
