"""
Shared fixtures: a small GeoNames-style gazetteer and an index built from it.
"""

from __future__ import annotations

import pytest

from geoname_resolver.index import build_index


def make_row(
    geoname_id,
    name,
    alternate_names="",
    lat="0.0",
    lon="0.0",
    feature_class="P",
    feature_code="PPL",
    country="US",
    admin1="",
    admin2="",
    population="0",
) -> str:
    """One tab-separated line in the 19-column GeoNames dump layout."""
    cols = [""] * 19
    cols[0] = str(geoname_id)
    cols[1] = name
    cols[2] = name  # asciiname
    cols[3] = alternate_names
    cols[4] = str(lat)
    cols[5] = str(lon)
    cols[6] = feature_class
    cols[7] = feature_code
    cols[8] = country
    cols[10] = admin1
    cols[11] = admin2
    cols[14] = str(population)
    cols[17] = "Etc/UTC"
    cols[18] = "2024-01-01"
    return "\t".join(cols)


SPRINGFIELD_COUNT = 10

GAZETTEER_ROWS = [
    make_row(2988507, "Paris", "Lutece,Paname,Paris,Parigi", 48.85341, 2.3488,
             "P", "PPLC", "FR", "11", "75", 2000000),
    make_row(4717560, "Paris", "", 33.66094, -95.55551,
             "P", "PPL", "US", "TX", "277", 25000),
    make_row(5128581, "New York City", "Big Apple,NYC,New York", 40.71427, -74.00597,
             "P", "PPL", "US", "NY", "", 8804190),
    make_row(5128638, "New York", "NY,State of New York", 43.00035, -75.4999,
             "A", "ADM1", "US", "NY", "", 19274244),
    make_row(2633352, "York", "Eboracum", 53.95763, -1.08271,
             "P", "PPLA2", "GB", "ENG", "Q5", 153717),
    # same class, unknown code with a huge population vs. known code
    make_row(9000001, "Camden", "", 39.92595, -75.11962, "P", "PPLZ", "US", "NJ", "007", 1000000),
    make_row(9000002, "Camden", "", 51.54057, -0.14334, "P", "PPLX", "GB", "ENG", "", 100),
    # unparseable coordinates and population
    make_row(9000003, "Nowhereville", "", "abc", "", "P", "PPL", "US", "", "", "n/a"),
]

GAZETTEER_ROWS += [
    make_row(8000000 + i, "Springfield", "", 39.0 + i, -89.0, "P", "PPL", "US",
             "IL", "", 1000 * (i + 1))
    for i in range(SPRINGFIELD_COUNT)
]

MALFORMED_ROWS = [
    "too\tfew\tcolumns",
    make_row("not-a-number", "Broken"),
]


@pytest.fixture(scope="session")
def gazetteer_file(tmp_path_factory):
    path = tmp_path_factory.mktemp("gazetteer") / "allCountries.txt"
    lines = GAZETTEER_ROWS[:3] + MALFORMED_ROWS + GAZETTEER_ROWS[3:]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture(scope="session")
def index_path(gazetteer_file, tmp_path_factory):
    path = tmp_path_factory.mktemp("index") / "geoIndex"
    build_index(gazetteer_file, path)
    return path
