from __future__ import annotations

import logging

from geoname_resolver.config import RetrievalConfig
from geoname_resolver.index import GazetteerIndex, QueryError
from geoname_resolver.models import Candidate, GazetteerRecord

logger = logging.getLogger(__name__)


def to_candidate(record: GazetteerRecord) -> Candidate:
    # Candidate falls back to the primary name when alternate names are empty
    return Candidate(
        name=record.name,
        alternate_names=record.alternate_names,
        country_code=record.country_code,
        admin1_code=record.admin1_code,
        admin2_code=record.admin2_code,
        latitude=record.latitude,
        longitude=record.longitude,
        feature_code=record.feature_code,
    )


class CandidateRetriever:
    """
    Fetches the raw candidate set for one query name.

    Over-fetches `per_name_limit * overfetch_factor` hits in taxonomy and
    population order and keeps the first `per_name_limit`.
    """

    def __init__(self, index: GazetteerIndex, config: RetrievalConfig | None = None):
        self.index = index
        self.config = config or RetrievalConfig()

    def retrieve(self, name: str, per_name_limit: int) -> list[Candidate]:
        if per_name_limit <= 0:
            return []
        try:
            records = self.index.search(name, per_name_limit * self.config.overfetch_factor)
        except QueryError as e:
            logger.warning("Skipping name %r: %s", name, e)
            return []

        logger.debug("Retrieved %d hits for %r", len(records), name)
        return [to_candidate(r) for r in records[:per_name_limit]]
