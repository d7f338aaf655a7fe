"""
Batch resolution of place names against the gazetteer index.

For every distinct input name: retrieve candidates, rank them, keep the best
`count`. Names without any candidates are left out of the result.
"""

from __future__ import annotations

import logging

from geoname_resolver.config import Settings, get_settings
from geoname_resolver.index import GazetteerIndex, PathLike
from geoname_resolver.models import Candidate, ResolvedLocation
from geoname_resolver.ranker import CandidateRanker
from geoname_resolver.retriever import CandidateRetriever

logger = logging.getLogger(__name__)


class GeoNameResolver:
    """
    Resolves batches of names against one read-only index.

    The index is opened once in the constructor; the instance holds no other
    state between calls and can serve concurrent callers.
    """

    def __init__(self, index_path: PathLike | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.index_path = index_path if index_path is not None else self.settings.index.path
        self.index = GazetteerIndex(self.index_path)
        self.retriever = CandidateRetriever(self.index, self.settings.retrieval)
        self.ranker = CandidateRanker(self.settings.ranking)

    def search(self, names: list[str], count: int) -> dict[str, list[Candidate]]:
        """Map each distinct name to its best `count` candidates."""
        if not names or not names[0]:
            return {}

        hits_per_name = self.settings.retrieval.hits_per_name(len(names))
        resolved: dict[str, list[Candidate]] = {}
        seen: set[str] = set()

        for name in names:
            if name in seen:
                continue
            seen.add(name)

            candidates = self.retriever.retrieve(name, hits_per_name)
            if not candidates:
                logger.debug("No candidates for %r", name)
                continue
            resolved[name] = self.ranker.rank(name, candidates, count)

        logger.info(
            "Resolved %d/%d distinct names (hits per name: %d)",
            len(resolved), len(seen), hits_per_name,
        )
        return resolved

    resolve = search

    def search_locations(self, names: list[str], count: int) -> dict[str, list[ResolvedLocation]]:
        """Like search(), with candidates converted to output records."""
        return {
            name: [c.to_location() for c in candidates]
            for name, candidates in self.search(names, count).items()
        }

    def close(self) -> None:
        self.index.close()

    def __enter__(self) -> "GeoNameResolver":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def search_geo_names(
    index_path: PathLike,
    names: list[str],
    count: int,
    settings: Settings | None = None,
) -> dict[str, list[ResolvedLocation]]:
    """Open the index, resolve `names`, close it again."""
    if not names or not names[0]:
        return {}
    with GeoNameResolver(index_path, settings) as resolver:
        return resolver.search_locations(names, count)
