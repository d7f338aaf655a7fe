"""
Relevance weighting and top-K selection for retrieved candidates.

weight = name match + alternate-name term + rank decay

  name match      query found as a whole word in the candidate name scores
                  name_match_weight, found anywhere else name_part_match_weight,
                  otherwise 0
  alternate names n * alt_name_weight - d / n, where n is the number of
                  alternate names and d the summed Levenshtein distance of the
                  alternates that contain the query
  rank decay      (total - i) * sort_order_weight for the i-th retrieved hit

Candidates are popped from a max-heap on weight; equal weights come out in
retrieval order.
"""

from __future__ import annotations

import heapq
import logging

from rapidfuzz.distance import Levenshtein

from geoname_resolver.config import RankingConfig
from geoname_resolver.models import Candidate

logger = logging.getLogger(__name__)


class CandidateRanker:
    def __init__(self, weights: RankingConfig | None = None):
        self.weights = weights or RankingConfig()

    def name_match_weight(self, name: str, candidate_name: str) -> int:
        # Space padding restricts the first test to whole words
        if f" {name} " in f" {candidate_name} ":
            return self.weights.name_match_weight
        if name in candidate_name:
            return self.weights.name_part_match_weight
        return 0

    def alternate_name_weight(self, name: str, alternate_names: list[str]) -> float:
        n = len(alternate_names)
        distance = sum(
            Levenshtein.distance(name, alt) for alt in alternate_names if name in alt
        )
        return n * self.weights.alt_name_weight - distance / n

    def weigh(self, name: str, candidates: list[Candidate]) -> None:
        """Set `weight` on every candidate, in retrieval order."""
        total = len(candidates)
        for i, candidate in enumerate(candidates):
            candidate.weight = (
                self.name_match_weight(name, candidate.name)
                + self.alternate_name_weight(name, candidate.alternate_name_list())
                + (total - i) * self.weights.sort_order_weight
            )

    def rank(self, name: str, candidates: list[Candidate], count: int) -> list[Candidate]:
        """Best `count` candidates for `name`, highest weight first."""
        if not candidates or count <= 0:
            return []

        self.weigh(name, candidates)
        heap = [(-c.weight, i, c) for i, c in enumerate(candidates)]
        heapq.heapify(heap)

        ranked = [heapq.heappop(heap)[2] for _ in range(min(count, len(heap)))]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Ranked %r: %s", name, [(c.name, c.feature_code, c.weight) for c in ranked]
            )
        return ranked
