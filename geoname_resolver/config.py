"""
Central configuration loaded from environment variables with sensible defaults.
Components take a Settings (or one of its groups) explicitly; get_settings()
only supplies the process default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class IndexConfig:
    path: str = os.getenv("GAZETTEER_INDEX_PATH", "geoIndex")
    # Log progress every N gazetteer rows while building
    progress_interval: int = int(os.getenv("GAZETTEER_PROGRESS_INTERVAL", "100000"))


@dataclass(frozen=True)
class RetrievalConfig:
    hits_per_page: int = int(os.getenv("RETRIEVAL_HITS_PER_PAGE", "8"))
    # Smaller budget used for very large batches to bound total work
    reduced_hits_per_page: int = int(os.getenv("RETRIEVAL_REDUCED_HITS_PER_PAGE", "5"))
    large_batch_threshold: int = int(os.getenv("RETRIEVAL_LARGE_BATCH", "200"))
    # Raw hits requested = hits per name * overfetch factor
    overfetch_factor: int = int(os.getenv("RETRIEVAL_OVERFETCH", "3"))

    def hits_per_name(self, batch_size: int) -> int:
        """Per-name hit budget for a batch of `batch_size` names."""
        if batch_size >= self.large_batch_threshold:
            return self.reduced_hits_per_page
        return self.hits_per_page


@dataclass(frozen=True)
class RankingConfig:
    name_match_weight: int = int(os.getenv("RANK_NAME_MATCH_WEIGHT", "20000"))
    name_part_match_weight: int = int(os.getenv("RANK_NAME_PART_MATCH_WEIGHT", "15000"))
    alt_name_weight: int = int(os.getenv("RANK_ALT_NAME_WEIGHT", "50"))
    sort_order_weight: int = int(os.getenv("RANK_SORT_ORDER_WEIGHT", "20"))


@dataclass(frozen=True)
class APIConfig:
    host: str = os.getenv("API_HOST", "0.0.0.0")
    port: int = int(os.getenv("API_PORT", "8765"))


@dataclass(frozen=True)
class Settings:
    index: IndexConfig = field(default_factory=IndexConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    env: str = os.getenv("APP_ENV", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton settings instance."""
    return Settings()
