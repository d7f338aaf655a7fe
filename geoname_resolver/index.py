"""
Gazetteer index: one-shot builder and read-only search handle.

The index is a SQLite database inside the index directory:

  geonames      every stored field of a gazetteer row, keyed by GeoNames id
  geonames_fts  FTS5 external-content table over name + alternatenames,
                used for phrase queries
  meta          build metadata; a "complete" key marks a finished build

Feature class and feature code are stored as plain columns and ordered at
query time through SQLite collations backed by the taxonomy comparators, so
the ordering can change without re-indexing. Population is an INTEGER column
sorted descending.
"""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from geoname_resolver.config import Settings, get_settings
from geoname_resolver.models import GazetteerRecord, IndexBuildStats, MalformedRowError
from geoname_resolver.taxonomy import FIELD_FEATURE_CLASS, FIELD_FEATURE_CODE, comparator_for

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

DB_FILENAME = "geonames.sqlite"
SCHEMA_VERSION = "1"

_SCHEMA = (
    """
    CREATE TABLE geonames (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        alternatenames TEXT NOT NULL DEFAULT '',
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        feature_class TEXT NOT NULL DEFAULT '',
        feature_code TEXT NOT NULL DEFAULT '',
        country_code TEXT NOT NULL DEFAULT '',
        admin1_code TEXT NOT NULL DEFAULT '',
        admin2_code TEXT NOT NULL DEFAULT '',
        population INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE VIRTUAL TABLE geonames_fts USING fts5(
        name, alternatenames, content='geonames', content_rowid='id'
    )
    """,
    "CREATE TABLE meta (key TEXT PRIMARY KEY, value TEXT NOT NULL)",
)

_INSERT_SQL = """
    INSERT INTO geonames (
        id, name, alternatenames, latitude, longitude, feature_class,
        feature_code, country_code, admin1_code, admin2_code, population
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""

_SEARCH_SQL = f"""
    SELECT g.id, g.name, g.alternatenames AS alternate_names, g.latitude,
           g.longitude, g.feature_class, g.feature_code, g.country_code,
           g.admin1_code, g.admin2_code, g.population
    FROM geonames_fts
    JOIN geonames AS g ON g.id = geonames_fts.rowid
    WHERE geonames_fts MATCH ?
    ORDER BY g.feature_class COLLATE {FIELD_FEATURE_CLASS},
             g.feature_code COLLATE {FIELD_FEATURE_CODE},
             g.population DESC,
             g.id
    LIMIT ?
"""


class IndexNotFoundError(FileNotFoundError):
    """No completed index at the requested path."""


class QueryError(ValueError):
    """A query name that cannot be turned into a phrase query."""


def db_path(index_path: PathLike) -> Path:
    return Path(index_path) / DB_FILENAME


def _connect_read_only(path: Path) -> sqlite3.Connection:
    uri = f"{path.resolve().as_uri()}?mode=ro"
    return sqlite3.connect(uri, uri=True, check_same_thread=False)


def index_exists(index_path: PathLike) -> bool:
    """True when a completed index is present at `index_path`."""
    path = db_path(index_path)
    if not path.is_file():
        return False
    try:
        conn = _connect_read_only(path)
    except sqlite3.Error:
        return False
    try:
        row = conn.execute("SELECT value FROM meta WHERE key = 'complete'").fetchone()
    except sqlite3.DatabaseError:
        return False
    finally:
        conn.close()
    return row is not None and row[0] == "1"


def phrase_query(name: str) -> str:
    """
    FTS5 phrase expression matching `name` as a single unit.

    The whole string is quoted so multi-word names match as a phrase rather
    than as independent terms.
    """
    if name is None or not name.strip():
        raise QueryError("empty query name")
    if "\x00" in name:
        raise QueryError(f"invalid character in query name {name!r}")
    return '"' + name.replace('"', '""') + '"'


# ══════════════════════════════════════════════════════════════════════
# BUILD
# ══════════════════════════════════════════════════════════════════════

def build_index(
    source_path: PathLike,
    index_path: PathLike,
    settings: Settings | None = None,
) -> IndexBuildStats:
    """
    Build the index at `index_path` from the gazetteer file at `source_path`.

    Skips entirely when a completed index already exists. Otherwise the build
    writes to a temporary file that only replaces the final database once every
    row has been read, so an interrupted build never leaves a valid-looking
    index behind. Malformed rows are logged and skipped; I/O errors propagate.
    """
    settings = settings or get_settings()
    progress_interval = max(1, settings.index.progress_interval)
    stats = IndexBuildStats(index_path=str(index_path))

    if index_exists(index_path):
        logger.info("Index already exists at %s, skipping build", index_path)
        stats.already_built = True
        return stats

    target = db_path(index_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".partial")
    if partial.exists():
        partial.unlink()

    logger.warning("Start building index for gazetteer %s", source_path)
    start = time.monotonic()
    conn = sqlite3.connect(str(partial))
    try:
        conn.execute("PRAGMA journal_mode = OFF")
        conn.execute("PRAGMA synchronous = OFF")
        for statement in _SCHEMA:
            conn.execute(statement)

        with open(source_path, "r", encoding="utf-8", errors="replace") as f:
            for lineno, line in enumerate(f, 1):
                stats.rows_read += 1
                if lineno % progress_interval == 0:
                    logger.info("Indexed row count: %d", lineno)
                try:
                    record = GazetteerRecord.from_row(line)
                    _add_record(conn, record)
                except (MalformedRowError, ValidationError, sqlite3.IntegrityError, OverflowError) as e:
                    stats.rows_skipped += 1
                    logger.warning("Skipping gazetteer line %d: %s", lineno, _short_error(e))
                    continue
                stats.rows_indexed += 1

        conn.execute("INSERT INTO geonames_fts(geonames_fts) VALUES ('rebuild')")
        _write_meta(conn, source_path, stats)
        conn.commit()
    except BaseException:
        conn.close()
        partial.unlink(missing_ok=True)
        raise
    conn.close()

    os.replace(partial, target)
    stats.duration_seconds = round(time.monotonic() - start, 3)
    logger.warning(
        "Building finished: %d rows indexed, %d skipped in %.1fs",
        stats.rows_indexed, stats.rows_skipped, stats.duration_seconds,
    )
    return stats


def _add_record(conn: sqlite3.Connection, record: GazetteerRecord) -> None:
    conn.execute(
        _INSERT_SQL,
        (
            record.id,
            record.name,
            record.alternate_names,
            record.latitude,
            record.longitude,
            record.feature_class,
            record.feature_code,
            record.country_code,
            record.admin1_code,
            record.admin2_code,
            record.population,
        ),
    )


def _write_meta(conn: sqlite3.Connection, source_path: PathLike, stats: IndexBuildStats) -> None:
    meta = {
        "schema_version": SCHEMA_VERSION,
        "source": str(source_path),
        "rows_indexed": str(stats.rows_indexed),
        "rows_skipped": str(stats.rows_skipped),
        "built_at": datetime.now(timezone.utc).isoformat(),
        "complete": "1",
    }
    conn.executemany("INSERT INTO meta (key, value) VALUES (?, ?)", meta.items())


def _short_error(e: Exception) -> str:
    if isinstance(e, ValidationError):
        return "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
    return str(e)


# ══════════════════════════════════════════════════════════════════════
# SEARCH
# ══════════════════════════════════════════════════════════════════════

class GazetteerIndex:
    """
    Read-only handle on a built index.

    Opened once and shared; queries are serialized on an internal lock so the
    handle can be used from several request threads.
    """

    def __init__(self, index_path: PathLike):
        self.index_path = Path(index_path)
        if not index_exists(self.index_path):
            logger.error("No index found at %s, build it first", self.index_path)
            raise IndexNotFoundError(
                f"No gazetteer index at {self.index_path}. "
                "Run `python -m geoname_resolver build` first."
            )
        self._conn = _connect_read_only(db_path(self.index_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.create_collation(FIELD_FEATURE_CLASS, comparator_for(FIELD_FEATURE_CLASS))
        self._conn.create_collation(FIELD_FEATURE_CODE, comparator_for(FIELD_FEATURE_CODE))
        self._lock = threading.Lock()

    def search(self, name: str, limit: int) -> list[GazetteerRecord]:
        """
        Phrase-match `name` against name and alternate names.

        Results are ordered by feature class rank, feature code rank, then
        population descending (id breaks remaining ties). Raises QueryError
        when the name cannot be queried.
        """
        if limit <= 0:
            return []
        query = phrase_query(name)
        with self._lock:
            try:
                rows = self._conn.execute(_SEARCH_SQL, (query, limit)).fetchall()
            except sqlite3.OperationalError as e:
                raise QueryError(f"cannot query {name!r}: {e}") from e
        return [GazetteerRecord(**dict(row)) for row in rows]

    def document_count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM geonames").fetchone()[0]

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "GazetteerIndex":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
