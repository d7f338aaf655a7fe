"""
Logging setup for the CLI and the HTTP service.

Everything goes to stderr so `search` output on stdout stays pipeable.
APP_ENV=production switches to one JSON object per line.
"""

from __future__ import annotations

import logging
import sys

import json_log_formatter

from geoname_resolver.config import Settings, get_settings

CONSOLE_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that are chatty at INFO under uvicorn
QUIET_LOGGERS = ("uvicorn.access",)


class GazetteerJSONFormatter(json_log_formatter.JSONFormatter):
    """JSON lines carrying the level and logger name next to the message."""

    def json_record(self, message, extra, record):
        extra = super().json_record(message, extra, record)
        extra["level"] = record.levelname
        extra["logger"] = record.name
        return extra


def build_handler(settings: Settings) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if settings.env == "production":
        handler.setFormatter(GazetteerJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATEFMT))
    return handler


def setup_logging(settings: Settings | None = None) -> None:
    """Install a single stderr handler on the root logger."""
    settings = settings or get_settings()
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers = [build_handler(settings)]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
