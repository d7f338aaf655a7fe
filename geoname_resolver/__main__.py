"""CLI entrypoint for geoname_resolver."""

from __future__ import annotations

import argparse
import logging
import sys

from geoname_resolver.config import get_settings
from geoname_resolver.index import IndexNotFoundError
from geoname_resolver.logging_config import setup_logging

logger = logging.getLogger("geoname_resolver")


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="geoname-resolver")
    sub = parser.add_subparsers(dest="command", required=True)

    build_parser = sub.add_parser("build", help="Build the index from a GeoNames dump")
    build_parser.add_argument("--gazetteer", "-b", required=True,
                              help="Path to the GeoNames allCountries.txt")
    build_parser.add_argument("--index", "-i", default=settings.index.path)

    search_parser = sub.add_parser("search", help="Resolve location names")
    search_parser.add_argument("names", nargs="+")
    search_parser.add_argument("--index", "-i", default=settings.index.path)
    # Kept as a string: anything that is not a plain number means 1
    search_parser.add_argument("--count", "-c", default="1")
    search_parser.add_argument("--json", action="store_true",
                               help="Write results as a JSON object")

    serve_parser = sub.add_parser("serve", help="Run the HTTP search service")
    serve_parser.add_argument("--index", "-i", default=settings.index.path)
    serve_parser.add_argument("--host", default=settings.api.host)
    serve_parser.add_argument("--port", type=int, default=settings.api.port)

    args = parser.parse_args(argv)

    try:
        if args.command == "build":
            _build(args.gazetteer, args.index)
        elif args.command == "search":
            _search(args.names, args.index, _parse_count(args.count), args.json)
        elif args.command == "serve":
            _serve(args.index, args.host, args.port)
    except IndexNotFoundError as e:
        logger.error("%s", e)
        sys.exit(1)


def _parse_count(value: str) -> int:
    return int(value) if value.isdigit() else 1


def _build(gazetteer_path: str, index_path: str) -> None:
    from geoname_resolver.index import build_index

    logger.info("Building index at path: [%s] with GeoNames file: [%s]", index_path, gazetteer_path)
    stats = build_index(gazetteer_path, index_path)
    print(stats.model_dump_json(indent=2))


def _search(names: list[str], index_path: str, count: int, as_json: bool) -> None:
    from geoname_resolver.output import write_result, write_result_json
    from geoname_resolver.resolver import search_geo_names

    results = search_geo_names(index_path, names, count)
    if as_json:
        write_result_json(results, sys.stdout)
    else:
        write_result(results, sys.stdout)


def _serve(index_path: str, host: str, port: int) -> None:
    import uvicorn

    from geoname_resolver.api import create_app
    from geoname_resolver.index import index_exists

    if not index_exists(index_path):
        raise IndexNotFoundError(f"No gazetteer index at {index_path}. Run `build` first.")

    settings = get_settings()
    uvicorn.run(
        create_app(index_path, settings),
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
