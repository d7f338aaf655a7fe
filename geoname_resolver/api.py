"""
FastAPI service exposing gazetteer search.

Endpoints:
  GET /api/search?s=<name>&s=<name>&c=<count>  - resolve names, JSON map of
                                                 name -> ranked locations
  GET /health                                  - service status
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request

from geoname_resolver.config import Settings, get_settings
from geoname_resolver.index import PathLike
from geoname_resolver.models import HealthResponse, ResolvedLocation
from geoname_resolver.resolver import GeoNameResolver

logger = logging.getLogger(__name__)


def create_app(index_path: PathLike | None = None, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    index_path = index_path if index_path is not None else settings.index.path

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: open the index read-only. Shutdown: close it."""
        logger.info("Initialising searcher from index %s", index_path)
        app.state.resolver = GeoNameResolver(index_path, settings)
        yield
        app.state.resolver.close()
        logger.info("API server shut down.")

    app = FastAPI(
        title="GeoName Resolver API",
        description="Resolve place names to GeoNames gazetteer entries",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.get(
        "/api/search",
        response_model=dict[str, list[ResolvedLocation]],
        response_model_by_alias=True,
    )
    def search(
        request: Request,
        s: Optional[list[str]] = Query(None, description="Location name, repeatable"),
        c: int = Query(1, description="Results per location"),
    ):
        if not s or c < 1:
            raise HTTPException(400, "at least one 's' and 'c' >= 1 are required")

        resolver: GeoNameResolver = request.app.state.resolver
        return resolver.search_locations(s, c)

    @app.get("/health", response_model=HealthResponse)
    def health_check(request: Request):
        resolver: GeoNameResolver = request.app.state.resolver
        return HealthResponse(status="ok", index_path=str(resolver.index_path))

    return app


app = create_app()
