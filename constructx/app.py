from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from constructx import __version__
from constructx.application import SessionRegistry, configure_sessions
from constructx.core.catalog import configure_catalog, load_catalog
from constructx.core.settings import Settings, configure_logging, load_settings
from constructx.infrastructure import ApiClient, InMemoryBackend, InMemoryMailbox, configure_api_client
from constructx.infrastructure.mock_data import seed_collections
from constructx.routes import assistant, catalog, email, pages, wizards
from constructx.services import ServiceRegistry

logger = logging.getLogger(__name__)


def _build_api_client(settings: Settings) -> ApiClient:
    if not settings.use_mock_data:
        return ApiClient(settings.api_url, timeout=settings.api_timeout)
    backend = InMemoryBackend(seed_collections())
    logger.info("serving mock data from the in-memory backend")
    http_client = httpx.AsyncClient(transport=backend.transport(), timeout=settings.api_timeout)
    return ApiClient(settings.api_url, timeout=settings.api_timeout, http_client=http_client)


def create_app(settings: Settings | None = None, sessions: SessionRegistry | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    if sessions is None:
        entity_catalog = load_catalog(settings.catalog_path)
        configure_catalog(entity_catalog)
        api = _build_api_client(settings)
        configure_api_client(api)
        services = ServiceRegistry(api, entity_catalog, InMemoryMailbox(), use_mock_data=settings.use_mock_data)
        sessions = SessionRegistry(services)
    configure_sessions(sessions)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        await sessions.aclose()

    app = FastAPI(title="ConstructX Pages API", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog.router, prefix="/api")
    app.include_router(pages.router, prefix="/api")
    app.include_router(wizards.router, prefix="/api")
    app.include_router(assistant.router, prefix="/api")
    app.include_router(email.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "ConstructX Pages API",
                "docs": "/docs",
                "health": "/api/catalog",
            }
        )

    return app


app = create_app()
