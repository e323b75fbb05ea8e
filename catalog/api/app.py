"""FastAPI application factory.

Every lookup opens its own fetch session, so the app holds no shared state
and needs no lifespan handler.  Endpoints are synchronous and run in
FastAPI's thread pool, one session per request.

Routers
-------
    /lookup   — locate a catalog entry and extract its detail records
    /search   — redirect to the first listing page for a name
    /health   — liveness probe
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog.api.routers import lookup as lookup_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Catalog Locator API",
        description=(
            "Locates a named entry in an alphabetically paginated remote "
            "catalog with an exponential + binary page search, then extracts "
            "the structured record from its detail page."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(lookup_router.router, tags=["lookup"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn catalog.api.app:app --reload
app = create_app()
