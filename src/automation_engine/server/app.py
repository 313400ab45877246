"""FastAPI app factory.

Endpoints are thin wrappers over the engine built by
:func:`automation_engine.host.build_engine`.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from automation_engine import __version__
from automation_engine.host import Engine, build_engine
from automation_engine.server.router import router


def create_app(engine: Engine | None = None) -> FastAPI:
    engine = engine or build_engine()

    app = FastAPI(
        title="Automation Engine",
        version=__version__,
        description="REST API over the command registry and automation runner.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.engine = engine

    app.add_middleware(
        CORSMiddleware,
        allow_origins=engine.settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app
