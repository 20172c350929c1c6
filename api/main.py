"""FastAPI application for the golf scoring engine."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import Settings, get_settings
from catalog import GameSpecCatalog, load_default_catalog


def create_app(settings: Optional[Settings] = None, catalog: Optional[GameSpecCatalog] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Golf Scoring API",
        version="1.0.0",
    )
    app.state.catalog = catalog if catalog is not None else load_default_catalog()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from api.routers import posting, scoring, specs
    app.include_router(scoring.router, prefix="/api", tags=["scoring"])
    app.include_router(posting.router, prefix="/api/posting", tags=["posting"])
    app.include_router(specs.router, prefix="/api/specs", tags=["specs"])

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "specs": len(app.state.catalog.list_specs())}

    return app


app = create_app()
