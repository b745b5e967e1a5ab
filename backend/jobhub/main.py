from __future__ import annotations
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from jobhub.api import auth, health, jobs, search, sources
from jobhub.core.config import Settings, settings as default_settings, validate_settings
from jobhub.core.logging import configure_logging
from jobhub.db.database import engine as default_engine, make_session_factory
from jobhub.db.init_db import init_db
from jobhub.services.aggregator import JobAggregator
from jobhub.services.storage import SqlStorage

logger = logging.getLogger(__name__)


def create_app(
    cfg: Settings | None = None,
    bind: Engine | None = None,
    client: httpx.Client | None = None,
) -> FastAPI:
    cfg = cfg or default_settings
    bind = bind or default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(cfg.log_level)
        init_db(bind)
        for problem in validate_settings(cfg):
            logger.warning(f"Configuration: {problem}")

        storage = SqlStorage(make_session_factory(bind))
        aggregator = JobAggregator(cfg, storage, client=client).init()
        app.state.aggregator = aggregator
        try:
            yield
        finally:
            aggregator.close()

    app = FastAPI(title=cfg.app_name, lifespan=lifespan)
    app.state.settings = cfg
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router, prefix=cfg.api_prefix)
    app.include_router(search.router, prefix=cfg.api_prefix)
    app.include_router(jobs.router, prefix=cfg.api_prefix)
    app.include_router(sources.router, prefix=cfg.api_prefix)
    return app


app = create_app()
