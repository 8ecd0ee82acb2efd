from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db
from core.config import Settings, load_settings
from core.errors import setup_error_handling
from core.logging_config import configure_logging
from listings import router as listings_router
from listings.resources import RESOURCES, Resource, schema_statements

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    resources: Sequence[Resource] = RESOURCES,
) -> FastAPI:
    resources = tuple(resources)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Settings are validated before any connection attempt.
        current = app.state.settings or load_settings()
        app.state.settings = current
        configure_logging(current.log_level, json_logs=current.log_json)

        try:
            await db.init_schema(current, schema_statements(resources))
        except Exception:
            # Never report ready on a half-initialized datastore.
            await db.close_pool()
            raise
        app.state.ready = True
        logger.info("startup_complete resources=%s", ",".join(r.name for r in resources))
        try:
            yield
        finally:
            app.state.ready = False
            await db.close_pool()

    app = FastAPI(title="Community Listings API", lifespan=lifespan)
    app.state.settings = settings
    app.state.ready = False

    # Public listings board: any origin may call it from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_error_handling(app)
    listings_router.include_resources(app, resources)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok" if app.state.ready else "starting"}

    @app.get("/")
    def root() -> dict:
        return {"message": "community listings api", "resources": [r.name for r in resources]}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    logger.info("starting host=%s port=%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
