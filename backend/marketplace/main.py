"""Marketplace API — FastAPI application entry point.

Invariants:
    - Routers registered explicitly, in one place
    - Startup configures logging, opens the database and creates the image directory;
      shutdown disposes the engine
    - CORS origins come from Settings

Design Decisions:
    - Lifespan over @app.on_event
    - create_app() builds the app; the module-level `app` is what uvicorn serves
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.error_handlers import register_error_handlers
from marketplace.api.routes import health, images, listings, login, users
from marketplace.config import get_settings
from marketplace.infrastructure.database import init_db
from marketplace.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ROUTERS = (health.router, listings.router, users.router, login.router, images.router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    settings.images_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Marketplace API started, images in {settings.images_dir}")
    try:
        yield
    finally:
        await manager.dispose()
        logger.info("Marketplace API stopped")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title="Marketplace API", version="1.0.0", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    for router in ROUTERS:
        application.include_router(router)
    register_error_handlers(application)
    return application


app = create_app()
