from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.main import api_router
from app.services.catalog import CatalogService
from app.services.factory import build_catalog_service

from .config import Settings, settings as default_settings
from .logger import setup_logging
from .version import __version__


def create_app(settings: Settings | None = None, service: CatalogService | None = None) -> FastAPI:
    """Build the FastAPI application. A prebuilt ``service`` skips adapter wiring."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifespan events (startup/shutdown).
        """
        setup_logging(settings)
        catalog_service = service or build_catalog_service(settings)
        app.state.settings = settings
        app.state.catalog_service = catalog_service
        catalog_service.cache.start_sweeper(settings.CACHE_SWEEP_INTERVAL_SECONDS)
        logger.info(f"{settings.ADDON_NAME} {__version__} started")
        yield
        try:
            await catalog_service.close()
            logger.info("Adapters and cache closed")
        except Exception as exc:
            logger.warning(f"Failed to close catalog service cleanly: {exc}")

    app = FastAPI(
        title=settings.ADDON_NAME,
        description="Stremio addon aggregating streaming sites and torrent indexes",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.APP_ENV != "development" else "/docs",
        redoc_url=None if settings.APP_ENV != "development" else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app


app = create_app()
