from fastapi import APIRouter

from .endpoints.caching import router as caching_router
from .endpoints.catalogs import router as catalogs_router
from .endpoints.health import router as health_router
from .endpoints.manifest import router as manifest_router
from .endpoints.meta import router as meta_router
from .endpoints.sources import router as sources_router
from .endpoints.streams import router as streams_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"status": "Server is running"}


api_router.include_router(manifest_router)
api_router.include_router(catalogs_router)
api_router.include_router(meta_router)
api_router.include_router(streams_router)
api_router.include_router(health_router)
api_router.include_router(sources_router)
api_router.include_router(caching_router)
