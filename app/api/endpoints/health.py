from fastapi import APIRouter, Depends

from app.api.deps import get_catalog_service
from app.core.version import __version__
from app.services.catalog import CatalogService

router = APIRouter(tags=["health"])


@router.get("/health", summary="Simple readiness probe")
async def health_check() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/metrics", summary="Adapter and cache counters")
async def metrics(service: CatalogService = Depends(get_catalog_service)) -> dict:
    return service.stats()
