from fastapi import APIRouter, Depends

from app.api.deps import get_catalog_service
from app.services.catalog import CatalogService

router = APIRouter(prefix="/cache")


@router.get("/")
async def cache_stats(service: CatalogService = Depends(get_catalog_service)):
    return service.cache.stats()


@router.delete("/")
async def clear_caches(service: CatalogService = Depends(get_catalog_service)):
    """
    Clear every cached catalog, meta and stream result.
    The next request for each goes back to the adapters.
    """
    await service.clear_cache()
    return {"message": "All caches cleared successfully", "status": "success"}
