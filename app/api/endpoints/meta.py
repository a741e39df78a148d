from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_catalog_service, validate_type
from app.models.stremio import StremioMetaResponse
from app.services.catalog import CatalogService
from app.utils.stremio import to_stremio_meta

router = APIRouter()


@router.get("/meta/{type}/{id}.json", response_model=StremioMetaResponse, response_model_exclude_none=True)
async def get_meta(
    id: str,
    type: str = Depends(validate_type),
    service: CatalogService = Depends(get_catalog_service),
):
    record = await service.get_meta(id, type)
    if record is None:
        # Stremio expects an explicit null for unknown items
        return JSONResponse({"meta": None})
    return StremioMetaResponse(meta=to_stremio_meta(record, full=True))
