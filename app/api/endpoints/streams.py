from fastapi import APIRouter, Depends

from app.api.deps import get_catalog_service, validate_type
from app.models.stremio import StremioStreamResponse
from app.services.catalog import CatalogService
from app.utils.stremio import to_stremio_stream

router = APIRouter()


@router.get("/stream/{type}/{id}.json", response_model=StremioStreamResponse, response_model_exclude_none=True)
async def get_stream(
    id: str,
    type: str = Depends(validate_type),
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Stremio stream endpoint for movies and series.

    Direct streams from the owning site come first; torrents are only searched
    when there are none.
    """
    streams = await service.get_streams(id, type)
    return StremioStreamResponse(streams=[to_stremio_stream(stream) for stream in streams])
