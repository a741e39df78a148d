from urllib.parse import parse_qs, unquote

from fastapi import APIRouter, Depends
from loguru import logger

from app.api.deps import get_catalog_service, validate_type
from app.models.stremio import StremioCatalogResponse
from app.services.catalog import CatalogService
from app.utils.stremio import to_stremio_meta

router = APIRouter()


def parse_extra(extra: str | None) -> dict[str, str]:
    """Parse Stremio's ``search=foo&genre=Action`` path segment."""
    if not extra:
        return {}
    parsed = parse_qs(unquote(extra), keep_blank_values=False)
    return {key: values[0] for key, values in parsed.items() if values}


@router.get("/catalog/{type}/{id}.json", response_model=StremioCatalogResponse, response_model_exclude_none=True)
@router.get(
    "/catalog/{type}/{id}/{extra}.json", response_model=StremioCatalogResponse, response_model_exclude_none=True
)
async def get_catalog(
    id: str,
    type: str = Depends(validate_type),
    extra: str | None = None,
    service: CatalogService = Depends(get_catalog_service),
):
    params = parse_extra(extra)
    # Results are not paginated; later pages are always empty
    if params.get("skip", "0") not in ("", "0"):
        return StremioCatalogResponse(metas=[])

    logger.debug(f"Catalog request {type}/{id} with {params}")
    records = await service.list_catalog(type, search=params.get("search"), genre=params.get("genre"))
    return StremioCatalogResponse(metas=[to_stremio_meta(record) for record in records])
