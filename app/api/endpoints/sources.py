from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel

from app.api.deps import get_catalog_service
from app.models.records import AdapterDescriptor
from app.services.catalog import CatalogService
from app.services.sources.registry import AdapterRegistry, UnknownAdapterError

router = APIRouter(prefix="/api", tags=["sources"])


class ToggleRequest(BaseModel):
    enabled: bool


def _registry(service: CatalogService, group: str) -> AdapterRegistry:
    return service.sources if group == "scrapers" else service.torrents


@router.get("/scrapers", response_model=list[AdapterDescriptor])
async def list_scrapers(service: CatalogService = Depends(get_catalog_service)):
    return service.sources.descriptors()


@router.get("/torrents", response_model=list[AdapterDescriptor])
async def list_torrents(service: CatalogService = Depends(get_catalog_service)):
    return service.torrents.descriptors()


@router.put("/{group}/{name}", response_model=AdapterDescriptor)
async def toggle_adapter(
    group: Literal["scrapers", "torrents"],
    name: str,
    body: ToggleRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    try:
        descriptor = _registry(service, group).set_enabled(name, body.enabled)
    except UnknownAdapterError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=404, detail=str(e))
    return descriptor.model_copy()
