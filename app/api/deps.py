from fastapi import HTTPException, Request

from app.core.config import Settings
from app.core.constants import CONTENT_TYPES
from app.services.catalog import CatalogService


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def validate_type(type: str) -> str:
    if type not in CONTENT_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported content type: {type}")
    return type
