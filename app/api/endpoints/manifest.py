from fastapi import Depends
from fastapi.routing import APIRouter

from app.api.deps import get_settings
from app.core.config import Settings
from app.services.manifest import ManifestService

router = APIRouter()


@router.get("/manifest.json")
async def manifest(settings: Settings = Depends(get_settings)):
    return ManifestService(settings).get_base_manifest()
