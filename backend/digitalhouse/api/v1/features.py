from fastapi import APIRouter

from digitalhouse.core.config import settings

router = APIRouter()

@router.get("")
async def list_features():
    """
    Server-side feature flags. Clients hide what is not listed here.
    """
    return {"data": list(settings.ENABLED_FEATURES)}
