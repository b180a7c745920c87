from fastapi import APIRouter, Depends

from digitalhouse.api.deps import get_current_user
from digitalhouse.models.user import User
from digitalhouse.schemas.user import UserResponse

router = APIRouter()

@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: User = Depends(get_current_user),
):
    """
    The member the bearer token belongs to.
    """
    return current_user
