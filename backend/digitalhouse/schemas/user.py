from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime
from digitalhouse.models.user import UserType
from digitalhouse.schemas.common import CamelModel

class TokenPayload(BaseModel):
    sub: Optional[str] = None

class UserSummary(CamelModel):
    """Display fields joined onto help requests and responses."""
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    location: Optional[str] = None

class UserResponse(UserSummary):
    email: Optional[str] = None
    user_type: UserType
    created_at: datetime
