import uuid
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from pydantic import ValidationError

from digitalhouse.db.session import get_db
from digitalhouse.core import security
from digitalhouse.core.config import settings
from digitalhouse.models.user import User
from digitalhouse.schemas.user import TokenPayload

# Tokens are issued by the account service; this only documents where.
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login"
)

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(reusable_oauth2)
) -> User:
    try:
        payload = security.decode_access_token(token)
        token_data = TokenPayload(**payload)
        user_id = uuid.UUID(token_data.sub)
    except (JWTError, ValidationError, TypeError, ValueError):
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise credentials_exception

    return user

def require_feature(name: str):
    """
    Gate a router or route on a server-side feature flag.
    Disabled features look like missing routes.
    """
    def _check() -> None:
        if not settings.feature_enabled(name):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Feature not enabled")
    return _check
