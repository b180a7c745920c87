from datetime import timedelta
from typing import Any, Optional, Union

from jose import jwt

from digitalhouse.core.config import settings
from digitalhouse.core.time_utils import get_utc_now

ALGORITHM = settings.ALGORITHM


def create_access_token(
    subject: Union[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Sign a bearer token for a user id.
    Login flows live in the external auth service; this is used for seeding and tests.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = get_utc_now() + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises jose.JWTError on a bad signature or an expired token."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
