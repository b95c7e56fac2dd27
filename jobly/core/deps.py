"""
FastAPI dependencies for authentication and authorization.

These dependencies are used to protect endpoints and extract user context.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from jobly.core.exceptions import UnauthorizedError
from jobly.core.security import decode_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme (Authorization: Bearer <token>); the token is optional
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    """
    Return the claims of the bearer token, if one was sent.

    It's not an error if no token was provided or if the token is not
    valid: the caller is then anonymous (None). Routes that need a user
    depend on ensure_logged_in instead.
    """
    if not credentials:
        return None

    try:
        return decode_token(credentials.credentials)
    except JWTError as e:
        logger.info(f"Ignoring invalid bearer token: {e}")
        return None


def ensure_logged_in(user: Optional[dict] = Depends(get_current_user)) -> dict:
    """
    Require a valid token.

    Raises:
        UnauthorizedError: If the caller is anonymous
    """
    if not user:
        raise UnauthorizedError()
    return user


def ensure_admin(user: dict = Depends(ensure_logged_in)) -> dict:
    """
    Require a valid token whose isAdmin claim is true.

    Raises:
        UnauthorizedError: If the caller is anonymous or not an admin
    """
    if user.get("isAdmin") is not True:
        raise UnauthorizedError()
    return user


def ensure_correct_user_or_admin(username: str, user: dict = Depends(ensure_logged_in)) -> dict:
    """
    Require the caller to be the user named in the path, or an admin.

    Raises:
        UnauthorizedError: If the caller is anonymous, another user, and not an admin
    """
    if user.get("username") != username and user.get("isAdmin") is not True:
        raise UnauthorizedError()
    return user
