# parkdesk/dependencies.py
"""
Request-scoped dependencies: bearer-token authentication and role checks.
Missing token → 401, bad or expired token → 403.
"""

from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from parkdesk.services.auth_service import TokenUser, decode_token
from parkdesk.utils.logger import get_logger

logger = get_logger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> TokenUser:
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied")
    try:
        return decode_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token for {request.method} {request.url.path}: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
