"""
Security helpers for administrative routes.

End-user authentication happens in the mobile client; this service
only distinguishes administrative callers (event management, credit
grants, participant lists).  Administrators present the static token
configured via ``ADMIN_TOKEN`` in the ``Authorization`` header as
``Bearer <token>``.  When no token is configured, the check is
disabled so the service can be exercised locally without setup.
"""

import hmac
import logging
from typing import Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings


logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def token_matches(candidate: str, expected: str) -> bool:
    """Compare tokens in constant time."""
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def require_admin(credentials: HTTPAuthorizationCredentials = Depends(security)) -> Dict[str, str]:
    """Dependency that admits only administrative callers.

    Returns a small context dictionary describing the caller.  Raises
    HTTP 401 when the header is missing and 403 when the token does
    not match.
    """
    if not settings.admin_token:
        return {"sub": "local_admin", "role": "admin"}
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not token_matches(credentials.credentials, settings.admin_token):
        logger.warning("Rejected admin request with an invalid token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )
    return {"sub": "static_admin", "role": "admin"}
