# income_tracker/api/v1/deps.py
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from income_tracker.core.errors import AuthError, ForbiddenError
from income_tracker.db import crud, models
from income_tracker.db.session import get_db
from income_tracker.schemas.auth import TokenPayload
from income_tracker.services.security import decode_access_token

logger = logging.getLogger(__name__)

# reads the "Authorization: Bearer <token>" header; a missing header is
# reported by our own AuthError so the response shape stays uniform
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authenticated")

    try:
        claims = TokenPayload(**decode_access_token(credentials.credentials))
    except (JWTError, ValidationError) as exc:
        logger.info("rejected bearer token: %s", exc)
        raise AuthError("Could not validate credentials")

    user = crud.get_user(db, claims.sub)
    if not user:
        raise AuthError("Could not validate credentials")
    # flags may have changed since the token was issued
    if not user.is_active:
        raise AuthError("Account is inactive")
    if user.role != models.Role.ADMIN and not user.is_approved:
        raise AuthError("Account is not approved yet")
    return user


def require_admin(current_user: models.User = Depends(get_current_user)) -> models.User:
    if current_user.role != models.Role.ADMIN:
        raise ForbiddenError("Admin privileges required")
    return current_user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[models.User]:
    """Like get_current_user, but anonymous callers get None. A bad token is still rejected."""
    if credentials is None:
        return None
    return get_current_user(credentials, db)
