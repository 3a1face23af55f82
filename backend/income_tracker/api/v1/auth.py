# income_tracker/api/v1/auth.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from income_tracker.api.v1.deps import get_current_user
from income_tracker.api.v1.users import user_to_dict
from income_tracker.core.errors import AuthError
from income_tracker.db import crud, models
from income_tracker.db.session import get_db
from income_tracker.schemas.auth import LoginRequest
from income_tracker.services.security import create_access_token, verify_password

logger = logging.getLogger(__name__)
router = APIRouter()

# same wording for unknown identifier and wrong password
INVALID_CREDENTIALS = "Invalid credentials"


@router.post("/login")
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = crud.find_user_by_identifier(db, payload.identifier)
    if not user:
        logger.info("login failed: unknown identifier %r", payload.identifier)
        raise AuthError(INVALID_CREDENTIALS)
    if not user.is_active:
        logger.info("login refused: user %s is inactive", user.id)
        raise AuthError("Account is inactive")
    if user.role != models.Role.ADMIN and not user.is_approved:
        logger.info("login refused: user %s is not approved", user.id)
        raise AuthError("Account is not approved yet")
    if not verify_password(payload.password, user.password):
        logger.warning("login failed: bad password for user %s", user.id)
        raise AuthError(INVALID_CREDENTIALS)

    token = create_access_token(user.id, username=user.username, email=user.email, role=user.role.value)
    logger.info("user %s logged in", user.id)
    return {"user": user_to_dict(user), "token": token}


@router.get("/me")
def me(current_user: models.User = Depends(get_current_user)):
    return user_to_dict(current_user)
