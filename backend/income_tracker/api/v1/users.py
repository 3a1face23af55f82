# income_tracker/api/v1/users.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from income_tracker.api.v1.deps import get_optional_user, require_admin
from income_tracker.core.errors import ConflictError, ForbiddenError, NotFoundError
from income_tracker.db import crud, models
from income_tracker.db.session import get_db
from income_tracker.schemas.simple import Message
from income_tracker.schemas.user import UserCreate, UserUpdate
from income_tracker.services.security import hash_password

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


def user_to_dict(user: models.User, income_count: Optional[int] = None, with_security_question: bool = False) -> Dict[str, Any]:
    """Public view of a user; the password hash never leaves the server."""
    data = {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "phone": user.phone,
        "name": user.name,
        "role": user.role.value if user.role is not None else None,
        "isActive": user.is_active,
        "isApproved": user.is_approved,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
    }
    if with_security_question:
        sq = user.security_question
        data["securityQuestion"] = {"question": sq.question} if sq else None
    if income_count is not None:
        data["_count"] = {"incomes": income_count}
    return data


@router.get("", response_model=List[Dict[str, Any]])
def list_users(db: Session = Depends(get_db), admin: models.User = Depends(require_admin)):
    users = crud.list_users(db)
    counts = crud.income_counts_by_user(db, [u.id for u in users])
    return [user_to_dict(u, counts.get(u.id, 0), with_security_question=True) for u in users]


@router.post("", status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: Optional[models.User] = Depends(get_optional_user),
):
    """
    Self-service registration. New accounts are active but unapproved until an
    admin approves them. Only an admin may create another admin.
    """
    role = payload.role or models.Role.USER
    if role == models.Role.ADMIN and (current_user is None or current_user.role != models.Role.ADMIN):
        raise ForbiddenError("Only an admin can create admin accounts")

    if crud.get_user_by_username(db, payload.username):
        raise ConflictError("Username already exists")
    if crud.get_user_by_email(db, payload.email):
        raise ConflictError("Email already exists")
    if crud.get_user_by_phone(db, payload.phone):
        raise ConflictError("Phone number already exists")

    sq = payload.security_question
    try:
        # user and security question commit together or not at all
        user = crud.create_user(
            db,
            username=payload.username,
            email=payload.email,
            phone=payload.phone,
            name=payload.name,
            password_hash=hash_password(payload.password),
            role=role,
            security_question=sq.question if sq else None,
            security_answer_hash=hash_password(sq.answer) if sq else None,
        )
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration
        db.rollback()
        logger.warning("registration for %r hit a unique constraint", payload.username)
        raise ConflictError("User with these details already exists")
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("registered user %s (%s)", user.username, user.id)
    return user_to_dict(user)


@router.patch("/{user_id}")
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    try:
        crud.update_user(db, user, payload.model_dump(exclude_unset=True))
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("admin %s updated user %s", admin.username, user.id)
    counts = crud.income_counts_by_user(db, [user.id])
    return user_to_dict(user, counts.get(user.id, 0), with_security_question=True)


@router.delete("/{user_id}", response_model=Message)
def delete_user(user_id: str, db: Session = Depends(get_db), admin: models.User = Depends(require_admin)):
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    if crud.income_counts_by_user(db, [user.id]).get(user.id):
        raise ConflictError("User still owns incomes and cannot be deleted")
    try:
        crud.delete_user(db, user)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("user %s still referenced by incomes; not deleted", user_id)
        raise ConflictError("User still owns incomes and cannot be deleted")
    except Exception:
        db.rollback()
        raise
    logger.info("admin %s deleted user %s", admin.username, user_id)
    return {"message": "User deleted"}
