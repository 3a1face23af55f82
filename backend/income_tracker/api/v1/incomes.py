# income_tracker/api/v1/incomes.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from income_tracker.api.v1.deps import get_current_user
from income_tracker.core.errors import ForbiddenError, NotFoundError
from income_tracker.db import crud, models
from income_tracker.db.session import get_db
from income_tracker.schemas.income import IncomeCreate, IncomeUpdate
from income_tracker.schemas.simple import Message

logger = logging.getLogger(__name__)
router = APIRouter(tags=["incomes"])


def ensure_can_modify(current_user: models.User, income: models.Income) -> None:
    if current_user.role != models.Role.ADMIN and income.user_id != current_user.id:
        raise ForbiddenError("Cannot modify incomes recorded by another user")


def income_to_dict(income: models.Income) -> Dict[str, Any]:
    entity = income.entity
    user = income.user
    return {
        "id": income.id,
        "amount": float(income.amount) if income.amount is not None else None,
        "dueDate": income.due_date.isoformat() if income.due_date else None,
        "entityId": income.entity_id,
        "month": income.month,
        "year": income.year,
        "type": income.type.value if income.type is not None else None,
        "description": income.description,
        "gpNumber": income.gp_number,
        "userId": income.user_id,
        "createdAt": income.created_at.isoformat() if income.created_at else None,
        "updatedAt": income.updated_at.isoformat() if income.updated_at else None,
        "entity": {
            "id": entity.id,
            "name": entity.name,
            "province": entity.province,
            "type": entity.type.value if entity.type is not None else None,
            "mainEntityId": entity.main_entity_id,
        } if entity else None,
        # only the creator's public fields
        "user": {"id": user.id, "name": user.name, "username": user.username} if user else None,
    }


@router.get("", response_model=List[Dict[str, Any]])
def list_incomes(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    entity_id: Optional[str] = Query(None, alias="entityId"),
    type: Optional[models.IncomeType] = Query(None),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Incomes newest due date first, optionally filtered by month, year, entity and type."""
    items = crud.list_incomes(db, month=month, year=year, entity_id=entity_id, type=type)
    return [income_to_dict(i) for i in items]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_income(
    payload: IncomeCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Record an income. Expect JSON:
    {
      "amount": 15000,
      "dueDate": "2024-01-15",
      "entityId": "...",
      "month": 1,
      "year": 2024,
      "type": "SUBSCRIPTION",
      "description": "...",   # optional
      "gpNumber": "...",      # optional
      "userId": "..."
    }
    """
    if current_user.role != models.Role.ADMIN and payload.user_id != current_user.id:
        raise ForbiddenError("Cannot record incomes for another user")
    if not crud.get_entity(db, payload.entity_id):
        raise NotFoundError("Entity not found")
    if not crud.get_user(db, payload.user_id):
        raise NotFoundError("User not found")

    try:
        income = crud.create_income(
            db,
            amount=payload.amount,
            due_date=payload.due_date,
            entity_id=payload.entity_id,
            month=payload.month,
            year=payload.year,
            type=payload.type,
            description=payload.description,
            gp_number=payload.gp_number,
            user_id=payload.user_id,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    income = crud.get_income(db, income.id)
    logger.info("user %s recorded income %s (%s)", current_user.id, income.id, income.amount)
    return income_to_dict(income)


@router.patch("/{income_id}")
def update_income(
    income_id: str,
    payload: IncomeUpdate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    income = crud.get_income(db, income_id)
    if not income:
        raise NotFoundError("Income not found")
    ensure_can_modify(current_user, income)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("entity_id") and not crud.get_entity(db, changes["entity_id"]):
        raise NotFoundError("Entity not found")

    try:
        crud.update_income(db, income, changes)
        db.commit()
    except Exception:
        db.rollback()
        raise
    income = crud.get_income(db, income_id)
    logger.info("user %s updated income %s: %s", current_user.id, income_id, sorted(changes))
    return income_to_dict(income)


@router.delete("/{income_id}", response_model=Message)
def delete_income(
    income_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    income = crud.get_income(db, income_id)
    if not income:
        raise NotFoundError("Income not found")
    ensure_can_modify(current_user, income)
    try:
        crud.delete_income(db, income)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("user %s deleted income %s", current_user.id, income_id)
    return {"message": "Income deleted"}
