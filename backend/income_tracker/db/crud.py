# income_tracker/db/crud.py
"""Typed accessors over the users / entities / incomes / security_questions tables.

Functions here only talk to the session; they flush but never commit, so the
caller decides the transaction boundary.
"""
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from income_tracker.db import models

# columns an admin may patch on a user
USER_PATCHABLE = ("is_active", "is_approved", "role")
# income columns that can never be set to NULL
INCOME_REQUIRED = ("amount", "due_date", "entity_id", "month", "year", "type")
INCOME_PATCHABLE = INCOME_REQUIRED + ("description", "gp_number")


# ---------------------------------------------------------------- users

def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def find_user_by_identifier(db: Session, identifier: str) -> Optional[models.User]:
    """First user whose username, email or phone equals ``identifier``."""
    return (
        db.query(models.User)
        .filter(
            or_(
                models.User.username == identifier,
                models.User.email == identifier,
                models.User.phone == identifier,
            )
        )
        .order_by(models.User.created_at)
        .first()
    )


def get_user_by_username(db: Session, username: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.username == username).first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def get_user_by_phone(db: Session, phone: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.phone == phone).first()


def list_users(db: Session) -> List[models.User]:
    return (
        db.query(models.User)
        .options(joinedload(models.User.security_question))
        .order_by(models.User.created_at.desc(), models.User.username)
        .all()
    )


def create_user(
    db: Session,
    *,
    username: str,
    email: str,
    phone: str,
    name: str,
    password_hash: str,
    role: models.Role = models.Role.USER,
    security_question: Optional[str] = None,
    security_answer_hash: Optional[str] = None,
) -> models.User:
    """Insert a user and, when given, its security question in the current transaction."""
    user = models.User(
        username=username,
        email=email,
        phone=phone,
        name=name,
        password=password_hash,
        role=role,
        is_active=True,
        # admins skip the approval gate
        is_approved=role == models.Role.ADMIN,
    )
    db.add(user)
    db.flush()
    if security_question is not None:
        db.add(models.SecurityQuestion(question=security_question, answer_hash=security_answer_hash, user_id=user.id))
        db.flush()
    return user


def update_user(db: Session, user: models.User, changes: Dict[str, Any]) -> models.User:
    for field in USER_PATCHABLE:
        value = changes.get(field)
        if value is not None:
            setattr(user, field, value)
    db.add(user)
    db.flush()
    return user


def delete_user(db: Session, user: models.User) -> None:
    # the security question holds the foreign key, so it goes first
    db.query(models.SecurityQuestion).filter(models.SecurityQuestion.user_id == user.id).delete(
        synchronize_session=False
    )
    db.delete(user)
    db.flush()


def income_counts_by_user(db: Session, user_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(user_ids)
    if not ids:
        return {}
    rows = (
        db.query(models.Income.user_id, func.count(models.Income.id))
        .filter(models.Income.user_id.in_(ids))
        .group_by(models.Income.user_id)
        .all()
    )
    return {uid: n for uid, n in rows}


# ---------------------------------------------------------------- entities

def get_entity(db: Session, entity_id: str) -> Optional[models.Entity]:
    return db.query(models.Entity).filter(models.Entity.id == entity_id).first()


def list_entities(
    db: Session,
    province: Optional[str] = None,
    type: Optional[models.EntityType] = None,
) -> List[models.Entity]:
    q = db.query(models.Entity).options(
        joinedload(models.Entity.main_entity),
        selectinload(models.Entity.sub_entities),
    )
    if province:
        q = q.filter(models.Entity.province == province)
    if type:
        q = q.filter(models.Entity.type == type)
    return q.order_by(models.Entity.name.asc()).all()


def create_entity(
    db: Session,
    *,
    name: str,
    province: str,
    main_entity_id: Optional[str] = None,
    type: Optional[models.EntityType] = None,
) -> models.Entity:
    entity = models.Entity(
        name=name,
        province=province,
        main_entity_id=main_entity_id,
        type=type or models.EntityType.MAIN,
    )
    db.add(entity)
    db.flush()
    return entity


def income_counts_by_entity(db: Session, entity_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(entity_ids)
    if not ids:
        return {}
    rows = (
        db.query(models.Income.entity_id, func.count(models.Income.id))
        .filter(models.Income.entity_id.in_(ids))
        .group_by(models.Income.entity_id)
        .all()
    )
    return {eid: n for eid, n in rows}


# ---------------------------------------------------------------- incomes

def get_income(db: Session, income_id: str) -> Optional[models.Income]:
    return (
        db.query(models.Income)
        .options(joinedload(models.Income.entity), joinedload(models.Income.user))
        .filter(models.Income.id == income_id)
        .first()
    )


def list_incomes(
    db: Session,
    month: Optional[int] = None,
    year: Optional[int] = None,
    entity_id: Optional[str] = None,
    type: Optional[models.IncomeType] = None,
) -> List[models.Income]:
    q = db.query(models.Income).options(joinedload(models.Income.entity), joinedload(models.Income.user))
    if month is not None:
        q = q.filter(models.Income.month == month)
    if year is not None:
        q = q.filter(models.Income.year == year)
    if entity_id:
        q = q.filter(models.Income.entity_id == entity_id)
    if type:
        q = q.filter(models.Income.type == type)
    return q.order_by(models.Income.due_date.desc(), models.Income.created_at.desc()).all()


def create_income(db: Session, **fields: Any) -> models.Income:
    income = models.Income(**fields)
    db.add(income)
    db.flush()
    return income


def update_income(db: Session, income: models.Income, changes: Dict[str, Any]) -> models.Income:
    """Apply only the keys present in ``changes``; required columns ignore explicit nulls."""
    for field in INCOME_PATCHABLE:
        if field not in changes:
            continue
        value = changes[field]
        if value is None and field in INCOME_REQUIRED:
            continue
        setattr(income, field, value)
    db.add(income)
    db.flush()
    return income


def delete_income(db: Session, income: models.Income) -> None:
    db.delete(income)
    db.flush()


# ---------------------------------------------------------------- aggregation

def income_totals_by_entity(db: Session, year: int) -> List[Any]:
    """Rows of (entity_id, total, count, average) for the year."""
    return (
        db.query(
            models.Income.entity_id.label("entity_id"),
            func.sum(models.Income.amount).label("total"),
            func.count(models.Income.id).label("count"),
            func.avg(models.Income.amount).label("average"),
        )
        .filter(models.Income.year == year)
        .group_by(models.Income.entity_id)
        .all()
    )


def income_totals_by_month(db: Session, year: int) -> List[Any]:
    """Rows of (month, total, count) for the year, month ascending."""
    return (
        db.query(
            models.Income.month.label("month"),
            func.sum(models.Income.amount).label("total"),
            func.count(models.Income.id).label("count"),
        )
        .filter(models.Income.year == year)
        .group_by(models.Income.month)
        .order_by(models.Income.month.asc())
        .all()
    )


def income_totals_by_type(db: Session, year: int) -> List[Any]:
    """Rows of (type, total, count) for the year."""
    return (
        db.query(
            models.Income.type.label("type"),
            func.sum(models.Income.amount).label("total"),
            func.count(models.Income.id).label("count"),
        )
        .filter(models.Income.year == year)
        .group_by(models.Income.type)
        .all()
    )


def income_totals_by_province(db: Session, year: int) -> List[Any]:
    """Rows of (province, total, count); the raw province may be NULL or empty."""
    return (
        db.query(
            models.Entity.province.label("province"),
            func.sum(models.Income.amount).label("total"),
            func.count(models.Income.id).label("count"),
        )
        .select_from(models.Income)
        .outerjoin(models.Entity, models.Income.entity_id == models.Entity.id)
        .filter(models.Income.year == year)
        .group_by(models.Entity.province)
        .all()
    )


def get_entities_by_ids(db: Session, entity_ids: Iterable[str]) -> Dict[str, models.Entity]:
    ids = list(entity_ids)
    if not ids:
        return {}
    rows = (
        db.query(models.Entity)
        .options(joinedload(models.Entity.main_entity))
        .filter(models.Entity.id.in_(ids))
        .all()
    )
    return {e.id: e for e in rows}
