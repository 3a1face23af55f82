# income_tracker/api/v1/entities.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from income_tracker.api.v1.deps import get_current_user
from income_tracker.core.errors import NotFoundError
from income_tracker.db import crud, models
from income_tracker.db.session import get_db
from income_tracker.schemas.entity import EntityCreate

logger = logging.getLogger(__name__)
router = APIRouter(tags=["entities"])


def entity_to_dict(entity: models.Entity, income_count: int = 0) -> Dict[str, Any]:
    return {
        "id": entity.id,
        "name": entity.name,
        "province": entity.province,
        "type": entity.type.value if entity.type is not None else None,
        "mainEntityId": entity.main_entity_id,
        "mainEntity": {"id": entity.main_entity.id, "name": entity.main_entity.name} if entity.main_entity else None,
        "subEntities": [{"id": s.id, "name": s.name} for s in entity.sub_entities],
        "_count": {"incomes": income_count},
        "createdAt": entity.created_at.isoformat() if entity.created_at else None,
        "updatedAt": entity.updated_at.isoformat() if entity.updated_at else None,
    }


@router.get("", response_model=List[Dict[str, Any]])
def list_entities(
    province: Optional[str] = Query(None),
    type: Optional[models.EntityType] = Query(None, description="MAIN, SUB or EMPLOYEE"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    entities = crud.list_entities(db, province=province, type=type)
    counts = crud.income_counts_by_entity(db, [e.id for e in entities])
    return [entity_to_dict(e, counts.get(e.id, 0)) for e in entities]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_entity(
    payload: EntityCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if payload.main_entity_id and not crud.get_entity(db, payload.main_entity_id):
        raise NotFoundError("Main entity not found")
    try:
        entity = crud.create_entity(
            db,
            name=payload.name,
            province=payload.province,
            main_entity_id=payload.main_entity_id or None,
            type=payload.type,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(entity)
    logger.info("user %s created entity %s", current_user.id, entity.id)
    return entity_to_dict(entity, 0)
