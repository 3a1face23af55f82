# income_tracker/api/v1/analytics.py
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from income_tracker.api.v1.deps import get_current_user
from income_tracker.db import models
from income_tracker.db.session import get_db
from income_tracker.services.analytics import build_report

router = APIRouter()


@router.get("", response_model=Dict[str, Any])
def yearly_analytics(
    year: Optional[int] = Query(None, ge=1900, le=9999, description="defaults to the current year"),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Per-entity, per-month, per-type and per-province aggregates for one year."""
    return build_report(db, year or date.today().year)
