# income_tracker/api/v1/health.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from income_tracker.db.session import get_db
from income_tracker.schemas.simple import Health

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get('/health', response_model=Health)
def health(db: Session = Depends(get_db)):
    # the API is up even when the database is not; report both
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError:
        logger.exception("health check: database unreachable")
        database = "unavailable"
    return {'status': 'ok', 'database': database}
