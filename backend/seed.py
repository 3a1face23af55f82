# seed.py: create the admin account and the default entities (idempotent)
import logging
import sys

from sqlalchemy.orm import Session

from income_tracker.core.config import settings
from income_tracker.db import crud, models
from income_tracker.db.session import SessionLocal
from income_tracker.services.security import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_ENTITIES = [
    {"name": "وزارة التجارة", "province": "الرياض"},
    {"name": "شركة الاتصالات", "province": "جدة"},
    {"name": "البنك الأهلي", "province": "الدمام"},
    {"name": "شركة الكهرباء", "province": "الرياض"},
    {"name": "وزارة الصحة", "province": "مكة"},
]


def ensure_admin(db: Session) -> models.User:
    admin = crud.get_user_by_username(db, settings.ADMIN_USERNAME)
    if admin:
        logger.info("Admin user already exists: %s", admin.username)
        return admin
    admin = crud.create_user(
        db,
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL,
        phone=settings.ADMIN_PHONE,
        name="Administrator",
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        role=models.Role.ADMIN,
    )
    logger.info("Admin user created: %s", admin.username)
    return admin


def ensure_entities(db: Session) -> int:
    created = 0
    for data in DEFAULT_ENTITIES:
        exists = db.query(models.Entity).filter(models.Entity.name == data["name"]).first()
        if exists:
            logger.info("Entity already exists: %s", data["name"])
            continue
        crud.create_entity(db, **data)
        created += 1
        logger.info("Created entity: %s", data["name"])
    return created


def seed(db: Session) -> None:
    ensure_admin(db)
    ensure_entities(db)
    db.commit()


def main() -> int:
    db = SessionLocal()
    try:
        seed(db)
    except Exception:
        db.rollback()
        logger.exception("Error seeding database")
        return 1
    finally:
        db.close()
    logger.info("Database seeded successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
