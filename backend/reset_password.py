# reset_password.py
import logging
import sys

from income_tracker.db import crud
from income_tracker.db.session import SessionLocal
from income_tracker.services.security import hash_password

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def reset_password(identifier: str, new_password: str) -> int:
    """Reset the password of the user matching a username, email or phone."""
    if len(new_password) < 6:
        logger.error("Password must be at least 6 characters")
        return 2
    db = SessionLocal()
    try:
        user = crud.find_user_by_identifier(db, identifier)
        if not user:
            logger.error("User not found: %s", identifier)
            return 1
        user.password = hash_password(new_password)
        db.add(user)
        db.commit()
        logger.info("Password reset for %s", user.username)
        return 0
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python reset_password.py <username|email|phone> <new_password>")
        sys.exit(2)
    sys.exit(reset_password(sys.argv[1], sys.argv[2]))
