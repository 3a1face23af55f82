# create_tables.py: run once to create missing tables (development helper)
import logging
import sys

from income_tracker.db import models  # noqa: F401  registers the tables on Base
from income_tracker.db.base import Base
from income_tracker.db.session import engine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> int:
    logger.info("Creating tables in the database (if not exist)...")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Error creating tables:")
        return 1
    logger.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
