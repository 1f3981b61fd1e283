import logging

from symptomcheck.database import Base, SessionLocal, engine
from symptomcheck.seed import seed_articles
import symptomcheck.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


def reset_database():
    logger.info("Resetting database...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_articles(db)
    finally:
        db.close()
    logger.info("Database reset successful.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database()
