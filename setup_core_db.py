# File: setup_core_db.py
"""
Creates the database (if missing) and every table the service needs.
Run once against a fresh Postgres, or with USE_SQLITE=true for a local file.
"""
import logging

from sqlalchemy_utils import database_exists, create_database

from skinsage.core.config.settings import settings
from skinsage.core.database.base import Base
from skinsage.core.database.connection import engine

# Import all models to ensure they are registered
import skinsage.features.scans.data.sql_models  # noqa: F401
import skinsage.core.jobs.models  # noqa: F401

logger = logging.getLogger("setup_core_db")


def main():
    settings.ensure_dirs()

    if not database_exists(engine.url):
        logger.info(f"Creating database {engine.url.database}")
        create_database(engine.url)

    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
    print("✅ Core database tables created successfully.")
