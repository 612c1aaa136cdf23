# app/infra/init_db.py

import logging

from sqlalchemy import inspect

from app.config import DATABASE_URL
from app.infra.postgres import create_db_engine
from app.models.base import Base
from app.models import message, user  # noqa: F401  (registers tables on Base)
from app.utils.logger import setup_logger

logger = logging.getLogger(__name__)


def init_db(database_url: str = DATABASE_URL, drop: bool = False) -> list:
    """Create all tables, optionally dropping them first. Returns the table names."""
    engine = create_db_engine(database_url)

    if drop:
        logger.warning("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    logger.info("Database initialized, tables: %s", tables)
    return tables


if __name__ == "__main__":
    import sys

    setup_logger()
    init_db(drop="--drop" in sys.argv)
