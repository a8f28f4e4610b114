"""
Create the FamilyBoard schema.
Runs on API startup; can also be run by hand: ``python -m db.init_db``.
"""
import logging
from typing import Optional

from sqlalchemy.engine import Engine

from db.models import Base

logger = logging.getLogger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables defined in models (existing tables are left alone)."""
    if bind is None:
        from db.session import engine as bind

    logger.info(f"Initializing database schema on {bind.url.render_as_string(hide_password=True)}")
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema initialized")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
