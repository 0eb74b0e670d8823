"""
Database initialization script.
"""
import logging
from app.core.logging import configure_logging
from app.db.session import init_db

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    configure_logging()
    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully!")
