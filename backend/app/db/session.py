"""
Database session management.
"""
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.core.config import settings
from app.db.base import Base

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    # Import models so every table is registered on Base.metadata
    import app.models  # noqa: F401
    Base.metadata.create_all(bind=engine)


@contextmanager
def atomic(db: Session):
    """
    Run a unit of work in one database transaction.
    
    Commits when the block exits normally; rolls back and re-raises on any
    exception, so a failed mutation never leaves partial writes behind.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
