"""
SQLite persistence for saved mission profiles.
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from vibration_wizard.config import get_settings
import logging

logger = logging.getLogger(__name__)

settings = get_settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Session:
    """
    Dependency yielding a database session for one request.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create the saved-profile tables on ``bind`` (the configured engine by default)."""
    bind = bind if bind is not None else engine
    try:
        from vibration_wizard.models import mission_profile  # noqa: F401

        Base.metadata.create_all(bind=bind)

        if bind.dialect.name == "sqlite":
            with bind.connect() as conn:
                result = conn.execute(text("SELECT name FROM sqlite_master WHERE type='table'"))
                tables = [row[0] for row in result]
            logger.info(f"Database tables: {tables}")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
