"""Database connection and session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from clinic_access.core.config import SQLALCHEMY_DATABASE_URL


def build_engine(url: str):
    """Create an engine (SQLite needs special connect_args; others don't)."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url)


engine = build_engine(SQLALCHEMY_DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for SQLAlchemy models
Base = declarative_base()


def get_db():
    """Generator function for FastAPI dependency injection.
    Creates a session, yields it, and closes it after usage to ensure proper cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
