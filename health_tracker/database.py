"""
Handles database connection setup and session management using SQLAlchemy.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from health_tracker.core.config import settings

# SQLite needs to be told that sessions may cross threads (background jobs)
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Create the main SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

# Create a session factory that will be used to create new DB sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class that our ORM models will inherit from
Base = declarative_base()


def get_db():
    """
    FastAPI dependency to create and manage database sessions per request.

    This function yields a database session to the API endpoint and ensures
    it is always closed afterward, even if an error occurs.

    Yields:
        Session: A new SQLAlchemy database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory():
    """FastAPI dependency returning the factory used by background jobs to open their own sessions."""
    return SessionLocal
