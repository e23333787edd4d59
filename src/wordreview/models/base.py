"""Base model configuration."""
from datetime import UTC, datetime
from typing import Generator

from sqlalchemy import Column, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from wordreview.config import settings

# Create SQLAlchemy engine
engine = create_engine(settings.database.url, echo=settings.database.echo)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create declarative base class
Base = declarative_base()


class TimestampMixin:
    """Mixin to add timestamp columns to models."""
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database."""
    # Register the mapped tables before creating them
    import wordreview.models.models  # noqa: F401

    Base.metadata.create_all(bind=engine)  # Create tables if they don't exist


def reset_db() -> None:
    """Drop and recreate all tables."""
    import wordreview.models.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
