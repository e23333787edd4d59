"""Database models for saved words and their practice history."""
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    DateTime,
    Float,
    Integer,
    String,
)

from wordreview.models.base import Base, TimestampMixin


class SavedWordEntry(Base, TimestampMixin):
    """A word the learner has bookmarked."""

    __tablename__ = "saved_words"

    id = Column(Integer, primary_key=True, index=True)
    word = Column(String, unique=True, nullable=False)
    syllables = Column(String)
    part_of_speech = Column(String)
    definition = Column(String)
    etymology = Column(String)
    source_text = Column(String)
    source_category = Column(String)
    saved_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    last_reviewed_date = Column(DateTime(timezone=True), nullable=True)


class WordPracticeEntry(Base, TimestampMixin):
    """Practice tally for one word, keyed by its lowercased text."""

    __tablename__ = "word_practice"

    id = Column(Integer, primary_key=True)
    word_key = Column(String, unique=True, nullable=False, index=True)
    attempts = Column(Integer, default=0, nullable=False)
    perfects = Column(Integer, default=0, nullable=False)


class ReviewSessionEntry(Base, TimestampMixin):
    """Summary of one finished review session."""

    __tablename__ = "review_sessions"

    id = Column(Integer, primary_key=True)
    date = Column(DateTime(timezone=True), nullable=False)
    accuracy = Column(Float, nullable=False)
    word_count = Column(Integer, nullable=False)
    perfects = Column(Integer, default=0)
    close = Column(Integer, default=0)
    missed = Column(Integer, default=0)
    mode = Column(String, nullable=False)  # "pronunciation" or "flashcard"
