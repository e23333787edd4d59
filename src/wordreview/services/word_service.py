"""Service for managing saved words and their practice history."""
import logging
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from wordreview.models.models import ReviewSessionEntry, SavedWordEntry, WordPracticeEntry
from wordreview.models.review_models import SavedWord, WordPractice, normalize_word_key

logger = logging.getLogger(__name__)

WORD_DETAIL_FIELDS = (
    "syllables",
    "part_of_speech",
    "definition",
    "etymology",
    "source_text",
    "source_category",
)
REVIEW_MODES = ("pronunciation", "flashcard")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; they were stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    value = _as_utc(value)
    return value.isoformat() if value else None


class WordService:
    """Service for managing saved words and their practice history."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db

    def get_saved_word(self, word_id: int) -> Optional[SavedWordEntry]:
        """Get a saved word by its ID."""
        return self.db.query(SavedWordEntry).filter(SavedWordEntry.id == word_id).first()

    def get_saved_word_by_text(self, word: str) -> Optional[SavedWordEntry]:
        """Get a saved word by its exact text."""
        return self.db.query(SavedWordEntry).filter(SavedWordEntry.word == word).first()

    def add_saved_word(self, word: str, **details: Any) -> SavedWordEntry:
        """Save a word. Saving a word that is already saved returns the existing entry."""
        existing = self.get_saved_word_by_text(word)
        if existing:
            logger.debug("Word %r is already saved", word)
            return existing

        unknown = set(details) - set(WORD_DETAIL_FIELDS)
        if unknown:
            raise ValueError(f"Unknown word fields: {', '.join(sorted(unknown))}")

        entry = SavedWordEntry(word=word, saved_at=datetime.now(UTC), **details)
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info("Saved word %r", word)
        return entry

    def remove_saved_word(self, word_id: int) -> bool:
        """Remove a saved word. Its practice history is kept."""
        entry = self.get_saved_word(word_id)
        if not entry:
            return False

        word = entry.word
        self.db.delete(entry)
        self.db.commit()
        logger.info("Removed word %r", word)
        return True

    def enrich_saved_word(self, word: str, **details: Any) -> SavedWordEntry:
        """Fill in dictionary details (syllables, definition, ...) for a saved word."""
        entry = self.get_saved_word_by_text(word)
        if not entry:
            raise ValueError(f"Word {word!r} not found")

        for key, value in details.items():
            if key not in WORD_DETAIL_FIELDS:
                raise ValueError(f"Unknown word field: {key}")
            if value is not None:
                setattr(entry, key, value)

        self.db.commit()
        self.db.refresh(entry)
        return entry

    def mark_reviewed(self, word: str, reviewed_at: Optional[datetime] = None) -> SavedWordEntry:
        """Record that a word was just reviewed."""
        entry = self.get_saved_word_by_text(word)
        if not entry:
            raise ValueError(f"Word {word!r} not found")

        entry.last_reviewed_date = _as_utc(reviewed_at) or datetime.now(UTC)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def record_practice(self, word: str, perfect: bool) -> WordPracticeEntry:
        """Count one practice attempt for a word, and a perfect if it was one."""
        word_key = normalize_word_key(word)
        entry = (
            self.db.query(WordPracticeEntry)
            .filter(WordPracticeEntry.word_key == word_key)
            .first()
        )
        if not entry:
            entry = WordPracticeEntry(word_key=word_key, attempts=0, perfects=0)
            self.db.add(entry)

        entry.attempts += 1
        if perfect:
            entry.perfects += 1

        self.db.commit()
        self.db.refresh(entry)
        logger.debug(
            "Practice for %r: %d/%d perfect", word_key, entry.perfects, entry.attempts
        )
        return entry

    def add_review_session(
        self,
        accuracy: float,
        word_count: int,
        perfects: int,
        close: int,
        missed: int,
        mode: str,
    ) -> ReviewSessionEntry:
        """Log a finished review session."""
        if mode not in REVIEW_MODES:
            raise ValueError(f"Review mode must be one of {REVIEW_MODES}, got {mode!r}")

        session = ReviewSessionEntry(
            date=datetime.now(UTC),
            accuracy=accuracy,
            word_count=word_count,
            perfects=perfects,
            close=close,
            missed=missed,
            mode=mode,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_review_sessions(self, limit: Optional[int] = None) -> List[ReviewSessionEntry]:
        """Get logged review sessions, newest first."""
        query = self.db.query(ReviewSessionEntry).order_by(
            ReviewSessionEntry.date.desc(), ReviewSessionEntry.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_saved_word_count(self) -> int:
        """Get the count of saved words."""
        return self.db.query(SavedWordEntry).count()

    def get_saved_words(self) -> List[SavedWord]:
        """Snapshot of all saved words, in the order they were saved."""
        entries = self.db.query(SavedWordEntry).order_by(SavedWordEntry.id).all()
        return [
            SavedWord(
                word=entry.word,
                last_reviewed_date=_to_iso(entry.last_reviewed_date),
                id=str(entry.id),
                saved_at=_to_iso(entry.saved_at),
                syllables=entry.syllables,
                part_of_speech=entry.part_of_speech,
                definition=entry.definition,
                etymology=entry.etymology,
                source_text=entry.source_text,
                source_category=entry.source_category,
            )
            for entry in entries
        ]

    def get_practice_history(self) -> Dict[str, WordPractice]:
        """Snapshot of the practice history, keyed by lowercased word text."""
        return {
            normalize_word_key(entry.word_key): WordPractice(
                attempts=entry.attempts, perfects=entry.perfects
            )
            for entry in self.db.query(WordPracticeEntry).all()
        }
