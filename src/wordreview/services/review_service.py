"""Service that runs the review scheduler against the word store."""
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from wordreview.models.review_models import ReviewUrgency, SavedWord, WordMastery
from wordreview.services import review_scheduler
from wordreview.services.word_service import WordService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOverview:
    """Everything a review screen needs at one instant."""
    total_words: int
    due_words: List[SavedWord]
    urgency: ReviewUrgency
    mastery: Dict[str, WordMastery]  # word text -> mastery


class ReviewService:
    """Service for answering review questions from fresh store snapshots.

    Nothing is cached between calls: due-ness depends on the clock, so each
    method reads the store again.
    """

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db
        self.word_service = WordService(db)

    def get_due_words(self, now: Optional[datetime] = None) -> List[SavedWord]:
        """Get the saved words that are due for review."""
        return review_scheduler.get_due_words(
            self.word_service.get_saved_words(),
            self.word_service.get_practice_history(),
            now,
        )

    def get_review_urgency(self, now: Optional[datetime] = None) -> ReviewUrgency:
        """Get the urgency of the current review backlog."""
        if now is None:
            now = datetime.now(UTC)
        history = self.word_service.get_practice_history()
        due_words = review_scheduler.get_due_words(
            self.word_service.get_saved_words(), history, now
        )
        return review_scheduler.get_review_urgency(due_words, history, now)

    def get_word_mastery(self, word: str) -> WordMastery:
        """Get the mastery of a saved word."""
        entry = self.word_service.get_saved_word_by_text(word)
        if not entry:
            raise ValueError(f"Word {word!r} not found")
        return review_scheduler.get_word_mastery(
            SavedWord(word=entry.word), self.word_service.get_practice_history()
        )

    def get_overview(self, now: Optional[datetime] = None) -> ReviewOverview:
        """Compute due words, urgency and mastery from a single snapshot."""
        if now is None:
            now = datetime.now(UTC)
        saved_words = self.word_service.get_saved_words()
        history = self.word_service.get_practice_history()

        due_words = review_scheduler.get_due_words(saved_words, history, now)
        urgency = review_scheduler.get_review_urgency(due_words, history, now)
        mastery = {
            word.word: review_scheduler.get_word_mastery(word, history)
            for word in saved_words
        }

        logger.info(
            "Review overview: %d saved, %d due, urgency %s",
            len(saved_words),
            len(due_words),
            urgency.value,
        )
        return ReviewOverview(
            total_words=len(saved_words),
            due_words=due_words,
            urgency=urgency,
            mastery=mastery,
        )
