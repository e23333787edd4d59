"""Spaced-repetition review scheduling and per-word mastery.

Everything here is a pure function of its arguments (and of the current time,
which can be pinned with ``now``). Nothing is cached: due-ness changes with the
clock, so callers recompute whenever history or the date changes.
"""
import logging
from datetime import datetime, timedelta, UTC
from typing import Iterable, List, Optional, Union

from wordreview.models.review_models import (
    MasteryLevel,
    PracticeHistory,
    ReviewUrgency,
    SavedWord,
    WordMastery,
    WordPractice,
    normalize_word_key,
)

logger = logging.getLogger(__name__)

# Days to wait before a word is due again, indexed by SR level.
# SR Level | Criteria               | Due after
# 0        | never practiced        | immediately
# 1        | 1 attempt              | 1 day
# 2        | 2 attempts             | 3 days
# 3        | 3 attempts             | 7 days
# 4        | 4+ attempts, >=75% acc | 14 days
SR_INTERVALS = (0, 1, 3, 7, 14)
MAX_SR_LEVEL = len(SR_INTERVALS) - 1

# Elapsed days reported for a word that was never reviewed; exceeds every interval
NEVER_REVIEWED_DAYS = 999

OVERDUE_DAYS = 7
CRITICAL_OVERDUE_COUNT = 3
HIGH_DUE_COUNT = 5

_NO_PRACTICE = WordPractice()


def _parse_timestamp(date_value: Union[str, datetime]) -> Optional[datetime]:
    if isinstance(date_value, datetime):
        parsed = date_value
    else:
        try:
            parsed = datetime.fromisoformat(date_value)
        except (TypeError, ValueError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def days_since(date_value: Optional[Union[str, datetime]], now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``date_value``.

    Returns NEVER_REVIEWED_DAYS when the date is missing or cannot be parsed,
    so such words are always treated as due. A datetime is accepted as well as
    an ISO-8601 string; naive values are read as UTC.
    """
    if not date_value:
        return NEVER_REVIEWED_DAYS

    reviewed_at = _parse_timestamp(date_value)
    if reviewed_at is None:
        logger.warning("Unparsable review date %r, treating word as never reviewed", date_value)
        return NEVER_REVIEWED_DAYS

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    return (now - reviewed_at) // timedelta(days=1)


def get_sr_level(attempts: int, accuracy: float) -> int:
    """Resolve the SR level for a practice tally.

    Only the top level looks at accuracy; levels 1-3 are earned by attempts alone.
    """
    if attempts >= 4 and accuracy >= 0.75:
        return 4
    if attempts >= 3:
        return 3
    if attempts >= 2:
        return 2
    if attempts >= 1:
        return 1
    return 0


def get_review_interval(sr_level: int) -> int:
    """Days to wait after a review before a word at ``sr_level`` is due again."""
    if sr_level < 0 or sr_level > MAX_SR_LEVEL:
        raise ValueError(f"SR level must be between 0 and {MAX_SR_LEVEL}, got {sr_level}")
    return SR_INTERVALS[sr_level]


def get_word_practice(word: SavedWord, practice_history: PracticeHistory) -> WordPractice:
    """Look up the practice tally for a word, defaulting to no attempts."""
    return practice_history.get(normalize_word_key(word.word), _NO_PRACTICE)


def is_word_due(
    word: SavedWord,
    practice_history: PracticeHistory,
    now: Optional[datetime] = None,
) -> bool:
    """Check whether a single word has waited out its SR interval."""
    practice = get_word_practice(word, practice_history)
    sr_level = get_sr_level(practice.attempts, practice.accuracy)
    return days_since(word.last_reviewed_date, now) >= get_review_interval(sr_level)


def get_due_words(
    saved_words: Iterable[SavedWord],
    practice_history: PracticeHistory,
    now: Optional[datetime] = None,
) -> List[SavedWord]:
    """Return the saved words that are due for review, in their original order."""
    if now is None:
        now = datetime.now(UTC)
    return [word for word in saved_words if is_word_due(word, practice_history, now)]


def get_review_urgency(
    due_words: Iterable[SavedWord],
    practice_history: PracticeHistory,
    now: Optional[datetime] = None,
) -> ReviewUrgency:
    """Classify how pressing a due backlog is.

    Critical when at least three due words have gone a week or more without
    review, high when five or more words are due, normal otherwise. The
    history is not consulted; it is accepted so the call mirrors get_due_words.
    """
    if now is None:
        now = datetime.now(UTC)
    due_words = list(due_words)

    overdue_count = sum(
        1 for word in due_words if days_since(word.last_reviewed_date, now) >= OVERDUE_DAYS
    )

    if overdue_count >= CRITICAL_OVERDUE_COUNT:
        return ReviewUrgency.CRITICAL
    if len(due_words) >= HIGH_DUE_COUNT:
        return ReviewUrgency.HIGH
    return ReviewUrgency.NORMAL


def get_word_mastery(word: SavedWord, practice_history: PracticeHistory) -> WordMastery:
    """Classify a word for display.

    Mastery thresholds are separate from the SR levels: a word can sit at SR
    level 4 while still showing as familiar.
    """
    practice = get_word_practice(word, practice_history)
    attempts = practice.attempts
    accuracy = practice.accuracy

    if attempts == 0:
        return WordMastery(level=MasteryLevel.NEW, dots=0, show_label=False)
    if attempts >= 5 and accuracy >= 0.75:
        return WordMastery(level=MasteryLevel.MASTERED, dots=3, show_label=True)
    if attempts >= 3 and accuracy >= 0.5:
        return WordMastery(level=MasteryLevel.FAMILIAR, dots=2, show_label=False)
    return WordMastery(level=MasteryLevel.LEARNING, dots=1, show_label=False)
