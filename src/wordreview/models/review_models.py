"""Value types passed between the word store and the review scheduler."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union


def normalize_word_key(word: str) -> str:
    """Return the practice-history key for a word (lookups are case-insensitive)."""
    return word.lower()


class ReviewUrgency(Enum):
    """Backlog severity over a whole due set."""
    CRITICAL = "critical"  # Several words left unreviewed for a week or more
    HIGH = "high"  # Large backlog
    NORMAL = "normal"


class MasteryLevel(Enum):
    """Display tier of how well a single word is learned."""
    NEW = "new"
    LEARNING = "learning"
    FAMILIAR = "familiar"
    MASTERED = "mastered"


@dataclass(frozen=True)
class SavedWord:
    """A vocabulary item the learner has bookmarked.

    Only ``word`` and ``last_reviewed_date`` take part in scheduling; the rest
    is carried through untouched for the caller.
    """
    word: str
    last_reviewed_date: Optional[Union[str, datetime]] = None  # ISO-8601 or datetime, None if never reviewed
    id: Optional[str] = None
    saved_at: Optional[str] = None
    syllables: Optional[str] = None
    part_of_speech: Optional[str] = None
    definition: Optional[str] = None
    etymology: Optional[str] = None
    source_text: Optional[str] = None
    source_category: Optional[str] = None


@dataclass(frozen=True)
class WordPractice:
    """Practice tally for one word."""
    attempts: int = 0
    perfects: int = 0

    def __post_init__(self) -> None:
        if self.attempts < 0 or self.perfects < 0:
            raise ValueError("attempts and perfects must be non-negative")
        if self.perfects > self.attempts:
            raise ValueError(
                f"perfects ({self.perfects}) cannot exceed attempts ({self.attempts})"
            )

    @property
    def accuracy(self) -> float:
        """Share of attempts scored as perfect, 0.0 when never attempted."""
        return self.perfects / self.attempts if self.attempts > 0 else 0.0

    def to_dict(self) -> Dict[str, int]:
        return {"attempts": self.attempts, "perfects": self.perfects}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WordPractice":
        return cls(attempts=int(data.get("attempts", 0)), perfects=int(data.get("perfects", 0)))


# Lowercased word text -> practice tally
PracticeHistory = Mapping[str, WordPractice]


@dataclass(frozen=True)
class WordMastery:
    """How a word's mastery is displayed."""
    level: MasteryLevel
    dots: int
    show_label: bool
