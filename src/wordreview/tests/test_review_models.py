"""Tests for review value types."""
from dataclasses import FrozenInstanceError

import pytest

from wordreview.models.review_models import SavedWord, WordPractice, normalize_word_key


def test_normalize_word_key() -> None:
    """Test that keys are lowercased."""
    assert normalize_word_key("Ephemeral") == "ephemeral"
    assert normalize_word_key("ÉCLAT") == "éclat"


def test_word_practice_accuracy() -> None:
    """Test accuracy, including the no-attempts convention."""
    assert WordPractice().accuracy == 0.0
    assert WordPractice(attempts=4, perfects=3).accuracy == 0.75
    assert WordPractice(attempts=2, perfects=2).accuracy == 1.0


@pytest.mark.parametrize(
    "attempts, perfects",
    [(-1, 0), (0, -1), (2, 3)],
)
def test_word_practice_rejects_invalid_counts(attempts: int, perfects: int) -> None:
    """Test that inconsistent tallies are rejected."""
    with pytest.raises(ValueError):
        WordPractice(attempts=attempts, perfects=perfects)


def test_word_practice_dict_conversion() -> None:
    """Test conversion from and to the stored dict shape."""
    practice = WordPractice.from_dict({"attempts": 5, "perfects": 4})
    assert practice == WordPractice(attempts=5, perfects=4)
    assert practice.to_dict() == {"attempts": 5, "perfects": 4}
    assert WordPractice.from_dict({}) == WordPractice()


def test_saved_word_is_immutable() -> None:
    """Test that saved words cannot be changed in place."""
    word = SavedWord(word="ephemeral", last_reviewed_date=None)
    with pytest.raises(FrozenInstanceError):
        word.last_reviewed_date = "2026-01-01T00:00:00+00:00"
