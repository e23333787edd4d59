"""Print a review report for the configured word store."""
import sys

from wordreview.config import ensure_directories
from wordreview.logging_config import get_logger, setup_logging
from wordreview.models.base import get_db, init_db
from wordreview.services.review_service import ReviewOverview, ReviewService

logger = get_logger(__name__)


def format_overview(overview: ReviewOverview) -> str:
    """Render an overview as plain text, one line per saved word."""
    due = {word.word for word in overview.due_words}
    lines = [
        f"Saved words: {overview.total_words}",
        f"Due for review: {len(overview.due_words)}",
        f"Urgency: {overview.urgency.value}",
    ]
    for word, mastery in overview.mastery.items():
        dots = "●" * mastery.dots + "○" * (3 - mastery.dots)
        label = f" {mastery.level.value}" if mastery.show_label else ""
        marker = " (due)" if word in due else ""
        lines.append(f"  {dots} {word}{label}{marker}")
    return "\n".join(lines)


def main() -> int:
    """Build the review overview and print it."""
    init_db()
    sessions = get_db()
    db = next(sessions)
    try:
        overview = ReviewService(db).get_overview()
    finally:
        sessions.close()

    print(format_overview(overview))
    return 0


if __name__ == "__main__":
    ensure_directories()
    setup_logging("Starting wordreview report ...")

    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
