"""Gate for direct navigation to score pages."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from exam_prep.services.session_store import LAST_RESULTS_SLOT, SessionStore
from exam_prep.services.sessions import utc_now

SCORE_ACCESS_WINDOW = timedelta(minutes=5)


@dataclass
class ScoreAccessValidator:
    """Checks that a score view stems from a freshly completed session."""

    store: SessionStore
    window: timedelta = SCORE_ACCESS_WINDOW
    clock: Callable[[], datetime] = field(default=utc_now)

    def validate_score_access(self, requested_quiz_type: str) -> bool:
        """Return True if the last results may be shown for this quiz type."""
        results = self.store.get(LAST_RESULTS_SLOT)
        if results is None or not results.completed or results.ended_at is None:
            return False
        if results.quiz_type != requested_quiz_type:
            return False
        return self.clock() - results.ended_at < self.window
