"""Domain models for practice questions and study progress."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Question:
    """A practice question belonging to one subject of an exam."""

    id: str
    exam_id: str
    subject_id: str | None
    question_text: str
    correct_answer: str
    options: list[object] = field(default_factory=list)
    explanation: str | None = None


@dataclass(frozen=True)
class SubjectProgress:
    """Aggregated answer counts for one subject, or the whole exam."""

    subject_id: str | None
    correct_count: int
    total_attempts: int
    last_attempt: datetime | None = None

    @property
    def percentage(self) -> int:
        if self.total_attempts <= 0:
            return 0
        return round(self.correct_count / self.total_attempts * 100)
