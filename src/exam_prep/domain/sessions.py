"""Domain models for quiz sessions."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

QuizType = Literal["practice", "mock"]
QUIZ_TYPES = frozenset({"practice", "mock"})

_SECONDS_PER_MINUTE = 60
_SECONDS_PER_HOUR = 3600
_HMS_PARTS = 3


@dataclass(frozen=True)
class Answer:
    """A single answer captured during a quiz session."""

    question_id: str
    selected_answer: str
    is_correct: bool
    time_spent: int
    answered_at: datetime


@dataclass(frozen=True)
class QuizSession:
    """One quiz attempt, in progress or just completed.

    ``ended_at``, ``final_score``, ``time_spent`` and ``total_questions`` are
    only populated once the session is completed.
    """

    id: UUID
    quiz_type: str
    exam_id: str
    started_at: datetime
    answers: tuple[Answer, ...] = ()
    completed: bool = False
    ended_at: datetime | None = None
    final_score: int | None = None
    time_spent: int | None = None
    total_questions: int | None = None

    @property
    def correct_count(self) -> int:
        """Number of answers marked correct."""
        return sum(1 for answer in self.answers if answer.is_correct)

    def is_finalized(self) -> bool:
        """Return True when the session is completed with all final metrics."""
        return (
            self.completed
            and self.ended_at is not None
            and self.final_score is not None
            and self.time_spent is not None
            and self.total_questions is not None
        )


def parse_duration(value: int | str) -> int:
    """Parse seconds or an ``HH:MM:SS`` / ``MM:SS`` string into seconds."""
    if isinstance(value, bool):
        raise ValueError("Duration must be seconds or HH:MM:SS")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("Duration cannot be negative")
        return value
    cleaned = value.strip()
    if cleaned.isdigit():
        return int(cleaned)
    parts = cleaned.split(":")
    if len(parts) not in {2, 3} or not all(part.isdigit() for part in parts):
        raise ValueError(f"Invalid duration: {value!r}")
    numbers = [int(part) for part in parts]
    if len(numbers) < _HMS_PARTS:
        numbers.insert(0, 0)
    hours, minutes, seconds = numbers
    if minutes >= _SECONDS_PER_MINUTE or seconds >= _SECONDS_PER_MINUTE:
        raise ValueError(f"Invalid duration: {value!r}")
    return hours * _SECONDS_PER_HOUR + minutes * _SECONDS_PER_MINUTE + seconds


def format_duration(total_seconds: int) -> str:
    """Format seconds as ``HH:MM:SS``."""
    hours, remainder = divmod(total_seconds, _SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, _SECONDS_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
