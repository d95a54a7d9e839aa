"""Domain models for mirroring completed sessions remotely."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SessionSummary:
    """Summary row written for each completed session."""

    user_id: UUID
    session_id: UUID
    exam_id: str
    quiz_type: str
    score: int
    total_questions: int
    time_spent: int
    completed_at: datetime


@dataclass(frozen=True)
class ProgressUpdate:
    """Per-exam progress increment for a user."""

    user_id: UUID
    exam_id: str
    correct_count: int
    total_attempts: int


@dataclass(frozen=True)
class AnswerRecord:
    """Per-answer row written while a session is in progress."""

    user_id: UUID
    session_id: UUID
    exam_id: str
    question_id: str
    selected_answer: str
    is_correct: bool
    time_spent: int
