"""Reading study progress."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from exam_prep.domain.models import UserRecord
from exam_prep.domain.study import SubjectProgress


class ProgressRepository(Protocol):
    """Read interface for progress aggregates."""

    def list_progress(self, user_id: UUID, exam_id: str) -> list[SubjectProgress]:
        """Return every progress row of the user for an exam."""


@dataclass
class ProgressService:
    """Application service for progress reads."""

    repository: ProgressRepository

    def exam_progress(self, user: UserRecord, exam_id: str) -> list[SubjectProgress]:
        """Return progress rows with the exam-wide row first, then by subject."""
        rows = self.repository.list_progress(user.id, exam_id)
        return sorted(
            rows, key=lambda row: (row.subject_id is not None, row.subject_id or "")
        )
