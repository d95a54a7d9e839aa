"""Exam catalog and access grants."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from exam_prep.domain.exams import Exam, ExamAccess
from exam_prep.domain.models import UserRecord


class ExamNotFoundError(LookupError):
    """Raised when an exam id is not in the catalog."""


class ExamAccessExistsError(ValueError):
    """Raised when a user already has access to an exam."""


class ExamRepository(Protocol):
    """Persistence interface for exams and access grants."""

    def list_active_exams(self) -> list[Exam]:
        """Return active exams ordered by name."""

    def get_exam(self, exam_id: str) -> Exam | None:
        """Return an exam by id, if present."""

    def get_access(self, user_id: UUID, exam_id: str) -> ExamAccess | None:
        """Return the user's access grant for an exam, if present."""

    def create_access(
        self, user_id: UUID, exam_id: str, access_type: str
    ) -> ExamAccess:
        """Create and return an access grant."""


@dataclass
class ExamService:
    """Application service for the exam catalog."""

    repository: ExamRepository

    def list_exams(self) -> list[Exam]:
        """Return active exams with their subjects."""
        return self.repository.list_active_exams()

    def grant_access(
        self, user: UserRecord, exam_id: str, access_type: str | None = None
    ) -> tuple[Exam, ExamAccess]:
        """Grant a user access to an exam."""
        exam = self.repository.get_exam(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        if self.repository.get_access(user.id, exam.id) is not None:
            raise ExamAccessExistsError(exam.id)
        access = self.repository.create_access(
            user.id, exam.id, access_type or "free"
        )
        return exam, access
