"""Loading practice questions for an exam."""

from dataclasses import dataclass
from typing import Protocol

from exam_prep.domain.models import UserRecord
from exam_prep.domain.study import Question
from exam_prep.services.exams import ExamRepository

FREE_QUESTION_LIMIT = 10


class ExamAccessRequiredError(PermissionError):
    """Raised when a user has no access grant for an exam."""


class QuestionRepository(Protocol):
    """Persistence interface for the question bank."""

    def list_questions(
        self, exam_id: str, subject_ids: list[str], limit: int
    ) -> list[Question]:
        """Return up to ``limit`` questions from the given subjects."""


@dataclass
class QuestionService:
    """Selects practice questions according to the user's access level."""

    questions: QuestionRepository
    exams: ExamRepository
    free_limit: int = FREE_QUESTION_LIMIT

    def load_practice_questions(
        self,
        user: UserRecord,
        exam_id: str,
        subject_ids: list[str],
        count: int,
    ) -> list[Question]:
        """Return questions for the selected subjects.

        Free access is capped at ``free_limit`` questions regardless of the
        requested count.
        """
        if not subject_ids:
            raise ValueError("Select at least one subject")
        if count < 1:
            raise ValueError("count must be positive")
        access = self.exams.get_access(user.id, exam_id)
        if access is None:
            raise ExamAccessRequiredError(exam_id)
        limit = min(count, self.free_limit) if access.access_type == "free" else count
        return self.questions.list_questions(exam_id, subject_ids, limit)
