"""Tests for practice question loading."""

from uuid import uuid4

import pytest

from exam_prep.domain.exams import ExamAccess
from exam_prep.domain.models import UserRecord
from exam_prep.services.questions import ExamAccessRequiredError, QuestionService
from tests.conftest import InMemoryExamRepository, InMemoryQuestionRepository


def _service_with_access(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
    access_type: str,
) -> tuple[QuestionService, UserRecord]:
    user = UserRecord(id=uuid4())
    exam_repository.access.append(ExamAccess(user.id, "nremt", access_type))
    service = QuestionService(
        questions=question_repository, exams=exam_repository, free_limit=2
    )
    return service, user


def test_free_access_is_capped(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
) -> None:
    service, user = _service_with_access(
        question_repository, exam_repository, "free"
    )

    questions = service.load_practice_questions(user, "nremt", ["airway"], 50)

    assert [question.id for question in questions] == ["aw1", "aw2"]
    assert question_repository.requested_limits == [2]


def test_paid_access_uses_requested_count(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
) -> None:
    service, user = _service_with_access(
        question_repository, exam_repository, "premium"
    )

    questions = service.load_practice_questions(
        user, "nremt", ["airway", "cardiology"], 50
    )

    assert len(questions) == 5
    assert question_repository.requested_limits == [50]


def test_free_access_below_cap_uses_requested_count(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
) -> None:
    service, user = _service_with_access(
        question_repository, exam_repository, "free"
    )

    service.load_practice_questions(user, "nremt", ["airway"], 1)

    assert question_repository.requested_limits == [1]


def test_questions_require_access_grant(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
) -> None:
    service = QuestionService(questions=question_repository, exams=exam_repository)

    with pytest.raises(ExamAccessRequiredError):
        service.load_practice_questions(
            UserRecord(id=uuid4()), "nremt", ["airway"], 10
        )
    assert question_repository.requested_limits == []


@pytest.mark.parametrize(("subject_ids", "count"), [([], 10), (["airway"], 0)])
def test_questions_reject_invalid_selection(
    question_repository: InMemoryQuestionRepository,
    exam_repository: InMemoryExamRepository,
    subject_ids: list[str],
    count: int,
) -> None:
    service, user = _service_with_access(
        question_repository, exam_repository, "free"
    )

    with pytest.raises(ValueError):
        service.load_practice_questions(user, "nremt", subject_ids, count)
