"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from exam_prep.config import Settings
from exam_prep.containers import AppContainer
from exam_prep.domain.exams import Exam, ExamAccess, Subject
from exam_prep.domain.models import UserRecord
from exam_prep.domain.study import Question, SubjectProgress
from exam_prep.domain.sync import AnswerRecord, ProgressUpdate, SessionSummary
from exam_prep.services.bookmarks import BookmarkRepository, BookmarkService
from exam_prep.services.exams import ExamRepository, ExamService
from exam_prep.services.progress import ProgressRepository, ProgressService
from exam_prep.services.questions import QuestionRepository, QuestionService
from exam_prep.services.session_store import (
    InMemorySessionStore,
    SessionStore,
    in_memory_store_factory,
)
from exam_prep.services.sessions import QuizSessionService
from exam_prep.services.sync import AuthClient, RemoteSyncService, ResultsRepository

VALID_TOKEN = "valid-token"


@dataclass
class FakeClock:
    """Manually advanced clock for time-sensitive tests."""

    now: datetime = field(
        default_factory=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class FakeAuthClient(AuthClient):
    """Auth client accepting a fixed set of tokens."""

    users: dict[str, UserRecord] = field(
        default_factory=lambda: {
            VALID_TOKEN: UserRecord(id=uuid4(), email="student@example.com")
        }
    )

    def get_user(self, access_token: str) -> UserRecord | None:
        return self.users.get(access_token)


@dataclass
class InMemoryResultsRepository(ResultsRepository, ProgressRepository):
    """In-memory results repository for tests."""

    answers: list[AnswerRecord] = field(default_factory=list)
    summaries: list[SessionSummary] = field(default_factory=list)
    progress: dict[tuple[UUID, str], tuple[int, int]] = field(default_factory=dict)
    subject_progress: dict[tuple[UUID, str], list[SubjectProgress]] = field(
        default_factory=dict
    )

    def create_answer(self, record: AnswerRecord) -> None:
        self.answers.append(record)

    def create_session_summary(self, summary: SessionSummary) -> None:
        self.summaries.append(summary)

    def apply_progress(self, update: ProgressUpdate) -> None:
        key = (update.user_id, update.exam_id)
        correct, attempts = self.progress.get(key, (0, 0))
        self.progress[key] = (
            correct + update.correct_count,
            attempts + update.total_attempts,
        )

    def list_progress(self, user_id: UUID, exam_id: str) -> list[SubjectProgress]:
        return list(self.subject_progress.get((user_id, exam_id), []))


@dataclass
class FailingResultsRepository(ResultsRepository):
    """Results repository whose writes always fail."""

    def create_answer(self, record: AnswerRecord) -> None:
        raise RuntimeError("supabase unavailable")

    def create_session_summary(self, summary: SessionSummary) -> None:
        raise RuntimeError("supabase unavailable")

    def apply_progress(self, update: ProgressUpdate) -> None:
        raise RuntimeError("supabase unavailable")


@dataclass
class InMemoryExamRepository(ExamRepository):
    """In-memory exam catalog for tests."""

    exams: dict[str, Exam] = field(
        default_factory=lambda: {
            "nremt": Exam(
                id="nremt",
                name="NREMT",
                description="National Registry EMT",
                is_active=True,
                subjects=[Subject(id="airway", name="Airway")],
            ),
            "ccna": Exam(
                id="ccna",
                name="CCNA",
                description=None,
                is_active=True,
            ),
            "legacy": Exam(
                id="legacy",
                name="Legacy",
                description=None,
                is_active=False,
            ),
        }
    )
    access: list[ExamAccess] = field(default_factory=list)

    def list_active_exams(self) -> list[Exam]:
        active = [exam for exam in self.exams.values() if exam.is_active]
        return sorted(active, key=lambda exam: exam.name)

    def get_exam(self, exam_id: str) -> Exam | None:
        return self.exams.get(exam_id)

    def get_access(self, user_id: UUID, exam_id: str) -> ExamAccess | None:
        for grant in self.access:
            if grant.user_id == user_id and grant.exam_id == exam_id:
                return grant
        return None

    def create_access(
        self, user_id: UUID, exam_id: str, access_type: str
    ) -> ExamAccess:
        grant = ExamAccess(user_id=user_id, exam_id=exam_id, access_type=access_type)
        self.access.append(grant)
        return grant


@dataclass
class InMemoryQuestionRepository(QuestionRepository):
    """In-memory question bank with NREMT airway and cardiology questions."""

    questions: list[Question] = field(
        default_factory=lambda: [
            Question(
                id=f"aw{index}",
                exam_id="nremt",
                subject_id="airway",
                question_text=f"Airway question {index}",
                correct_answer="a",
                options=["a", "b", "c", "d"],
            )
            for index in range(1, 5)
        ]
        + [
            Question(
                id="cd1",
                exam_id="nremt",
                subject_id="cardiology",
                question_text="Cardiology question",
                correct_answer="b",
            )
        ]
    )
    requested_limits: list[int] = field(default_factory=list)

    def list_questions(
        self, exam_id: str, subject_ids: list[str], limit: int
    ) -> list[Question]:
        self.requested_limits.append(limit)
        matching = [
            question
            for question in self.questions
            if question.exam_id == exam_id and question.subject_id in subject_ids
        ]
        return matching[:limit]


@dataclass
class InMemoryBookmarkRepository(BookmarkRepository):
    """In-memory bookmarks keyed by user and question."""

    rows: dict[tuple[UUID, str], str] = field(default_factory=dict)

    def list_bookmarked(self, user_id: UUID, question_ids: list[str]) -> set[str]:
        return {
            question_id
            for question_id in question_ids
            if (user_id, question_id) in self.rows
        }

    def add_bookmark(self, user_id: UUID, question_id: str, exam_id: str) -> None:
        self.rows[(user_id, question_id)] = exam_id

    def remove_bookmark(self, user_id: UUID, question_id: str) -> None:
        self.rows.pop((user_id, question_id), None)

@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def results_repository() -> InMemoryResultsRepository:
    return InMemoryResultsRepository()


@pytest.fixture
def remote_sync(
    auth_client: FakeAuthClient, results_repository: InMemoryResultsRepository
) -> RemoteSyncService:
    return RemoteSyncService(auth_client=auth_client, repository=results_repository)


@pytest.fixture
def service(
    store: SessionStore, remote_sync: RemoteSyncService, clock: FakeClock
) -> QuizSessionService:
    return QuizSessionService(
        store=store,
        remote_sync=remote_sync,
        access_token=VALID_TOKEN,
        clock=clock,
    )


@pytest.fixture
def exam_repository() -> InMemoryExamRepository:
    return InMemoryExamRepository()


@pytest.fixture
def question_repository() -> InMemoryQuestionRepository:
    return InMemoryQuestionRepository()


@pytest.fixture
def bookmark_repository() -> InMemoryBookmarkRepository:
    return InMemoryBookmarkRepository()


@pytest.fixture
def container(
    settings: Settings,
    clock: FakeClock,
    auth_client: FakeAuthClient,
    remote_sync: RemoteSyncService,
    results_repository: InMemoryResultsRepository,
    exam_repository: InMemoryExamRepository,
    question_repository: InMemoryQuestionRepository,
    bookmark_repository: InMemoryBookmarkRepository,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        session_store_factory=in_memory_store_factory(),
        auth_client=auth_client,
        remote_sync=remote_sync,
        exam_service=ExamService(exam_repository),
        question_service=QuestionService(
            questions=question_repository, exams=exam_repository
        ),
        bookmark_service=BookmarkService(bookmark_repository),
        progress_service=ProgressService(results_repository),
        clock=clock,
    )
