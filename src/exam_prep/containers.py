"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import partial

from supabase import create_client

from exam_prep.adapters.json_file_session_store import JsonFileSessionStore
from exam_prep.adapters.supabase_auth_client import SupabaseAuthClient
from exam_prep.adapters.supabase_bookmark_repository import (
    SupabaseBookmarkRepository,
)
from exam_prep.adapters.supabase_exam_repository import SupabaseExamRepository
from exam_prep.adapters.supabase_question_repository import (
    SupabaseQuestionRepository,
)
from exam_prep.adapters.supabase_results_repository import (
    SupabaseResultsRepository,
)
from exam_prep.config import Settings
from exam_prep.services.bookmarks import BookmarkService
from exam_prep.services.exams import ExamService
from exam_prep.services.progress import ProgressService
from exam_prep.services.questions import QuestionService
from exam_prep.services.score_access import ScoreAccessValidator
from exam_prep.services.session_store import SessionStore, in_memory_store_factory
from exam_prep.services.sessions import QuizSessionService, utc_now
from exam_prep.services.sync import AuthClient, RemoteSyncService


@dataclass
class AppContainer:
    """Holds application-wide dependencies.

    Quiz session services are request-scoped and built per client through
    ``quiz_sessions`` and ``score_access``.
    """

    settings: Settings
    session_store_factory: Callable[[str], SessionStore]
    auth_client: AuthClient
    remote_sync: RemoteSyncService
    exam_service: ExamService
    question_service: QuestionService
    bookmark_service: BookmarkService
    progress_service: ProgressService
    clock: Callable[[], datetime] = field(default=utc_now)

    def quiz_sessions(
        self, client_id: str, access_token: str | None = None
    ) -> QuizSessionService:
        """Build the session lifecycle service for a client."""
        return QuizSessionService(
            store=self.session_store_factory(client_id),
            remote_sync=self.remote_sync,
            access_token=access_token,
            clock=self.clock,
        )

    def score_access(self, client_id: str) -> ScoreAccessValidator:
        """Build the score access validator for a client."""
        return ScoreAccessValidator(
            store=self.session_store_factory(client_id),
            window=timedelta(seconds=self.settings.score_access_window_seconds),
            clock=self.clock,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    auth_client = SupabaseAuthClient(supabase_client)
    results_repository = SupabaseResultsRepository(supabase_client)
    exam_repository = SupabaseExamRepository(supabase_client)

    session_store_factory: Callable[[str], SessionStore]
    if resolved_settings.session_store_dir:
        session_store_factory = partial(
            JsonFileSessionStore.for_client, resolved_settings.session_store_dir
        )
    else:
        session_store_factory = in_memory_store_factory(
            resolved_settings.session_store_max_clients
        )

    return AppContainer(
        settings=resolved_settings,
        session_store_factory=session_store_factory,
        auth_client=auth_client,
        remote_sync=RemoteSyncService(
            auth_client=auth_client, repository=results_repository
        ),
        exam_service=ExamService(exam_repository),
        question_service=QuestionService(
            questions=SupabaseQuestionRepository(supabase_client),
            exams=exam_repository,
        ),
        bookmark_service=BookmarkService(SupabaseBookmarkRepository(supabase_client)),
        progress_service=ProgressService(results_repository),
    )
