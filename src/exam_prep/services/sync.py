"""Remote mirroring of quiz answers and completed sessions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from exam_prep.domain.models import UserRecord
from exam_prep.domain.sessions import Answer, QuizSession
from exam_prep.domain.sync import AnswerRecord, ProgressUpdate, SessionSummary

logger = logging.getLogger(__name__)


class AuthClient(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user owning the access token, if any."""


class ResultsRepository(Protocol):
    """Persistence interface for answers and completed session results."""

    def create_answer(self, record: AnswerRecord) -> None:
        """Insert a row for a single recorded answer."""

    def create_session_summary(self, summary: SessionSummary) -> None:
        """Insert a summary row for a completed session."""

    def apply_progress(self, update: ProgressUpdate) -> None:
        """Add a progress increment to the user's per-exam aggregate."""


@dataclass
class RemoteSyncService:
    """Writes quiz activity to the remote persistence service.

    Unauthenticated callers are skipped without error. Failures while
    writing propagate to the caller.
    """

    auth_client: AuthClient
    repository: ResultsRepository

    async def mirror_answer(
        self, session: QuizSession, answer: Answer, access_token: str | None
    ) -> bool:
        """Mirror one recorded answer and return True when it was written."""
        user = self._resolve_user(session, access_token)
        if user is None:
            return False
        self.repository.create_answer(
            AnswerRecord(
                user_id=user.id,
                session_id=session.id,
                exam_id=session.exam_id,
                question_id=answer.question_id,
                selected_answer=answer.selected_answer,
                is_correct=answer.is_correct,
                time_spent=answer.time_spent,
            )
        )
        return True

    async def mirror(self, session: QuizSession, access_token: str | None) -> bool:
        """Mirror a completed session and return True when it was written."""
        if not session.is_finalized():
            raise ValueError("Only completed sessions can be mirrored")
        user = self._resolve_user(session, access_token)
        if user is None:
            return False

        self.repository.create_session_summary(
            SessionSummary(
                user_id=user.id,
                session_id=session.id,
                exam_id=session.exam_id,
                quiz_type=session.quiz_type,
                score=session.final_score,
                total_questions=session.total_questions,
                time_spent=session.time_spent,
                completed_at=session.ended_at,
            )
        )
        self.repository.apply_progress(
            ProgressUpdate(
                user_id=user.id,
                exam_id=session.exam_id,
                correct_count=session.correct_count,
                total_attempts=len(session.answers),
            )
        )
        return True

    def _resolve_user(
        self, session: QuizSession, access_token: str | None
    ) -> UserRecord | None:
        if not access_token:
            logger.debug("Skipping remote sync for anonymous session %s", session.id)
            return None
        user = self.auth_client.get_user(access_token)
        if user is None:
            logger.info("Skipping remote sync, access token has no user")
        return user
