"""Quiz session lifecycle: start, answer capture and completion."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import uuid4

from exam_prep.domain.sessions import (
    QUIZ_TYPES,
    Answer,
    QuizSession,
    parse_duration,
)
from exam_prep.services.session_store import (
    CURRENT_SLOT,
    LAST_RESULTS_SLOT,
    SessionStore,
)
from exam_prep.services.sync import RemoteSyncService

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(tz=UTC)


@dataclass
class QuizSessionService:
    """Owns the single in-progress quiz session of one client.

    Every mutation is written through to the store so the session survives
    reloads. Completion moves the session into the last-results slot.
    """

    store: SessionStore
    remote_sync: RemoteSyncService | None = None
    access_token: str | None = None
    clock: Callable[[], datetime] = field(default=utc_now)

    def current_session(self) -> QuizSession | None:
        """Return the in-progress session, if any."""
        return self.store.get(CURRENT_SLOT)

    def last_results(self) -> QuizSession | None:
        """Return the most recently completed session, if any."""
        return self.store.get(LAST_RESULTS_SLOT)

    def start_session(self, quiz_type: str, exam_id: str) -> QuizSession:
        """Start a new session, replacing any abandoned one."""
        if quiz_type not in QUIZ_TYPES:
            raise ValueError(f"Unknown quiz type: {quiz_type!r}")
        if not exam_id or not exam_id.strip():
            raise ValueError("exam_id must not be empty")

        previous = self.store.get(CURRENT_SLOT)
        if previous is not None:
            logger.info("Replacing abandoned session %s", previous.id)

        session = QuizSession(
            id=uuid4(),
            quiz_type=quiz_type,
            exam_id=exam_id,
            started_at=self.clock(),
        )
        self.store.set(CURRENT_SLOT, session)
        return session

    def record_answer(
        self,
        question_id: str,
        selected_answer: str,
        is_correct: bool,
        time_spent: int,
    ) -> QuizSession | None:
        """Append an answer to the in-progress session.

        Returns the updated session, or None when nothing is in progress.
        Repeated answers to the same question are all kept.
        """
        session = self.store.get(CURRENT_SLOT)
        if session is None:
            return None

        answer = Answer(
            question_id=question_id,
            selected_answer=selected_answer,
            is_correct=is_correct,
            time_spent=time_spent,
            answered_at=self.clock(),
        )
        updated = replace(session, answers=(*session.answers, answer))
        self.store.set(CURRENT_SLOT, updated)
        return updated

    async def answer_question(
        self,
        question_id: str,
        selected_answer: str,
        is_correct: bool,
        time_spent: int,
    ) -> QuizSession | None:
        """Record an answer locally, then mirror it as a per-answer row."""
        updated = self.record_answer(
            question_id, selected_answer, is_correct, time_spent
        )
        if updated is None or self.remote_sync is None:
            return updated
        try:
            await self.remote_sync.mirror_answer(
                updated, updated.answers[-1], self.access_token
            )
        except Exception:
            logger.exception(
                "Failed to sync answer",
                extra={"session_id": str(updated.id), "question_id": question_id},
            )
        return updated

    async def complete_session(
        self,
        final_score: int,
        time_spent: int | str,
        total_questions: int,
    ) -> QuizSession | None:
        """Finalize the in-progress session and store it as last results.

        Returns None without touching either slot when nothing is in
        progress. A failing remote mirror is logged and does not affect the
        local result.
        """
        session = self.store.get(CURRENT_SLOT)
        if session is None:
            return None

        completed = replace(
            session,
            completed=True,
            ended_at=self.clock(),
            final_score=final_score,
            time_spent=parse_duration(time_spent),
            total_questions=total_questions,
        )

        if self.remote_sync is not None:
            try:
                await self.remote_sync.mirror(completed, self.access_token)
            except Exception:
                logger.exception(
                    "Failed to sync completed session",
                    extra={"session_id": str(completed.id)},
                )

        self.store.set(LAST_RESULTS_SLOT, completed)
        self.store.remove(CURRENT_SLOT)
        return completed
