"""Supabase repository for answers, session results and progress."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from exam_prep.domain.study import SubjectProgress
from exam_prep.domain.sync import AnswerRecord, ProgressUpdate, SessionSummary
from exam_prep.services.progress import ProgressRepository
from exam_prep.services.sync import ResultsRepository


@dataclass
class SupabaseResultsRepository(ResultsRepository, ProgressRepository):
    """Supabase implementation for answer rows, summaries and progress."""

    client: Client

    def create_answer(self, record: AnswerRecord) -> None:
        """Insert a user_answers row."""
        response = (
            self.client.table("user_answers")
            .insert(
                {
                    "user_id": str(record.user_id),
                    "session_id": str(record.session_id),
                    "exam_id": record.exam_id,
                    "question_id": record.question_id,
                    "selected_answer": record.selected_answer,
                    "is_correct": record.is_correct,
                    "time_spent": record.time_spent,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store answer")

    def create_session_summary(self, summary: SessionSummary) -> None:
        """Insert a practice_sessions row."""
        response = (
            self.client.table("practice_sessions")
            .insert(
                {
                    "user_id": str(summary.user_id),
                    "exam_id": summary.exam_id,
                    "session_id": str(summary.session_id),
                    "session_type": summary.quiz_type,
                    "correct_answers": summary.score,
                    "total_questions": summary.total_questions,
                    "time_spent": summary.time_spent,
                    "completed": True,
                    "completed_at": summary.completed_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store session summary")

    def apply_progress(self, update: ProgressUpdate) -> None:
        """Add counts to the user's exam-wide progress row, creating it if needed."""
        response = (
            self.client.table("user_progress")
            .select("id, correct_count, total_attempts")
            .eq("user_id", str(update.user_id))
            .eq("exam_id", update.exam_id)
            .is_("subject_id", "null")
            .limit(1)
            .execute()
        )
        now = datetime.now(tz=UTC).isoformat()
        if response.data:
            row = response.data[0]
            self.client.table("user_progress").update(
                {
                    "correct_count": int(row.get("correct_count") or 0)
                    + update.correct_count,
                    "total_attempts": int(row.get("total_attempts") or 0)
                    + update.total_attempts,
                    "last_attempt": now,
                }
            ).eq("id", row["id"]).execute()
            return
        self.client.table("user_progress").insert(
            {
                "user_id": str(update.user_id),
                "exam_id": update.exam_id,
                "correct_count": update.correct_count,
                "total_attempts": update.total_attempts,
                "last_attempt": now,
            }
        ).execute()

    def list_progress(self, user_id: UUID, exam_id: str) -> list[SubjectProgress]:
        """Return the user's progress rows for an exam."""
        response = (
            self.client.table("user_progress")
            .select("subject_id, correct_count, total_attempts, last_attempt")
            .eq("user_id", str(user_id))
            .eq("exam_id", exam_id)
            .execute()
        )
        return [_parse_progress(row) for row in response.data or []]


def _parse_progress(row: dict[str, object]) -> SubjectProgress:
    subject_id = row.get("subject_id")
    last_attempt = row.get("last_attempt")
    return SubjectProgress(
        subject_id=str(subject_id) if subject_id is not None else None,
        correct_count=int(row.get("correct_count") or 0),
        total_attempts=int(row.get("total_attempts") or 0),
        last_attempt=datetime.fromisoformat(str(last_attempt))
        if last_attempt
        else None,
    )
