"""Supabase repository for the question bank."""

from dataclasses import dataclass

from supabase import Client

from exam_prep.domain.study import Question
from exam_prep.services.questions import QuestionRepository


@dataclass
class SupabaseQuestionRepository(QuestionRepository):
    """Supabase implementation for practice questions."""

    client: Client

    def list_questions(
        self, exam_id: str, subject_ids: list[str], limit: int
    ) -> list[Question]:
        """Return up to ``limit`` questions from the given subjects."""
        response = (
            self.client.table("questions")
            .select(
                "id, exam_id, question_text, options, correct_answer, "
                "explanation, subject_id"
            )
            .eq("exam_id", exam_id)
            .in_("subject_id", subject_ids)
            .limit(limit)
            .execute()
        )
        return [_parse_question(row, exam_id) for row in response.data or []]


def _parse_question(row: dict[str, object], exam_id: str) -> Question:
    options = row.get("options")
    subject_id = row.get("subject_id")
    return Question(
        id=str(row["id"]),
        exam_id=str(row.get("exam_id") or exam_id),
        subject_id=str(subject_id) if subject_id is not None else None,
        question_text=str(row.get("question_text", "")),
        correct_answer=str(row.get("correct_answer", "")),
        options=list(options) if isinstance(options, list) else [],
        explanation=row.get("explanation"),
    )
