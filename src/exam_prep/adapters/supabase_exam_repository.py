"""Supabase repository for the exam catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from exam_prep.domain.exams import Exam, ExamAccess, Subject
from exam_prep.services.exams import ExamRepository


@dataclass
class SupabaseExamRepository(ExamRepository):
    """Supabase implementation for exams and access grants."""

    client: Client

    def list_active_exams(self) -> list[Exam]:
        """Return active exams with subjects, ordered by name."""
        response = (
            self.client.table("exams")
            .select("id, name, description, is_active, subjects (id, name)")
            .eq("is_active", True)
            .order("name")
            .execute()
        )
        return [_parse_exam(row) for row in response.data or []]

    def get_exam(self, exam_id: str) -> Exam | None:
        """Return an exam by id, if present."""
        response = (
            self.client.table("exams")
            .select("id, name, description, is_active, subjects (id, name)")
            .eq("id", exam_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_exam(response.data[0])

    def get_access(self, user_id: UUID, exam_id: str) -> ExamAccess | None:
        """Return the access grant for a user and exam, if present."""
        response = (
            self.client.table("user_exam_access")
            .select("user_id, exam_id, access_type")
            .eq("user_id", str(user_id))
            .eq("exam_id", exam_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_access(response.data[0])

    def create_access(
        self, user_id: UUID, exam_id: str, access_type: str
    ) -> ExamAccess:
        """Insert an access grant and return it."""
        response = (
            self.client.table("user_exam_access")
            .insert(
                {
                    "user_id": str(user_id),
                    "exam_id": exam_id,
                    "access_type": access_type,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to grant exam access")
        return _parse_access(response.data[0])


def _parse_exam(row: dict[str, object]) -> Exam:
    subjects = row.get("subjects") or []
    return Exam(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        description=row.get("description"),
        is_active=bool(row.get("is_active", True)),
        subjects=[
            Subject(id=str(subject["id"]), name=str(subject.get("name", "")))
            for subject in subjects
            if isinstance(subject, dict)
        ],
    )


def _parse_access(row: dict[str, object]) -> ExamAccess:
    return ExamAccess(
        user_id=UUID(str(row["user_id"])),
        exam_id=str(row["exam_id"]),
        access_type=str(row.get("access_type") or "free"),
    )
