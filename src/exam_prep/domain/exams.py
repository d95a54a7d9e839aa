"""Domain models for the exam catalog."""

from dataclasses import dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class Subject:
    """A subject area within an exam."""

    id: str
    name: str


@dataclass(frozen=True)
class Exam:
    """A certification exam offered in the catalog."""

    id: str
    name: str
    description: str | None
    is_active: bool
    subjects: list[Subject] = field(default_factory=list)


@dataclass(frozen=True)
class ExamAccess:
    """A user's access grant to an exam."""

    user_id: UUID
    exam_id: str
    access_type: str
