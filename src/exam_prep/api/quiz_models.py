"""Pydantic models for quiz API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from exam_prep.domain.sessions import QuizType


class StartSessionRequest(BaseModel):
    """Payload starting a quiz session."""

    quiz_type: QuizType
    exam_id: str = Field(min_length=1)


class RecordAnswerRequest(BaseModel):
    """Payload recording one answer."""

    question_id: str
    selected_answer: str
    is_correct: bool
    time_spent: int = Field(default=0, ge=0)


class CompleteSessionRequest(BaseModel):
    """Payload completing the in-progress session."""

    final_score: int = Field(ge=0)
    time_spent: int | str
    total_questions: int = Field(ge=0)


class GrantExamAccessRequest(BaseModel):
    """Payload granting the current user access to an exam."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    purchase_type: str | None = Field(default=None, alias="purchaseType")


class ToggleBookmarkRequest(BaseModel):
    """Payload flipping the bookmark on a question."""

    question_id: str = Field(min_length=1)
    exam_id: str = Field(min_length=1)
