"""Score page summaries for completed sessions."""

from dataclasses import dataclass

from exam_prep.domain.sessions import QuizSession, format_duration

DEFAULT_PASS_PERCENTAGE = 70


@dataclass(frozen=True)
class ResultsView:
    """Data rendered on a score page."""

    session_id: str
    exam_id: str
    quiz_type: str
    score: int
    total_questions: int
    percentage: int
    correct: int
    incorrect: int
    time_spent: str
    passed: bool | None


def build_results_view(
    session: QuizSession, pass_percentage: int = DEFAULT_PASS_PERCENTAGE
) -> ResultsView:
    """Build the score page summary for a completed session."""
    if not session.is_finalized():
        raise ValueError("Results are only available for completed sessions")
    score = session.final_score
    total = session.total_questions
    percentage = round(score / total * 100) if total else 0
    return ResultsView(
        session_id=str(session.id),
        exam_id=session.exam_id,
        quiz_type=session.quiz_type,
        score=score,
        total_questions=total,
        percentage=percentage,
        correct=score,
        incorrect=max(total - score, 0),
        time_spent=format_duration(session.time_spent),
        passed=percentage >= pass_percentage if session.quiz_type == "mock" else None,
    )
