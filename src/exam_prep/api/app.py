"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from exam_prep.api.quiz_models import (
    CompleteSessionRequest,
    GrantExamAccessRequest,
    RecordAnswerRequest,
    StartSessionRequest,
    ToggleBookmarkRequest,
)
from exam_prep.app_logging import configure_logging
from exam_prep.config import parse_bearer_token
from exam_prep.containers import AppContainer
from exam_prep.domain.models import UserRecord
from exam_prep.domain.sessions import QuizSession, format_duration
from exam_prep.services.exams import ExamAccessExistsError, ExamNotFoundError
from exam_prep.services.questions import ExamAccessRequiredError
from exam_prep.services.results import build_results_view
from exam_prep.services.score_access import ScoreAccessValidator
from exam_prep.services.sessions import QuizSessionService


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


def quiz_sessions(
    x_client_id: str = Header(),
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(_get_container),
) -> QuizSessionService:
    """Build the session lifecycle service for the calling client."""
    try:
        return container.quiz_sessions(x_client_id, parse_bearer_token(authorization))
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def score_access(
    x_client_id: str = Header(),
    container: AppContainer = Depends(_get_container),
) -> ScoreAccessValidator:
    """Build the score access validator for the calling client."""
    try:
        return container.score_access(x_client_id)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


def current_user(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(_get_container),
) -> UserRecord:
    """Resolve the bearer token to a user or reject the request."""
    token = parse_bearer_token(authorization)
    user = container.auth_client.get_user(token) if token else None
    if user is None:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, detail="Unauthorized: No user found"
        )
    return user


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting exam prep API (%s)", container.settings.environment)
        yield
        logger.info("Stopping exam prep API")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/exams")
    async def list_exams(request: Request) -> dict[str, object]:
        """Return the active exam catalog."""
        state_container: AppContainer = request.app.state.container
        exams = state_container.exam_service.list_exams()
        return {"exams": [asdict(exam) for exam in exams]}

    @app.post("/exams")
    async def grant_exam_access(
        payload: GrantExamAccessRequest,
        request: Request,
        user: UserRecord = Depends(current_user),
    ) -> dict[str, object]:
        """Grant the authenticated user access to an exam."""
        state_container: AppContainer = request.app.state.container
        try:
            exam, access = state_container.exam_service.grant_access(
                user, payload.id, payload.purchase_type
            )
        except ExamNotFoundError as exc:
            raise HTTPException(
                status.HTTP_404_NOT_FOUND, detail="Exam not found"
            ) from exc
        except ExamAccessExistsError as exc:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                detail="You already have access to this exam",
            ) from exc
        return {"success": True, "exam": asdict(exam), "access": asdict(access)}

    @app.get("/exams/{exam_id}/questions")
    async def practice_questions(
        exam_id: str,
        request: Request,
        subject_ids: list[str] = Query(default=[], alias="subjectId"),
        count: int = Query(default=50, ge=1),
        user: UserRecord = Depends(current_user),
    ) -> dict[str, object]:
        """Return practice questions for the selected subjects."""
        state_container: AppContainer = request.app.state.container
        try:
            questions = state_container.question_service.load_practice_questions(
                user, exam_id, subject_ids, count
            )
        except ExamAccessRequiredError as exc:
            raise HTTPException(
                status.HTTP_403_FORBIDDEN, detail="No access to this exam"
            ) from exc
        except ValueError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return {"questions": [asdict(question) for question in questions]}

    @app.get("/exams/{exam_id}/progress")
    async def exam_progress(
        exam_id: str,
        request: Request,
        user: UserRecord = Depends(current_user),
    ) -> dict[str, object]:
        """Return the user's progress for an exam, per subject."""
        state_container: AppContainer = request.app.state.container
        rows = state_container.progress_service.exam_progress(user, exam_id)
        return {
            "progress": [{**asdict(row), "percentage": row.percentage} for row in rows]
        }

    @app.get("/bookmarks")
    async def list_bookmarks(
        request: Request,
        question_ids: list[str] = Query(default=[], alias="questionId"),
        user: UserRecord = Depends(current_user),
    ) -> dict[str, object]:
        """Return which of the given questions the user has bookmarked."""
        state_container: AppContainer = request.app.state.container
        bookmarked = state_container.bookmark_service.bookmarked(user, question_ids)
        return {"bookmarks": sorted(bookmarked)}

    @app.post("/bookmarks")
    async def toggle_bookmark(
        payload: ToggleBookmarkRequest,
        request: Request,
        user: UserRecord = Depends(current_user),
    ) -> dict[str, object]:
        """Flip the bookmark on a question."""
        state_container: AppContainer = request.app.state.container
        bookmarked = state_container.bookmark_service.toggle(
            user, payload.question_id, payload.exam_id
        )
        return {"question_id": payload.question_id, "bookmarked": bookmarked}

    @app.post("/sessions")
    async def start_session(
        payload: StartSessionRequest,
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object]:
        """Start a quiz session, replacing any abandoned one."""
        try:
            session = service.start_session(payload.quiz_type, payload.exam_id)
        except ValueError as exc:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        return {"status": "ok", "session": asdict(session)}

    @app.get("/sessions/current")
    async def current_session(
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object]:
        """Return the in-progress session, if any."""
        session = service.current_session()
        return {"session": asdict(session) if session else None}

    @app.post("/sessions/current/answers")
    async def record_answer(
        payload: RecordAnswerRequest,
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object]:
        """Record an answer on the in-progress session and mirror it."""
        session = await service.answer_question(
            question_id=payload.question_id,
            selected_answer=payload.selected_answer,
            is_correct=payload.is_correct,
            time_spent=payload.time_spent,
        )
        if session is None:
            return {"status": "ignored"}
        return {"status": "ok", "session": asdict(session)}

    @app.post("/sessions/current/complete")
    async def complete_session(
        payload: CompleteSessionRequest,
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object]:
        """Complete the in-progress session and return its score link."""
        try:
            session = await service.complete_session(
                final_score=payload.final_score,
                time_spent=payload.time_spent,
                total_questions=payload.total_questions,
            )
        except ValueError as exc:
            raise HTTPException(
                status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        if session is None:
            return {"status": "ignored"}
        return {
            "status": "ok",
            "session": asdict(session),
            "score_url": _score_url(session),
        }

    @app.get("/score", response_model=None)
    async def score(
        request: Request,
        quiz_type: str | None = Query(default=None, alias="quizType"),
        session_id: str | None = Query(default=None, alias="sessionId"),
        validator: ScoreAccessValidator = Depends(score_access),
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object] | RedirectResponse:
        """Render the last results if this navigation is legitimate."""
        return _score_response(request, quiz_type, session_id, validator, service)

    @app.get("/score/{quiz_type}", response_model=None)
    async def score_for_type(
        quiz_type: str,
        request: Request,
        session_id: str | None = Query(default=None, alias="sessionId"),
        validator: ScoreAccessValidator = Depends(score_access),
        service: QuizSessionService = Depends(quiz_sessions),
    ) -> dict[str, object] | RedirectResponse:
        """Render the last results for a specific quiz type."""
        return _score_response(request, quiz_type, session_id, validator, service)

    return app


def _score_response(
    request: Request,
    quiz_type: str | None,
    session_id: str | None,
    validator: ScoreAccessValidator,
    service: QuizSessionService,
) -> dict[str, object] | RedirectResponse:
    """Return the results view or a redirect to the home path."""
    container: AppContainer = request.app.state.container
    home = RedirectResponse(container.settings.home_path)
    if not quiz_type or not session_id:
        return home
    if not validator.validate_score_access(quiz_type):
        return home
    results = service.last_results()
    if results is None:
        return home
    view = build_results_view(
        results, pass_percentage=container.settings.mock_pass_percentage
    )
    return {"results": asdict(view)}


def _score_url(session: QuizSession) -> str:
    """Build the score page link for a completed session."""
    query = urlencode(
        {
            "examId": session.exam_id,
            "score": session.final_score,
            "totalQuestions": session.total_questions,
            "timeSpent": format_duration(session.time_spent or 0),
            "sessionId": str(session.id),
        }
    )
    return f"/score/{session.quiz_type}?{query}"
