"""JSON file-backed session store."""

import hashlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from uuid import UUID

from exam_prep.domain.sessions import QUIZ_TYPES, Answer, QuizSession
from exam_prep.services.session_store import SLOT_KEYS, SessionSlot, SessionStore

logger = logging.getLogger(__name__)


@dataclass
class JsonFileSessionStore(SessionStore):
    """Stores both slots of one client in a single JSON document."""

    path: Path

    @classmethod
    def for_client(
        cls, directory: str | Path, client_id: str
    ) -> "JsonFileSessionStore":
        """Create a store for a client inside a storage directory."""
        if not client_id.strip():
            raise ValueError("client_id must not be empty")
        digest = hashlib.sha256(client_id.encode("utf-8")).hexdigest()
        return cls(path=Path(directory) / f"{digest}.json")

    def get(self, slot: SessionSlot) -> QuizSession | None:
        """Return the session stored in the slot, if present and valid."""
        payload = self._read().get(SLOT_KEYS[slot])
        if payload is None:
            return None
        try:
            return session_from_payload(payload)
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "Discarding malformed session record",
                extra={"path": str(self.path), "slot": slot},
            )
            return None

    def set(self, slot: SessionSlot, session: QuizSession) -> None:
        """Write the session to the slot."""
        document = self._read()
        document[SLOT_KEYS[slot]] = session_to_payload(session)
        self._write(document)

    def remove(self, slot: SessionSlot) -> None:
        """Clear the slot."""
        document = self._read()
        if document.pop(SLOT_KEYS[slot], None) is not None:
            self._write(document)

    def _read(self) -> dict[str, object]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(
                "Ignoring unreadable session file", extra={"path": str(self.path)}
            )
            return {}
        return document if isinstance(document, dict) else {}

    def _write(self, document: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f"{self.path.stem}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(document, handle)
        try:
            os.replace(handle.name, self.path)
        except OSError:
            Path(handle.name).unlink(missing_ok=True)
            raise


def session_to_payload(session: QuizSession) -> dict[str, object]:
    """Serialize a session to a JSON-compatible dict."""
    payload: dict[str, object] = {
        "id": str(session.id),
        "quizType": session.quiz_type,
        "examId": session.exam_id,
        "startTime": session.started_at.isoformat(),
        "answers": [
            {
                "questionId": answer.question_id,
                "selectedAnswer": answer.selected_answer,
                "isCorrect": answer.is_correct,
                "timeSpent": answer.time_spent,
                "timestamp": answer.answered_at.isoformat(),
            }
            for answer in session.answers
        ],
        "completed": session.completed,
    }
    if session.completed:
        payload["endTime"] = session.ended_at.isoformat() if session.ended_at else None
        payload["finalScore"] = session.final_score
        payload["timeSpent"] = session.time_spent
        payload["totalQuestions"] = session.total_questions
    return payload


def session_from_payload(payload: object) -> QuizSession:
    """Parse a stored payload, raising ValueError when it is inconsistent."""
    if not isinstance(payload, dict):
        raise TypeError("Session payload must be an object")
    quiz_type = payload["quizType"]
    if quiz_type not in QUIZ_TYPES:
        raise ValueError(f"Unknown quiz type: {quiz_type!r}")
    answers = tuple(
        Answer(
            question_id=str(item["questionId"]),
            selected_answer=str(item["selectedAnswer"]),
            is_correct=bool(item["isCorrect"]),
            time_spent=int(item["timeSpent"]),
            answered_at=_aware_timestamp(item["timestamp"]),
        )
        for item in payload.get("answers", [])
    )
    completed = bool(payload.get("completed", False))
    end_time = payload.get("endTime")
    session = QuizSession(
        id=UUID(str(payload["id"])),
        quiz_type=quiz_type,
        exam_id=str(payload["examId"]),
        started_at=_aware_timestamp(payload["startTime"]),
        answers=answers,
        completed=completed,
        ended_at=_aware_timestamp(end_time) if end_time else None,
        final_score=_optional_int(payload.get("finalScore")),
        time_spent=_optional_int(payload.get("timeSpent")),
        total_questions=_optional_int(payload.get("totalQuestions")),
    )
    if completed and not session.is_finalized():
        raise ValueError("Completed session is missing final metrics")
    return session


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)


def _aware_timestamp(value: object) -> datetime:
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        raise ValueError(f"Timestamp lacks a timezone: {value!r}")
    return parsed
