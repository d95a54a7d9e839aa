"""Question bookmarks."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from exam_prep.domain.models import UserRecord

logger = logging.getLogger(__name__)


class BookmarkRepository(Protocol):
    """Persistence interface for bookmarked questions."""

    def list_bookmarked(self, user_id: UUID, question_ids: list[str]) -> set[str]:
        """Return the subset of question ids the user has bookmarked."""

    def add_bookmark(self, user_id: UUID, question_id: str, exam_id: str) -> None:
        """Bookmark a question."""

    def remove_bookmark(self, user_id: UUID, question_id: str) -> None:
        """Remove a bookmark."""


@dataclass
class BookmarkService:
    """Lists and toggles bookmarks for a user."""

    repository: BookmarkRepository

    def bookmarked(self, user: UserRecord, question_ids: list[str]) -> set[str]:
        """Return which of the given questions are bookmarked."""
        if not question_ids:
            return set()
        return self.repository.list_bookmarked(user.id, question_ids)

    def toggle(self, user: UserRecord, question_id: str, exam_id: str) -> bool:
        """Flip the bookmark on a question and return the new state."""
        if self.repository.list_bookmarked(user.id, [question_id]):
            self.repository.remove_bookmark(user.id, question_id)
            logger.info("Removed bookmark %s", question_id)
            return False
        self.repository.add_bookmark(user.id, question_id, exam_id)
        logger.info("Added bookmark %s", question_id)
        return True
