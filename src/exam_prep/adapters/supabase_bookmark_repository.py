"""Supabase repository for question bookmarks."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from exam_prep.services.bookmarks import BookmarkRepository


@dataclass
class SupabaseBookmarkRepository(BookmarkRepository):
    """Supabase implementation for bookmarks."""

    client: Client

    def list_bookmarked(self, user_id: UUID, question_ids: list[str]) -> set[str]:
        """Return the subset of question ids the user has bookmarked."""
        response = (
            self.client.table("bookmarks")
            .select("question_id")
            .eq("user_id", str(user_id))
            .in_("question_id", question_ids)
            .execute()
        )
        return {str(row["question_id"]) for row in response.data or []}

    def add_bookmark(self, user_id: UUID, question_id: str, exam_id: str) -> None:
        """Insert a bookmarks row."""
        response = (
            self.client.table("bookmarks")
            .insert(
                {
                    "user_id": str(user_id),
                    "question_id": question_id,
                    "exam_id": exam_id,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add bookmark")

    def remove_bookmark(self, user_id: UUID, question_id: str) -> None:
        """Delete the user's bookmark on a question."""
        self.client.table("bookmarks").delete().match(
            {"user_id": str(user_id), "question_id": question_id}
        ).execute()
