"""Supabase-backed access token resolution."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from exam_prep.domain.models import UserRecord
from exam_prep.services.sync import AuthClient

logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves Supabase access tokens to users."""

    client: Client

    def get_user(self, access_token: str) -> UserRecord | None:
        """Return the user for an access token, or None if it is rejected."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthApiError as exc:
            logger.info("Supabase rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UserRecord(id=UUID(str(response.user.id)), email=response.user.email)
