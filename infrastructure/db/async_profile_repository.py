"""Async Supabase implementation of ProfileRepository."""

from typing import Any, Dict, List, Optional

from opentelemetry.trace import SpanKind
from postgrest.exceptions import APIError
from supabase import AsyncClient

from application.models import Profile
from application.ports.errors import CollaboratorError, NotFoundError
from backend.observability import traced
from infrastructure.db.errors import translate_api_error


class AsyncSupabaseProfileRepository:
    """Async Supabase-backed profile repository."""

    TABLE = "profiles"

    def __init__(self, client: Optional[AsyncClient]) -> None:
        self._client = client

    def _table(self):
        if self._client is None:
            raise CollaboratorError("Database not available")
        return self._client.table(self.TABLE)

    @traced(name="db.profiles.get", kind=SpanKind.CLIENT)
    async def get_profile(self, user_id: str) -> Optional[Profile]:
        try:
            result = await (
                self._table()
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        return Profile.model_validate(result.data[0]) if result.data else None

    @traced(name="db.profiles.update", kind=SpanKind.CLIENT)
    async def update_profile(self, user_id: str, patch: Dict[str, Any]) -> None:
        try:
            result = await (
                self._table()
                .update(patch)
                .eq("id", user_id)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        if not result.data:
            raise NotFoundError("Profile not found")

    @traced(name="db.profiles.search", kind=SpanKind.CLIENT)
    async def search_profiles(self, query: str, limit: int) -> List[Profile]:
        # LIKE wildcards in user input are matched literally
        pattern = query.replace("%", "").replace("_", "") + "%"
        try:
            result = await (
                self._table()
                .select("*")
                .ilike("display_name", pattern)
                .eq("is_public", True)
                .limit(limit)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        return [Profile.model_validate(row) for row in result.data or []]
