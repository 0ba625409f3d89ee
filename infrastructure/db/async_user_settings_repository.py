"""Async Supabase implementation of UserSettingsRepository.

One row per user in user_settings, with preferences and privacy stored as
JSON columns. Missing rows and missing keys fall back to model defaults.
"""

from typing import Any, Dict, Optional

from opentelemetry.trace import SpanKind
from postgrest.exceptions import APIError
from supabase import AsyncClient

from application.models import PrivacySettings, UserPreferences
from application.ports.errors import CollaboratorError
from backend.observability import traced
from infrastructure.db.errors import translate_api_error


class AsyncSupabaseUserSettingsRepository:
    """Async Supabase-backed user settings repository."""

    TABLE = "user_settings"

    def __init__(self, client: Optional[AsyncClient]) -> None:
        self._client = client

    def _table(self):
        if self._client is None:
            raise CollaboratorError("Database not available")
        return self._client.table(self.TABLE)

    @traced(name="db.user_settings.get_preferences", kind=SpanKind.CLIENT)
    async def get_preferences(self, user_id: str) -> UserPreferences:
        return UserPreferences.model_validate(await self._read(user_id, "preferences"))

    @traced(name="db.user_settings.get_privacy", kind=SpanKind.CLIENT)
    async def get_privacy(self, user_id: str) -> PrivacySettings:
        return PrivacySettings.model_validate(await self._read(user_id, "privacy"))

    @traced(name="db.user_settings.update_preferences", kind=SpanKind.CLIENT)
    async def update_preferences(self, user_id: str, patch: Dict[str, Any]) -> None:
        current = await self.get_preferences(user_id)
        merged = current.model_copy(update=patch)
        await self._write(user_id, "preferences", merged.model_dump(mode="json"))

    @traced(name="db.user_settings.update_privacy", kind=SpanKind.CLIENT)
    async def update_privacy(self, user_id: str, patch: Dict[str, Any]) -> None:
        current = await self.get_privacy(user_id)
        merged = current.model_copy(update=patch)
        await self._write(user_id, "privacy", merged.model_dump(mode="json"))

    async def _read(self, user_id: str, column: str) -> Dict[str, Any]:
        try:
            result = await (
                self._table()
                .select(column)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        if not result.data:
            return {}
        return result.data[0].get(column) or {}

    async def _write(self, user_id: str, column: str, value: Dict[str, Any]) -> None:
        try:
            await (
                self._table()
                .upsert({"user_id": user_id, column: value}, on_conflict="user_id")
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
