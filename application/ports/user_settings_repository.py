"""Port interface for user preference and privacy settings."""

from typing import Any, Dict, Protocol

from application.models import PrivacySettings, UserPreferences


class UserSettingsRepository(Protocol):
    """Repository protocol for per-user settings.

    Getters return defaults for users who never saved settings.
    """

    async def get_preferences(self, user_id: str) -> UserPreferences:
        ...

    async def get_privacy(self, user_id: str) -> PrivacySettings:
        ...

    async def update_preferences(self, user_id: str, patch: Dict[str, Any]) -> None:
        """Merge patch into stored preferences, creating the row if needed."""
        ...

    async def update_privacy(self, user_id: str, patch: Dict[str, Any]) -> None:
        """Merge patch into stored privacy settings, creating the row if needed."""
        ...
