"""Port interface for user profile operations."""

from typing import Any, Dict, List, Optional, Protocol

from application.models import Profile


class ProfileRepository(Protocol):
    """Repository protocol for user profiles."""

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Get a profile by user ID, or None if the user has none."""
        ...

    async def update_profile(self, user_id: str, patch: Dict[str, Any]) -> None:
        """Apply a partial update (snake_case column names) to a profile."""
        ...

    async def search_profiles(self, query: str, limit: int) -> List[Profile]:
        """Prefix-search public profiles by display name."""
        ...
