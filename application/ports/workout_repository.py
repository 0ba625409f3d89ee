"""Port interface for workout data operations."""

from typing import List, Optional, Protocol

from application.models import Workout


class WorkoutRepository(Protocol):
    """Repository protocol for a user's logged workouts."""

    async def list_workouts(self, user_id: str) -> List[Workout]:
        """List all workouts for a user (any order).

        Raises:
            PermissionDeniedError: If the store refuses the read.
            CollaboratorError: On any other storage failure.
        """
        ...

    async def get_workout(self, workout_id: str) -> Optional[Workout]:
        """Get a workout by ID, or None if it does not exist."""
        ...

    async def delete_workout(self, workout_id: str, user_id: str) -> None:
        """Delete a workout owned by user_id.

        Raises:
            NotFoundError: If no matching row was deleted.
        """
        ...
