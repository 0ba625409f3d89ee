"""Async Supabase implementation of WorkoutRepository."""

from typing import List, Optional

from opentelemetry.trace import SpanKind
from postgrest.exceptions import APIError
from supabase import AsyncClient

from application.models import Workout
from application.ports.errors import CollaboratorError, NotFoundError
from backend.observability import traced
from infrastructure.db.errors import translate_api_error


class AsyncSupabaseWorkoutRepository:
    """Async Supabase-backed workout repository.

    Without a client (Supabase not configured) every call raises
    CollaboratorError.
    """

    TABLE = "workouts"

    def __init__(self, client: Optional[AsyncClient]) -> None:
        self._client = client

    def _table(self):
        if self._client is None:
            raise CollaboratorError("Database not available")
        return self._client.table(self.TABLE)

    @traced(name="db.workouts.list", kind=SpanKind.CLIENT)
    async def list_workouts(self, user_id: str) -> List[Workout]:
        try:
            result = await (
                self._table()
                .select("*")
                .eq("user_id", user_id)
                .order("date", desc=True)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        return [Workout.model_validate(row) for row in result.data or []]

    @traced(name="db.workouts.get", kind=SpanKind.CLIENT)
    async def get_workout(self, workout_id: str) -> Optional[Workout]:
        try:
            result = await (
                self._table()
                .select("*")
                .eq("id", workout_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        return Workout.model_validate(result.data[0]) if result.data else None

    @traced(name="db.workouts.delete", kind=SpanKind.CLIENT)
    async def delete_workout(self, workout_id: str, user_id: str) -> None:
        try:
            result = await (
                self._table()
                .delete()
                .eq("id", workout_id)
                .eq("user_id", user_id)
                .execute()
            )
        except APIError as e:
            raise translate_api_error(e) from e
        if not result.data:
            raise NotFoundError("Workout not found")
