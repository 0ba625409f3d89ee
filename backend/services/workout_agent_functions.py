"""Workout agent functions: history, details, stats, personal bests, delete.

Each handler takes its validated argument model plus the caller's user ID and
returns an ExecutionResult. deleteWorkout is destructive: the first call only
builds a PendingAction, execute_delete_workout performs the delete once the
user confirms.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from application.models import (
    ErrorKind,
    ExecutionResult,
    ExerciseSummary,
    PendingAction,
    PersonalBest,
    Workout,
    WorkoutDetail,
    WorkoutStats,
    WorkoutSummary,
)
from application.ports.workout_repository import WorkoutRepository
from backend.services.function_registry import AgentFunction
from backend.services.result_classifier import read_failure, write_failure
from backend.services.tool_schemas import (
    DeleteWorkoutArgs,
    GetPersonalBestsArgs,
    LogWorkoutArgs,
    ViewStatsArgs,
    ViewWorkoutDetailsArgs,
    ViewWorkoutHistoryArgs,
)

logger = logging.getLogger(__name__)

# Stats windows in days; all-time runs from the first workout
_TIMEFRAME_DAYS: Dict[str, Optional[int]] = {
    "week": 7,
    "month": 30,
    "year": 365,
    "all-time": None,
}

_TIMEFRAME_LABELS = {
    "week": "this week",
    "month": "in the last 30 days",
    "year": "in the last year",
    "all-time": "all time",
}

PERSONAL_BESTS_IN_MESSAGE = 10

WORKOUT_NOT_FOUND = "Workout not found"


class WorkoutAgentFunctions:
    """Agent functions backed by a WorkoutRepository."""

    def __init__(self, workouts: WorkoutRepository):
        self._workouts = workouts

    def handlers(self) -> Dict[str, AgentFunction]:
        """Handlers keyed by the tool name the model calls."""
        return {
            "viewWorkoutHistory": self.view_workout_history,
            "viewWorkoutDetails": self.view_workout_details,
            "deleteWorkout": self.delete_workout,
            "logWorkout": self.log_workout,
            "viewStats": self.view_stats,
            "getPersonalBests": self.get_personal_bests,
        }

    def confirm_handlers(self) -> Dict[str, AgentFunction]:
        """Handlers that perform a destructive action after confirmation."""
        return {"deleteWorkout": self.execute_delete_workout}

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def view_workout_history(
        self, args: ViewWorkoutHistoryArgs, user_id: str
    ) -> ExecutionResult:
        try:
            workouts = await self._workouts.list_workouts(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="fetch your workout history",
                permission_message=(
                    "I couldn't open your workout history just now. "
                    "You can log a new workout to get started."
                ),
                navigation_target="/log-workout/new",
                workouts=[],
                total=0,
            )

        if not workouts:
            return ExecutionResult.empty(
                "You haven't logged any workouts yet. Want to start one now?",
                navigation_target="/log-workout/new",
                workouts=[],
                total=0,
            )

        ordered = sorted(
            workouts, key=lambda w: _as_utc(w.date), reverse=args.sort_by == "recent"
        )[: args.limit]
        summaries = [
            WorkoutSummary(
                id=w.id,
                title=w.title,
                date=w.date,
                exercise_count=len(w.exercises),
                total_volume=_volume(w),
            )
            for w in ordered
        ]
        noun = "workout" if len(summaries) == 1 else "workouts"
        return ExecutionResult.ok(
            message=f"Here are your {len(summaries)} {args.sort_by} {noun}.",
            navigation_target="/workout",
            workouts=summaries,
            total=len(workouts),
        )

    async def view_workout_details(
        self, args: ViewWorkoutDetailsArgs, user_id: str
    ) -> ExecutionResult:
        try:
            workout = await self._workouts.get_workout(args.workout_id)
        except Exception as e:
            return read_failure(
                e,
                action="load that workout",
                permission_message="I can't open that workout right now.",
                navigation_target="/workout",
            )

        if workout is None or workout.user_id != user_id:
            return ExecutionResult.failure(ErrorKind.NOT_FOUND, WORKOUT_NOT_FOUND)

        exercises = [
            ExerciseSummary(
                name=exercise.name,
                sets=len(exercise.sets),
                total_reps=sum(s.reps or 0 for s in exercise.sets),
                total_weight=sum(s.weight or 0 for s in exercise.sets),
            )
            for exercise in workout.exercises
        ]
        detail = WorkoutDetail(
            id=workout.id,
            title=workout.title,
            date=workout.date,
            total_volume=_volume(workout),
            exercises=exercises,
            average_rpe=workout.rpe or 0,
        )
        return ExecutionResult.ok(
            message=f"{workout.title}: {len(exercises)} exercises.",
            workout=detail,
        )

    async def delete_workout(
        self, args: DeleteWorkoutArgs, user_id: str
    ) -> ExecutionResult:
        """First phase: ask for confirmation without touching storage."""
        pending = PendingAction(
            function="deleteWorkout",
            args={**args.model_dump(by_alias=True), "userId": user_id},
        )
        return ExecutionResult.confirmation(
            "Are you sure you want to delete this workout? This cannot be undone.",
            pending,
        )

    async def execute_delete_workout(
        self, args: DeleteWorkoutArgs, user_id: str
    ) -> ExecutionResult:
        """Second phase: delete a confirmed workout owned by the caller."""
        try:
            workout = await self._workouts.get_workout(args.workout_id)
            if workout is None or workout.user_id != user_id:
                return ExecutionResult.failure(ErrorKind.NOT_FOUND, WORKOUT_NOT_FOUND)
            await self._workouts.delete_workout(args.workout_id, user_id)
        except Exception as e:
            return write_failure(e, action="delete that workout")

        logger.info("Deleted workout %s for %s", args.workout_id, user_id)
        return ExecutionResult.ok(
            message=f'Deleted "{workout.title}".',
            navigation_target="/workout",
            deleted_workout_id=args.workout_id,
        )

    async def log_workout(self, args: LogWorkoutArgs, user_id: str) -> ExecutionResult:
        return ExecutionResult.ok(
            message=f"Starting a new {args.workout_type} workout. Let's go!",
            navigation_target="/log-workout/new",
            workout_type=args.workout_type,
        )

    async def view_stats(self, args: ViewStatsArgs, user_id: str) -> ExecutionResult:
        try:
            workouts = await self._workouts.list_workouts(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="calculate your stats",
                permission_message=(
                    "I couldn't read your stats just now. "
                    "Logging a workout is a great way to start tracking progress."
                ),
                navigation_target="/log-workout/new",
                stats=WorkoutStats(),
                timeframe=args.timeframe,
            )

        if not workouts:
            return ExecutionResult.empty(
                "No stats yet. Log your first workout to start tracking progress.",
                navigation_target="/log-workout/new",
                stats=WorkoutStats(),
                timeframe=args.timeframe,
                metric=args.metric,
            )

        stats = _compute_stats(workouts, args.timeframe, datetime.now(timezone.utc))
        return ExecutionResult.ok(
            message=_stats_message(stats, args.timeframe, args.metric),
            navigation_target="/stats",
            stats=stats,
            timeframe=args.timeframe,
            metric=args.metric,
        )

    async def get_personal_bests(
        self, args: GetPersonalBestsArgs, user_id: str
    ) -> ExecutionResult:
        try:
            workouts = await self._workouts.list_workouts(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="fetch your personal bests",
                permission_message=(
                    "I couldn't read your records just now. "
                    "Log a workout and your best lifts will show up here."
                ),
                navigation_target="/log-workout/new",
                personal_bests=[],
            )

        bests = _personal_bests(workouts, args.exercise_name)
        if not bests:
            message = (
                f'No personal bests for "{args.exercise_name}" yet.'
                if args.exercise_name
                else "No personal bests yet. Log a workout with weights to set some."
            )
            return ExecutionResult.empty(message, personal_bests=[])

        lines = [
            f"{pb.exercise}: {pb.weight:g} x {pb.reps}"
            for pb in bests[:PERSONAL_BESTS_IN_MESSAGE]
        ]
        return ExecutionResult.ok(
            message="Your personal bests:\n" + "\n".join(lines),
            personal_bests=bests,
        )


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from storage as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _volume(workout: Workout) -> float:
    if workout.total_volume is not None:
        return workout.total_volume
    return sum(
        (s.reps or 0) * (s.weight or 0)
        for exercise in workout.exercises
        for s in exercise.sets
    )


def _compute_stats(workouts: List[Workout], timeframe: str, now: datetime) -> WorkoutStats:
    days = _TIMEFRAME_DAYS[timeframe]
    if days is None:
        window = workouts
        first = min(_as_utc(w.date) for w in workouts)
        span_days = max((now - first).days, 7)
    else:
        cutoff = now - timedelta(days=days)
        window = [w for w in workouts if _as_utc(w.date) >= cutoff]
        span_days = days

    if not window:
        return WorkoutStats()

    rated = [w.rpe for w in window if w.rpe is not None]
    weeks = span_days / 7
    return WorkoutStats(
        total_workouts=len(window),
        total_volume=sum(_volume(w) for w in window),
        average_rpe=round(sum(rated) / len(rated), 1) if rated else 0,
        workout_frequency=f"{len(window) / weeks:.1f} workouts/week",
    )


def _stats_message(stats: WorkoutStats, timeframe: str, metric: str) -> str:
    label = _TIMEFRAME_LABELS[timeframe]
    if stats.total_workouts == 0:
        return f"No workouts logged {label}."
    if metric == "volume":
        return f"You moved {stats.total_volume:,.0f} total volume {label}."
    if metric == "frequency":
        return f"You trained {stats.workout_frequency} {label}."
    if metric == "strength":
        return f"Your average RPE {label} was {stats.average_rpe:g}."
    return (
        f"{stats.total_workouts} workouts {label}, "
        f"{stats.total_volume:,.0f} total volume, {stats.workout_frequency}."
    )


def _personal_bests(
    workouts: List[Workout], exercise_filter: Optional[str]
) -> List[PersonalBest]:
    """Heaviest set per exercise, heaviest first."""
    needle = exercise_filter.lower() if exercise_filter else None
    bests: Dict[str, PersonalBest] = {}
    for workout in workouts:
        for exercise in workout.exercises:
            if needle and needle not in exercise.name.lower():
                continue
            for s in exercise.sets:
                if not s.weight or s.weight <= 0:
                    continue
                current = bests.get(exercise.name)
                if current is None or s.weight > current.weight:
                    bests[exercise.name] = PersonalBest(
                        exercise=exercise.name,
                        weight=s.weight,
                        reps=s.reps or 0,
                        date=workout.date,
                    )
    return sorted(bests.values(), key=lambda pb: pb.weight, reverse=True)
