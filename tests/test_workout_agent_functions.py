"""Unit tests for WorkoutAgentFunctions.

Handlers are called directly with validated argument models against the
in-memory FakeWorkoutRepository.
"""

import pytest

from application.models import EmptyReason, ErrorKind, ResultStatus
from application.ports.errors import PermissionDeniedError
from backend.services.tool_schemas import (
    DeleteWorkoutArgs,
    GetPersonalBestsArgs,
    LogWorkoutArgs,
    ViewStatsArgs,
    ViewWorkoutDetailsArgs,
    ViewWorkoutHistoryArgs,
)
from backend.services.workout_agent_functions import WorkoutAgentFunctions
from tests.fakes import TEST_USER_ID, FakeWorkoutRepository, make_workout


@pytest.fixture
def functions(workout_repo):
    return WorkoutAgentFunctions(workout_repo)


@pytest.fixture
def empty_functions():
    return WorkoutAgentFunctions(FakeWorkoutRepository())


class TestHandlerMaps:
    """Tests for handlers() and confirm_handlers()."""

    def test_handler_names(self, functions):
        assert set(functions.handlers()) == {
            "viewWorkoutHistory",
            "viewWorkoutDetails",
            "deleteWorkout",
            "logWorkout",
            "viewStats",
            "getPersonalBests",
        }
        assert set(functions.confirm_handlers()) == {"deleteWorkout"}


class TestViewWorkoutHistory:
    """Tests for viewWorkoutHistory."""

    @pytest.mark.asyncio
    async def test_recent_first(self, functions):
        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), TEST_USER_ID)

        assert result.success is True
        assert result.status == ResultStatus.OK
        assert result.navigation_target == "/workout"
        assert [w.id for w in result.payload["workouts"]] == ["w-1", "w-2"]
        assert result.payload["total"] == 2

    @pytest.mark.asyncio
    async def test_oldest_first_with_limit(self, functions):
        result = await functions.view_workout_history(
            ViewWorkoutHistoryArgs(limit=1, sort_by="oldest"), TEST_USER_ID
        )

        assert [w.id for w in result.payload["workouts"]] == ["w-2"]
        assert result.payload["total"] == 2

    @pytest.mark.asyncio
    async def test_summaries(self, functions):
        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), TEST_USER_ID)

        push_day = result.payload["workouts"][0]
        assert push_day.title == "Push Day"
        assert push_day.exercise_count == 2
        assert push_day.total_volume == 1425

    @pytest.mark.asyncio
    async def test_wire_form_is_camel_case(self, functions):
        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), TEST_USER_ID)

        wire = result.to_wire()
        assert wire["success"] is True
        assert wire["navigationTarget"] == "/workout"
        assert wire["workouts"][0]["exerciseCount"] == 2
        assert "error" not in wire

    @pytest.mark.asyncio
    async def test_no_workouts_is_empty_success(self, empty_functions):
        result = await empty_functions.view_workout_history(
            ViewWorkoutHistoryArgs(), TEST_USER_ID
        )

        assert result.success is True
        assert result.status == ResultStatus.EMPTY
        assert result.reason == EmptyReason.NO_DATA
        assert result.payload == {"workouts": [], "total": 0}
        assert result.navigation_target == "/log-workout/new"
        assert result.message

    @pytest.mark.asyncio
    async def test_other_users_workouts_hidden(self, workout_repo):
        functions = WorkoutAgentFunctions(workout_repo)

        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), "user-2")

        assert [w.id for w in result.payload["workouts"]] == ["w-other"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            PermissionDeniedError("row level security"),
            RuntimeError("insufficient_privilege on table workouts"),
        ],
    )
    async def test_permission_denied_is_guided_success(self, workout_repo, functions, error):
        workout_repo.read_error = error

        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), TEST_USER_ID)

        assert result.success is True
        assert result.status == ResultStatus.EMPTY
        assert result.reason == EmptyReason.PERMISSION_DENIED
        assert result.navigation_target == "/log-workout/new"
        assert result.payload["workouts"] == []

    @pytest.mark.asyncio
    async def test_collaborator_failure(self, workout_repo, functions):
        workout_repo.read_error = ConnectionError("connection reset")

        result = await functions.view_workout_history(ViewWorkoutHistoryArgs(), TEST_USER_ID)

        assert result.success is False
        assert result.error_kind == ErrorKind.COLLABORATOR_FAILURE
        assert result.error.startswith("Unable to fetch your workout history at the moment")
        assert "connection reset" not in result.error


class TestViewWorkoutDetails:
    """Tests for viewWorkoutDetails."""

    @pytest.mark.asyncio
    async def test_details(self, functions):
        result = await functions.view_workout_details(
            ViewWorkoutDetailsArgs(workout_id="w-1"), TEST_USER_ID
        )

        detail = result.payload["workout"]
        assert result.success is True
        assert detail.total_volume == 1425
        assert detail.average_rpe == 8
        bench = detail.exercises[0]
        assert (bench.name, bench.sets, bench.total_reps, bench.total_weight) == (
            "Bench Press",
            2,
            10,
            205,
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("workout_id", ["missing", "w-other"])
    async def test_missing_or_foreign_workout(self, functions, workout_id):
        result = await functions.view_workout_details(
            ViewWorkoutDetailsArgs(workout_id=workout_id), TEST_USER_ID
        )

        assert result.success is False
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error == "Workout not found"


class TestDeleteWorkout:
    """Tests for the two phases of deleteWorkout."""

    @pytest.mark.asyncio
    async def test_request_phase_only_asks(self, workout_repo, functions):
        result = await functions.delete_workout(DeleteWorkoutArgs(workout_id="w-1"), TEST_USER_ID)

        assert result.requires_confirmation is True
        assert result.pending_action.function == "deleteWorkout"
        assert result.pending_action.args == {"workoutId": "w-1", "userId": TEST_USER_ID}
        assert "w-1" in workout_repo.workouts

    @pytest.mark.asyncio
    async def test_confirmed_delete(self, workout_repo, functions):
        result = await functions.execute_delete_workout(
            DeleteWorkoutArgs(workout_id="w-1"), TEST_USER_ID
        )

        assert result.success is True
        assert "Push Day" in result.message
        assert result.payload["deleted_workout_id"] == "w-1"
        assert workout_repo.deleted == [("w-1", TEST_USER_ID)]

    @pytest.mark.asyncio
    async def test_cannot_delete_foreign_workout(self, workout_repo, functions):
        result = await functions.execute_delete_workout(
            DeleteWorkoutArgs(workout_id="w-other"), TEST_USER_ID
        )

        assert result.error_kind == ErrorKind.NOT_FOUND
        assert workout_repo.deleted == []

    @pytest.mark.asyncio
    async def test_refused_delete_is_failure(self, workout_repo, functions):
        workout_repo.write_error = PermissionDeniedError("denied")

        result = await functions.execute_delete_workout(
            DeleteWorkoutArgs(workout_id="w-1"), TEST_USER_ID
        )

        assert result.success is False
        assert result.error_kind == ErrorKind.PERMISSION_DENIED

    @pytest.mark.asyncio
    async def test_delete_failure(self, workout_repo, functions):
        workout_repo.write_error = RuntimeError("timeout")

        result = await functions.execute_delete_workout(
            DeleteWorkoutArgs(workout_id="w-1"), TEST_USER_ID
        )

        assert result.error_kind == ErrorKind.COLLABORATOR_FAILURE
        assert result.error.startswith("Unable to delete that workout at the moment")


class TestLogWorkout:
    """Tests for logWorkout."""

    @pytest.mark.asyncio
    async def test_navigates_to_new_session(self, functions):
        result = await functions.log_workout(LogWorkoutArgs(workout_type="cardio"), TEST_USER_ID)

        assert result.success is True
        assert result.navigation_target == "/log-workout/new"
        assert "cardio" in result.message


class TestViewStats:
    """Tests for viewStats."""

    @pytest.mark.asyncio
    async def test_week_window(self, functions):
        result = await functions.view_stats(ViewStatsArgs(timeframe="week"), TEST_USER_ID)

        stats = result.payload["stats"]
        assert result.navigation_target == "/stats"
        assert stats.total_workouts == 1
        assert stats.total_volume == 1425
        assert stats.average_rpe == 8
        assert stats.workout_frequency == "1.0 workouts/week"

    @pytest.mark.asyncio
    async def test_month_window(self, functions):
        result = await functions.view_stats(ViewStatsArgs(), TEST_USER_ID)

        stats = result.payload["stats"]
        assert result.payload["timeframe"] == "month"
        assert stats.total_workouts == 2
        assert stats.total_volume == 2575
        assert stats.average_rpe == 7.5
        assert stats.workout_frequency == "0.5 workouts/week"

    @pytest.mark.asyncio
    async def test_all_time_runs_from_first_workout(self, functions):
        result = await functions.view_stats(ViewStatsArgs(timeframe="all-time"), TEST_USER_ID)

        assert result.payload["stats"].workout_frequency == "1.4 workouts/week"

    @pytest.mark.asyncio
    async def test_metric_shapes_message(self, functions):
        result = await functions.view_stats(
            ViewStatsArgs(timeframe="week", metric="volume"), TEST_USER_ID
        )

        assert "1,425" in result.message

    @pytest.mark.asyncio
    async def test_no_workouts(self, empty_functions):
        result = await empty_functions.view_stats(ViewStatsArgs(), TEST_USER_ID)

        assert result.success is True
        assert result.status == ResultStatus.EMPTY
        assert result.payload["stats"].total_workouts == 0


class TestGetPersonalBests:
    """Tests for getPersonalBests."""

    @pytest.mark.asyncio
    async def test_heaviest_set_per_exercise(self, functions):
        result = await functions.get_personal_bests(GetPersonalBestsArgs(), TEST_USER_ID)

        bests = result.payload["personal_bests"]
        assert [(pb.exercise, pb.weight, pb.reps) for pb in bests] == [
            ("Back Squat", 150, 3),
            ("Bench Press", 105, 5),
            ("Overhead Press", 50, 8),
        ]
        assert "Back Squat: 150 x 3" in result.message

    @pytest.mark.asyncio
    async def test_unweighted_sets_are_not_bests(self):
        """Bodyweight (weight 0) and unweighted sets never count as a best lift."""
        repo = FakeWorkoutRepository([
            make_workout(
                "w-bw",
                exercises=[
                    ("Pull-up", [(10, 0.0)]),
                    ("Plank", [(1, None)]),
                    ("Bench Press", [(5, 100.0), (8, 0.0)]),
                ],
            )
        ])

        result = await WorkoutAgentFunctions(repo).get_personal_bests(
            GetPersonalBestsArgs(), TEST_USER_ID
        )

        bests = result.payload["personal_bests"]
        assert [(pb.exercise, pb.weight, pb.reps) for pb in bests] == [("Bench Press", 100, 5)]
        assert "Pull-up" not in result.message

    @pytest.mark.asyncio
    async def test_only_bodyweight_work_is_empty(self):
        repo = FakeWorkoutRepository([
            make_workout("w-bw", exercises=[("Pull-up", [(10, 0.0), (8, 0.0)])])
        ])

        result = await WorkoutAgentFunctions(repo).get_personal_bests(
            GetPersonalBestsArgs(), TEST_USER_ID
        )

        assert result.status == ResultStatus.EMPTY
        assert result.payload["personal_bests"] == []

    @pytest.mark.asyncio
    async def test_case_insensitive_filter(self, functions):
        result = await functions.get_personal_bests(
            GetPersonalBestsArgs(exercise_name="BENCH"), TEST_USER_ID
        )

        assert [pb.exercise for pb in result.payload["personal_bests"]] == ["Bench Press"]

    @pytest.mark.asyncio
    async def test_no_matches(self, functions):
        result = await functions.get_personal_bests(
            GetPersonalBestsArgs(exercise_name="deadlift"), TEST_USER_ID
        )

        assert result.success is True
        assert result.status == ResultStatus.EMPTY
        assert result.payload["personal_bests"] == []
        assert "deadlift" in result.message
