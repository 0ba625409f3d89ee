"""Application domain models for agent function dispatch."""

from .agent import (
    EmptyReason,
    ErrorKind,
    ExecutionResult,
    PendingAction,
    ResultStatus,
)
from .fitness import (
    Achievement,
    Exercise,
    ExerciseSet,
    ExerciseSummary,
    PersonalBest,
    PrivacySettings,
    Profile,
    ProfileStats,
    ProfileSummary,
    UserPreferences,
    Workout,
    WorkoutDetail,
    WorkoutStats,
    WorkoutSummary,
)

__all__ = [
    "Achievement",
    "EmptyReason",
    "ErrorKind",
    "ExecutionResult",
    "Exercise",
    "ExerciseSet",
    "ExerciseSummary",
    "PendingAction",
    "PersonalBest",
    "PrivacySettings",
    "Profile",
    "ProfileStats",
    "ProfileSummary",
    "ResultStatus",
    "UserPreferences",
    "Workout",
    "WorkoutDetail",
    "WorkoutStats",
    "WorkoutSummary",
]
