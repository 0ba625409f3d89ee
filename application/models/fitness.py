"""Fitness domain records returned by collaborators and payload summaries.

Records (Workout, Profile, ...) are what the repositories hand back; they are
validated from storage rows. Summaries (WorkoutSummary, ProfileSummary, ...)
are the trimmed shapes agent functions place in an ExecutionResult payload.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, dumps camelCase by alias."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Records
# =============================================================================


class ExerciseSet(_CamelModel):
    reps: Optional[int] = None
    weight: Optional[float] = None


class Exercise(_CamelModel):
    name: str
    sets: List[ExerciseSet] = Field(default_factory=list)


class Workout(_CamelModel):
    id: str
    user_id: str
    title: str = "Untitled workout"
    date: datetime
    exercises: List[Exercise] = Field(default_factory=list)
    total_volume: Optional[float] = None
    rpe: Optional[float] = None


class Achievement(_CamelModel):
    id: str
    title: str
    category: Optional[str] = None
    description: Optional[str] = None
    earned_at: Optional[datetime] = None


class Profile(_CamelModel):
    id: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    fitness_goals: List[str] = Field(default_factory=list)
    workouts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    achievements: List[Achievement] = Field(default_factory=list)
    is_public: bool = True
    created_at: Optional[datetime] = None


Theme = Literal["light", "dark", "system"]
Units = Literal["metric", "imperial"]
Visibility = Literal["public", "friends", "private"]


class UserPreferences(_CamelModel):
    theme: Theme = "system"
    units: Units = "metric"
    language: str = "en"
    notifications_enabled: bool = True
    notifications: Dict[str, Any] = Field(default_factory=dict)


class PrivacySettings(_CamelModel):
    profile_visibility: Visibility = "public"
    workout_visibility: Visibility = "friends"
    show_workouts: bool = True
    allow_followers: bool = True


# =============================================================================
# Payload summaries
# =============================================================================


class WorkoutSummary(_CamelModel):
    id: str
    title: str
    date: datetime
    exercise_count: int
    total_volume: float


class ExerciseSummary(_CamelModel):
    name: str
    sets: int
    total_reps: int
    total_weight: float


class WorkoutDetail(_CamelModel):
    id: str
    title: str
    date: datetime
    total_volume: float
    exercises: List[ExerciseSummary]
    average_rpe: float


class WorkoutStats(_CamelModel):
    total_workouts: int = 0
    total_volume: float = 0
    average_rpe: float = 0
    workout_frequency: str = "0.0 workouts/week"


class PersonalBest(_CamelModel):
    exercise: str
    weight: float
    reps: int
    date: datetime


class ProfileSummary(_CamelModel):
    id: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    fitness_goals: List[str] = Field(default_factory=list)
    workout_count: int = 0


class ProfileStats(_CamelModel):
    workouts_count: int
    followers_count: int
    following_count: int
    goals_count: int
    achievements_count: int
    member_since: Optional[datetime] = None
