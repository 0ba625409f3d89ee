"""Tool argument models and JSON schemas for LLM function calling.

Each agent function declares a pydantic model for its arguments. The model
validates tool-call arguments before dispatch and is also the source of the
JSON schema sent to the model provider, so the two can never drift apart.

Argument names are camelCase on the wire (workoutId, sortBy) and snake_case
in Python; both spellings are accepted on input.
"""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Domain(str, Enum):
    """Function domains exposed to the agent."""

    WORKOUT = "workout"
    PROFILE = "profile"
    SYSTEM = "system"


class ToolArgs(BaseModel):
    """Base for tool argument models. Unknown arguments are rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# =============================================================================
# Workout arguments
# =============================================================================


class ViewWorkoutHistoryArgs(ToolArgs):
    limit: int = Field(10, ge=1, le=50, description="Number of workouts to retrieve (default: 10)")
    sort_by: Literal["recent", "oldest"] = Field("recent", description="Sort order (default: recent)")


class ViewWorkoutDetailsArgs(ToolArgs):
    workout_id: str = Field(..., min_length=1, description="ID of the workout to view")


class DeleteWorkoutArgs(ToolArgs):
    workout_id: str = Field(..., min_length=1, description="ID of the workout to delete")


class LogWorkoutArgs(ToolArgs):
    workout_type: Literal["strength", "cardio", "flexibility", "sports"] = Field(
        "strength", description="Kind of session to start"
    )


class ViewStatsArgs(ToolArgs):
    timeframe: Literal["week", "month", "year", "all-time"] = "month"
    metric: Literal["volume", "frequency", "strength", "overview"] = "overview"


class GetPersonalBestsArgs(ToolArgs):
    exercise_name: Optional[str] = Field(
        None, description="Specific exercise (omit for all PRs)"
    )


# =============================================================================
# Profile arguments
# =============================================================================


class ViewProfileArgs(ToolArgs):
    user_id: Optional[str] = Field(None, description="User ID (omit for current user)")


class UpdateProfileArgs(ToolArgs):
    display_name: Optional[str] = Field(None, min_length=1, max_length=80)
    bio: Optional[str] = Field(None, max_length=500)
    fitness_goals: Optional[List[str]] = None


class UpdateFitnessGoalsArgs(ToolArgs):
    goals: List[str] = Field(..., min_length=1, description="Array of fitness goals")


class GetProfileStatsArgs(ToolArgs):
    pass


class SearchUsersArgs(ToolArgs):
    query: str = Field(..., min_length=1, description="Search query")
    limit: int = Field(10, ge=1, le=50, description="Number of results (default: 10)")


class ViewAchievementsArgs(ToolArgs):
    category: Optional[str] = Field(
        None, description="Filter by category (workouts, social, etc)"
    )


# =============================================================================
# System arguments
# =============================================================================

Page = Literal[
    "home",
    "chat",
    "workout",
    "log-workout",
    "stats",
    "feed",
    "profile",
    "settings",
    "notifications",
    "discover",
    "recommendations",
    "templates",
    "onboarding",
]


class NavigationParams(ToolArgs):
    workout_id: Optional[str] = None
    user_id: Optional[str] = None


class NavigateToArgs(ToolArgs):
    page: Page = Field(..., description="Target page")
    params: Optional[NavigationParams] = None


class ViewSettingsArgs(ToolArgs):
    category: Literal["all", "preferences", "privacy", "notifications"] = "all"


class UpdateSettingsArgs(ToolArgs):
    theme: Optional[Literal["light", "dark", "system"]] = None
    units: Optional[Literal["metric", "imperial"]] = None
    notifications_enabled: Optional[bool] = None


class UpdatePrivacyArgs(ToolArgs):
    profile_visibility: Optional[Literal["public", "friends", "private"]] = None
    show_workouts: Optional[bool] = None


class GetHelpArgs(ToolArgs):
    topic: Optional[Literal["workouts", "profile", "settings", "navigation", "social"]] = None


# =============================================================================
# Tool catalog
# =============================================================================


@dataclass(frozen=True)
class ToolSpec:
    """Static description of one agent function."""

    domain: Domain
    description: str
    parameters: Type[ToolArgs]
    destructive: bool = False


WORKOUT_TOOLS: Dict[str, ToolSpec] = {
    "viewWorkoutHistory": ToolSpec(
        Domain.WORKOUT,
        'View workout history. Use when user asks "show my workouts", "what did I do last week".',
        ViewWorkoutHistoryArgs,
    ),
    "viewWorkoutDetails": ToolSpec(
        Domain.WORKOUT,
        "Get detailed information about a specific workout.",
        ViewWorkoutDetailsArgs,
    ),
    "deleteWorkout": ToolSpec(
        Domain.WORKOUT,
        'Delete a workout (requires confirmation). Use when user says "delete my last workout".',
        DeleteWorkoutArgs,
        destructive=True,
    ),
    "logWorkout": ToolSpec(
        Domain.WORKOUT,
        "Start logging a new workout session.",
        LogWorkoutArgs,
    ),
    "viewStats": ToolSpec(
        Domain.WORKOUT,
        "View workout statistics and progress for a timeframe.",
        ViewStatsArgs,
    ),
    "getPersonalBests": ToolSpec(
        Domain.WORKOUT,
        "Get personal best records for exercises.",
        GetPersonalBestsArgs,
    ),
}

PROFILE_TOOLS: Dict[str, ToolSpec] = {
    "viewProfile": ToolSpec(
        Domain.PROFILE,
        'View a user profile. Use when user says "show my profile".',
        ViewProfileArgs,
    ),
    "updateProfile": ToolSpec(
        Domain.PROFILE,
        "Update user profile information (display name, bio, goals).",
        UpdateProfileArgs,
    ),
    "updateFitnessGoals": ToolSpec(
        Domain.PROFILE,
        "Replace the user's fitness goals.",
        UpdateFitnessGoalsArgs,
    ),
    "getProfileStats": ToolSpec(
        Domain.PROFILE,
        "Get profile statistics: workouts, followers, goals, achievements.",
        GetProfileStatsArgs,
    ),
    "searchUsers": ToolSpec(
        Domain.PROFILE,
        "Search for other users by name.",
        SearchUsersArgs,
    ),
    "viewAchievements": ToolSpec(
        Domain.PROFILE,
        "View user achievements and badges.",
        ViewAchievementsArgs,
    ),
}

SYSTEM_TOOLS: Dict[str, ToolSpec] = {
    "navigateTo": ToolSpec(
        Domain.SYSTEM,
        'Navigate to a different page. Use when user says "go to stats", "show me settings".',
        NavigateToArgs,
    ),
    "viewSettings": ToolSpec(
        Domain.SYSTEM,
        "View current user settings.",
        ViewSettingsArgs,
    ),
    "updateSettings": ToolSpec(
        Domain.SYSTEM,
        "Update user settings: theme, units, notifications.",
        UpdateSettingsArgs,
    ),
    "updatePrivacy": ToolSpec(
        Domain.SYSTEM,
        "Update privacy settings.",
        UpdatePrivacyArgs,
    ),
    "getHelp": ToolSpec(
        Domain.SYSTEM,
        "Get help information about app features.",
        GetHelpArgs,
    ),
}

# Combined catalog for convenience
ALL_TOOLS: Dict[str, ToolSpec] = {**WORKOUT_TOOLS, **PROFILE_TOOLS, **SYSTEM_TOOLS}


# =============================================================================
# JSON schema export
# =============================================================================


def parameter_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Build an LLM-friendly JSON schema for an argument model.

    Nested models are inlined, titles are dropped and Optional[...] unions
    collapse to the non-null branch.
    """
    raw = model.model_json_schema(by_alias=True)
    defs = raw.pop("$defs", {})
    schema = _simplify(raw, defs)
    schema.setdefault("properties", {})
    return schema


def _simplify(node: Any, defs: Dict[str, Any]) -> Any:
    if isinstance(node, list):
        return [_simplify(item, defs) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        target = copy.deepcopy(defs[node["$ref"].split("/")[-1]])
        extras = {k: v for k, v in node.items() if k != "$ref"}
        return _simplify({**target, **extras}, defs)

    result: Dict[str, Any] = {}
    for key, value in node.items():
        if key == "title":
            continue
        if key == "default" and value is None:
            continue
        if key == "properties":
            result[key] = {name: _simplify(prop, defs) for name, prop in value.items()}
        elif key in ("enum", "required", "default"):
            result[key] = value
        else:
            result[key] = _simplify(value, defs)

    branches = result.get("anyOf")
    if branches:
        non_null = [b for b in branches if b.get("type") != "null"]
        if len(non_null) == 1 and len(non_null) < len(branches):
            del result["anyOf"]
            result = {**non_null[0], **result}

    return result
