"""Profile agent functions: view/update profile, goals, stats, search, achievements."""

import logging
from typing import Dict, List

from pydantic.alias_generators import to_camel

from application.models import ErrorKind, ExecutionResult, Profile, ProfileStats, ProfileSummary
from application.ports.profile_repository import ProfileRepository
from backend.services.function_registry import AgentFunction
from backend.services.result_classifier import read_failure, write_failure
from backend.services.tool_schemas import (
    GetProfileStatsArgs,
    SearchUsersArgs,
    UpdateFitnessGoalsArgs,
    UpdateProfileArgs,
    ViewAchievementsArgs,
    ViewProfileArgs,
)

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "Profile not found"


class ProfileAgentFunctions:
    """Agent functions backed by a ProfileRepository."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    def handlers(self) -> Dict[str, AgentFunction]:
        return {
            "viewProfile": self.view_profile,
            "updateProfile": self.update_profile,
            "updateFitnessGoals": self.update_fitness_goals,
            "getProfileStats": self.get_profile_stats,
            "searchUsers": self.search_users,
            "viewAchievements": self.view_achievements,
        }

    def confirm_handlers(self) -> Dict[str, AgentFunction]:
        return {}

    async def view_profile(self, args: ViewProfileArgs, user_id: str) -> ExecutionResult:
        target_id = args.user_id or user_id
        is_self = target_id == user_id
        try:
            profile = await self._profiles.get_profile(target_id)
        except Exception as e:
            return read_failure(
                e,
                action="load that profile",
                permission_message="I can't open that profile right now.",
            )

        # Private profiles of other users are indistinguishable from missing ones
        if profile is None or (not is_self and not profile.is_public):
            return ExecutionResult.failure(ErrorKind.NOT_FOUND, PROFILE_NOT_FOUND)

        name = profile.display_name or profile.username or "this user"
        return ExecutionResult.ok(
            message="Here's your profile." if is_self else f"Here's {name}'s profile.",
            navigation_target="/profile" if is_self else f"/profile/{target_id}",
            profile=_summarize(profile),
        )

    async def update_profile(
        self, args: UpdateProfileArgs, user_id: str
    ) -> ExecutionResult:
        patch = args.model_dump(exclude_none=True)
        if not patch:
            return ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR,
                "Tell me what you'd like to change: display name, bio or fitness goals.",
            )

        try:
            await self._profiles.update_profile(user_id, patch)
        except Exception as e:
            return write_failure(e, action="update your profile")

        updated = [to_camel(field) for field in patch]
        logger.info("Updated profile fields %s for %s", updated, user_id)
        return ExecutionResult.ok(
            message="Profile updated successfully.",
            navigation_target="/profile",
            updated_fields=updated,
        )

    async def update_fitness_goals(
        self, args: UpdateFitnessGoalsArgs, user_id: str
    ) -> ExecutionResult:
        goals = _clean_goals(args.goals)
        if not goals:
            return ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR, "Please provide at least one goal."
            )

        try:
            await self._profiles.update_profile(user_id, {"fitness_goals": goals})
        except Exception as e:
            return write_failure(e, action="update your fitness goals")

        return ExecutionResult.ok(
            message=f"Fitness goals updated: {', '.join(goals)}.",
            goals=goals,
        )

    async def get_profile_stats(
        self, args: GetProfileStatsArgs, user_id: str
    ) -> ExecutionResult:
        try:
            profile = await self._profiles.get_profile(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="load your profile stats",
                permission_message="I can't read your profile stats right now.",
                navigation_target="/profile",
            )

        if profile is None:
            return ExecutionResult.failure(ErrorKind.NOT_FOUND, PROFILE_NOT_FOUND)

        stats = ProfileStats(
            workouts_count=profile.workouts_count,
            followers_count=profile.followers_count,
            following_count=profile.following_count,
            goals_count=len(profile.fitness_goals),
            achievements_count=len(profile.achievements),
            member_since=profile.created_at,
        )
        return ExecutionResult.ok(
            message=(
                f"{stats.workouts_count} workouts, {stats.followers_count} followers, "
                f"following {stats.following_count}."
            ),
            stats=stats,
        )

    async def search_users(self, args: SearchUsersArgs, user_id: str) -> ExecutionResult:
        query = args.query.strip()
        if not query:
            return ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR, "Please tell me who you're looking for."
            )

        try:
            profiles = await self._profiles.search_profiles(query, args.limit)
        except Exception as e:
            return read_failure(
                e,
                action="search users",
                permission_message="User search isn't available to you right now.",
                navigation_target="/discover",
                users=[],
                query=query,
            )

        users = [_summarize(p) for p in profiles if p.is_public or p.id == user_id]
        if not users:
            return ExecutionResult.empty(
                f'No users found matching "{query}".',
                navigation_target="/discover",
                users=[],
                query=query,
            )

        noun = "user" if len(users) == 1 else "users"
        return ExecutionResult.ok(
            message=f'Found {len(users)} {noun} matching "{query}".',
            users=users,
            query=query,
        )

    async def view_achievements(
        self, args: ViewAchievementsArgs, user_id: str
    ) -> ExecutionResult:
        try:
            profile = await self._profiles.get_profile(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="load your achievements",
                permission_message="I can't read your achievements right now.",
                achievements=[],
            )

        if profile is None:
            return ExecutionResult.failure(ErrorKind.NOT_FOUND, PROFILE_NOT_FOUND)

        achievements = profile.achievements
        if args.category:
            wanted = args.category.lower()
            achievements = [
                a for a in achievements if (a.category or "").lower() == wanted
            ]

        if not achievements:
            suffix = f" in {args.category}" if args.category else ""
            return ExecutionResult.empty(
                f"No achievements{suffix} yet. Keep training and they'll come!",
                achievements=[],
            )

        return ExecutionResult.ok(
            message=f"You've earned {len(achievements)} achievements.",
            achievements=achievements,
        )


def _summarize(profile: Profile) -> ProfileSummary:
    return ProfileSummary(
        id=profile.id,
        display_name=profile.display_name,
        username=profile.username,
        bio=profile.bio,
        fitness_goals=profile.fitness_goals,
        workout_count=profile.workouts_count,
    )


def _clean_goals(goals: List[str]) -> List[str]:
    """Strip whitespace, drop blanks and duplicates, keep order."""
    cleaned: List[str] = []
    for goal in goals:
        goal = goal.strip()
        if goal and goal not in cleaned:
            cleaned.append(goal)
    return cleaned
