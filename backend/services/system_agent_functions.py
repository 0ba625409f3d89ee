"""System agent functions: navigation, settings, privacy and help."""

import logging
from typing import Any, Dict

from pydantic.alias_generators import to_camel

from application.models import ErrorKind, ExecutionResult
from application.ports.user_settings_repository import UserSettingsRepository
from backend.services.function_registry import AgentFunction
from backend.services.result_classifier import read_failure, write_failure
from backend.services.tool_schemas import (
    GetHelpArgs,
    NavigateToArgs,
    UpdatePrivacyArgs,
    UpdateSettingsArgs,
    ViewSettingsArgs,
)

logger = logging.getLogger(__name__)

# Pages whose route does not depend on navigation params
STATIC_ROUTES: Dict[str, str] = {
    "home": "/",
    "chat": "/chat",
    "workout": "/workout",
    "stats": "/stats",
    "feed": "/feed",
    "settings": "/settings",
    "notifications": "/notifications",
    "discover": "/discover",
    "recommendations": "/recommendations",
    "templates": "/templates",
    "onboarding": "/onboarding",
}

HELP_MESSAGES: Dict[str, str] = {
    "workouts": (
        "I can help you generate personalized workouts, log your exercises, view your "
        "workout history, and track your progress. Just tell me what you want to do!"
    ),
    "profile": (
        "I can help you view and update your profile, set fitness goals, and see your "
        "achievements. What would you like to do with your profile?"
    ),
    "settings": (
        "I can help you change your theme, units of measurement, notification "
        "preferences, and privacy settings. What would you like to adjust?"
    ),
    "navigation": (
        "I can take you to any page in the app. Just say things like "
        '"go to stats" or "show me the feed".'
    ),
    "social": (
        "I can help you view your feed, search for users, and manage your followers. "
        "What social feature would you like to use?"
    ),
}

GENERAL_HELP = (
    "I'm your AI fitness assistant! I can help you with workouts, profile management, "
    "navigation, settings, and more. What would you like to do?"
)


class SystemAgentFunctions:
    """Agent functions backed by a UserSettingsRepository."""

    def __init__(self, settings: UserSettingsRepository):
        self._settings = settings

    def handlers(self) -> Dict[str, AgentFunction]:
        return {
            "navigateTo": self.navigate_to,
            "viewSettings": self.view_settings,
            "updateSettings": self.update_settings,
            "updatePrivacy": self.update_privacy,
            "getHelp": self.get_help,
        }

    def confirm_handlers(self) -> Dict[str, AgentFunction]:
        return {}

    async def navigate_to(self, args: NavigateToArgs, user_id: str) -> ExecutionResult:
        params = args.params
        if args.page == "log-workout":
            workout_id = params.workout_id if params else None
            target = f"/log-workout/{workout_id or 'new'}"
        elif args.page == "profile":
            profile_id = (params.user_id if params else None) or user_id
            target = f"/profile/{profile_id}"
        else:
            target = STATIC_ROUTES[args.page]

        logger.debug("Navigating %s to %s", user_id, target)
        return ExecutionResult.ok(
            message=f"Taking you to {args.page.replace('-', ' ')}.",
            navigation_target=target,
            page=args.page,
        )

    async def view_settings(self, args: ViewSettingsArgs, user_id: str) -> ExecutionResult:
        category = args.category
        settings: Dict[str, Any] = {}
        try:
            if category in ("all", "preferences", "notifications"):
                preferences = await self._settings.get_preferences(user_id)
                if category in ("all", "preferences"):
                    settings["preferences"] = preferences
                if category in ("all", "notifications"):
                    settings["notifications"] = {
                        "enabled": preferences.notifications_enabled,
                        **preferences.notifications,
                    }
            if category in ("all", "privacy"):
                settings["privacy"] = await self._settings.get_privacy(user_id)
        except Exception as e:
            return read_failure(
                e,
                action="load your settings",
                permission_message="I can't read your settings right now, but you can open them here.",
                navigation_target="/settings",
                settings={},
            )

        return ExecutionResult.ok(
            message="Here are your settings." if category == "all" else f"Here are your {category} settings.",
            navigation_target="/settings",
            settings=settings,
        )

    async def update_settings(
        self, args: UpdateSettingsArgs, user_id: str
    ) -> ExecutionResult:
        patch = args.model_dump(exclude_none=True)
        if not patch:
            return ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR,
                "Tell me which setting to change: theme, units or notifications.",
            )

        try:
            await self._settings.update_preferences(user_id, patch)
        except Exception as e:
            return write_failure(e, action="update your settings")

        updated = [to_camel(field) for field in patch]
        logger.info("Updated settings %s for %s", updated, user_id)
        return ExecutionResult.ok(
            message="Settings updated successfully.",
            updated=updated,
        )

    async def update_privacy(
        self, args: UpdatePrivacyArgs, user_id: str
    ) -> ExecutionResult:
        patch = args.model_dump(exclude_none=True)
        if not patch:
            return ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR,
                "Tell me which privacy setting to change: profile visibility or showing workouts.",
            )

        try:
            await self._settings.update_privacy(user_id, patch)
        except Exception as e:
            return write_failure(e, action="update your privacy settings")

        updated = [to_camel(field) for field in patch]
        logger.info("Updated privacy %s for %s", updated, user_id)
        return ExecutionResult.ok(
            message="Privacy settings updated successfully.",
            updated=updated,
        )

    async def get_help(self, args: GetHelpArgs, user_id: str) -> ExecutionResult:
        message = HELP_MESSAGES.get(args.topic, GENERAL_HELP) if args.topic else GENERAL_HELP
        return ExecutionResult.ok(message=message, topic=args.topic)
