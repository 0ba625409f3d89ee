"""Unit tests for SystemAgentFunctions."""

import pytest

from application.models import EmptyReason, ErrorKind, PrivacySettings, UserPreferences
from application.ports.errors import PermissionDeniedError
from backend.services.system_agent_functions import (
    GENERAL_HELP,
    HELP_MESSAGES,
    SystemAgentFunctions,
)
from backend.services.tool_schemas import (
    GetHelpArgs,
    NavigateToArgs,
    UpdatePrivacyArgs,
    UpdateSettingsArgs,
    ViewSettingsArgs,
)
from tests.fakes import TEST_USER_ID


@pytest.fixture
def functions(settings_repo):
    return SystemAgentFunctions(settings_repo)


class TestNavigateTo:
    """Tests for navigateTo."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "page,target",
        [
            ("home", "/"),
            ("chat", "/chat"),
            ("workout", "/workout"),
            ("stats", "/stats"),
            ("feed", "/feed"),
            ("settings", "/settings"),
            ("notifications", "/notifications"),
            ("discover", "/discover"),
            ("recommendations", "/recommendations"),
            ("templates", "/templates"),
            ("onboarding", "/onboarding"),
            ("log-workout", "/log-workout/new"),
            ("profile", f"/profile/{TEST_USER_ID}"),
        ],
    )
    async def test_page_routes(self, functions, page, target):
        result = await functions.navigate_to(NavigateToArgs(page=page), TEST_USER_ID)

        assert result.success is True
        assert result.navigation_target == target
        assert result.payload["page"] == page

    @pytest.mark.asyncio
    async def test_log_workout_with_id(self, functions):
        args = NavigateToArgs.model_validate(
            {"page": "log-workout", "params": {"workoutId": "w-9"}}
        )

        result = await functions.navigate_to(args, TEST_USER_ID)

        assert result.navigation_target == "/log-workout/w-9"

    @pytest.mark.asyncio
    async def test_other_users_profile(self, functions):
        args = NavigateToArgs.model_validate({"page": "profile", "params": {"userId": "user-3"}})

        result = await functions.navigate_to(args, TEST_USER_ID)

        assert result.navigation_target == "/profile/user-3"


class TestViewSettings:
    """Tests for viewSettings."""

    @pytest.mark.asyncio
    async def test_all_categories(self, functions):
        result = await functions.view_settings(ViewSettingsArgs(), TEST_USER_ID)

        settings = result.payload["settings"]
        assert result.navigation_target == "/settings"
        assert set(settings) == {"preferences", "privacy", "notifications"}
        assert settings["preferences"] == UserPreferences()
        assert settings["notifications"] == {"enabled": True}

    @pytest.mark.asyncio
    async def test_single_category(self, settings_repo, functions):
        settings_repo.privacy[TEST_USER_ID] = PrivacySettings(profile_visibility="private")

        result = await functions.view_settings(
            ViewSettingsArgs(category="privacy"), TEST_USER_ID
        )

        settings = result.payload["settings"]
        assert list(settings) == ["privacy"]
        assert settings["privacy"].profile_visibility == "private"

    @pytest.mark.asyncio
    async def test_wire_form(self, functions):
        result = await functions.view_settings(
            ViewSettingsArgs(category="privacy"), TEST_USER_ID
        )

        privacy = result.to_wire()["settings"]["privacy"]
        assert privacy["profileVisibility"] == "public"
        assert privacy["showWorkouts"] is True

    @pytest.mark.asyncio
    async def test_permission_denied(self, settings_repo, functions):
        settings_repo.read_error = PermissionDeniedError("denied")

        result = await functions.view_settings(ViewSettingsArgs(), TEST_USER_ID)

        assert result.success is True
        assert result.reason == EmptyReason.PERMISSION_DENIED
        assert result.navigation_target == "/settings"
        assert result.payload["settings"] == {}

    @pytest.mark.asyncio
    async def test_failure(self, settings_repo, functions):
        settings_repo.read_error = RuntimeError("timeout")

        result = await functions.view_settings(ViewSettingsArgs(), TEST_USER_ID)

        assert result.success is False
        assert result.error_kind == ErrorKind.COLLABORATOR_FAILURE


class TestUpdateSettings:
    """Tests for updateSettings and updatePrivacy."""

    @pytest.mark.asyncio
    async def test_single_preferences_update(self, settings_repo, functions):
        result = await functions.update_settings(
            UpdateSettingsArgs(theme="dark", notifications_enabled=False), TEST_USER_ID
        )

        assert result.success is True
        assert result.payload["updated"] == ["theme", "notificationsEnabled"]
        assert settings_repo.preference_updates == [
            (TEST_USER_ID, {"theme": "dark", "notifications_enabled": False})
        ]
        assert settings_repo.preferences[TEST_USER_ID].theme == "dark"

    @pytest.mark.asyncio
    async def test_empty_settings_patch_rejected(self, settings_repo, functions):
        result = await functions.update_settings(UpdateSettingsArgs(), TEST_USER_ID)

        assert result.error_kind == ErrorKind.VALIDATION_ERROR
        assert settings_repo.preference_updates == []

    @pytest.mark.asyncio
    async def test_privacy_update(self, settings_repo, functions):
        result = await functions.update_privacy(
            UpdatePrivacyArgs(profile_visibility="friends"), TEST_USER_ID
        )

        assert result.success is True
        assert settings_repo.privacy_updates == [
            (TEST_USER_ID, {"profile_visibility": "friends"})
        ]

    @pytest.mark.asyncio
    async def test_empty_privacy_patch_rejected(self, functions):
        result = await functions.update_privacy(UpdatePrivacyArgs(), TEST_USER_ID)

        assert result.error_kind == ErrorKind.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_refused_privacy_update(self, settings_repo, functions):
        settings_repo.write_error = RuntimeError("permission denied for table user_settings")

        result = await functions.update_privacy(
            UpdatePrivacyArgs(show_workouts=False), TEST_USER_ID
        )

        assert result.success is False
        assert result.error_kind == ErrorKind.PERMISSION_DENIED


class TestGetHelp:
    """Tests for getHelp."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("topic", sorted(HELP_MESSAGES))
    async def test_topic_messages(self, functions, topic):
        result = await functions.get_help(GetHelpArgs(topic=topic), TEST_USER_ID)

        assert result.success is True
        assert result.message == HELP_MESSAGES[topic]
        assert result.payload["topic"] == topic

    @pytest.mark.asyncio
    async def test_general_help(self, functions):
        result = await functions.get_help(GetHelpArgs(), TEST_USER_ID)

        assert result.message == GENERAL_HELP
