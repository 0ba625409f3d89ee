"""Build the sealed FunctionRegistry from the tool catalog and domain handlers."""

import logging
from typing import Dict

from application.ports.profile_repository import ProfileRepository
from application.ports.user_settings_repository import UserSettingsRepository
from application.ports.workout_repository import WorkoutRepository
from backend.services.function_registry import AgentFunction, FunctionRegistry
from backend.services.profile_agent_functions import ProfileAgentFunctions
from backend.services.system_agent_functions import SystemAgentFunctions
from backend.services.tool_schemas import ALL_TOOLS
from backend.services.workout_agent_functions import WorkoutAgentFunctions

logger = logging.getLogger(__name__)


def build_function_registry(
    workout_repository: WorkoutRepository,
    profile_repository: ProfileRepository,
    settings_repository: UserSettingsRepository,
) -> FunctionRegistry:
    """Register every catalogued tool against its handler and seal the registry.

    Raises:
        RuntimeError: If the catalog and the handlers disagree on tool names.
    """
    function_sets = [
        WorkoutAgentFunctions(workout_repository),
        ProfileAgentFunctions(profile_repository),
        SystemAgentFunctions(settings_repository),
    ]
    handlers: Dict[str, AgentFunction] = {}
    confirm_handlers: Dict[str, AgentFunction] = {}
    for function_set in function_sets:
        handlers.update(function_set.handlers())
        confirm_handlers.update(function_set.confirm_handlers())

    missing = set(ALL_TOOLS) - set(handlers)
    unexpected = set(handlers) - set(ALL_TOOLS)
    if missing or unexpected:
        raise RuntimeError(
            f"Tool catalog mismatch: missing handlers {sorted(missing)}, "
            f"uncatalogued handlers {sorted(unexpected)}"
        )

    registry = FunctionRegistry()
    for name, spec in ALL_TOOLS.items():
        registry.register(
            name,
            handlers[name],
            domain=spec.domain,
            description=spec.description,
            parameters=spec.parameters,
            destructive=spec.destructive,
            on_confirm=confirm_handlers.get(name),
        )
    registry.seal()

    logger.info(
        "Registered %d agent functions (%d destructive)",
        len(registry),
        sum(1 for name in ALL_TOOLS if registry.is_destructive(name)),
    )
    return registry
