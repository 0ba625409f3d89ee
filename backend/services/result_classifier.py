"""Turn collaborator exceptions into ExecutionResults.

Reads and writes are classified differently when the collaborator refuses
access: a refused read becomes a guided empty result (success) that steers
the user toward the action that would produce data, while a refused write is
reported as a failure so the user is never told a change happened.
"""

import logging
from typing import Any, Optional

from application.models import EmptyReason, ErrorKind, ExecutionResult
from application.ports.errors import NotFoundError, is_permission_error

logger = logging.getLogger(__name__)


def read_failure(
    error: Exception,
    *,
    action: str,
    permission_message: str,
    navigation_target: Optional[str] = None,
    **empty_payload: Any,
) -> ExecutionResult:
    """Classify an exception raised while reading collaborator data.

    Args:
        error: The exception raised by the collaborator.
        action: Verb phrase for the failure message ("fetch your workout history").
        permission_message: Friendly guidance shown when access is refused.
        navigation_target: Where to send the user when access is refused.
        **empty_payload: Payload fields for the guided empty result.
    """
    if is_permission_error(error):
        logger.warning("Permission denied while trying to %s: %s", action, error)
        return ExecutionResult.empty(
            permission_message,
            reason=EmptyReason.PERMISSION_DENIED,
            navigation_target=navigation_target,
            **empty_payload,
        )
    if isinstance(error, NotFoundError):
        return ExecutionResult.failure(ErrorKind.NOT_FOUND, error.message)

    logger.error("Failed to %s: %s", action, error, exc_info=error)
    return ExecutionResult.failure(
        ErrorKind.COLLABORATOR_FAILURE,
        f"Unable to {action} at the moment. Please try again later.",
    )


def write_failure(error: Exception, *, action: str) -> ExecutionResult:
    """Classify an exception raised while changing collaborator data."""
    if is_permission_error(error):
        logger.warning("Permission denied while trying to %s: %s", action, error)
        return ExecutionResult.failure(
            ErrorKind.PERMISSION_DENIED,
            f"I'm not allowed to {action} for you right now.",
        )
    if isinstance(error, NotFoundError):
        return ExecutionResult.failure(ErrorKind.NOT_FOUND, error.message)

    logger.error("Failed to %s: %s", action, error, exc_info=error)
    return ExecutionResult.failure(
        ErrorKind.COLLABORATOR_FAILURE,
        f"Unable to {action} at the moment. Please try again later.",
    )
