"""Result and replay-token models for agent function dispatch.

Every agent function returns an ExecutionResult. The model is always
well-formed: success is derived from the status, so "no data yet" (EMPTY) and
"call failed" (ERROR) stay structurally distinct while both remain
displayable in a chat transcript.

Python attributes are snake_case; the wire form produced by to_wire() is
camelCase (navigationTarget, pendingAction, ...), including domain payload
fields passed as extras.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultStatus(str, Enum):
    """Three-way outcome of a dispatch, plus the confirmation hand-off."""

    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"
    CONFIRMATION_REQUIRED = "confirmation_required"


class ErrorKind(str, Enum):
    """Classification of a failed (or soft-failed) dispatch."""

    UNKNOWN_FUNCTION = "unknown_function"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    COLLABORATOR_FAILURE = "collaborator_failure"
    INTERNAL_ERROR = "internal_error"
    CONFIRMATION_INVALID = "confirmation_invalid"


class EmptyReason(str, Enum):
    """Why a successful result carries no data."""

    NO_DATA = "no_data"
    PERMISSION_DENIED = "permission_denied"


class PendingAction(BaseModel):
    """Replay token for a destructive call awaiting user confirmation.

    The orchestrator holds this value and echoes it back to
    FunctionRegistry.execute_confirmed(). ticket_id is only set when the
    orchestrator issues tickets through a ConfirmationTicketStore.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    function: str
    args: Dict[str, Any] = Field(default_factory=dict)
    ticket_id: Optional[str] = None


class ExecutionResult(BaseModel):
    """Normalized outcome of one agent function call."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    success: bool
    status: ResultStatus
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    reason: Optional[EmptyReason] = None
    message: Optional[str] = None
    navigation_target: Optional[str] = None
    requires_confirmation: Optional[bool] = None
    confirmation_prompt: Optional[str] = None
    pending_action: Optional[PendingAction] = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def ok(
        cls,
        message: Optional[str] = None,
        navigation_target: Optional[str] = None,
        **payload: Any,
    ) -> "ExecutionResult":
        return cls(
            success=True,
            status=ResultStatus.OK,
            message=message,
            navigation_target=navigation_target,
            **payload,
        )

    @classmethod
    def empty(
        cls,
        message: str,
        reason: EmptyReason = EmptyReason.NO_DATA,
        navigation_target: Optional[str] = None,
        **payload: Any,
    ) -> "ExecutionResult":
        """A valid state with nothing to show (counts as success)."""
        return cls(
            success=True,
            status=ResultStatus.EMPTY,
            reason=reason,
            message=message,
            navigation_target=navigation_target,
            **payload,
        )

    @classmethod
    def failure(cls, kind: ErrorKind, error: str, **payload: Any) -> "ExecutionResult":
        return cls(
            success=False,
            status=ResultStatus.ERROR,
            error_kind=kind,
            error=error,
            **payload,
        )

    @classmethod
    def confirmation(
        cls, prompt: str, pending_action: PendingAction
    ) -> "ExecutionResult":
        """First phase of a destructive call: ask, don't act."""
        return cls(
            success=False,
            status=ResultStatus.CONFIRMATION_REQUIRED,
            requires_confirmation=True,
            confirmation_prompt=prompt,
            pending_action=pending_action,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @property
    def payload(self) -> Dict[str, Any]:
        """Domain payload fields (everything not declared on the model)."""
        return dict(self.model_extra or {})

    def to_wire(self) -> Dict[str, Any]:
        """Serialize for the orchestrator / LLM: camelCase keys, no nulls."""
        data = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        extra_keys = set(self.model_extra or {})
        return {to_camel(k) if k in extra_keys else k: v for k, v in data.items()}
