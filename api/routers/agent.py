"""Internal agent function dispatch endpoints.

Called by the chat orchestrator, never by browsers. Secured by the
X-Internal-Key header; X-User-Id names the user the orchestrator acts for.
Domain outcomes (including failures) are 200 responses carrying an
ExecutionResult; HTTP errors are reserved for transport and auth problems.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from api.deps import (
    get_caller_id,
    get_confirmation_store,
    get_function_registry,
    get_settings,
)
from application.models import PendingAction
from backend.observability import AgentMetrics, add_span_attributes
from backend.services.confirmation_store import ConfirmationTicketStore
from backend.services.function_registry import FunctionRegistry
from backend.settings import Settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------


def _verify_internal_key(
    x_internal_key: str = Header(..., alias="X-Internal-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Verify the internal API key."""
    if not settings.internal_api_key:
        raise HTTPException(status_code=503, detail="Internal API key not configured")
    if x_internal_key != settings.internal_api_key:
        raise HTTPException(status_code=403, detail="Invalid internal API key")


router = APIRouter(
    prefix="/internal/agent",
    tags=["agent"],
    dependencies=[Depends(_verify_internal_key)],
)


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class _CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecuteRequest(_CamelRequest):
    """A tool call emitted by the model."""
    function_name: str = Field(..., min_length=1)
    arguments: Optional[Any] = None


class PendingActionRequest(_CamelRequest):
    """A pending action echoed back by the orchestrator."""
    pending_action: Dict[str, Any]


class FunctionsResponse(BaseModel):
    domain: str
    functions: List[str]


class ToolsResponse(BaseModel):
    tools: List[Dict[str, Any]]


class CancelResponse(BaseModel):
    cancelled: bool


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/functions", response_model=FunctionsResponse)
async def list_functions(
    domain: str = Query("all"),
    registry: FunctionRegistry = Depends(get_function_registry),
):
    """Names of the functions available for a domain."""
    try:
        functions = registry.get_functions_for_domain(domain)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return FunctionsResponse(domain=domain, functions=functions)


@router.get("/tools", response_model=ToolsResponse)
async def list_tools(
    domain: Optional[str] = Query(None),
    registry: FunctionRegistry = Depends(get_function_registry),
):
    """Tool definitions in Anthropic tool-use format."""
    try:
        tools = registry.get_anthropic_tools(domain)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ToolsResponse(tools=tools)


@router.post("/execute")
async def execute_function(
    request: ExecuteRequest,
    caller_id: str = Depends(get_caller_id),
    registry: FunctionRegistry = Depends(get_function_registry),
    tickets: Optional[ConfirmationTicketStore] = Depends(get_confirmation_store),
) -> Dict[str, Any]:
    """Run one tool call. Destructive calls come back as confirmation requests."""
    add_span_attributes({"agent.function": request.function_name, "user.id": caller_id})
    result = await registry.execute(request.function_name, request.arguments, caller_id)

    if result.pending_action is not None and tickets is not None:
        ticketed = tickets.issue(result.pending_action, caller_id)
        result = result.model_copy(update={"pending_action": ticketed})

    return result.to_wire()


@router.post("/confirm")
async def confirm_action(
    request: PendingActionRequest,
    caller_id: str = Depends(get_caller_id),
    registry: FunctionRegistry = Depends(get_function_registry),
    tickets: Optional[ConfirmationTicketStore] = Depends(get_confirmation_store),
) -> Dict[str, Any]:
    """Perform a destructive action the user confirmed."""
    add_span_attributes({"user.id": caller_id})
    result = await registry.execute_confirmed(request.pending_action, caller_id, tickets)
    return result.to_wire()


@router.post("/cancel", response_model=CancelResponse)
async def cancel_action(
    request: PendingActionRequest,
    caller_id: str = Depends(get_caller_id),
    tickets: Optional[ConfirmationTicketStore] = Depends(get_confirmation_store),
):
    """Abandon a pending action so its ticket can never be confirmed."""
    try:
        pending = PendingAction.model_validate(request.pending_action)
    except ValidationError:
        raise HTTPException(status_code=422, detail="Malformed pending action")

    cancelled = False
    if tickets is not None and pending.ticket_id:
        cancelled = tickets.discard(pending.ticket_id, caller_id)

    AgentMetrics.confirmations_total().add(
        1, {"function": pending.function, "outcome": "cancelled"}
    )
    logger.info("Cancelled %s for %s (ticket discarded=%s)", pending.function, caller_id, cancelled)
    return CancelResponse(cancelled=cancelled)
