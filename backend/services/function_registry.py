"""FunctionRegistry for dispatching LLM tool calls to agent functions.

The registry is the single entry point the chat orchestrator uses to run
agent functions and to export their tool schemas. It is append-only while the
process starts (register/seal) and read-only afterwards, so concurrent
execute() calls need no locking.

Guarantees:
- An unknown function name yields a failure result, never an exception.
- Arguments are validated against the function's pydantic model before
  dispatch; malformed calls yield a validation_error result.
- Any exception escaping an agent function is logged, recorded on the span
  and converted to a generic failure result.
- Destructive functions only ever perform their side effect through
  execute_confirmed(), which replays a PendingAction.
"""

import logging
import time
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Type,
    Union,
)

from opentelemetry.trace import SpanKind, Status, StatusCode
from pydantic import ValidationError

from application.models import ErrorKind, ExecutionResult, PendingAction
from backend.observability import AgentMetrics, get_tracer
from backend.services.tool_schemas import Domain, ToolArgs, parameter_schema

if TYPE_CHECKING:
    from backend.services.confirmation_store import ConfirmationTicketStore

logger = logging.getLogger(__name__)

AgentFunction = Callable[[Any, str], Awaitable[ExecutionResult]]

# Keys the REQUESTED phase adds to pending-action args to identify the requester
_REQUESTER_KEYS = ("userId", "user_id")


@dataclass(frozen=True)
class FunctionDescriptor:
    """Immutable description of a registered agent function."""

    name: str
    domain: Domain
    description: str
    parameters: Type[ToolArgs]
    destructive: bool = False

    @property
    def parameter_schema(self) -> Dict[str, Any]:
        return parameter_schema(self.parameters)


@dataclass(frozen=True)
class _Entry:
    descriptor: FunctionDescriptor
    fn: AgentFunction
    on_confirm: Optional[AgentFunction] = None


class FunctionRegistry:
    """Catalog of agent functions with a protective execution boundary."""

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._sealed = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        fn: AgentFunction,
        *,
        domain: Union[Domain, str],
        description: str,
        parameters: Type[ToolArgs],
        destructive: bool = False,
        on_confirm: Optional[AgentFunction] = None,
    ) -> FunctionDescriptor:
        """Register an agent function under a unique name.

        Raises:
            RuntimeError: If the registry has been sealed.
            ValueError: On a duplicate name, or a destructive function
                without an on_confirm handler (and vice versa).
        """
        if self._sealed:
            raise RuntimeError(f"Cannot register '{name}': registry is sealed")
        if name in self._entries:
            raise ValueError(f"Function '{name}' is already registered")
        if destructive and on_confirm is None:
            raise ValueError(f"Destructive function '{name}' needs an on_confirm handler")
        if on_confirm is not None and not destructive:
            raise ValueError(f"Only destructive functions take on_confirm ('{name}')")

        descriptor = FunctionDescriptor(
            name=name,
            domain=Domain(domain),
            description=description,
            parameters=parameters,
            destructive=destructive,
        )
        self._entries[name] = _Entry(descriptor=descriptor, fn=fn, on_confirm=on_confirm)
        return descriptor

    def seal(self) -> None:
        """End registration. The catalog is read-only from here on."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        function_name: str,
        arguments: Any,
        caller_id: str,
    ) -> ExecutionResult:
        """Execute an agent function by name.

        Args:
            function_name: Tool name emitted by the model.
            arguments: Raw tool-call arguments (untrusted).
            caller_id: ID of the user the conversation belongs to.

        Returns:
            ExecutionResult; this method never raises.
        """
        entry = self._entries.get(function_name) if isinstance(function_name, str) else None
        if entry is None:
            logger.error(
                "Unknown agent function '%s' requested by %s", function_name, caller_id
            )
            self._record(str(function_name), "unknown", "unknown_function", 0.0)
            return ExecutionResult.failure(
                ErrorKind.UNKNOWN_FUNCTION, f"Unknown function: {function_name}"
            )

        args, invalid = self._validate(entry.descriptor, arguments)
        if invalid is not None:
            logger.info(
                "Rejected %s for %s: %s", function_name, caller_id, invalid.error
            )
            self._record(function_name, entry.descriptor.domain.value, "validation_error", 0.0)
            return invalid

        return await self._run(
            entry.descriptor, entry.fn, args, caller_id, f"agent.function.{function_name}"
        )

    async def execute_confirmed(
        self,
        pending_action: Union[PendingAction, Dict[str, Any]],
        caller_id: str,
        tickets: Optional["ConfirmationTicketStore"] = None,
    ) -> ExecutionResult:
        """Perform a destructive action the user has explicitly confirmed.

        Args:
            pending_action: The token returned by the REQUESTED phase.
            caller_id: ID of the user confirming the action.
            tickets: Orchestrator-owned ticket store. When given, the
                pending action must carry a ticket that is consumed here,
                which makes execution at-most-once.

        Returns:
            ExecutionResult; this method never raises.
        """
        try:
            pending = PendingAction.model_validate(pending_action)
        except ValidationError:
            return ExecutionResult.failure(
                ErrorKind.CONFIRMATION_INVALID, "That confirmation could not be read."
            )

        entry = self._entries.get(pending.function)
        if entry is None or not entry.descriptor.destructive:
            logger.warning(
                "Confirmation for non-destructive or unknown function '%s' by %s",
                pending.function,
                caller_id,
            )
            return ExecutionResult.failure(
                ErrorKind.CONFIRMATION_INVALID,
                f"There is nothing to confirm for {pending.function}.",
            )

        args = dict(pending.args)
        requesters = {str(args.pop(key)) for key in _REQUESTER_KEYS if key in args}
        if requesters and requesters != {caller_id}:
            logger.warning(
                "Confirmation of %s by %s does not match requester", pending.function, caller_id
            )
            self._record_confirmation(pending.function, "rejected")
            return ExecutionResult.failure(
                ErrorKind.CONFIRMATION_INVALID,
                "This action was requested by a different user.",
            )

        if tickets is not None:
            rejection = self._consume_ticket(tickets, pending, caller_id)
            if rejection is not None:
                self._record_confirmation(pending.function, "rejected")
                return rejection

        validated, invalid = self._validate(entry.descriptor, args)
        if invalid is not None:
            self._record_confirmation(pending.function, "rejected")
            return invalid

        result = await self._run(
            entry.descriptor,
            entry.on_confirm,  # type: ignore[arg-type]
            validated,
            caller_id,
            f"agent.confirm.{pending.function}",
        )
        self._record_confirmation(pending.function, result.status.value)
        return result

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def get_functions_for_domain(self, domain: Union[Domain, str] = "all") -> List[str]:
        """Names registered for a domain, or every name for 'all'.

        Raises:
            ValueError: For an unknown domain.
        """
        if domain == "all":
            return list(self._entries)
        try:
            wanted = Domain(domain)
        except ValueError:
            valid = ", ".join(["all"] + [d.value for d in Domain])
            raise ValueError(f"Unknown domain '{domain}'. Valid domains: {valid}")
        return [
            name for name, entry in self._entries.items()
            if entry.descriptor.domain is wanted
        ]

    def get_tool_definitions(
        self, domain: Optional[Union[Domain, str]] = None
    ) -> Dict[str, Dict[str, Any]]:
        """Tool catalog keyed by function name: {description, parameters}."""
        return {
            name: {
                "description": self._entries[name].descriptor.description,
                "parameters": self._entries[name].descriptor.parameter_schema,
            }
            for name in self.get_functions_for_domain(domain or "all")
        }

    def get_anthropic_tools(
        self, domain: Optional[Union[Domain, str]] = None
    ) -> List[Dict[str, Any]]:
        """Tool catalog in Anthropic tool-use format (name, description, input_schema)."""
        return [
            {
                "name": name,
                "description": definition["description"],
                "input_schema": definition["parameters"],
            }
            for name, definition in self.get_tool_definitions(domain).items()
        ]

    def get_descriptor(self, name: str) -> Optional[FunctionDescriptor]:
        entry = self._entries.get(name)
        return entry.descriptor if entry else None

    def is_destructive(self, name: str) -> bool:
        entry = self._entries.get(name)
        return bool(entry and entry.descriptor.destructive)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(
        self, descriptor: FunctionDescriptor, arguments: Any
    ) -> Tuple[Optional[ToolArgs], Optional[ExecutionResult]]:
        if arguments is None:
            arguments = {}
        try:
            return descriptor.parameters.model_validate(arguments), None
        except ValidationError as e:
            return None, ExecutionResult.failure(
                ErrorKind.VALIDATION_ERROR,
                f"Invalid arguments for {descriptor.name}: {_describe_errors(e)}",
            )

    @staticmethod
    def _consume_ticket(
        tickets: "ConfirmationTicketStore", pending: PendingAction, caller_id: str
    ) -> Optional[ExecutionResult]:
        expired = ExecutionResult.failure(
            ErrorKind.CONFIRMATION_INVALID,
            "This confirmation has expired or was already used. Please ask again.",
        )
        if not pending.ticket_id:
            return expired
        issued = tickets.consume(pending.ticket_id, caller_id)
        if issued is None:
            return expired
        if issued.function != pending.function or issued.args != pending.args:
            logger.warning(
                "Ticket %s replayed with altered action by %s", pending.ticket_id, caller_id
            )
            return ExecutionResult.failure(
                ErrorKind.CONFIRMATION_INVALID,
                "This confirmation does not match the original request.",
            )
        return None

    async def _run(
        self,
        descriptor: FunctionDescriptor,
        fn: AgentFunction,
        args: ToolArgs,
        caller_id: str,
        span_name: str,
    ) -> ExecutionResult:
        start_time = time.perf_counter()

        with get_tracer().start_as_current_span(
            span_name,
            kind=SpanKind.INTERNAL,
            attributes={
                "agent.function": descriptor.name,
                "agent.domain": descriptor.domain.value,
                "user.id": caller_id,
            },
        ) as span:
            try:
                result = await fn(args, caller_id)
                if not isinstance(result, ExecutionResult):
                    raise TypeError(
                        f"{descriptor.name} returned {type(result).__name__}, "
                        "expected ExecutionResult"
                    )
            except Exception as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                logger.exception(
                    "Agent function %s failed for %s", descriptor.name, caller_id
                )
                result = ExecutionResult.failure(
                    ErrorKind.INTERNAL_ERROR, f"Failed to execute {descriptor.name}"
                )

            duration = time.perf_counter() - start_time
            span.set_attribute("agent.status", result.status.value)
            span.set_attribute("agent.duration_seconds", duration)

        self._record(descriptor.name, descriptor.domain.value, result.status.value, duration)
        logger.info(
            "Executed %s for %s: success=%s status=%s (%.3fs)",
            descriptor.name,
            caller_id,
            result.success,
            result.status.value,
            duration,
        )
        return result

    @staticmethod
    def _record(function_name: str, domain: str, status: str, duration: float) -> None:
        labels = {"function": function_name, "domain": domain, "status": status}
        AgentMetrics.function_executions_total().add(1, labels)
        AgentMetrics.function_execution_seconds().record(duration, labels)

    @staticmethod
    def _record_confirmation(function_name: str, outcome: str) -> None:
        AgentMetrics.confirmations_total().add(
            1, {"function": function_name, "outcome": outcome}
        )


def _describe_errors(error: ValidationError, limit: int = 3) -> str:
    """Compact, user-readable summary of a pydantic ValidationError."""
    parts = []
    for item in error.errors()[:limit]:
        location = ".".join(str(p) for p in item.get("loc", ())) or "arguments"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)
