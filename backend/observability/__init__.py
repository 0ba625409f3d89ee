"""
OpenTelemetry observability package for the agent function-dispatch service.

Usage:
    from backend.observability import (
        configure_observability,
        get_tracer,
        traced,
        AgentMetrics,
    )

    # Initialize in application startup
    configure_observability(settings)

    # Count a dispatch
    AgentMetrics.function_executions_total().add(
        1, {"function": "viewStats", "domain": "workout", "status": "ok"}
    )
"""

from backend.observability.config import configure_observability, shutdown_observability
from backend.observability.tracing import add_span_attributes, get_tracer, traced
from backend.observability.metrics import AgentMetrics, get_metrics_response

__all__ = [
    # Configuration
    "configure_observability",
    "shutdown_observability",
    # Tracing
    "get_tracer",
    "traced",
    "add_span_attributes",
    # Metrics
    "AgentMetrics",
    "get_metrics_response",
]
