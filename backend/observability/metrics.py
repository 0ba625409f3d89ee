"""
Metrics definitions for the agent function-dispatch service.

Defines all metrics using OpenTelemetry Meter API. Instruments are created
lazily so importing this module never requires a configured MeterProvider.
"""

import logging
from typing import Optional

from opentelemetry import metrics

logger = logging.getLogger(__name__)

_METER_NAME = "agent-api"


def _get_meter() -> metrics.Meter:
    """Get the metrics meter instance."""
    return metrics.get_meter(_METER_NAME)


class AgentMetrics:
    """
    Centralized metrics for agent function dispatch.

    All metrics are lazily initialized on first access.
    """

    _function_executions_total: Optional[metrics.Counter] = None
    _function_execution_seconds: Optional[metrics.Histogram] = None
    _confirmations_total: Optional[metrics.Counter] = None

    @classmethod
    def function_executions_total(cls) -> metrics.Counter:
        """Counter for dispatch attempts by function, domain and status."""
        if cls._function_executions_total is None:
            cls._function_executions_total = _get_meter().create_counter(
                name="agent_function_executions_total",
                description="Total number of agent function dispatch attempts",
                unit="1",
            )
        return cls._function_executions_total

    @classmethod
    def function_execution_seconds(cls) -> metrics.Histogram:
        """Histogram for agent function execution duration."""
        if cls._function_execution_seconds is None:
            cls._function_execution_seconds = _get_meter().create_histogram(
                name="agent_function_execution_seconds",
                description="Duration of agent function executions",
                unit="s",
            )
        return cls._function_execution_seconds

    @classmethod
    def confirmations_total(cls) -> metrics.Counter:
        """Counter for confirmed destructive calls by outcome."""
        if cls._confirmations_total is None:
            cls._confirmations_total = _get_meter().create_counter(
                name="agent_confirmations_total",
                description="Total confirmed destructive actions by outcome",
                unit="1",
            )
        return cls._confirmations_total

    @classmethod
    def reset(cls) -> None:
        """Drop cached instruments (tests swap MeterProviders)."""
        cls._function_executions_total = None
        cls._function_execution_seconds = None
        cls._confirmations_total = None


def get_metrics_response() -> str:
    """
    Get Prometheus-format metrics response.

    Returns:
        Prometheus text format metrics string.
    """
    try:
        from prometheus_client import generate_latest, REGISTRY
    except ImportError:
        return "# Prometheus exporter not available\n"
    return generate_latest(REGISTRY).decode("utf-8")
