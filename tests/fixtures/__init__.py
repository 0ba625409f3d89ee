"""Shared test fixtures."""

from tests.fixtures.otel import (
    CapturedSpan,
    SpanCapture,
    get_histogram_count,
    get_metric_value,
)

__all__ = [
    "CapturedSpan",
    "SpanCapture",
    "get_histogram_count",
    "get_metric_value",
]
