"""
Tracing utilities for OpenTelemetry.

Provides the @traced decorator and get_tracer() helper.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Optional, TypeVar, Union

from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_DEFAULT_TRACER_NAME = "agent-api"


def get_tracer(name: Optional[str] = None) -> trace.Tracer:
    """
    Get an OpenTelemetry tracer instance.

    Args:
        name: Optional tracer name. Defaults to "agent-api".

    Returns:
        Tracer instance for creating spans.
    """
    return trace.get_tracer(name or _DEFAULT_TRACER_NAME)


def traced(
    _func: Optional[Callable] = None,
    *,
    name: Optional[str] = None,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[dict] = None,
) -> Union[Callable[[F], F], F]:
    """
    Decorator to create a span around a sync or async function.

    Can be used with or without parentheses:

        @traced
        def my_function():
            ...

        @traced(name="supabase.workouts.list", kind=SpanKind.CLIENT)
        async def list_workouts():
            ...

    The tracer is looked up per call so a TracerProvider installed after
    import (tests, late configure_observability) is still honoured.
    """

    def decorator(func: F) -> F:
        span_name = name or func.__qualname__

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with get_tracer().start_as_current_span(
                    span_name, kind=kind, attributes=attributes
                ) as span:
                    try:
                        result = await func(*args, **kwargs)
                        span.set_status(Status(StatusCode.OK))
                        return result
                    except Exception as e:
                        span.set_status(Status(StatusCode.ERROR, str(e)))
                        span.record_exception(e)
                        raise

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with get_tracer().start_as_current_span(
                span_name, kind=kind, attributes=attributes
            ) as span:
                try:
                    result = func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return sync_wrapper  # type: ignore

    if _func is not None:
        return decorator(_func)

    return decorator


def add_span_attributes(attributes: dict) -> None:
    """Add attributes to the current span, if one is recording."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)
