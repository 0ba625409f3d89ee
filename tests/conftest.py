"""
Shared test fixtures for the Agent API.

Domain function and registry tests run against in-memory fakes (tests/fakes.py).
Router tests go through FastAPI's TestClient with dependency overrides, so no
Supabase or OTel collector is needed.
"""

import os

import pytest

# ---------------------------------------------------------------------------
# Environment setup (must precede backend imports)
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("OTEL_ENABLED", "false")

from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from application.models import Achievement, Profile
from backend.observability.metrics import AgentMetrics
from backend.services.registry_factory import build_function_registry
from tests.fakes import (
    OTHER_USER_ID,
    TEST_USER_ID,
    FakeProfileRepository,
    FakeUserSettingsRepository,
    FakeWorkoutRepository,
    make_workout,
)
from tests.fixtures.otel import SpanCapture


# =============================================================================
# Repositories
# =============================================================================


@pytest.fixture
def workout_repo():
    """Two workouts for TEST_USER_ID and one for OTHER_USER_ID."""
    return FakeWorkoutRepository(
        [
            make_workout(
                "w-1",
                title="Push Day",
                days_ago=1,
                exercises=[
                    ("Bench Press", [(5, 100.0), (5, 105.0)]),
                    ("Overhead Press", [(8, 50.0)]),
                ],
                rpe=8,
            ),
            make_workout(
                "w-2",
                title="Leg Day",
                days_ago=10,
                exercises=[("Back Squat", [(5, 140.0), (3, 150.0)])],
                rpe=7,
            ),
            make_workout("w-other", user_id=OTHER_USER_ID, title="Their Workout"),
        ]
    )


@pytest.fixture
def profile_repo():
    return FakeProfileRepository(
        [
            Profile(
                id=TEST_USER_ID,
                display_name="Alex Runner",
                username="alex",
                bio="Lifting and running",
                fitness_goals=["Run a marathon"],
                workouts_count=42,
                followers_count=10,
                following_count=5,
                achievements=[
                    Achievement(id="a-1", title="First Workout", category="workouts"),
                    Achievement(id="a-2", title="Ten Followers", category="social"),
                ],
            ),
            Profile(id=OTHER_USER_ID, display_name="Alexis Private", is_public=False),
            Profile(id="user-3", display_name="Sam Lifter", username="sam"),
        ]
    )


@pytest.fixture
def settings_repo():
    return FakeUserSettingsRepository()


@pytest.fixture
def registry(workout_repo, profile_repo, settings_repo):
    """Sealed registry wired to the fakes."""
    return build_function_registry(workout_repo, profile_repo, settings_repo)


# =============================================================================
# Telemetry
# =============================================================================


@pytest.fixture
def span_capture(monkeypatch) -> SpanCapture:
    """Capture spans emitted by the FunctionRegistry.

    The global TracerProvider can only be set once per process, so the
    registry's tracer lookup is patched to a local provider instead.
    """
    capture = SpanCapture()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(capture._exporter))
    monkeypatch.setattr(
        "backend.services.function_registry.get_tracer",
        lambda name=None: provider.get_tracer(name or "agent-api"),
    )
    yield capture
    capture.clear()


@pytest.fixture
def metric_reader(monkeypatch) -> InMemoryMetricReader:
    """InMemoryMetricReader wired into AgentMetrics through a local MeterProvider."""
    reader = InMemoryMetricReader()
    provider = MeterProvider(metric_readers=[reader])
    monkeypatch.setattr(
        "backend.observability.metrics._get_meter",
        lambda: provider.get_meter("agent-api"),
    )
    AgentMetrics.reset()
    yield reader
    AgentMetrics.reset()
