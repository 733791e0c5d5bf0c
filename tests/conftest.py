"""Shared test fixtures for all test modules."""

import pytest
from tests.snapshots import PASS_START, make_histogram, make_meter, make_timer

from insightspy.adapters.clients.in_memory import InMemoryTelemetryClient
from insightspy.core.models import (
    CounterSnapshot,
    GaugeSnapshot,
    HealthCheckResult,
    HealthStatus,
    MetricEntry,
    ReportSnapshot,
    Unit,
)
from insightspy.core.report import InsightsReport


@pytest.fixture
def client() -> InMemoryTelemetryClient:
    """Fixture providing an empty in-memory telemetry client."""
    return InMemoryTelemetryClient(clock=lambda: PASS_START)


@pytest.fixture
def report(client: InMemoryTelemetryClient) -> InsightsReport:
    """Fixture providing a report wired to the in-memory client."""
    return InsightsReport(client, clock=lambda: PASS_START)


@pytest.fixture
def sample_snapshot() -> ReportSnapshot:
    """One metric of every kind plus two health checks, in a single context."""
    return ReportSnapshot(
        context="Process",
        timestamp=PASS_START,
        metrics=(
            MetricEntry("MyPercentageGauge", GaugeSnapshot(42.0), Unit.PERCENT, context="App"),
            MetricEntry("MyItemCounter", CounterSnapshot(3), Unit.ITEMS, context="App"),
            MetricEntry("MyErrorsPerSecMeter", make_meter(), Unit.ERRORS, context="App"),
            MetricEntry("MyItemsHistogram", make_histogram(), Unit.ITEMS, context="App"),
            MetricEntry("MyEventsTimer", make_timer(), Unit.EVENTS, context="App"),
        ),
        health=HealthStatus.from_results(
            (
                HealthCheckResult("Seconds", True, "Seconds <= 55"),
                HealthCheckResult("AlwaysTrue", True, "Always True check"),
            )
        ),
    )
