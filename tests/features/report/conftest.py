"""BDD step definitions for reporting pass features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when
from tests.snapshots import PASS_START

from insightspy.adapters.clients.in_memory import InMemoryTelemetryClient
from insightspy.core.models import (
    AvailabilityRecord,
    CounterSnapshot,
    GaugeSnapshot,
    HealthCheckResult,
    HealthStatus,
    MetricEntry,
    ReportSnapshot,
    Unit,
)
from insightspy.core.report import InsightsReport, ReportResult
from insightspy.core.tags import DO_NOT_REPORT

UNITS = {unit.name: unit for unit in (Unit.NONE, Unit.ITEMS, Unit.PERCENT, Unit.ERRORS)}


@dataclass
class ReportScenarioContext:
    """State shared between the steps of one scenario."""

    client: InMemoryTelemetryClient = field(default_factory=InMemoryTelemetryClient)
    report_context: str = ""
    metrics: list[MetricEntry] = field(default_factory=list)
    checks: list[HealthCheckResult] = field(default_factory=list)
    results: list[ReportResult] = field(default_factory=list)

    def snapshot(self) -> ReportSnapshot:
        return ReportSnapshot(
            context=self.report_context,
            timestamp=PASS_START,
            metrics=tuple(self.metrics),
            health=HealthStatus.from_results(tuple(self.checks)),
        )

    def availability(self) -> AvailabilityRecord:
        (record,) = [r for r in self.client.records if isinstance(r, AvailabilityRecord)]
        return record


@pytest.fixture
def ctx() -> ReportScenarioContext:
    """Fresh scenario context for each test."""
    return ReportScenarioContext()


# --- Given ---


@given(parsers.parse('a report context named "{name}"'))
def given_report_context(ctx: ReportScenarioContext, name: str) -> None:
    ctx.report_context = name


@given(parsers.parse('a counter "{name}" with count {count:d} in unit "{unit}"'))
def given_counter(ctx: ReportScenarioContext, name: str, count: int, unit: str) -> None:
    ctx.metrics.append(MetricEntry(name, CounterSnapshot(count), UNITS[unit]))


@given(parsers.parse('a gauge "{name}" with value {value:g} in unit "{unit}"'))
def given_gauge(ctx: ReportScenarioContext, name: str, value: float, unit: str) -> None:
    ctx.metrics.append(MetricEntry(name, GaugeSnapshot(value), UNITS[unit]))


@given(parsers.parse('a suppressed counter "{name}" with count {count:d}'))
def given_suppressed_counter(ctx: ReportScenarioContext, name: str, count: int) -> None:
    ctx.metrics.append(MetricEntry(name, CounterSnapshot(count), tags=(DO_NOT_REPORT,)))


@given(parsers.parse('a health check "{name}" that passes with "{message}"'))
def given_passing_check(ctx: ReportScenarioContext, name: str, message: str) -> None:
    ctx.checks.append(HealthCheckResult(name, True, message))


@given(parsers.parse('a health check "{name}" that fails with "{message}"'))
def given_failing_check(ctx: ReportScenarioContext, name: str, message: str) -> None:
    ctx.checks.append(HealthCheckResult(name, False, message))


# --- When ---


@when("the report runs")
def when_report_runs(ctx: ReportScenarioContext) -> None:
    report = InsightsReport(ctx.client, clock=lambda: PASS_START)
    ctx.results.append(report.run(ctx.snapshot()))


@when(parsers.parse("the report runs {n:d} times"))
def when_report_runs_n_times(ctx: ReportScenarioContext, n: int) -> None:
    report = InsightsReport(ctx.client, clock=lambda: PASS_START)
    for _ in range(n):
        ctx.results.append(report.run(ctx.snapshot()))


# --- Then ---


@then(parsers.parse("{n:d} records are emitted"))
def then_n_records(ctx: ReportScenarioContext, n: int) -> None:
    assert len(ctx.client.records) == n


@then(parsers.parse('the record "{name}" has value "{value}"'))
def then_record_value(ctx: ReportScenarioContext, name: str, value: str) -> None:
    (record,) = [r for r in ctx.client.records if r.name == name]
    assert record.properties["Value"] == value


@then(parsers.parse('the availability record "{name}" reports success {success}'))
def then_availability_success(ctx: ReportScenarioContext, name: str, success: str) -> None:
    record = ctx.availability()
    assert record.name == name
    assert str(record.success).lower() == success


@then(parsers.parse('the availability record has property "{key}" equal to "{value}"'))
def then_availability_property(ctx: ReportScenarioContext, key: str, value: str) -> None:
    assert ctx.availability().properties[key] == value


@then("the report scope is closed")
def then_scope_closed(ctx: ReportScenarioContext) -> None:
    scope = ctx.results[-1].scope
    assert scope is not None and scope.is_closed
    assert ctx.client.open_operations == []


@then(parsers.parse("{n:d} report scopes were closed"))
def then_n_scopes_closed(ctx: ReportScenarioContext, n: int) -> None:
    assert len(ctx.client.ended) == n
    assert all(r.scope is not None and r.scope.is_closed for r in ctx.results)
