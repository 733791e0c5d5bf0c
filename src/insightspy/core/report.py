"""Report lifecycle controller.

A reporting pass walks Idle -> report open -> context open -> group open,
emitting records for every metric, then closes everything in reverse and
returns to Idle. The report scope is released on every exit path.
"""

import itertools
import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from insightspy.core.encoders import encode_health, encode_metric
from insightspy.core.errors import ReportInProgressError
from insightspy.core.logs import get_logger, log_exception
from insightspy.core.models import (
    AvailabilityRecord,
    ContextFrame,
    HealthStatus,
    MetricEntry,
    ReportScope,
    ReportSnapshot,
    ScalarRecord,
    StructuredRecord,
    TelemetryRecord,
)
from insightspy.core.ports import TelemetryClientPort

logger = get_logger(__name__)

DEFAULT_REPORT_SOURCE = "insightspy"
HEALTH_CHECKS_GROUP = "Health Checks"


@dataclass(frozen=True)
class EncodingFailure:
    """A metric that could not be reported during a pass."""

    context: str | None
    group: str | None
    name: str
    kind: str
    error: Exception


@dataclass
class ReportResult:
    """Outcome of one reporting pass."""

    scope: ReportScope | None = None
    records_emitted: int = 0
    failures: list[EncodingFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures


def _kind_label(entry: MetricEntry) -> str:
    try:
        return entry.kind.value
    except TypeError:
        return type(entry.snapshot).__name__


def _group_label(entry: MetricEntry) -> str:
    # Unknown kinds still get a group so encode_metric can fail per metric
    try:
        return entry.group_name
    except TypeError:
        return "Metrics"


def emit_record(
    client: TelemetryClientPort,
    record: TelemetryRecord,
    context: dict[str, str] | None = None,
) -> None:
    """Hand a record to the telemetry client method matching its type."""
    if isinstance(record, ScalarRecord):
        client.emit_scalar_record(record.name, record.value, record.properties, context)
    elif isinstance(record, StructuredRecord):
        client.emit_structured_record(
            record.name,
            record.sample_count,
            record.total,
            record.minimum,
            record.maximum,
            record.std_dev,
            record.properties,
            context,
        )
    elif isinstance(record, AvailabilityRecord):
        client.emit_availability_record(
            record.name,
            record.timestamp,
            record.duration,
            record.success,
            record.properties,
            context,
        )
    else:
        raise TypeError(f"unsupported record type: {type(record).__name__}")


class InsightsReport:
    """Translates report snapshots into telemetry on a telemetry client.

    One instance owns one ContextFrame and must not run two passes at the
    same time; use one instance (and one client) per concurrent report.

    Example:
        ```python
        from insightspy import InMemoryTelemetryClient, InsightsReport

        client = InMemoryTelemetryClient()
        report = InsightsReport(client)
        result = report.run(source.snapshot())
        ```
    """

    def __init__(
        self,
        client: TelemetryClientPort,
        report_source: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the report with a telemetry client.

        Args:
            client: Telemetry client implementing TelemetryClientPort.
            report_source: Label used for the MetricsSource property and the
                           operation name (default: "insightspy"). The
                           synthetic-source tag is set on the client;
                           use build_report to keep the two in sync.
            clock: Time source for scope timestamps.
        """
        self.client = client
        self.report_source = report_source or DEFAULT_REPORT_SOURCE
        self.frame = ContextFrame(source=self.report_source)
        self._clock = clock
        self._scope: ReportScope | None = None
        self._running = threading.Lock()

    @property
    def synthetic_source(self) -> str:
        """Synthetic-source label marking records as machine generated."""
        return f"{self.report_source} Report"

    @property
    def scope(self) -> ReportScope | None:
        """The open report scope, or None when idle."""
        return self._scope

    def operation_name(self) -> str:
        """Unique operation name for a new pass."""
        return f"{self.report_source.replace(' ', '')}-Report-{uuid.uuid4()}"

    # --- Lifecycle transitions ---

    def start_report(self, context_name: str, timestamp: float | None = None) -> ReportScope:
        """Open the report scope for a pass.

        Raises:
            RuntimeError: If a scope is already open.
        """
        if self._scope is not None:
            raise RuntimeError("a report scope is already open")
        self.frame.report_context = context_name
        try:
            handle = self.client.begin_operation(self.operation_name())
        except BaseException:
            self.frame.report_context = None
            raise
        started_at = timestamp if timestamp is not None else self._clock()
        self._scope = ReportScope(handle=handle, started_at=started_at)
        logger.debug(
            "Report started",
            extra={"operation_id": handle.operation_id, "report_context": context_name},
        )
        return self._scope

    def end_report(self, context_name: str) -> ReportScope:
        """Close the report scope opened by start_report.

        The scope is marked closed even when the client fails to end the
        operation.

        Raises:
            RuntimeError: If no scope is open.
        """
        scope = self._scope
        if scope is None:
            raise RuntimeError(f"no open report scope for {context_name!r}")
        self.frame.report_context = None
        self.frame.context = None
        self.frame.group = None
        self._scope = None
        try:
            self.client.end_operation(scope.handle)
        finally:
            scope.close(self._clock())
        logger.debug("Report ended", extra={"operation_id": scope.operation_id})
        return scope

    def start_context(self, name: str) -> None:
        self.frame.context = name

    def end_context(self, name: str) -> None:
        self.frame.context = None

    def start_metric_group(self, name: str) -> None:
        self.frame.group = name

    def end_metric_group(self, name: str) -> None:
        self.frame.group = None

    @contextmanager
    def context(self, name: str) -> Iterator[None]:
        self.start_context(name)
        try:
            yield
        finally:
            self.end_context(name)

    @contextmanager
    def metric_group(self, name: str) -> Iterator[None]:
        self.start_metric_group(name)
        try:
            yield
        finally:
            self.end_metric_group(name)

    # --- Encoding ---

    def _emit_all(self, records: Iterable[TelemetryRecord]) -> int:
        context = self.frame.properties()
        emitted = 0
        for record in records:
            emit_record(self.client, record, context)
            emitted += 1
        return emitted

    def report_metric(self, entry: MetricEntry, result: ReportResult) -> None:
        """Encode and emit one metric, isolating any failure in ``result``."""
        try:
            result.records_emitted += self._emit_all(encode_metric(entry))
        except Exception as e:
            kind = _kind_label(entry)
            log_exception(
                f"Error reporting metric {entry.name!r}",
                logger=logger,
                level=logging.WARNING,
                metric_name=entry.name,
                metric_kind=kind,
            )
            result.failures.append(
                EncodingFailure(
                    context=self.frame.context,
                    group=self.frame.group,
                    name=entry.name,
                    kind=kind,
                    error=e,
                )
            )

    def report_health(
        self, status: HealthStatus, timestamp: float, result: ReportResult
    ) -> None:
        """Emit the pass's single availability record."""
        try:
            record = encode_health(status, self.frame, timestamp)
            result.records_emitted += self._emit_all([record])
        except Exception as e:
            log_exception(
                "Error reporting health status",
                logger=logger,
                level=logging.WARNING,
                metric_name=HEALTH_CHECKS_GROUP,
                metric_kind="health",
            )
            result.failures.append(
                EncodingFailure(
                    context=self.frame.context,
                    group=self.frame.group,
                    name=HEALTH_CHECKS_GROUP,
                    kind="health",
                    error=e,
                )
            )

    def _report_metrics(self, metrics: Iterable[MetricEntry], result: ReportResult) -> None:
        for context_label, in_context in itertools.groupby(metrics, key=lambda m: m.context):
            with self.context(context_label):
                for group, in_group in itertools.groupby(in_context, key=_group_label):
                    with self.metric_group(group):
                        for entry in in_group:
                            self.report_metric(entry, result)

    # --- Pass ---

    def run(self, snapshot: ReportSnapshot) -> ReportResult:
        """Run one complete reporting pass over ``snapshot``.

        Per-metric failures are collected in the result and never abort the
        pass. The report scope is closed even if the pass is interrupted.

        Raises:
            ReportInProgressError: If another pass is running on this report.
        """
        if not self._running.acquire(blocking=False):
            raise ReportInProgressError("a reporting pass is already running")
        try:
            result = ReportResult()
            self.start_report(snapshot.context, snapshot.timestamp)
            try:
                self._report_metrics(snapshot.metrics, result)
                health = snapshot.health
                if health is not None and health.has_registered_checks:
                    with self.metric_group(HEALTH_CHECKS_GROUP):
                        self.report_health(health, snapshot.timestamp, result)
            finally:
                result.scope = self.end_report(snapshot.context)
            logger.debug(
                "Report pass complete",
                extra={
                    "operation_id": result.scope.operation_id,
                    "records": result.records_emitted,
                    "failures": len(result.failures),
                },
            )
            return result
        finally:
            self._running.release()
