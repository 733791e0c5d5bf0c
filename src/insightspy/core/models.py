"""Core domain models for metric snapshots and telemetry records.

Snapshots are immutable values produced by the instrument registry right
before a reporting pass. Records are the logical telemetry items the
encoders produce for a telemetry client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class TimeUnit(Enum):
    """Time unit used for rates and durations."""

    NANOSECONDS = "ns"
    MICROSECONDS = "us"
    MILLISECONDS = "ms"
    SECONDS = "s"
    MINUTES = "min"
    HOURS = "h"
    DAYS = "days"

    @property
    def abbreviation(self) -> str:
        """Short suffix used in formatted strings (e.g. "ms")."""
        return self.value

    @property
    def label(self) -> str:
        """Display name used in RateUnit/DurationUnit properties (e.g. "Seconds")."""
        return self.name.title()


@dataclass(frozen=True)
class Unit:
    """Semantic measurement unit.

    Attributes:
        name: Unit name reported in the "Unit" property (e.g. "Items").
        symbol: Suffix appended to formatted values and counts (e.g. "%").
        precision: Decimal places used when formatting values.
    """

    name: str
    symbol: str = ""
    precision: int = 2

    NONE: ClassVar["Unit"]
    ITEMS: ClassVar["Unit"]
    ERRORS: ClassVar["Unit"]
    EVENTS: ClassVar["Unit"]
    CALLS: ClassVar["Unit"]
    REQUESTS: ClassVar["Unit"]
    COMMANDS: ClassVar["Unit"]
    THREADS: ClassVar["Unit"]
    RESULTS: ClassVar["Unit"]
    PERCENT: ClassVar["Unit"]
    BYTES: ClassVar["Unit"]
    KILOBYTES: ClassVar["Unit"]
    MEGABYTES: ClassVar["Unit"]

    @classmethod
    def custom(cls, name: str, symbol: str | None = None, precision: int = 2) -> "Unit":
        """Create a custom unit whose symbol defaults to " <name>"."""
        return cls(
            name=name,
            symbol=f" {name}" if symbol is None else symbol,
            precision=precision,
        )


Unit.NONE = Unit("")
Unit.ITEMS = Unit("Items")
Unit.ERRORS = Unit("Errors")
Unit.EVENTS = Unit("Events")
Unit.CALLS = Unit("Calls")
Unit.REQUESTS = Unit("Requests")
Unit.COMMANDS = Unit("Commands")
Unit.THREADS = Unit("Threads")
Unit.RESULTS = Unit("Results")
Unit.PERCENT = Unit("%", symbol="%", precision=0)
Unit.BYTES = Unit("bytes", symbol=" B", precision=0)
Unit.KILOBYTES = Unit("Kb", symbol=" Kb")
Unit.MEGABYTES = Unit("Mb", symbol=" Mb")


# === Snapshots ===


@dataclass(frozen=True)
class CounterItem:
    """Itemized sub-count of a counter."""

    item: str
    count: int


@dataclass(frozen=True)
class CounterSnapshot:
    """A counter's total plus optional itemized sub-counts."""

    count: int
    items: tuple[CounterItem, ...] = ()


@dataclass(frozen=True)
class GaugeSnapshot:
    """A single instantaneous scalar."""

    value: float


@dataclass(frozen=True)
class MeterSnapshot:
    """Event rate statistics, precomputed upstream."""

    count: int
    mean_rate: float
    one_minute_rate: float
    five_minute_rate: float
    fifteen_minute_rate: float


@dataclass(frozen=True)
class HistogramSnapshot:
    """Distribution statistics of a value stream."""

    count: int
    last_value: float
    mean: float
    std_dev: float
    min: float
    max: float
    median: float
    percentile_75: float
    percentile_95: float
    percentile_98: float
    percentile_99: float
    percentile_999: float
    sample_size: int


@dataclass(frozen=True)
class TimerSnapshot:
    """Call rate plus duration distribution of a timed operation.

    Attributes:
        rate: Call rate statistics.
        histogram: Duration distribution.
        total_time: Total elapsed time, independent of rate and histogram.
    """

    rate: MeterSnapshot
    histogram: HistogramSnapshot
    total_time: float


Snapshot = CounterSnapshot | GaugeSnapshot | MeterSnapshot | HistogramSnapshot | TimerSnapshot


class MetricKind(Enum):
    """Instrument kind of a metric entry."""

    GAUGE = "gauge"
    COUNTER = "counter"
    METER = "meter"
    HISTOGRAM = "histogram"
    TIMER = "timer"

    @property
    def default_group(self) -> str:
        """Group name used when an entry does not name its own group."""
        return f"{self.name.title()}s"


_KIND_BY_SNAPSHOT: dict[type, MetricKind] = {
    GaugeSnapshot: MetricKind.GAUGE,
    CounterSnapshot: MetricKind.COUNTER,
    MeterSnapshot: MetricKind.METER,
    HistogramSnapshot: MetricKind.HISTOGRAM,
    TimerSnapshot: MetricKind.TIMER,
}


@dataclass(frozen=True)
class MetricEntry:
    """One metric instance as supplied by the snapshot source.

    Attributes:
        name: Metric name.
        snapshot: Snapshot value; its type determines the metric kind.
        unit: Measurement unit.
        tags: Ordered free-form labels.
        context: Name of the context the metric belongs to.
        group: Metric group name. Defaults to the kind's group (e.g. "Gauges").
        rate_unit: Time unit of meter and timer rates.
        duration_unit: Time unit of timer durations.
    """

    name: str
    snapshot: Snapshot
    unit: Unit = Unit.NONE
    tags: tuple[str, ...] = ()
    context: str = ""
    group: str | None = None
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS

    @property
    def kind(self) -> MetricKind:
        """Instrument kind derived from the snapshot type."""
        try:
            return _KIND_BY_SNAPSHOT[type(self.snapshot)]
        except KeyError:
            raise TypeError(
                f"unsupported snapshot type: {type(self.snapshot).__name__}"
            ) from None

    @property
    def group_name(self) -> str:
        """Explicit group, or the default group for the metric kind."""
        return self.group if self.group is not None else self.kind.default_group


@dataclass(frozen=True)
class HealthCheckResult:
    """Outcome of a single health check."""

    name: str
    is_healthy: bool
    message: str = ""


@dataclass(frozen=True)
class HealthStatus:
    """Aggregate outcome of all registered health checks."""

    is_healthy: bool
    results: tuple[HealthCheckResult, ...] = ()

    @property
    def has_registered_checks(self) -> bool:
        return len(self.results) > 0

    @classmethod
    def from_results(cls, results: tuple[HealthCheckResult, ...]) -> "HealthStatus":
        """Build a status that is healthy only when every check is healthy."""
        return cls(is_healthy=all(r.is_healthy for r in results), results=results)


@dataclass(frozen=True)
class ReportSnapshot:
    """Everything a single reporting pass consumes.

    Attributes:
        context: Report-level context name (e.g. the process name).
        timestamp: Unix timestamp of the pass start.
        metrics: Metric entries in context -> group -> metric order.
        health: Optional health status, reported once per pass.
    """

    context: str
    timestamp: float
    metrics: tuple[MetricEntry, ...] = ()
    health: HealthStatus | None = None


def context_name(*parts: str) -> str:
    """Join nested context names into a single flat label."""
    return " - ".join(p for p in parts if p)


# === Report state ===


@dataclass
class ContextFrame:
    """Labels describing where in a reporting pass the controller currently is.

    At most one context and one metric group are active at any time.
    """

    source: str
    report_context: str | None = None
    context: str | None = None
    group: str | None = None

    def properties(self) -> dict[str, str]:
        """Context properties attached to every emitted record."""
        props = {"MetricsSource": self.source}
        if self.report_context is not None:
            props["MetricsReportContext"] = self.report_context
        if self.context is not None:
            props["MetricsContext"] = self.context
        if self.group is not None:
            props["MetricsGroup"] = self.group
        return props


@dataclass(frozen=True)
class OperationHandle:
    """Correlation handle returned by a telemetry client for one operation."""

    operation_id: str
    name: str
    started_at: float


@dataclass
class ReportScope:
    """Correlation scope of one reporting pass. Closed exactly once."""

    handle: OperationHandle
    started_at: float
    closed_at: float | None = None

    @property
    def operation_id(self) -> str:
        return self.handle.operation_id

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None

    def close(self, timestamp: float) -> None:
        if self.closed_at is not None:
            raise RuntimeError(f"report scope {self.operation_id} already closed")
        self.closed_at = timestamp


# === Telemetry records ===


@dataclass(frozen=True)
class ScalarRecord:
    """A single-value metric record."""

    name: str
    value: float
    properties: dict[str, str] = field(default_factory=dict)
    context: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StructuredRecord:
    """A multi-field (aggregated) metric record."""

    name: str
    sample_count: int
    total: float
    minimum: float
    maximum: float
    std_dev: float
    properties: dict[str, str] = field(default_factory=dict)
    context: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AvailabilityRecord:
    """A pass/fail availability record."""

    name: str
    timestamp: float
    duration: float
    success: bool
    properties: dict[str, str] = field(default_factory=dict)
    context: dict[str, str] = field(default_factory=dict)


TelemetryRecord = ScalarRecord | StructuredRecord | AvailabilityRecord
