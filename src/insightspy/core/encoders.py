"""Snapshot encoders: one recipe per instrument kind.

Each encoder returns the telemetry records for one metric, in emission
order. Per-statistic sibling records always come before the aggregate
record so receivers that process in order see detail before summary.
A metric tagged with DO_NOT_REPORT encodes to no records at all.
"""

from collections.abc import Callable, Sequence

from insightspy.core.errors import EncodingError
from insightspy.core.models import (
    AvailabilityRecord,
    ContextFrame,
    CounterSnapshot,
    GaugeSnapshot,
    HealthStatus,
    HistogramSnapshot,
    MeterSnapshot,
    MetricEntry,
    ScalarRecord,
    StructuredRecord,
    TelemetryRecord,
    TimerSnapshot,
    TimeUnit,
    Unit,
)
from insightspy.core.tags import is_suppressed, join_tags
from insightspy.core.units import (
    format_count,
    format_duration,
    format_rate,
    format_value,
)


def _rate_fields(meter: MeterSnapshot) -> list[tuple[str, float]]:
    return [
        ("MeanRate", meter.mean_rate),
        ("OneMinuteRate", meter.one_minute_rate),
        ("FiveMinuteRate", meter.five_minute_rate),
        ("FifteenMinuteRate", meter.fifteen_minute_rate),
    ]


def _distribution_fields(histogram: HistogramSnapshot) -> list[tuple[str, float]]:
    return [
        ("Mean", histogram.mean),
        ("Median", histogram.median),
        ("Percentile75", histogram.percentile_75),
        ("Percentile95", histogram.percentile_95),
        ("Percentile98", histogram.percentile_98),
        ("Percentile99", histogram.percentile_99),
        ("Percentile999", histogram.percentile_999),
    ]


def _shared_properties(unit: Unit, tags: Sequence[str], **extra: str) -> dict[str, str]:
    props = {"Unit": unit.name, **extra}
    joined = join_tags(tags)
    if joined is not None:
        props["Tags"] = joined
    return props


def _sample_count(kind: str, name: str, value: float) -> int:
    """Convert a sample count to the integer the aggregate record requires.

    Raises:
        EncodingError: If the count is NaN or infinite.
    """
    try:
        return int(value)
    except (ValueError, OverflowError) as e:
        raise EncodingError(f"{kind} {name!r} has invalid count {value!r}") from e


def _sibling_records(
    name: str,
    fields: list[tuple[str, float]],
    shared: dict[str, str],
    render: Callable[[float], str],
) -> list[TelemetryRecord]:
    """Build one "name {Field}" record per statistic."""
    records: list[TelemetryRecord] = []
    for field_name, value in fields:
        suffixed = f"{name} {{{field_name}}}"
        props = {**shared, "Name": suffixed, "Value": render(value)}
        records.append(ScalarRecord(name=suffixed, value=value, properties=props))
    return records


def encode_gauge(
    name: str, snapshot: GaugeSnapshot, unit: Unit, tags: Sequence[str] = ()
) -> list[TelemetryRecord]:
    """Encode a gauge as a single scalar record."""
    if is_suppressed(tags):
        return []
    props = {
        "Name": name,
        "Value": format_value(unit, snapshot.value),
        **_shared_properties(unit, tags),
    }
    return [ScalarRecord(name=name, value=snapshot.value, properties=props)]


def encode_counter(
    name: str, snapshot: CounterSnapshot, unit: Unit, tags: Sequence[str] = ()
) -> list[TelemetryRecord]:
    """Encode a counter as a single scalar record.

    Itemized sub-counts are added as one property per item label.
    """
    if is_suppressed(tags):
        return []
    props = {
        "Name": name,
        "Value": format_count(unit, snapshot.count),
        **_shared_properties(unit, tags),
    }
    for item in snapshot.items:
        props[item.item] = format_value(unit, item.count)
    return [ScalarRecord(name=name, value=snapshot.count, properties=props)]


def encode_meter(
    name: str,
    snapshot: MeterSnapshot,
    unit: Unit,
    rate_unit: TimeUnit,
    tags: Sequence[str] = (),
) -> list[TelemetryRecord]:
    """Encode a meter as four rate records plus one summary record."""
    if is_suppressed(tags):
        return []
    shared = _shared_properties(unit, tags, RateUnit=rate_unit.label)
    rates = _rate_fields(snapshot)

    records = _sibling_records(
        name, rates, shared, lambda v: format_rate(unit, v, rate_unit)
    )

    summary = {**shared, "Name": name, "Value": format_count(unit, snapshot.count)}
    for field_name, value in rates:
        summary[field_name] = format_rate(unit, value, rate_unit)
    records.append(ScalarRecord(name=name, value=snapshot.count, properties=summary))
    return records


def encode_histogram(
    name: str, snapshot: HistogramSnapshot, unit: Unit, tags: Sequence[str] = ()
) -> list[TelemetryRecord]:
    """Encode a histogram as seven statistic records plus one aggregate record.

    The aggregate carries sample size as its sample count and the total
    count as its sum, alongside min, max and standard deviation.

    Raises:
        EncodingError: If the sample size is NaN or infinite.
    """
    if is_suppressed(tags):
        return []
    shared = _shared_properties(unit, tags)
    stats = _distribution_fields(snapshot)

    records = _sibling_records(name, stats, shared, lambda v: format_value(unit, v))

    props = {
        "Name": name,
        "Value": format_value(unit, snapshot.last_value),
        **shared,
    }
    for field_name, value in stats:
        props[field_name] = format_value(unit, value)
    records.append(
        StructuredRecord(
            name=name,
            sample_count=_sample_count("histogram", name, snapshot.sample_size),
            total=snapshot.count,
            minimum=snapshot.min,
            maximum=snapshot.max,
            std_dev=snapshot.std_dev,
            properties=props,
        )
    )
    return records


def encode_timer(
    name: str,
    snapshot: TimerSnapshot,
    unit: Unit,
    rate_unit: TimeUnit,
    duration_unit: TimeUnit,
    tags: Sequence[str] = (),
) -> list[TelemetryRecord]:
    """Encode a timer as duration records, rate records and one aggregate.

    The aggregate pairs the histogram count (sample count) with the total
    elapsed time (sum). These are different quantities; the pairing follows
    the backend's fixed metric schema.
    """
    if is_suppressed(tags):
        return []
    durations = _distribution_fields(snapshot.histogram)
    rates = _rate_fields(snapshot.rate)

    records = _sibling_records(
        name,
        durations,
        _shared_properties(unit, tags, DurationUnit=duration_unit.label),
        lambda v: format_duration(unit, v, duration_unit),
    )
    records.extend(
        _sibling_records(
            name,
            rates,
            _shared_properties(unit, tags, RateUnit=rate_unit.label),
            lambda v: format_rate(unit, v, rate_unit),
        )
    )

    props = {
        "Name": name,
        "Value": format_duration(unit, snapshot.total_time, duration_unit),
        **_shared_properties(
            unit, tags, RateUnit=rate_unit.label, DurationUnit=duration_unit.label
        ),
    }
    for field_name, value in rates:
        props[field_name] = format_rate(unit, value, rate_unit)
    for field_name, value in durations:
        props[field_name] = format_duration(unit, value, duration_unit)

    histogram = snapshot.histogram
    sample_count = _sample_count("timer", name, histogram.count)
    records.append(
        StructuredRecord(
            name=name,
            sample_count=sample_count,
            total=snapshot.total_time,
            minimum=histogram.min,
            maximum=histogram.max,
            std_dev=histogram.std_dev,
            properties=props,
        )
    )
    return records


def encode_health(
    status: HealthStatus, frame: ContextFrame, timestamp: float
) -> AvailabilityRecord:
    """Encode all health checks as one availability record.

    The record is named "[<report context>] <group>" from the current frame
    and carries one "[Ok|FAILED] <message>" property per check.

    Raises:
        EncodingError: If two checks share a name.
    """
    name = f"[{frame.report_context or ''}] {frame.group or ''}"
    props: dict[str, str] = {}
    for result in status.results:
        if result.name in props:
            raise EncodingError(f"duplicate health check name: {result.name!r}")
        outcome = "Ok" if result.is_healthy else "FAILED"
        props[result.name] = f"[{outcome}] {result.message}"
    return AvailabilityRecord(
        name=name,
        timestamp=timestamp,
        duration=0.0,
        success=status.is_healthy,
        properties=props,
    )


def encode_metric(entry: MetricEntry) -> list[TelemetryRecord]:
    """Encode a metric entry with the encoder matching its snapshot kind.

    Raises:
        TypeError: If the snapshot type is not a known instrument kind.
    """
    snapshot = entry.snapshot
    if isinstance(snapshot, GaugeSnapshot):
        return encode_gauge(entry.name, snapshot, entry.unit, entry.tags)
    if isinstance(snapshot, CounterSnapshot):
        return encode_counter(entry.name, snapshot, entry.unit, entry.tags)
    if isinstance(snapshot, MeterSnapshot):
        return encode_meter(entry.name, snapshot, entry.unit, entry.rate_unit, entry.tags)
    if isinstance(snapshot, HistogramSnapshot):
        return encode_histogram(entry.name, snapshot, entry.unit, entry.tags)
    if isinstance(snapshot, TimerSnapshot):
        return encode_timer(
            entry.name,
            snapshot,
            entry.unit,
            entry.rate_unit,
            entry.duration_unit,
            entry.tags,
        )
    raise TypeError(f"unsupported snapshot type: {type(snapshot).__name__}")
