"""insightspy: export metric snapshots as Application Insights telemetry."""

import logging

from insightspy.adapters.clients.app_insights import AppInsightsTelemetryClient
from insightspy.adapters.clients.in_memory import InMemoryTelemetryClient
from insightspy.adapters.clients.ring_buffer import RingBufferTelemetryClient
from insightspy.config import ReporterConfig, build_report, with_application_insights
from insightspy.core.encoders import encode_metric
from insightspy.core.errors import (
    ConfigurationError,
    EncodingError,
    InsightsError,
    ReportInProgressError,
)
from insightspy.core.logs import get_logger
from insightspy.core.models import (
    CounterItem,
    CounterSnapshot,
    GaugeSnapshot,
    HealthCheckResult,
    HealthStatus,
    HistogramSnapshot,
    MeterSnapshot,
    MetricEntry,
    ReportSnapshot,
    TimerSnapshot,
    TimeUnit,
    Unit,
    context_name,
)
from insightspy.core.ports import SnapshotSourcePort, TelemetryClientPort
from insightspy.core.report import EncodingFailure, InsightsReport, ReportResult
from insightspy.core.tags import DO_NOT_REPORT, is_suppressed
from insightspy.scheduler import ReportScheduler

logging.getLogger("insightspy").addHandler(logging.NullHandler())

__all__ = [
    "DO_NOT_REPORT",
    "AppInsightsTelemetryClient",
    "ConfigurationError",
    "CounterItem",
    "CounterSnapshot",
    "EncodingError",
    "EncodingFailure",
    "GaugeSnapshot",
    "HealthCheckResult",
    "HealthStatus",
    "HistogramSnapshot",
    "InMemoryTelemetryClient",
    "InsightsError",
    "InsightsReport",
    "MeterSnapshot",
    "MetricEntry",
    "ReportInProgressError",
    "ReportResult",
    "ReportScheduler",
    "ReportSnapshot",
    "ReporterConfig",
    "RingBufferTelemetryClient",
    "SnapshotSourcePort",
    "TelemetryClientPort",
    "TimeUnit",
    "TimerSnapshot",
    "Unit",
    "build_report",
    "context_name",
    "encode_metric",
    "get_logger",
    "is_suppressed",
    "with_application_insights",
]
