"""Reporter configuration and wiring helpers.

Example:
    ```python
    from insightspy import with_application_insights

    scheduler = with_application_insights(
        source,
        instrumentation_key=os.environ["AI_INSTRUMENTATION_KEY"],
        interval_seconds=30,
        session_id=str(uuid.uuid4()),
    )
    await scheduler.run()
    ```
"""

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from insightspy.adapters.clients.app_insights import (
    DEFAULT_ENDPOINT,
    AppInsightsTelemetryClient,
    validate_instrumentation_key,
)
from insightspy.core.errors import ConfigurationError
from insightspy.core.ports import SnapshotSourcePort
from insightspy.core.report import DEFAULT_REPORT_SOURCE, InsightsReport
from insightspy.scheduler import ReportScheduler

ENV_PREFIX = "INSIGHTSPY_"


@dataclass(frozen=True)
class ReporterConfig:
    """Settings for an Application Insights reporter.

    Attributes:
        instrumentation_key: Application Insights instrumentation key (GUID).
        session_id: Fixed session id for every pass of this process, or None.
            A random id per process run makes restarts visible.
        report_source: Override for the report source label, or None.
        interval_seconds: Time between reporting passes.
        endpoint: Ingestion endpoint URL.
        timeout_seconds: HTTP request timeout.

    Raises:
        ConfigurationError: If the key is invalid or a duration is not positive.
    """

    instrumentation_key: str
    session_id: str | None = None
    report_source: str | None = None
    interval_seconds: float = 30.0
    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 10.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "instrumentation_key",
            validate_instrumentation_key(self.instrumentation_key),
        )
        self._validate_positive("interval_seconds", self.interval_seconds)
        self._validate_positive("timeout_seconds", self.timeout_seconds)

    @staticmethod
    def _validate_positive(name: str, value: float) -> None:
        if not math.isfinite(value) or value <= 0:
            raise ConfigurationError(f"{name} must be > 0, got {value}")

    @property
    def source_label(self) -> str:
        return self.report_source or DEFAULT_REPORT_SOURCE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReporterConfig":
        """Build a config from INSIGHTSPY_* environment variables.

        Raises:
            ConfigurationError: If a variable is missing or malformed.
        """
        env = os.environ if environ is None else environ

        def _get(name: str) -> str | None:
            value = env.get(f"{ENV_PREFIX}{name}", "").strip()
            return value or None

        interval = _get("INTERVAL_SECONDS")
        try:
            interval_seconds = float(interval) if interval is not None else 30.0
        except ValueError:
            raise ConfigurationError(
                f"{ENV_PREFIX}INTERVAL_SECONDS is not a number: {interval!r}"
            ) from None

        return cls(
            instrumentation_key=_get("INSTRUMENTATION_KEY") or "",
            session_id=_get("SESSION_ID"),
            report_source=_get("REPORT_SOURCE"),
            interval_seconds=interval_seconds,
            endpoint=_get("ENDPOINT") or DEFAULT_ENDPOINT,
        )


def build_report(
    config: ReporterConfig, http_client: httpx.Client | None = None
) -> InsightsReport:
    """Create a report wired to an Application Insights client."""
    client = AppInsightsTelemetryClient(
        config.instrumentation_key,
        session_id=config.session_id,
        synthetic_source=f"{config.source_label} Report",
        endpoint=config.endpoint,
        http_client=http_client,
        timeout=config.timeout_seconds,
    )
    return InsightsReport(client, report_source=config.source_label)


def with_application_insights(
    source: SnapshotSourcePort,
    instrumentation_key: str,
    interval_seconds: float,
    session_id: str | None = None,
    report_source: str | None = None,
    http_client: httpx.Client | None = None,
) -> ReportScheduler:
    """Schedule a report sent to Application Insights at a fixed interval.

    Args:
        source: Snapshot source polled before every pass.
        instrumentation_key: Instrumentation key from Application Insights.
        interval_seconds: Interval at which to run the report.
        session_id: Static session id for all passes of this run, or None.
        report_source: Value to override the report source label, or None.
        http_client: httpx client to use, or None for an owned client.

    Raises:
        ConfigurationError: If the configuration is invalid.
    """
    config = ReporterConfig(
        instrumentation_key=instrumentation_key,
        session_id=session_id,
        report_source=report_source,
        interval_seconds=interval_seconds,
    )
    return ReportScheduler(
        build_report(config, http_client=http_client),
        source,
        config.interval_seconds,
    )
