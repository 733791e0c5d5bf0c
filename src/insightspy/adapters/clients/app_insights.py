"""Azure Application Insights telemetry client adapter.

Translates logical telemetry records into Application Insights envelopes
and submits them to the ingestion endpoint with httpx. Envelopes are
buffered for the duration of an operation and posted as one NDJSON batch
when the operation ends, together with the request envelope that
represents the operation itself.
"""

import math
import time
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

import httpx

from insightspy.core.encoding.ndjson import encode_ndjson
from insightspy.core.errors import ConfigurationError
from insightspy.core.logs import get_logger
from insightspy.core.models import OperationHandle
from insightspy.core.report import DEFAULT_REPORT_SOURCE

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://dc.services.visualstudio.com/v2/track"
CONTENT_TYPE = "application/x-json-stream"
DEFAULT_SYNTHETIC_SOURCE = f"{DEFAULT_REPORT_SOURCE} Report"

# Data point kinds of MetricData
_MEASUREMENT = 0
_AGGREGATION = 1


def validate_instrumentation_key(instrumentation_key: str | None) -> str:
    """Validate an Application Insights instrumentation key.

    Args:
        instrumentation_key: Key from the Application Insights resource.

    Returns:
        The key in canonical lowercase GUID form.

    Raises:
        ConfigurationError: If the key is missing or not a GUID.
    """
    if not instrumentation_key or not instrumentation_key.strip():
        raise ConfigurationError("instrumentation key must not be empty")
    try:
        return str(uuid.UUID(instrumentation_key.strip()))
    except ValueError:
        raise ConfigurationError(
            f"instrumentation key is not a GUID: {instrumentation_key!r}"
        ) from None


def _format_time(timestamp: float) -> str:
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _format_duration(seconds: float) -> str:
    """Format seconds as the backend's "d.hh:mm:ss.fff" timespan."""
    millis = max(0, round(seconds * 1000))
    days, millis = divmod(millis, 86_400_000)
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return f"{days}.{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def _finite(value: float) -> float:
    # NaN and infinities are not representable in JSON
    return float(value) if math.isfinite(value) else 0.0


def _count(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


class AppInsightsTelemetryClient:
    """Application Insights implementation of TelemetryClientPort.

    Example:
        ```python
        client = AppInsightsTelemetryClient(
            "00000000-0000-0000-0000-000000000000",
            session_id=str(uuid.uuid4()),
        )
        report = InsightsReport(client)
        ```
    """

    def __init__(
        self,
        instrumentation_key: str,
        session_id: str | None = None,
        synthetic_source: str | None = DEFAULT_SYNTHETIC_SOURCE,
        endpoint: str = DEFAULT_ENDPOINT,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the client.

        Args:
            instrumentation_key: Application Insights instrumentation key (GUID).
            session_id: Fixed session id attached to every envelope, or None.
            synthetic_source: Synthetic-source tag for every envelope, or None
                              to omit it. Should match the report source
                              of the InsightsReport using this client
                              (build_report wires both).
            endpoint: Ingestion endpoint URL.
            http_client: httpx client to use (default: a new client owned by
                         this adapter).
            timeout: Request timeout in seconds for the owned client.
            clock: Time source for envelope timestamps.

        Raises:
            ConfigurationError: If the instrumentation key is invalid.
        """
        self.instrumentation_key = validate_instrumentation_key(instrumentation_key)
        self.session_id = session_id or None
        self.synthetic_source = synthetic_source or None
        self.endpoint = endpoint
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._clock = clock
        self._pending: list[dict[str, Any]] = []
        self._operation: OperationHandle | None = None

    @property
    def pending(self) -> list[dict[str, Any]]:
        """Envelopes waiting for the next flush."""
        return list(self._pending)

    # --- Envelope construction ---

    def _tags(self) -> dict[str, str]:
        tags: dict[str, str] = {}
        if self._operation is not None:
            tags["ai.operation.id"] = self._operation.operation_id
            tags["ai.operation.name"] = self._operation.name
        if self.synthetic_source is not None:
            tags["ai.operation.syntheticSource"] = self.synthetic_source
        if self.session_id is not None:
            tags["ai.session.id"] = self.session_id
        return tags

    def _envelope(
        self, telemetry_type: str, base_type: str, base_data: dict[str, Any], timestamp: float
    ) -> dict[str, Any]:
        key = self.instrumentation_key.replace("-", "")
        return {
            "name": f"Microsoft.ApplicationInsights.{key}.{telemetry_type}",
            "time": _format_time(timestamp),
            "iKey": self.instrumentation_key,
            "tags": self._tags(),
            "data": {"baseType": base_type, "baseData": base_data},
        }

    @staticmethod
    def _properties(
        properties: Mapping[str, str], context: Mapping[str, str] | None
    ) -> dict[str, str]:
        return {**(context or {}), **properties}

    def _metric(
        self, point: dict[str, Any], properties: Mapping[str, str], context: Mapping[str, str] | None
    ) -> None:
        base_data = {
            "ver": 2,
            "metrics": [point],
            "properties": self._properties(properties, context),
        }
        self._pending.append(self._envelope("Metric", "MetricData", base_data, self._clock()))

    # --- TelemetryClientPort ---

    def emit_scalar_record(
        self,
        name: str,
        value: float,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Queue a measurement metric envelope."""
        point = {"name": name, "kind": _MEASUREMENT, "value": _finite(value), "count": 1}
        self._metric(point, properties, context)

    def emit_structured_record(
        self,
        name: str,
        sample_count: int,
        total: float,
        minimum: float,
        maximum: float,
        std_dev: float,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Queue an aggregation metric envelope."""
        point = {
            "name": name,
            "kind": _AGGREGATION,
            "value": _finite(total),
            "count": _count(sample_count),
            "min": _finite(minimum),
            "max": _finite(maximum),
            "stdDev": _finite(std_dev),
        }
        self._metric(point, properties, context)

    def emit_availability_record(
        self,
        name: str,
        timestamp: float,
        duration: float,
        success: bool,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Queue an availability envelope."""
        base_data = {
            "ver": 2,
            "id": uuid.uuid4().hex,
            "name": name,
            "duration": _format_duration(duration),
            "success": success,
            "runLocation": "",
            "properties": self._properties(properties, context),
        }
        self._pending.append(
            self._envelope("Availability", "AvailabilityData", base_data, timestamp)
        )

    def begin_operation(self, name: str) -> OperationHandle:
        """Start a request operation that correlates subsequent envelopes."""
        handle = OperationHandle(
            operation_id=uuid.uuid4().hex, name=name, started_at=self._clock()
        )
        self._operation = handle
        return handle

    def end_operation(self, handle: OperationHandle) -> None:
        """Queue the request envelope for ``handle`` and flush the batch."""
        base_data = {
            "ver": 2,
            "id": handle.operation_id,
            "name": handle.name,
            "duration": _format_duration(self._clock() - handle.started_at),
            "responseCode": "200",
            "success": True,
            "properties": {},
        }
        self._operation = handle
        self._pending.append(
            self._envelope("Request", "RequestData", base_data, handle.started_at)
        )
        self._operation = None
        self.flush()

    # --- Transport ---

    def flush(self) -> bool:
        """Post all pending envelopes in one batch.

        Transport errors are logged and the batch is dropped.

        Returns:
            True if the batch was accepted (or there was nothing to send).
        """
        if not self._pending:
            return True
        batch, self._pending = self._pending, []
        body = encode_ndjson(batch)
        try:
            response = self._http.post(
                self.endpoint, content=body, headers={"Content-Type": CONTENT_TYPE}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                "Dropped telemetry batch: %s",
                e,
                extra={"envelopes": len(batch), "endpoint": self.endpoint},
            )
            return False
        logger.debug("Sent telemetry batch", extra={"envelopes": len(batch)})
        return True

    def close(self) -> None:
        """Flush pending envelopes and close the owned http client."""
        self.flush()
        if self._owns_http_client:
            self._http.close()
