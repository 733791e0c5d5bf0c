"""In-memory telemetry client adapter."""

import time
import uuid
from collections.abc import Callable, Mapping

from insightspy.core.models import (
    AvailabilityRecord,
    OperationHandle,
    ScalarRecord,
    StructuredRecord,
    TelemetryRecord,
)


class InMemoryTelemetryClient:
    """In-memory implementation of TelemetryClientPort.

    Stores emitted records in a list and keeps track of begun and ended
    operations. Suitable for testing and dry runs where nothing should
    leave the process.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._records: list[TelemetryRecord] = []
        self.begun: list[OperationHandle] = []
        self.ended: list[OperationHandle] = []

    def _store(self, record: TelemetryRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> list[TelemetryRecord]:
        """All records emitted so far, in emission order."""
        return list(self._records)

    @property
    def open_operations(self) -> list[OperationHandle]:
        """Operations that were begun but not yet ended."""
        return [h for h in self.begun if h not in self.ended]

    def emit_scalar_record(
        self,
        name: str,
        value: float,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Record a single-value metric."""
        self._store(
            ScalarRecord(
                name=name,
                value=value,
                properties=dict(properties),
                context=dict(context or {}),
            )
        )

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
        """Record an aggregated metric."""
        self._store(
            StructuredRecord(
                name=name,
                sample_count=sample_count,
                total=total,
                minimum=minimum,
                maximum=maximum,
                std_dev=std_dev,
                properties=dict(properties),
                context=dict(context or {}),
            )
        )

    def emit_availability_record(
        self,
        name: str,
        timestamp: float,
        duration: float,
        success: bool,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Record an availability result."""
        self._store(
            AvailabilityRecord(
                name=name,
                timestamp=timestamp,
                duration=duration,
                success=success,
                properties=dict(properties),
                context=dict(context or {}),
            )
        )

    def begin_operation(self, name: str) -> OperationHandle:
        """Open an operation with a random id."""
        handle = OperationHandle(
            operation_id=uuid.uuid4().hex, name=name, started_at=self._clock()
        )
        self.begun.append(handle)
        return handle

    def end_operation(self, handle: OperationHandle) -> None:
        """Mark an operation as ended."""
        self.ended.append(handle)

    def clear(self) -> None:
        """Forget all records and operations."""
        self._records.clear()
        self.begun.clear()
        self.ended.clear()
