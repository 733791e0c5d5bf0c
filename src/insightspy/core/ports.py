"""Port interfaces between the reporting core and its collaborators.

These protocols define the contracts that telemetry clients and snapshot
sources must implement. The core depends only on these interfaces, not
on concrete backends.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from insightspy.core.models import OperationHandle, ReportSnapshot


@runtime_checkable
class TelemetryClientPort(Protocol):
    """Port for emitting telemetry records to a backend.

    All emit calls are fire-and-forget from the core's perspective.
    Transport errors are the adapter's concern.
    Examples: InMemoryTelemetryClient, AppInsightsTelemetryClient.
    """

    def emit_scalar_record(
        self,
        name: str,
        value: float,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Emit a single-value metric record."""
        ...

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
        """Emit an aggregated metric record (count, sum, min, max, stddev)."""
        ...

    def emit_availability_record(
        self,
        name: str,
        timestamp: float,
        duration: float,
        success: bool,
        properties: Mapping[str, str],
        context: Mapping[str, str] | None = None,
    ) -> None:
        """Emit a pass/fail availability record."""
        ...

    def begin_operation(self, name: str) -> OperationHandle:
        """Open a correlated operation and return its handle.

        Args:
            name: Operation name shown by the backend.

        Returns:
            Handle carrying the backend-generated operation id.
        """
        ...

    def end_operation(self, handle: OperationHandle) -> None:
        """Close an operation opened by begin_operation."""
        ...


@runtime_checkable
class SnapshotSourcePort(Protocol):
    """Port for the upstream instrument registry.

    Supplies, per pass, the ordered metric entries plus optional health.
    """

    def snapshot(self) -> ReportSnapshot:
        """Capture a fresh snapshot of every instrument."""
        ...
