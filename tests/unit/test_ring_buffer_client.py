"""Tests for the ring buffer telemetry client adapter."""

import pytest

from insightspy.adapters.clients.ring_buffer import RingBufferTelemetryClient
from insightspy.core.models import CounterSnapshot, MetricEntry, ReportSnapshot
from insightspy.core.ports import TelemetryClientPort
from insightspy.core.report import InsightsReport


class TestRingBufferTelemetryClient:
    """Tests for RingBufferTelemetryClient adapter."""

    @pytest.mark.adapter
    def test_implements_telemetry_client_port(self) -> None:
        """RingBufferTelemetryClient must satisfy TelemetryClientPort protocol."""
        assert isinstance(RingBufferTelemetryClient(max_size=2), TelemetryClientPort)

    @pytest.mark.adapter
    @pytest.mark.parametrize("max_size", [0, -1])
    def test_rejects_non_positive_size(self, max_size: int) -> None:
        with pytest.raises(ValueError, match="max_size must be > 0"):
            RingBufferTelemetryClient(max_size=max_size)

    @pytest.mark.adapter
    def test_under_capacity_keeps_all(self) -> None:
        client = RingBufferTelemetryClient(max_size=10)
        client.emit_scalar_record("a", 1.0, {})
        client.emit_scalar_record("b", 2.0, {})
        assert [r.name for r in client.records] == ["a", "b"]

    @pytest.mark.adapter
    def test_evicts_oldest_records(self) -> None:
        """When full, the oldest record makes room for the newest."""
        client = RingBufferTelemetryClient(max_size=3)

        for i in range(5):
            client.emit_scalar_record(f"m{i}", float(i), {})

        assert [r.name for r in client.records] == ["m2", "m3", "m4"]

    @pytest.mark.adapter
    def test_eviction_spans_record_types(self) -> None:
        client = RingBufferTelemetryClient(max_size=2)

        client.emit_scalar_record("scalar", 1.0, {})
        client.emit_structured_record("structured", 3, 9.0, 1.0, 5.0, 0.5, {})
        client.emit_availability_record("availability", 0.0, 0.0, True, {})

        assert [r.name for r in client.records] == ["structured", "availability"]

    @pytest.mark.adapter
    def test_keeps_recent_operations(self) -> None:
        client = RingBufferTelemetryClient(max_size=2)

        handles = [client.begin_operation(f"op{i}") for i in range(3)]
        for handle in handles:
            client.end_operation(handle)

        assert list(client.begun) == handles[1:]
        assert list(client.ended) == handles[1:]
        assert client.open_operations == []

    @pytest.mark.adapter
    def test_open_operations_over_deques(self) -> None:
        client = RingBufferTelemetryClient(max_size=4)

        first = client.begin_operation("first")
        second = client.begin_operation("second")
        client.end_operation(first)

        assert client.open_operations == [second]

    @pytest.mark.adapter
    def test_clear_empties_buffers(self) -> None:
        client = RingBufferTelemetryClient(max_size=2)
        client.end_operation(client.begin_operation("op"))
        client.emit_scalar_record("a", 1.0, {})

        client.clear()

        assert client.records == []
        assert list(client.begun) == []
        assert list(client.ended) == []

    @pytest.mark.adapter
    def test_buffer_still_bounded_after_clear(self) -> None:
        client = RingBufferTelemetryClient(max_size=1)
        client.emit_scalar_record("a", 1.0, {})
        client.clear()

        client.emit_scalar_record("b", 2.0, {})
        client.emit_scalar_record("c", 3.0, {})

        assert [r.name for r in client.records] == ["c"]

    @pytest.mark.adapter
    def test_repeated_passes_keep_latest_records(self) -> None:
        client = RingBufferTelemetryClient(max_size=2)
        report = InsightsReport(client)

        for count in range(1, 4):
            report.run(
                ReportSnapshot(
                    context="Process",
                    timestamp=0.0,
                    metrics=(MetricEntry("MyCounter", CounterSnapshot(count)),),
                )
            )

        assert [r.value for r in client.records] == [2, 3]
        assert len(client.ended) == 2
        assert client.open_operations == []
