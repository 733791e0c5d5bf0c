"""Ring buffer telemetry client adapter.

Provides bounded in-memory capture that automatically evicts the oldest
records when the buffer is full. Useful for long-running dry runs that
need predictable memory usage.
"""

import time
from collections import deque
from collections.abc import Callable

from insightspy.adapters.clients.in_memory import InMemoryTelemetryClient
from insightspy.core.models import OperationHandle, TelemetryRecord


class RingBufferTelemetryClient(InMemoryTelemetryClient):
    """Ring buffer implementation of TelemetryClientPort.

    Stores records in a fixed-size circular buffer. When the buffer is
    full, the oldest record is evicted to make room for new records.
    Only the most recent ``max_size`` operations are remembered.

    Args:
        max_size: Maximum number of records to keep.
    """

    def __init__(self, max_size: int, clock: Callable[[], float] = time.time) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be > 0, got {max_size}")
        super().__init__(clock=clock)
        self._records: deque[TelemetryRecord] = deque(maxlen=max_size)  # type: ignore[assignment]
        self.begun: deque[OperationHandle] = deque(maxlen=max_size)  # type: ignore[assignment]
        self.ended: deque[OperationHandle] = deque(maxlen=max_size)  # type: ignore[assignment]
