"""Telemetry client adapters implementing TelemetryClientPort."""

from insightspy.adapters.clients.app_insights import AppInsightsTelemetryClient
from insightspy.adapters.clients.in_memory import InMemoryTelemetryClient
from insightspy.adapters.clients.ring_buffer import RingBufferTelemetryClient

__all__ = [
    "AppInsightsTelemetryClient",
    "InMemoryTelemetryClient",
    "RingBufferTelemetryClient",
]
