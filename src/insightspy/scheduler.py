"""Fixed-interval driver for reporting passes."""

import asyncio

from insightspy.core.logs import get_logger, log_exception
from insightspy.core.ports import SnapshotSourcePort
from insightspy.core.report import InsightsReport, ReportResult

logger = get_logger(__name__)


class ReportScheduler:
    """Runs a report against a snapshot source every ``interval_seconds``.

    Passes run one after another in a worker thread, so a slow telemetry
    backend never blocks the event loop and passes never overlap.
    """

    def __init__(
        self,
        report: InsightsReport,
        source: SnapshotSourcePort,
        interval_seconds: float,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")
        self.report = report
        self.source = source
        self.interval_seconds = interval_seconds
        self.passes = 0
        self._stopped = asyncio.Event()

    def run_once(self) -> ReportResult:
        """Snapshot the source and run a single pass synchronously."""
        result = self.report.run(self.source.snapshot())
        self.passes += 1
        return result

    async def run(self, iterations: int | None = None) -> None:
        """Run passes until stopped, or for ``iterations`` passes.

        A pass that fails as a whole is logged and the next one still runs.
        """
        completed = 0
        while iterations is None or completed < iterations:
            try:
                await asyncio.to_thread(self.run_once)
            except Exception:
                log_exception("Reporting pass failed", logger=logger)
            completed += 1
            if iterations is not None and completed >= iterations:
                break
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue
            break

    def stop(self) -> None:
        """Stop the run loop after the current pass."""
        self._stopped.set()
