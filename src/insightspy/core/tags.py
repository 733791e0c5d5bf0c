"""Tag conventions shared by the snapshot encoders."""

from collections.abc import Sequence

# Add this tag to a metric to keep it out of exported telemetry:
#     MetricEntry("MySuppressedCounter", snapshot, Unit.ITEMS, tags=(DO_NOT_REPORT,))
DO_NOT_REPORT = "do-not-report"


def is_suppressed(tags: Sequence[str] | None) -> bool:
    """Return True if the tag set contains the suppression sentinel."""
    if not tags:
        return False
    return DO_NOT_REPORT in tags


def join_tags(tags: Sequence[str] | None) -> str | None:
    """Join tags for the "Tags" property, or None when there are no tags."""
    if not tags:
        return None
    return ",".join(tags)
