"""Exception types raised by insightspy."""


class InsightsError(Exception):
    """Base class for all insightspy errors."""


class ConfigurationError(InsightsError):
    """The reporter or telemetry client cannot be configured.

    Raised once at startup; a reporter with invalid configuration never runs.
    """


class EncodingError(InsightsError):
    """A single metric snapshot could not be encoded into telemetry records."""


class ReportInProgressError(InsightsError):
    """A reporting pass was started while another pass is still running."""
