"""Custom exception hierarchy for the analytics engine."""


class AnalyticsError(Exception):
    """Base exception for all analytics errors."""


# --- Configuration ---
class ConfigError(AnalyticsError):
    """Invalid or missing configuration."""


# --- Data ---
class DataError(AnalyticsError):
    """Input data shape or quality error."""


class MalformedRecordError(DataError):
    """A raw trade record failed basic shape validation."""

    def __init__(self, reason: str, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = f"Malformed record [{reason}]"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
