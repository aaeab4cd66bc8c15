"""
Custom Exceptions.

Client-side exception classes for consistent error handling. Every error the
CLI layer reports to the operator derives from SynseError.
"""


class SynseError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ConfigError(SynseError):
    """Raised when a configuration file or override cannot be used."""

    def __init__(self, message: str = "Invalid configuration", path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message, code="CFG_INVALID")


class TransportError(SynseError):
    """Raised when the remote host is unreachable or returns an unusable body."""

    def __init__(self, message: str = "Transport error", url: str | None = None) -> None:
        self.url = url
        super().__init__(message, code="NET_TRANSPORT")


class RequestError(SynseError):
    """Raised when the remote host answers with a non-2xx status."""

    def __init__(self, message: str = "Request failed", status_code: int | None = None) -> None:
        self.status_code = status_code
        self.result = None
        super().__init__(message, code="NET_REQUEST")


class FormatError(SynseError):
    """Raised when an unsupported output format is requested."""

    def __init__(self, requested: str) -> None:
        self.format = requested
        super().__init__(
            f"Unsupported output format: {requested!r} (choose table, json or yaml)",
            code="FMT_UNSUPPORTED",
        )


class ValidationError(SynseError):
    """Raised when command arguments fail validation."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_INVALID")
