"""Failure taxonomy shared by every fetcher implementation.

Each error carries a short ``kind`` so callers can tell failures apart
without matching on message text.
"""

__all__ = [
    "FetchError",
    "ConfigBootstrapError",
    "RemoteConnectionError",
    "AuthenticationError",
    "NotFoundError",
    "UnknownRemoteError",
    "HttpStatusError",
    "NetworkError",
    "ResultWriteError",
]


class FetchError(Exception):
    """Base exception for every failure reported by the fetch pipeline."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigBootstrapError(FetchError):
    """Raised when the configuration file can be neither read nor created."""

    kind = "config"


class RemoteConnectionError(FetchError):
    """Raised when the remote is unreachable or the session is unusable."""

    kind = "connection"


class AuthenticationError(FetchError):
    """Raised when the remote rejects the credentials (HTTP 401)."""

    kind = "auth"


class NotFoundError(FetchError):
    """Raised when the requested issue does not exist."""

    kind = "not_found"


class UnknownRemoteError(FetchError):
    """Raised for any other remote failure while fetching the summary."""

    kind = "remote"


class HttpStatusError(FetchError):
    """Raised when the export endpoint answers with a non-200 status."""

    kind = "http_status"

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message or f"Unexpected HTTP status {status_code}")
        self.status_code = status_code


class NetworkError(FetchError):
    """Raised on transport failures (DNS, refused connection, timeout)."""

    kind = "network"


class ResultWriteError(FetchError):
    """Raised when a fetched payload cannot be written to disk."""

    kind = "io"

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename
