"""
Exception hierarchy shared by the OmniHR client and the spreadsheet writers.
"""

from typing import Any, Optional


class LeaveSyncError(Exception):
    """Base class for all errors raised by this project."""


class ConfigurationError(LeaveSyncError):
    """Missing or invalid configuration (e.g. credentials). Fatal at startup."""


class AuthenticationError(LeaveSyncError):
    """Token exchange failed or the API rejected the bearer token."""


class ApiError(LeaveSyncError):
    """Non-successful HTTP response or an unexpected response shape."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class PaginationError(ApiError):
    """The API kept returning a `next` link beyond the configured page ceiling."""


class LayoutError(LeaveSyncError):
    """The spreadsheet does not have the expected sheets, rows or columns."""


class StaleCacheError(LeaveSyncError):
    """The leave cache holds data of another month than the one requested."""
