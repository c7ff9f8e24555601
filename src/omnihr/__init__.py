from .errors import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    LayoutError,
    LeaveSyncError,
    PaginationError,
    StaleCacheError,
)
