"""Error taxonomy shared by the sync passes."""


class FeedSyncError(Exception):
    """Base class for errors that abort a single feed's pass."""


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


class FeedFetchError(FeedSyncError):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class StoreError(FeedSyncError):
    """Raised when the record store rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SearchError(StoreError):
    """Raised when the candidate search fails."""


class WriteError(StoreError):
    """Raised when a create, update or archive call fails."""


__all__ = [
    "ConfigError",
    "FeedFetchError",
    "FeedSyncError",
    "SearchError",
    "StoreError",
    "WriteError",
]
