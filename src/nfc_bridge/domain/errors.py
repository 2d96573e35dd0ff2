"""Error types raised across the bridge."""


class BridgeError(Exception):
    """Base class for bridge errors."""


class ConfigurationError(BridgeError):
    """The persisted configuration is missing or invalid."""


class ValidationError(BridgeError):
    """A submitted value is missing or malformed."""


class MediaServerError(BridgeError):
    """A call to the media server failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UserNotFoundError(BridgeError):
    """The configured media server user does not exist."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Jellyfin user '{username}' not found.")
        self.username = username


class CatalogStoreError(BridgeError):
    """The catalog store failed for a reason other than a duplicate binding."""
