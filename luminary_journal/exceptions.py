"""
Custom exceptions for journal storage.

Remote and device stores raise these so the persistence gateway can
tell a recoverable remote failure from a local one.
"""


class JournalStorageError(Exception):
    """Base exception for all journal storage errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StorageConnectionError(JournalStorageError):
    """Raised when the remote store cannot be reached or times out.

    Note: Named StorageConnectionError to avoid shadowing the builtin ConnectionError.
    """

    def __init__(self, endpoint: str, cause: Exception | None = None):
        details = {"endpoint": endpoint}
        if cause:
            details["cause"] = str(cause) or type(cause).__name__
        super().__init__(f"Connection failed to {endpoint}", details)
        self.endpoint = endpoint
        self.cause = cause


class RemoteStoreError(JournalStorageError):
    """Raised when the remote store answers with a failure or a bad payload."""

    def __init__(self, operation: str, status: int | None = None, reason: str | None = None):
        details: dict = {"operation": operation}
        if status is not None:
            details["status"] = status
        if reason:
            details["reason"] = reason
        message = f"Remote store rejected {operation}"
        if status is not None:
            message += f" (HTTP {status})"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.operation = operation
        self.status = status
        self.reason = reason


class StorageIOError(JournalStorageError):
    """Raised when a device storage I/O operation fails."""

    def __init__(self, operation: str, path: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if path:
            details["path"] = path
        if cause:
            details["cause"] = str(cause)
        message = f"Storage I/O error during {operation}"
        if path:
            message += f": {path}"
        super().__init__(message, details)
        self.operation = operation
        self.path = path
        self.cause = cause


class ValidationError(JournalStorageError):
    """Raised when entry data, snapshots or settings fail validation."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Validation failed for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value
