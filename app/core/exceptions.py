from typing import Optional, Any

from utils.constants import USER_NOT_FOUND_MESSAGE

class UserDirectoryError(Exception):
    """
    Base exception for the user directory service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(UserDirectoryError):
    """
    Raised when user input is missing or malformed.
    Always raised before any storage access.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class NotFoundError(UserDirectoryError):
    """
    Raised when no user record matches the requested id.
    """
    def __init__(self, message: str = USER_NOT_FOUND_MESSAGE, details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class StorageError(UserDirectoryError):
    """
    Raised when the storage backend is unavailable, a write fails, or a call times out.
    `details` carries the internal cause; it is logged, never returned to clients.
    """
    def __init__(self, message: str = "Storage error", details: Optional[Any] = None):
        super().__init__(message, code="STORAGE_ERROR", status_code=500, details=details)
