class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SyncValidationError(AppError):
    """Raised when a synchronization request is missing or has blank identifiers."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class InvalidCreditsError(AppError):
    """Raised when a course credit count cannot produce a weekly schedule."""
    def __init__(self, credits):
        super().__init__(
            f"Credit count must be a positive integer, got {credits!r}",
            status_code=400,
            details={"credits": credits},
        )

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ConflictError(AppError):
    """Raised when a write would violate a uniqueness or capacity rule."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)

class StorageUnavailableError(AppError):
    """Raised when the database cannot be reached; the whole operation is aborted."""
    def __init__(self, operation: str):
        super().__init__(f"Storage unavailable during {operation}", status_code=503)
