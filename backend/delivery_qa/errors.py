"""Service-level exceptions rendered as plain-text HTTP responses.

Every error the API reports to callers derives from ServiceError. The
application registers a single exception handler that turns these into
``text/plain`` responses carrying ``message`` and ``status_code``.
"""


class ServiceError(Exception):
    """Base exception for errors surfaced to API callers."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class MissingFieldError(ServiceError):
    """Raised when a required request field is absent or blank."""
    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f'Field "{field}" is required.', status_code=400)


class InvalidRequestError(ServiceError):
    """Raised when a request body cannot be interpreted."""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class PayloadTooLargeError(ServiceError):
    """Raised when an upload or request body exceeds its size limit."""
    def __init__(self, limit_bytes: int, what: str = "Payload"):
        self.limit_bytes = limit_bytes
        limit_mb = limit_bytes // (1024 * 1024)
        super().__init__(f"{what} exceeds limit of {limit_mb}MB", status_code=413)
