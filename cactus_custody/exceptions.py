import asyncio
from typing import Optional, Any


class CustodyError(Exception):
    """Base exception for all custody API client errors."""
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message if status_code is None else f"{message} (Status: {status_code})")

class InvalidRequestError(CustodyError):
    """Raised when the request URI or query cannot be canonicalized."""
    pass

class SigningError(CustodyError):
    """Raised when the signing key is missing or the signing primitive fails."""
    pass

class KeyLoadError(CustodyError):
    """Raised when the private key container cannot be read or decoded."""
    pass

class TransientTransportError(CustodyError):
    """Raised on connection failures, timeouts and 5xx responses. Retryable."""
    pass

class RetryExhaustedError(CustodyError):
    """Raised when the retry budget (attempts or elapsed time) is spent."""
    def __init__(self, message: str, last_exception: Optional[Exception] = None, attempts: int = 0):
        self.last_exception = last_exception
        self.attempts = attempts
        status_code = getattr(last_exception, "status_code", None)
        super().__init__(message, status_code=status_code)

class RequestCancelledError(CustodyError, asyncio.CancelledError):
    """Raised when the calling task is cancelled mid-request or mid-backoff."""
    pass

class ApiError(CustodyError):
    """Raised when an endpoint answers with a non-2xx status."""
    pass

class ResponseDecodeError(CustodyError):
    """Raised when a response body cannot be decoded into its model."""
    pass
