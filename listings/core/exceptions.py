"""Custom exception hierarchy for the listings client."""


class ListingsError(Exception):
    """Base exception for all listings client errors."""


class ApiError(ListingsError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class AuthenticationError(ApiError):
    """Raised when the backend rejects the bearer token (401)."""


class PropertyNotFoundError(ApiError):
    """Raised when a property identifier does not resolve (404)."""


class ResponseShapeError(ListingsError):
    """Raised when a response body is not valid JSON or has an unexpected structure."""


class FetchCancelledError(ListingsError):
    """Raised inside a retry loop when its cancellation token fires."""
