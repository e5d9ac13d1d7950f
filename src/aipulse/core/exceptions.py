"""Exception hierarchy for AI Pulse.

Two families live here:

- HTTP-facing errors (``AIPulseError`` subclasses with a ``status_code``),
  rendered by the exception handler in ``aipulse.main``. Their JSON body
  always carries a plain-string ``error`` member because that is what the
  SPA reads.
- Fetch-boundary errors (``UpstreamError``, ``SchemaValidationError``,
  ``StorageError``). These are raised inside catalog fetchers and tool
  storage, caught at that boundary and logged; they never reach a client.

Usage:
    from aipulse.core.exceptions import CatalogUnavailableError

    raise CatalogUnavailableError(details={"catalog": "github"})
"""

from typing import Any

PLATFORM_MESSAGE = "New tools are being updated. Please check back shortly."


class AIPulseError(Exception):
    """Base exception for all AI Pulse errors.

    Attributes:
        code: Machine-readable error code (e.g., "CATALOG_UNAVAILABLE")
        message: Human-readable error message
        status_code: HTTP status code to return
        details: Additional error details (optional)
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message:
            self.message = message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self, request_id: str | None = None) -> dict[str, Any]:
        """Convert exception to the API error body.

        Args:
            request_id: Request correlation ID

        Returns:
            ``{"error": message, "code": code, ...}``
        """
        body: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }
        if request_id:
            body["request_id"] = request_id
        if self.details:
            body["details"] = self.details
        return body


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(AIPulseError):
    """Raised when request input is missing or malformed."""

    code: str = "VALIDATION_ERROR"
    message: str = "Validation error"
    status_code: int = 400

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if details is None:
            details = {}
        if field:
            details["field"] = field
        super().__init__(message=message, details=details if details else None)


# =============================================================================
# Service Errors (500, 502)
# =============================================================================


class ExternalServiceError(AIPulseError):
    """Base class for errors talking to a third-party service."""

    code: str = "EXTERNAL_SERVICE_ERROR"
    message: str = "External service error"
    status_code: int = 502


class DescriptionServiceError(ExternalServiceError):
    """Raised when the generative-text provider cannot clean a description."""

    code: str = "DESCRIPTION_SERVICE_ERROR"
    message: str = "Failed to clean description"
    status_code: int = 500


class CatalogUnavailableError(AIPulseError):
    """Raised when a catalog request fails outside the cache-aside paths.

    Fetch and validation failures never produce this; they fall back to
    cached or fixed data. This covers the unexpected (e.g. the cache
    database itself failing).
    """

    code: str = "CATALOG_UNAVAILABLE"
    message: str = PLATFORM_MESSAGE
    status_code: int = 500


# =============================================================================
# Fetch-Boundary Errors (never rendered)
# =============================================================================


class UpstreamError(AIPulseError):
    """Network failure or non-2xx response from a catalog provider."""

    code: str = "UPSTREAM_ERROR"
    message: str = "Upstream request failed"
    status_code: int = 502

    def __init__(
        self,
        provider: str,
        message: str | None = None,
        status: int | None = None,
    ) -> None:
        details: dict[str, Any] = {"provider": provider}
        if status is not None:
            details["status"] = status
        self.provider = provider
        self.status = status
        super().__init__(message=message, details=details)


class SchemaValidationError(AIPulseError):
    """Upstream payload did not match the expected shape."""

    code: str = "SCHEMA_VALIDATION_ERROR"
    message: str = "Upstream response failed validation"
    status_code: int = 502

    def __init__(self, provider: str, errors: str | None = None) -> None:
        self.provider = provider
        self.errors = errors
        details: dict[str, Any] = {"provider": provider}
        if errors:
            details["errors"] = errors
        super().__init__(details=details)


class StorageError(AIPulseError):
    """Read or write failure in the cache store or tool storage."""

    code: str = "STORAGE_ERROR"
    message: str = "Storage operation failed"
