"""Common Pydantic schemas used across the API.

This module provides shared pieces for:
- Error responses (consistent error format)
- URL-checked string fields for upstream payloads
- ``ParseResult``, the success/failure value returned by upstream parsers
"""

from dataclasses import dataclass
from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    # Validate only; keep the provider's exact string so cached and fresh
    # payloads serialize identically.
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ValueError(f"invalid URL: {value!r}") from e
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]


# =============================================================================
# Base Configuration
# =============================================================================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,  # Allow both alias and field name
    )


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error body.

    ``error`` is always a human-readable string; ``code`` and
    ``request_id`` are present when the error came from the app's own
    exception handler.
    """

    error: str = Field(..., description="Human-readable error description")
    code: str | None = Field(None, description="Machine-readable error code")
    request_id: str | None = Field(None, description="Request correlation ID")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "New tools are being updated. Please check back shortly.",
                "code": "CATALOG_UNAVAILABLE",
                "request_id": "abc-123-def-456",
            }
        }
    )


# =============================================================================
# Parse Results
# =============================================================================


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of validating an upstream payload.

    Exactly one of ``value`` / ``error`` is meaningful; check ``ok``.
    """

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_model(model: type[T], raw: Any) -> ParseResult[T]:
    """Validate ``raw`` against ``model`` without raising."""
    try:
        return ParseResult(value=model.model_validate(raw))  # type: ignore[attr-defined]
    except PydanticValidationError as e:
        return ParseResult(error=str(e))
