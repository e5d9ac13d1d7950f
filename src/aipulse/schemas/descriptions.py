"""Schemas for the description-cleaning endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class CleanDescriptionRequest(BaseModel):
    """Body of ``POST /api/clean-description``.

    ``description`` is optional at the schema level so that a missing value
    is answered with the endpoint's own 400 body rather than FastAPI's 422.
    """

    description: str | None = Field(None, description="Raw tool description")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"description": "autogpt - an experimental open source gpt-4 agent"}
        }
    )


class CleanDescriptionResponse(BaseModel):
    cleaned: str = Field(..., description="Two-sentence pitch")
