"""Description cleaning endpoint."""

from typing import Annotated

from fastapi import APIRouter, Body, status

from aipulse.core.exceptions import ValidationError
from aipulse.dependencies import DescriptionDep
from aipulse.schemas.common import ErrorResponse
from aipulse.schemas.descriptions import CleanDescriptionRequest, CleanDescriptionResponse

router = APIRouter()


@router.post(
    "/clean-description",
    response_model=CleanDescriptionResponse,
    status_code=status.HTTP_200_OK,
    summary="Clean a tool description",
    description="Rewrite a raw description as a concise two-sentence pitch.",
    responses={
        400: {"model": ErrorResponse, "description": "Description missing"},
        500: {"model": ErrorResponse, "description": "Provider failure"},
    },
)
async def clean_description(
    descriptions: DescriptionDep,
    request: Annotated[CleanDescriptionRequest | None, Body()] = None,
) -> CleanDescriptionResponse:
    if request is None or not request.description:
        raise ValidationError(message="Description required", field="description")

    cleaned = await descriptions.clean(request.description)
    return CleanDescriptionResponse(cleaned=cleaned)
