"""Document numbering endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_allocate_number_use_case, get_tenant_id
from src.application.dto.requests import AllocateNumberRequest
from src.application.dto.responses import DocumentNumberResponse, ErrorResponse
from src.application.use_cases import AllocateNumberUseCase

router = APIRouter(prefix="/api/numbering", tags=["numbering"])


@router.post(
    "/allocate",
    response_model=DocumentNumberResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def allocate_number(
    request: AllocateNumberRequest,
    tenant_id: str = Depends(get_tenant_id),
    use_case: AllocateNumberUseCase = Depends(get_allocate_number_use_case),
) -> DocumentNumberResponse:
    """Issue the next number in a series. Issued numbers are never reused."""
    number = await use_case.execute(tenant_id, request)
    return use_case.to_response(number)
