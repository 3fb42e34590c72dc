"""Allocate Number Use Case: hands out a document number on request."""

from datetime import date

from src.application.accounting_core import AccountingCore
from src.application.dto.requests import AllocateNumberRequest
from src.application.dto.responses import DocumentNumberResponse
from src.core.entities.numbering import DocumentNumber, SeriesSelector
from src.core.exceptions import ValidationError


class AllocateNumberUseCase:
    """Allocate the next number for an explicit series or a document kind."""

    def __init__(self, core: AccountingCore | None = None):
        self._core = core

    async def _get_core(self) -> AccountingCore:
        if self._core is None:
            from src.application.services import get_accounting_core

            self._core = await get_accounting_core()
        return self._core

    async def execute(self, tenant_id: str, request: AllocateNumberRequest) -> DocumentNumber:
        if request.series_code is not None:
            selector = request.series_code
        elif request.document_kind is not None:
            selector = SeriesSelector(kind=request.document_kind, payment_mode=request.payment_mode)
        else:
            raise ValidationError("series_code", "series_code or document_kind is required")

        core = await self._get_core()
        return await core.allocate_document_number(
            tenant_id, selector, request.effective_date or date.today()
        )

    def to_response(self, number: DocumentNumber) -> DocumentNumberResponse:
        return DocumentNumberResponse(
            number=number.number,
            sequence=number.sequence,
            series_code=number.series_code.value,
            period=number.period,
        )
