"""
Sequence allocator service.

Hands out document numbers of the form
``{prefix}-{series}-{sequence}-{period}`` (e.g. ``GK-CR-0001-25-26``).
Every series uses a persisted counter keyed by (tenant, series, period)
that is incremented and read back atomically, so concurrent callers never
receive the same value. Numbers freed by deleted documents are not reused.
"""

from datetime import date
from typing import Literal

from src.config import get_logger
from src.core.entities.directory import Tenant
from src.core.entities.invoice import PaymentMode
from src.core.entities.numbering import (
    DocumentKind,
    DocumentNumber,
    SeriesCode,
    SeriesSelector,
)
from src.core.exceptions import SequenceAllocationFailedError, StorageError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.sequence_store import ISequenceStore

logger = get_logger(__name__)

PeriodPolicy = Literal["fiscal", "calendar"]


class SequenceAllocator:
    """
    Allocates unique, human-readable document numbers per tenant.

    The period label depends on the deployment policy:

    - ``fiscal``: two-digit start and end years of the fiscal year that
      contains the date, e.g. ``24-25`` for 2025-03-31 and ``25-26`` for
      2025-04-01 with an April start month.
    - ``calendar``: the four-digit calendar year, e.g. ``2025``.
    """

    def __init__(
        self,
        sequence_store: ISequenceStore,
        directory: IDirectory,
        *,
        period_policy: PeriodPolicy = "fiscal",
        fiscal_year_start_month: int = 4,
        sequence_width: int = 4,
        default_prefix: str = "XX",
    ):
        if not 1 <= fiscal_year_start_month <= 12:
            raise ValueError(f"fiscal_year_start_month out of range: {fiscal_year_start_month}")
        self._sequence_store = sequence_store
        self._directory = directory
        self._period_policy = period_policy
        self._fiscal_year_start_month = fiscal_year_start_month
        self._sequence_width = sequence_width
        self._default_prefix = default_prefix

    async def allocate(self, tenant_id: str, series_code: SeriesCode | str, period: str) -> int:
        """
        Issue the next sequence value for (tenant, series, period).

        Raises:
            SequenceAllocationFailedError: If the tenant cannot be resolved
                or the counter could not be incremented.
        """
        code = SeriesCode(series_code).value
        await self._resolve_tenant(tenant_id, code)
        return await self._next_value(tenant_id, code, period)

    async def allocate_document_number(
        self,
        tenant_id: str,
        selector: SeriesSelector | SeriesCode,
        effective_date: date,
    ) -> DocumentNumber:
        """
        Allocate a complete document number.

        Args:
            tenant_id: Tenant the document belongs to.
            selector: Either a series code or a description of the document
                from which the series is derived.
            effective_date: Document date; decides the period label.

        Returns:
            DocumentNumber with the formatted number and its parts.
        """
        series = selector if isinstance(selector, SeriesCode) else self.series_for(selector)
        tenant = await self._resolve_tenant(tenant_id, series.value)
        period = self.period_label(effective_date)
        sequence = await self._next_value(tenant_id, series.value, period)

        number = self.format_number(self.tenant_prefix(tenant), series, sequence, period)
        logger.info(
            "document_number_allocated",
            tenant_id=tenant_id,
            series_code=series.value,
            period=period,
            sequence=sequence,
            number=number,
        )
        return DocumentNumber(
            number=number,
            sequence=sequence,
            series_code=series,
            period=period,
        )

    @staticmethod
    def series_for(selector: SeriesSelector) -> SeriesCode:
        """Series for a document: purchases share one, sales split by mode."""
        if selector.kind == DocumentKind.PURCHASE_INVOICE:
            return SeriesCode.PURCHASE
        if selector.kind == DocumentKind.SALES_INVOICE:
            if selector.payment_mode == PaymentMode.CASH:
                return SeriesCode.CASH_SALE
            return SeriesCode.CREDIT_SALE
        if selector.kind == DocumentKind.RECEIPT_VOUCHER:
            return SeriesCode.RECEIPT
        return SeriesCode.PAYMENT

    def period_label(self, effective_date: date) -> str:
        if self._period_policy == "calendar":
            return f"{effective_date.year:04d}"

        start_year = effective_date.year
        if effective_date.month < self._fiscal_year_start_month:
            start_year -= 1
        if self._fiscal_year_start_month == 1:
            # Fiscal year equals the calendar year
            return f"{start_year:04d}"
        return f"{start_year % 100:02d}-{(start_year + 1) % 100:02d}"

    def tenant_prefix(self, tenant: Tenant) -> str:
        """Explicit prefix, else first two letters of the name uppercased."""
        if tenant.numbering_prefix and tenant.numbering_prefix.strip():
            return tenant.numbering_prefix.strip().upper()
        letters = "".join(ch for ch in tenant.name if ch.isalpha())
        if letters:
            return letters[:2].upper()
        return self._default_prefix

    def format_number(
        self, prefix: str, series: SeriesCode, sequence: int, period: str
    ) -> str:
        return f"{prefix}-{series.value}-{sequence:0{self._sequence_width}d}-{period}"

    async def _resolve_tenant(self, tenant_id: str, series_code: str) -> Tenant:
        tenant = await self._directory.get_tenant(tenant_id) if tenant_id else None
        if tenant is None:
            logger.warning(
                "sequence_tenant_unresolved",
                tenant_id=tenant_id,
                series_code=series_code,
            )
            raise SequenceAllocationFailedError(tenant_id, series_code, "tenant not found")
        return tenant

    async def _next_value(self, tenant_id: str, series_code: str, period: str) -> int:
        try:
            return await self._sequence_store.next_value(tenant_id, series_code, period)
        except StorageError as e:
            logger.error(
                "sequence_increment_failed",
                tenant_id=tenant_id,
                series_code=series_code,
                period=period,
                error=str(e),
            )
            raise SequenceAllocationFailedError(tenant_id, series_code, str(e)) from e
