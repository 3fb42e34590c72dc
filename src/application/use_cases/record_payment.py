"""Record Payment Use Case: receipts and payouts with invoice allocations."""

from dataclasses import dataclass, field
from datetime import date

from src.application.accounting_core import AccountingCore
from src.application.dto.presenters import payment_response
from src.application.dto.requests import CreatePaymentRequest
from src.application.dto.responses import DeletePaymentResponse, PaymentResponse
from src.config import get_logger
from src.core.entities.payment import Payment, PaymentAllocation
from src.core.exceptions import PartyNotFoundError, PaymentNotFoundError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.payment_store import IPaymentStore

logger = get_logger(__name__)


@dataclass
class RecordPaymentResult:
    """Result of recording a payment."""

    payment: Payment


class RecordPaymentUseCase:
    """Validate, number and persist a payment with its allocations."""

    def __init__(
        self,
        core: AccountingCore | None = None,
        directory: IDirectory | None = None,
    ):
        self._core = core
        self._directory = directory

    async def _get_core(self) -> AccountingCore:
        if self._core is None:
            from src.application.services import get_accounting_core

            self._core = await get_accounting_core()
        return self._core

    async def _get_directory(self) -> IDirectory:
        if self._directory is None:
            from src.infrastructure.storage.sqlite import get_directory

            self._directory = await get_directory()
        return self._directory

    async def execute(self, tenant_id: str, request: CreatePaymentRequest) -> RecordPaymentResult:
        """Execute record payment use case."""
        core = await self._get_core()
        directory = await self._get_directory()

        if await directory.get_party(tenant_id, request.party_id) is None:
            raise PartyNotFoundError(request.party_id)

        payment = Payment(
            tenant_id=tenant_id,
            party_id=request.party_id,
            direction=request.direction,
            amount=request.amount,
            payment_date=request.payment_date or date.today(),
            mode=request.mode,
            reference=request.reference,
            notes=request.notes,
        )
        allocations = None
        if request.allocations:
            allocations = [
                PaymentAllocation(invoice_id=a.invoice_id, amount=a.amount)
                for a in request.allocations
            ]

        saved = await core.create_payment_with_allocations(
            payment, allocations, auto_allocate=request.auto_allocate
        )
        return RecordPaymentResult(payment=saved)

    def to_response(self, result: RecordPaymentResult) -> PaymentResponse:
        """Convert result to API response."""
        return payment_response(result.payment)


@dataclass
class DeletePaymentResult:
    """Result of deleting a payment."""

    payment: Payment
    # allocations whose invoice had already been deleted
    missing_invoices: list[int] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [
            f"Invoice {invoice_id} no longer exists; its allocation from "
            f"{self.payment.voucher_number or self.payment.id} was not given back"
            for invoice_id in self.missing_invoices
        ]


class DeletePaymentUseCase:
    """Delete a payment and give its allocations back to the invoices."""

    def __init__(
        self,
        core: AccountingCore | None = None,
        payment_store: IPaymentStore | None = None,
    ):
        self._core = core
        self._payment_store = payment_store

    async def _get_core(self) -> AccountingCore:
        if self._core is None:
            from src.application.services import get_accounting_core

            self._core = await get_accounting_core()
        return self._core

    async def _get_payment_store(self) -> IPaymentStore:
        if self._payment_store is None:
            from src.infrastructure.storage.sqlite import get_payment_store

            self._payment_store = await get_payment_store()
        return self._payment_store

    async def execute(self, tenant_id: str, payment_id: int) -> DeletePaymentResult:
        """Execute delete payment use case."""
        core = await self._get_core()
        store = await self._get_payment_store()

        payment = await store.get_payment(tenant_id, payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)

        missing = await core.delete_payment(tenant_id, payment_id)
        if missing:
            logger.warning(
                "delete_payment_unmatched_allocations",
                tenant_id=tenant_id,
                payment_id=payment_id,
                invoice_ids=missing,
            )
        return DeletePaymentResult(payment=payment, missing_invoices=list(missing))

    def to_response(self, result: DeletePaymentResult) -> DeletePaymentResponse:
        """Convert result to API response."""
        return DeletePaymentResponse(
            payment_id=result.payment.id,  # type: ignore[arg-type]
            voucher_number=result.payment.voucher_number,
            restored_invoices=[
                a.invoice_id
                for a in result.payment.allocations
                if a.invoice_id not in result.missing_invoices
            ],
            warnings=result.warnings,
        )
