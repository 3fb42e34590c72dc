"""
Payment allocation engine.

Applies a payment against invoice due amounts. Validation runs before any
write; the payment row, every invoice update and the ledger row are then
committed by the store as one transaction.
"""

from src.config import get_logger
from src.core.entities.amounts import MONEY_EPSILON, is_positive_finite, round_money
from src.core.entities.invoice import Invoice, InvoiceDirection
from src.core.entities.numbering import SeriesCode
from src.core.entities.payment import Payment, PaymentAllocation, PaymentDirection
from src.core.exceptions import (
    AllocationExceedsDueError,
    AllocationExceedsPaymentAmountError,
    AllocationInvoiceMismatchError,
    InvoiceNotFoundError,
    PaymentNotFoundError,
    ValidationError,
)
from src.core.interfaces.invoice_store import IInvoiceStore
from src.core.interfaces.payment_store import IPaymentStore
from src.core.services.posting import payment_entry, payment_reversal_entry
from src.core.services.sequence_allocator import SequenceAllocator

logger = get_logger(__name__)


def allocate_fifo(amount: float, candidates: list[Invoice]) -> list[PaymentAllocation]:
    """
    Spread ``amount`` over ``candidates`` in the given order.

    Each invoice's current due amount is consumed before moving on; stops
    when the amount is exhausted. Invoices with nothing due are skipped.
    """
    remaining = round_money(amount)
    allocations: list[PaymentAllocation] = []
    for invoice in candidates:
        if remaining < MONEY_EPSILON:
            break
        if invoice.id is None or invoice.due_amount < MONEY_EPSILON:
            continue
        take = round_money(min(remaining, invoice.due_amount))
        allocations.append(PaymentAllocation(invoice_id=invoice.id, amount=take))
        remaining = round_money(remaining - take)
    return allocations


class PaymentAllocationEngine:
    """Creates and removes payments together with their invoice effects."""

    def __init__(
        self,
        payment_store: IPaymentStore,
        invoice_store: IInvoiceStore,
        sequence_allocator: SequenceAllocator,
    ):
        self._payment_store = payment_store
        self._invoice_store = invoice_store
        self._sequence_allocator = sequence_allocator

    async def apply(
        self,
        payment: Payment,
        allocations: list[PaymentAllocation] | None = None,
        candidates: list[Invoice] | None = None,
        auto_allocate: bool = True,
    ) -> Payment:
        """
        Validate, number and persist a payment with its allocations.

        Args:
            payment: Payment to record; its own ``allocations`` are used
                when ``allocations`` is not given.
            allocations: Explicit ``{invoice_id, amount}`` pairs.
            candidates: Ordered invoices for FIFO distribution when no
                allocations are given at all. Defaults to the party's
                outstanding invoices in the payment's direction.
            auto_allocate: When false, a payment without allocations is
                recorded on account.

        Returns:
            The persisted payment.

        Raises:
            ValidationError: If the payment or an allocation amount is not
                a positive finite number.
            AllocationExceedsPaymentAmountError: If allocations add up to
                more than the payment amount.
            InvoiceNotFoundError: If an allocation targets an unknown invoice.
            AllocationInvoiceMismatchError: If an allocated invoice belongs to
                another party or runs the other way (receipts settle SALES
                invoices, payouts settle PURCHASE invoices).
            AllocationExceedsDueError: If an allocation is larger than the
                invoice's due amount.
        """
        if not is_positive_finite(payment.amount):
            raise ValidationError("amount", "must be a finite number > 0", payment.amount)
        payment.amount = round_money(payment.amount)

        if allocations is None:
            allocations = list(payment.allocations)
        if not allocations and auto_allocate:
            if candidates is None:
                candidates = await self._default_candidates(payment)
            allocations = allocate_fifo(payment.amount, candidates)

        merged = await self._validate(payment, allocations)

        number = await self._sequence_allocator.allocate_document_number(
            payment.tenant_id, self._series(payment), payment.payment_date
        )
        payment.voucher_number = number.number
        payment.sequence = number.sequence
        payment.series_code = number.series_code.value
        payment.period = number.period
        payment.allocations = merged

        saved = await self._payment_store.create_payment_with_allocations(
            payment, [payment_entry(payment)]
        )
        logger.info(
            "payment_applied",
            tenant_id=saved.tenant_id,
            payment_id=saved.id,
            voucher_number=saved.voucher_number,
            amount=saved.amount,
            allocations=len(saved.allocations),
            allocated=saved.allocated_total,
        )
        return saved

    async def remove(self, tenant_id: str, payment_id: int) -> list[int]:
        """
        Delete a payment and undo its allocations in one transaction.

        Returns the ids of allocated invoices that were already deleted;
        their share of the payment could not be given back.

        Raises:
            PaymentNotFoundError: If the payment does not exist.
        """
        payment = await self._payment_store.get_payment(tenant_id, payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id)

        missing = await self._payment_store.delete_payment_with_reversal(
            payment, [payment_reversal_entry(payment)]
        )
        logger.info(
            "payment_removed",
            tenant_id=tenant_id,
            payment_id=payment_id,
            voucher_number=payment.voucher_number,
            allocations=len(payment.allocations),
            missing_invoices=missing,
        )
        return missing

    async def _validate(
        self, payment: Payment, allocations: list[PaymentAllocation]
    ) -> list[PaymentAllocation]:
        """Check amounts and invoices; merge duplicate invoice ids."""
        per_invoice: dict[int, float] = {}
        for allocation in allocations:
            if not is_positive_finite(allocation.amount):
                raise ValidationError(
                    "allocations.amount", "must be a finite number > 0", allocation.amount
                )
            per_invoice[allocation.invoice_id] = round_money(
                per_invoice.get(allocation.invoice_id, 0.0) + allocation.amount
            )

        total = round_money(sum(per_invoice.values()))
        if total > payment.amount + MONEY_EPSILON:
            logger.warning(
                "payment_rejected",
                tenant_id=payment.tenant_id,
                reason="ALLOCATION_EXCEEDS_PAYMENT_AMOUNT",
                allocated=total,
                amount=payment.amount,
            )
            raise AllocationExceedsPaymentAmountError(total, payment.amount)

        for invoice_id, amount in per_invoice.items():
            invoice = await self._invoice_store.get_invoice(payment.tenant_id, invoice_id)
            if invoice is None:
                raise InvoiceNotFoundError(invoice_id)
            self._check_counterpart(payment, invoice)
            if amount > invoice.due_amount + MONEY_EPSILON:
                logger.warning(
                    "payment_rejected",
                    tenant_id=payment.tenant_id,
                    reason="ALLOCATION_EXCEEDS_DUE",
                    invoice_id=invoice_id,
                    amount=amount,
                    due=invoice.due_amount,
                )
                raise AllocationExceedsDueError(invoice_id, amount, invoice.due_amount)

        return [
            PaymentAllocation(invoice_id=invoice_id, amount=amount)
            for invoice_id, amount in per_invoice.items()
        ]

    @staticmethod
    def _settles(payment: Payment) -> InvoiceDirection:
        if payment.direction == PaymentDirection.RECEIVE:
            return InvoiceDirection.SALES
        return InvoiceDirection.PURCHASE

    def _check_counterpart(self, payment: Payment, invoice: Invoice) -> None:
        reason = None
        if invoice.party_id != payment.party_id:
            reason = f"invoice belongs to party {invoice.party_id}, payment to party {payment.party_id}"
        elif invoice.direction != self._settles(payment):
            direction = invoice.direction.value if invoice.direction else None
            reason = f"a {payment.direction.value} payment cannot settle a {direction} invoice"
        if reason is None:
            return
        logger.warning(
            "payment_rejected",
            tenant_id=payment.tenant_id,
            reason="ALLOCATION_INVOICE_MISMATCH",
            invoice_id=invoice.id,
            detail=reason,
        )
        raise AllocationInvoiceMismatchError(invoice.id, reason)  # type: ignore[arg-type]

    async def _default_candidates(self, payment: Payment) -> list[Invoice]:
        wanted = self._settles(payment)
        outstanding = await self._invoice_store.list_outstanding(
            payment.tenant_id, payment.party_id
        )
        return [invoice for invoice in outstanding if invoice.direction == wanted]

    @staticmethod
    def _series(payment: Payment) -> SeriesCode:
        if payment.direction == PaymentDirection.RECEIVE:
            return SeriesCode.RECEIPT
        return SeriesCode.PAYMENT
