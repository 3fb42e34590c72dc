"""
Ledger posting rules.

Pure builders that turn invoices and payments into ledger rows. Stores
write these rows in the same transaction as the document change.

Sign conventions from the party's point of view:

- SALES invoice debits the party, PURCHASE invoice credits it.
- A cash SALES invoice is settled immediately, so it also posts a PAYMENT
  row crediting the party for the paid amount.
- Payment ``receive`` credits the party, ``pay`` debits it.
- An adjustment credits its source party and debits its destination party.
- A reversal row swaps debit and credit of the row it cancels.
"""

from datetime import date

from src.core.entities.adjustment import Adjustment
from src.core.entities.amounts import round_money
from src.core.entities.invoice import Invoice, InvoiceDirection
from src.core.entities.ledger import LedgerEntry, LedgerEntryType, LedgerRefType
from src.core.entities.payment import Payment, PaymentDirection


def invoice_entries(invoice: Invoice) -> list[LedgerEntry]:
    """Rows posted when an invoice is created."""
    amount = round_money(invoice.grand_total)
    is_sales = invoice.direction == InvoiceDirection.SALES
    entries = [
        LedgerEntry(
            tenant_id=invoice.tenant_id,
            party_id=invoice.party_id,
            entry_date=invoice.invoice_date,
            entry_type=LedgerEntryType.INVOICE,
            debit=amount if is_sales else 0.0,
            credit=0.0 if is_sales else amount,
            ref_type=LedgerRefType.INVOICE,
            ref_id=invoice.id,
            ref_no=invoice.number,
            narration=f"{'Sales' if is_sales else 'Purchase'} invoice {invoice.number or ''}".strip(),
            payment_mode=invoice.payment_mode.value,
        )
    ]
    if invoice.is_cash_sale and invoice.paid_amount > 0:
        entries.append(
            LedgerEntry(
                tenant_id=invoice.tenant_id,
                party_id=invoice.party_id,
                entry_date=invoice.invoice_date,
                entry_type=LedgerEntryType.PAYMENT,
                credit=round_money(invoice.paid_amount),
                ref_type=LedgerRefType.INVOICE,
                ref_id=invoice.id,
                ref_no=invoice.number,
                narration=f"Cash settlement {invoice.number or ''}".strip(),
                payment_mode=invoice.payment_mode.value,
            )
        )
    return entries


def invoice_reversal_entries(
    invoice: Invoice, reason: str, on: date | None = None
) -> list[LedgerEntry]:
    """Rows cancelling everything :func:`invoice_entries` posted for ``invoice``."""
    return [
        _reverse(entry, f"{reason}: {invoice.number or invoice.id}", on)
        for entry in invoice_entries(invoice)
    ]


def invoice_needs_repost(stored: Invoice, updated: Invoice) -> bool:
    """True when an update changes what the invoice posted to the ledger."""
    return (
        round_money(stored.grand_total) != round_money(updated.grand_total)
        or stored.party_id != updated.party_id
        or stored.direction != updated.direction
        or stored.is_cash_sale != updated.is_cash_sale
        or (
            (stored.is_cash_sale or updated.is_cash_sale)
            and round_money(stored.paid_amount) != round_money(updated.paid_amount)
        )
    )


def payment_entry(payment: Payment) -> LedgerEntry:
    """Row posted when a payment is recorded."""
    amount = round_money(payment.amount)
    is_receipt = payment.direction == PaymentDirection.RECEIVE
    return LedgerEntry(
        tenant_id=payment.tenant_id,
        party_id=payment.party_id,
        entry_date=payment.payment_date,
        entry_type=LedgerEntryType.PAYMENT,
        debit=0.0 if is_receipt else amount,
        credit=amount if is_receipt else 0.0,
        ref_type=LedgerRefType.PAYMENT,
        ref_id=payment.id,
        ref_no=payment.voucher_number,
        narration=f"{'Receipt' if is_receipt else 'Payment'} {payment.voucher_number or ''}".strip(),
        payment_mode=payment.mode.value,
    )


def payment_reversal_entry(payment: Payment, on: date | None = None) -> LedgerEntry:
    """Row cancelling :func:`payment_entry` for a deleted payment."""
    return _reverse(
        payment_entry(payment),
        f"Payment deleted: {payment.voucher_number or payment.id}",
        on,
    )


def adjustment_entries(adjustment: Adjustment) -> list[LedgerEntry]:
    """Rows posted when an adjustment is recorded, source first."""
    amount = round_money(adjustment.amount)
    label = adjustment.txn_type.value.title()
    entries: list[LedgerEntry] = []
    if adjustment.from_party_id is not None:
        entries.append(
            _adjustment_row(adjustment, adjustment.from_party_id, credit=amount, narration=f"{label} out")
        )
    if adjustment.to_party_id is not None:
        entries.append(
            _adjustment_row(adjustment, adjustment.to_party_id, debit=amount, narration=f"{label} in")
        )
    return entries


def adjustment_reversal_entries(adjustment: Adjustment, on: date | None = None) -> list[LedgerEntry]:
    """Rows cancelling :func:`adjustment_entries` for a deleted adjustment."""
    return compensating_entries(
        adjustment_entries(adjustment),
        f"Adjustment deleted: {adjustment.reference or adjustment.id}",
        on,
    )


def _adjustment_row(
    adjustment: Adjustment,
    party_id: int,
    *,
    narration: str,
    debit: float = 0.0,
    credit: float = 0.0,
) -> LedgerEntry:
    return LedgerEntry(
        tenant_id=adjustment.tenant_id,
        party_id=party_id,
        entry_date=adjustment.adjustment_date,
        entry_type=LedgerEntryType.ADJUSTMENT,
        debit=debit,
        credit=credit,
        ref_type=LedgerRefType.ADJUSTMENT,
        ref_id=adjustment.id,
        ref_no=adjustment.reference,
        narration=adjustment.note or narration,
    )


def compensating_entries(
    entries: list[LedgerEntry], narration: str, on: date | None = None
) -> list[LedgerEntry]:
    """Rows that cancel ``entries`` one for one, newest first."""
    return [_reverse(entry, narration, on) for entry in reversed(entries)]


def _reverse(entry: LedgerEntry, narration: str, on: date | None) -> LedgerEntry:
    return LedgerEntry(
        tenant_id=entry.tenant_id,
        party_id=entry.party_id,
        entry_date=on or date.today(),
        entry_type=LedgerEntryType.REVERSAL,
        debit=entry.credit,
        credit=entry.debit,
        ref_type=entry.ref_type,
        ref_id=entry.ref_id,
        ref_no=f"REV-{entry.ref_no}" if entry.ref_no else None,
        narration=narration,
        payment_mode=entry.payment_mode,
        reversed_ref_id=entry.ref_id,
        is_reversal=True,
    )
