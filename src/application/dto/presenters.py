"""Entity to response DTO conversions shared by use cases and routes."""

from src.application.dto.responses import (
    AdjustmentResponse,
    InvoiceLineResponse,
    InvoiceResponse,
    ItemResponse,
    LedgerLineResponse,
    PartyResponse,
    PartyStatementResponse,
    PaymentAllocationResponse,
    PaymentResponse,
    StockMovementResponse,
)
from src.core.entities.adjustment import Adjustment
from src.core.entities.directory import Party
from src.core.entities.inventory import Item, StockMovement
from src.core.entities.invoice import Invoice
from src.core.entities.ledger import LedgerStatement
from src.core.entities.payment import Payment


def party_response(party: Party) -> PartyResponse:
    return PartyResponse(
        id=party.id,  # type: ignore[arg-type]
        name=party.name,
        role=party.role.value,
        opening_balance=party.opening_balance,
        opening_balance_type=party.opening_balance_type.value,
        mobile=party.mobile,
        email=party.email,
        address=party.address,
        created_at=party.created_at,
    )


def item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,  # type: ignore[arg-type]
        name=item.name,
        unit=item.unit,
        hsn=item.hsn,
        purchase_rate=item.purchase_rate,
        sale_rate=item.sale_rate,
        tax_percent=item.tax_percent,
        quantity=item.quantity,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def movement_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        item_id=movement.item_id,
        delta=movement.delta,
        kind=movement.kind.value,
        ref_id=movement.ref_id,
        note=movement.note,
        previous_quantity=movement.previous_quantity,
        new_quantity=movement.new_quantity,
        created_at=movement.created_at,
    )


def invoice_response(invoice: Invoice) -> InvoiceResponse:
    return InvoiceResponse(
        id=invoice.id,  # type: ignore[arg-type]
        party_id=invoice.party_id,
        direction=invoice.direction.value if invoice.direction else "",
        invoice_date=invoice.invoice_date,
        payment_mode=invoice.payment_mode.value,
        number=invoice.number,
        sequence=invoice.sequence,
        series_code=invoice.series_code,
        period=invoice.period,
        subtotal=invoice.subtotal,
        tax_amount=invoice.tax_amount,
        grand_total=invoice.grand_total,
        paid_amount=invoice.paid_amount,
        due_amount=invoice.due_amount,
        notes=invoice.notes,
        lines=[
            InvoiceLineResponse(
                id=line.id,
                item_id=line.item_id,
                description=line.description,
                quantity=line.quantity,
                rate=line.rate,
                tax_percent=line.tax_percent,
                amount=line.amount,
                tax_amount=line.tax_amount,
            )
            for line in invoice.lines
        ],
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


def payment_response(payment: Payment) -> PaymentResponse:
    return PaymentResponse(
        id=payment.id,  # type: ignore[arg-type]
        party_id=payment.party_id,
        direction=payment.direction.value,
        amount=payment.amount,
        payment_date=payment.payment_date,
        mode=payment.mode.value,
        voucher_number=payment.voucher_number,
        allocations=[
            PaymentAllocationResponse(invoice_id=a.invoice_id, amount=a.amount)
            for a in payment.allocations
        ],
        allocated_total=payment.allocated_total,
        unallocated=payment.unallocated,
        reference=payment.reference,
        notes=payment.notes,
        created_at=payment.created_at,
    )


def adjustment_response(adjustment: Adjustment) -> AdjustmentResponse:
    return AdjustmentResponse(
        id=adjustment.id,  # type: ignore[arg-type]
        txn_type=adjustment.txn_type.value,
        adjustment_date=adjustment.adjustment_date,
        amount=adjustment.amount,
        from_party_id=adjustment.from_party_id,
        to_party_id=adjustment.to_party_id,
        reference=adjustment.reference,
        category=adjustment.category,
        note=adjustment.note,
        created_at=adjustment.created_at,
    )


def statement_response(statement: LedgerStatement) -> PartyStatementResponse:
    return PartyStatementResponse(
        party_id=statement.party_id,
        party_name=statement.party_name,
        role=statement.role.value,
        start=statement.start,
        end=statement.end,
        opening_balance=statement.opening_balance,
        total_debit=statement.total_debit,
        total_credit=statement.total_credit,
        closing_balance=statement.closing_balance,
        lines=[
            LedgerLineResponse(
                id=line.entry.id,
                entry_date=line.entry.entry_date,
                entry_type=line.entry.entry_type.value,
                debit=line.entry.debit,
                credit=line.entry.credit,
                ref_type=line.entry.ref_type.value if line.entry.ref_type else None,
                ref_id=line.entry.ref_id,
                ref_no=line.entry.ref_no,
                narration=line.entry.narration,
                is_reversal=line.entry.is_reversal,
                balance_after=line.balance_after,
            )
            for line in statement.lines
        ],
    )
