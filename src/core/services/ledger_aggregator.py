"""
Ledger balance aggregator.

Folds a party's persisted ledger rows into a running balance. Read-only:
nothing here writes, so statements can be computed concurrently and
repeatedly with the same result.
"""

from datetime import date

from src.config import get_logger
from src.core.entities.amounts import round_money
from src.core.entities.directory import Party
from src.core.entities.ledger import LedgerEntry, LedgerStatement, StatementLine
from src.core.exceptions import PartyNotFoundError, ValidationError
from src.core.interfaces.directory import IDirectory
from src.core.interfaces.ledger_store import ILedgerStore

logger = get_logger(__name__)


def fold_entries(
    party: Party, opening_balance: float, entries: list[LedgerEntry]
) -> list[StatementLine]:
    """Running balance after each entry, in the order given."""
    balance = opening_balance
    lines: list[StatementLine] = []
    for entry in entries:
        balance = round_money(balance + party.balance_delta(entry.debit, entry.credit))
        lines.append(StatementLine(entry=entry, balance_after=balance))
    return lines


class LedgerAggregator:
    """Computes party statements from ledger rows."""

    def __init__(self, ledger_store: ILedgerStore, directory: IDirectory):
        self._ledger_store = ledger_store
        self._directory = directory

    async def running_balance(
        self,
        tenant_id: str,
        party_id: int,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerStatement:
        """
        Build a statement for one party.

        The opening figure is the party's opening balance plus every entry
        dated before ``start``. Entries within the range are folded in
        (date, creation) order.

        Raises:
            PartyNotFoundError: If the party does not exist in the tenant.
            ValidationError: If ``start`` is after ``end``.
        """
        if start and end and start > end:
            raise ValidationError("start", "must not be after end", start.isoformat())

        party = await self._directory.get_party(tenant_id, party_id)
        if party is None:
            raise PartyNotFoundError(party_id)

        opening = party.signed_opening_balance
        if start is not None:
            before = await self._ledger_store.sum_before(tenant_id, party_id, start)
            opening = round_money(opening + party.balance_delta(before.debit, before.credit))

        entries = await self._ledger_store.list_entries(tenant_id, party_id, start, end)
        lines = fold_entries(party, opening, entries)
        closing = lines[-1].balance_after if lines else opening

        logger.debug(
            "party_statement_computed",
            tenant_id=tenant_id,
            party_id=party_id,
            entries=len(entries),
            closing_balance=closing,
        )
        return LedgerStatement(
            tenant_id=tenant_id,
            party_id=party_id,
            party_name=party.name,
            role=party.role,
            start=start,
            end=end,
            opening_balance=opening,
            lines=lines,
            closing_balance=closing,
            total_debit=round_money(sum(e.debit for e in entries)),
            total_credit=round_money(sum(e.credit for e in entries)),
        )
