"""Tests for party sign conventions."""

import pytest

from src.core.entities import BalanceType, Party, PartyRole


def _party(role: PartyRole, opening: float = 0.0, side: BalanceType = BalanceType.DR) -> Party:
    return Party(
        tenant_id="gk", name="P", role=role, opening_balance=opening, opening_balance_type=side
    )


class TestPartySigns:
    @pytest.mark.parametrize(
        "role",
        [PartyRole.CUSTOMER, PartyRole.EMPLOYEE, PartyRole.CARTING, PartyRole.CASH, PartyRole.BANK, PartyRole.UPI],
    )
    def test_asset_like_roles(self, role):
        party = _party(role)
        assert party.is_asset_like
        assert party.balance_delta(debit=100, credit=30) == 70

    @pytest.mark.parametrize("role", [PartyRole.SUPPLIER, PartyRole.OWNER, PartyRole.PARTNER])
    def test_liability_like_roles(self, role):
        party = _party(role)
        assert not party.is_asset_like
        assert party.balance_delta(debit=100, credit=30) == -70


class TestSignedOpeningBalance:
    def test_customer_receivable(self):
        assert _party(PartyRole.CUSTOMER, 500, BalanceType.DR).signed_opening_balance == 500.0
        assert _party(PartyRole.CUSTOMER, 500, BalanceType.CR).signed_opening_balance == -500.0

    def test_supplier_payable(self):
        assert _party(PartyRole.SUPPLIER, 800, BalanceType.CR).signed_opening_balance == 800.0
        assert _party(PartyRole.SUPPLIER, 800, BalanceType.DR).signed_opening_balance == -800.0
