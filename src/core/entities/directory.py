"""Tenant and party domain entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.core.entities.amounts import round_money


class PartyRole(str, Enum):
    """Role of a party in a tenant's books."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"
    OWNER = "owner"
    PARTNER = "partner"
    EMPLOYEE = "employee"
    CARTING = "carting"
    CASH = "cash"
    BANK = "bank"
    UPI = "upi"


# Debits increase the balance of these roles; credits increase every other role.
ASSET_LIKE_ROLES = frozenset(
    {
        PartyRole.CUSTOMER,
        PartyRole.EMPLOYEE,
        PartyRole.CARTING,
        PartyRole.CASH,
        PartyRole.BANK,
        PartyRole.UPI,
    }
)


class BalanceType(str, Enum):
    """Side of an opening balance."""

    DR = "DR"  # receivable
    CR = "CR"  # payable


class Tenant(BaseModel):
    """An isolated company scope; every business record belongs to one."""

    id: str
    name: str
    numbering_prefix: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Party(BaseModel):
    """A customer, supplier, or money account within a tenant."""

    id: int | None = None
    tenant_id: str
    name: str
    role: PartyRole
    opening_balance: float = 0.0
    opening_balance_type: BalanceType = BalanceType.DR
    mobile: str | None = None
    email: str | None = None
    address: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_asset_like(self) -> bool:
        return self.role in ASSET_LIKE_ROLES

    @property
    def signed_opening_balance(self) -> float:
        """Opening balance expressed in the party's own sign convention.

        A DR opening on an asset-like party (a receivable) is positive, and
        so is a CR opening on a liability-like party (a payable). The
        opposite side is negative.
        """
        amount = round_money(abs(self.opening_balance))
        if self.is_asset_like:
            return amount if self.opening_balance_type == BalanceType.DR else -amount
        return amount if self.opening_balance_type == BalanceType.CR else -amount

    def balance_delta(self, debit: float, credit: float) -> float:
        """Signed effect of one debit/credit pair on this party's balance."""
        if self.is_asset_like:
            return debit - credit
        return credit - debit
