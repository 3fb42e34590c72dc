"""SQLite implementation of the tenant and party directory."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.directory import BalanceType, Party, PartyRole, Tenant
from src.core.exceptions import ValidationError
from src.core.interfaces.directory import IDirectory
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteDirectory(IDirectory):
    """SQLite implementation of tenant and party lookup."""

    async def get_tenant(self, tenant_id: str) -> Tenant | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM tenants WHERE id = ?", (tenant_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return Tenant(
                id=row["id"],
                name=row["name"],
                numbering_prefix=row["numbering_prefix"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )

    async def create_tenant(self, tenant: Tenant) -> Tenant:
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO tenants (id, name, numbering_prefix, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (tenant.id, tenant.name, tenant.numbering_prefix, tenant.created_at.isoformat()),
                )
        except aiosqlite.IntegrityError as e:
            raise ValidationError("id", "tenant already exists", tenant.id) from e
        logger.info("tenant_created", tenant_id=tenant.id, name=tenant.name)
        return tenant

    async def get_party(self, tenant_id: str, party_id: int) -> Party | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM parties WHERE id = ? AND tenant_id = ?",
                (party_id, tenant_id),
            )
            row = await cursor.fetchone()
            return self._row_to_party(row) if row else None

    async def create_party(self, party: Party) -> Party:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO parties (
                    tenant_id, name, role, opening_balance, opening_balance_type,
                    mobile, email, address, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    party.tenant_id,
                    party.name,
                    party.role.value,
                    party.opening_balance,
                    party.opening_balance_type.value,
                    party.mobile,
                    party.email,
                    party.address,
                    party.created_at.isoformat(),
                ),
            )
            party.id = cursor.lastrowid
        logger.info(
            "party_created",
            tenant_id=party.tenant_id,
            party_id=party.id,
            role=party.role.value,
        )
        return party

    async def list_parties(
        self, tenant_id: str, role: PartyRole | None = None
    ) -> list[Party]:
        query = "SELECT * FROM parties WHERE tenant_id = ?"
        params: list = [tenant_id]
        if role is not None:
            query += " AND role = ?"
            params.append(role.value)
        query += " ORDER BY name, id"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [self._row_to_party(row) for row in await cursor.fetchall()]

    @staticmethod
    def _row_to_party(row: aiosqlite.Row) -> Party:
        return Party(
            id=row["id"],
            tenant_id=row["tenant_id"],
            name=row["name"],
            role=PartyRole(row["role"]),
            opening_balance=row["opening_balance"],
            opening_balance_type=BalanceType(row["opening_balance_type"]),
            mobile=row["mobile"],
            email=row["email"],
            address=row["address"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
