"""SQLite implementation of numbering counters."""

from datetime import datetime

import aiosqlite

from src.config import get_logger
from src.core.entities.numbering import SequenceCounter
from src.core.exceptions import DatabaseError
from src.core.interfaces.sequence_store import ISequenceStore
from src.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteSequenceStore(ISequenceStore):
    """Counters keyed by (tenant, series, period).

    ``next_value`` is an upsert-increment followed by a read in the same
    write transaction, so no two callers can observe the same value.
    """

    async def next_value(self, tenant_id: str, series_code: str, period: str) -> int:
        now = datetime.utcnow().isoformat()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO sequences (tenant_id, series_code, period, last_value, updated_at)
                    VALUES (?, ?, ?, 1, ?)
                    ON CONFLICT (tenant_id, series_code, period)
                    DO UPDATE SET last_value = last_value + 1, updated_at = excluded.updated_at
                    """,
                    (tenant_id, series_code, period, now),
                )
                cursor = await conn.execute(
                    """
                    SELECT last_value FROM sequences
                    WHERE tenant_id = ? AND series_code = ? AND period = ?
                    """,
                    (tenant_id, series_code, period),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("sequence_next_value", str(e)) from e

        value = row["last_value"]
        logger.debug(
            "sequence_incremented",
            tenant_id=tenant_id,
            series_code=series_code,
            period=period,
            value=value,
        )
        return value

    async def current_value(self, tenant_id: str, series_code: str, period: str) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT last_value FROM sequences
                WHERE tenant_id = ? AND series_code = ? AND period = ?
                """,
                (tenant_id, series_code, period),
            )
            row = await cursor.fetchone()
            return row["last_value"] if row else 0

    async def list_counters(self, tenant_id: str | None = None) -> list[SequenceCounter]:
        query = "SELECT * FROM sequences"
        params: list = []
        if tenant_id is not None:
            query += " WHERE tenant_id = ?"
            params.append(tenant_id)
        query += " ORDER BY tenant_id, series_code, period"

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            return [
                SequenceCounter(
                    tenant_id=row["tenant_id"],
                    series_code=row["series_code"],
                    period=row["period"],
                    last_value=row["last_value"],
                    updated_at=datetime.fromisoformat(row["updated_at"]),
                )
                for row in await cursor.fetchall()
            ]
