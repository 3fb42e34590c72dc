"""Tests for SQLiteSequenceStore."""

import asyncio

import pytest

from src.infrastructure.storage.sqlite import SQLiteSequenceStore


@pytest.fixture
def store() -> SQLiteSequenceStore:
    return SQLiteSequenceStore()


class TestSequenceStore:
    async def test_first_value_is_one(self, store, tenant):
        assert await store.current_value(tenant.id, "CR", "25-26") == 0
        assert await store.next_value(tenant.id, "CR", "25-26") == 1
        assert await store.next_value(tenant.id, "CR", "25-26") == 2
        assert await store.current_value(tenant.id, "CR", "25-26") == 2

    async def test_keys_are_independent(self, store, tenant):
        await store.next_value(tenant.id, "CR", "25-26")
        assert await store.next_value(tenant.id, "C", "25-26") == 1
        assert await store.next_value(tenant.id, "CR", "24-25") == 1
        assert await store.next_value("other", "CR", "25-26") == 1

    async def test_concurrent_callers_get_distinct_values(self, store, tenant):
        values = await asyncio.gather(
            *[store.next_value(tenant.id, "PUR", "25-26") for _ in range(20)]
        )
        assert sorted(values) == list(range(1, 21))

    async def test_list_counters(self, store, tenant):
        await store.next_value(tenant.id, "RCV", "25-26")
        await store.next_value("other", "PAY", "25-26")

        counters = await store.list_counters(tenant.id)
        assert [(c.series_code, c.last_value) for c in counters] == [("RCV", 1)]
        assert len(await store.list_counters()) == 2
