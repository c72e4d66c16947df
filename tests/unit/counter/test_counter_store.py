"""Tests for the MongoDB compare-and-swap counter store."""

import asyncio

import pytest
from conftest import FakeCollection
from pymongo.errors import NetworkTimeout

from envios.core.modules.counter.store import MongoCounterStore
from envios.errors import StoreUnavailableError


def increment(current):
    return (current or 0) + 1


class RacingCollection(FakeCollection):
    """Another writer bumps the counter right before each of our first `races` writes."""

    def __init__(self, races: int) -> None:
        super().__init__()
        self.races = races

    async def update_one(self, query, update):
        if self.races > 0:
            self.races -= 1
            self.docs[query["_id"]]["seq"] += 1
        return await super().update_one(query, update)


class TimeoutCollection(FakeCollection):
    async def update_one(self, query, update):
        raise NetworkTimeout("timed out")


class TestRead:
    def test_absent_counter_reads_none(self):
        store = MongoCounterStore(FakeCollection())
        assert asyncio.run(store.read("shipmentCounter")) is None

    def test_reads_stored_value(self):
        collection = FakeCollection()
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 12}
        assert asyncio.run(MongoCounterStore(collection).read("shipmentCounter")) == 12


class TestAtomicUpdate:
    def test_creates_missing_counter(self):
        collection = FakeCollection()
        store = MongoCounterStore(collection)
        assert asyncio.run(store.atomic_update("shipmentCounter", increment)) == 1
        assert collection.docs["shipmentCounter"]["seq"] == 1

    def test_increments_existing_counter(self):
        collection = FakeCollection()
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 41}
        assert asyncio.run(MongoCounterStore(collection).atomic_update("shipmentCounter", increment)) == 42

    def test_lost_race_retries_against_fresh_value(self):
        collection = RacingCollection(races=2)
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 5}
        store = MongoCounterStore(collection, max_attempts=5)

        assert asyncio.run(store.atomic_update("shipmentCounter", increment)) == 8
        assert collection.docs["shipmentCounter"]["seq"] == 8

    def test_gives_up_after_max_attempts(self):
        collection = RacingCollection(races=100)
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 5}
        store = MongoCounterStore(collection, max_attempts=3)

        with pytest.raises(StoreUnavailableError, match="gave up after 3 attempts"):
            asyncio.run(store.atomic_update("shipmentCounter", increment))
        # Only the competing writer's increments landed
        assert collection.docs["shipmentCounter"]["seq"] == 8

    def test_driver_error_leaves_counter_unchanged(self):
        collection = TimeoutCollection()
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 5}
        store = MongoCounterStore(collection)

        with pytest.raises(StoreUnavailableError):
            asyncio.run(store.atomic_update("shipmentCounter", increment))
        assert collection.docs["shipmentCounter"]["seq"] == 5

    def test_concurrent_updates_are_not_lost(self):
        collection = FakeCollection()
        store = MongoCounterStore(collection, max_attempts=20)

        async def run():
            return await asyncio.gather(*(store.atomic_update("shipmentCounter", increment) for _ in range(10)))

        values = asyncio.run(run())
        assert sorted(values) == list(range(1, 11))
        assert collection.docs["shipmentCounter"]["seq"] == 10

    def test_unchanged_value_counts_as_committed(self):
        """A write that leaves seq as it was still matched, so it must not be retried."""
        collection = FakeCollection()
        collection.docs["shipmentCounter"] = {"_id": "shipmentCounter", "seq": 5}
        store = MongoCounterStore(collection, max_attempts=1)

        assert asyncio.run(store.atomic_update("shipmentCounter", lambda current: current)) == 5
        assert collection.docs["shipmentCounter"]["seq"] == 5
