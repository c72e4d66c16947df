"""Shared pytest fixtures."""

import asyncio
import copy
import operator
from types import SimpleNamespace
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError

from envios.core.modules.client.service import ClientService
from envios.core.modules.counter.service import CounterService
from envios.core.modules.counter.store import MemoryCounterStore
from envios.core.modules.shipment.service import ShipmentService
from envios.core.modules.transport.service import TransportService

COMPARISONS = {"$gt": operator.gt, "$gte": operator.ge, "$lt": operator.lt, "$lte": operator.le, "$ne": operator.ne}


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self._docs)


class FakeCollection:
    """In-memory stand-in for an AsyncCollection, enough for the services under test.

    find_one yields to the event loop after reading, so concurrent callers can
    act on a value that is stale by the time they write.
    """

    def __init__(self) -> None:
        self.docs: dict[Any, dict[str, Any]] = {}

    @staticmethod
    def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        for key, condition in query.items():
            value = doc.get(key)
            if isinstance(condition, dict) and any(op.startswith("$") for op in condition):
                for op, operand in condition.items():
                    if value is None or not COMPARISONS[op](value, operand):
                        return False
            elif value != condition:
                return False
        return True

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs.values() if self._matches(doc, query)), None)

    async def create_index(self, *args: Any, **kwargs: Any) -> str:
        return "index"

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        doc = self._first(query)
        result = copy.deepcopy(doc) if doc is not None else None
        await asyncio.sleep(0)
        return result

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs.values() if self._matches(doc, query or {})])

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        if doc["_id"] in self.docs:
            raise DuplicateKeyError(f"E11000 duplicate key error: {doc['_id']}")
        self.docs[doc["_id"]] = copy.deepcopy(doc)
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        doc = self._first(query)
        if doc is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        changes = update["$set"]
        modified = any(doc.get(key) != value for key, value in changes.items())
        doc.update(copy.deepcopy(changes))
        return SimpleNamespace(matched_count=1, modified_count=1 if modified else 0)

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        doc = self._first(query)
        if doc is None:
            return SimpleNamespace(deleted_count=0)
        del self.docs[doc["_id"]]
        return SimpleNamespace(deleted_count=1)


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def counter_store():
    return MemoryCounterStore()


@pytest.fixture
def services(database, counter_store):
    """Services wired through a minimal core."""
    registry = SimpleNamespace(
        counter=CounterService(database, counter_store, "shipmentCounter"),
        client=ClientService(database),
        transport=TransportService(database),
        shipment=ShipmentService(database),
    )
    core = SimpleNamespace(services=registry)
    for service in vars(registry).values():
        service.set_core(core)
    return core.services
