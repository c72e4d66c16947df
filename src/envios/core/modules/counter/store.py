import asyncio
from typing import Any

import pymongo
import structlog
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from envios.core.modules.counter.models import Counter, UpdateFn
from envios.errors import StoreUnavailableError

logger = structlog.get_logger(__name__)


class MongoCounterStore:
    """Counter store backed by a MongoDB collection.

    Updates are compare-and-swap: the write is filtered on the value that was
    read, so a concurrent writer makes it match nothing and the update is
    retried against the fresh value. A missing counter is created with
    insert_one, and the unique _id makes concurrent creators collide instead
    of both succeeding.
    """

    def __init__(self, collection: AsyncCollection[dict[str, Any]], max_attempts: int = 5, timeout_ms: int = 2000) -> None:
        self._collection = collection
        self._max_attempts = max_attempts
        self._timeout = timeout_ms / 1000

    async def read(self, key: str) -> int | None:
        try:
            with pymongo.timeout(self._timeout):
                doc = await self._collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to read counter '{key}'") from e
        if doc is None:
            return None
        return Counter.model_validate(doc).seq

    async def atomic_update(self, key: str, fn: UpdateFn) -> int:
        try:
            with pymongo.timeout(self._timeout):
                for attempt in range(1, self._max_attempts + 1):
                    new_value = await self._try_update(key, fn)
                    if new_value is not None:
                        return new_value
                    logger.debug("counter_update_conflict", key=key, attempt=attempt)
        except PyMongoError as e:
            raise StoreUnavailableError(f"Failed to update counter '{key}'") from e

        logger.warning("counter_update_gave_up", key=key, attempts=self._max_attempts)
        raise StoreUnavailableError(f"Counter '{key}' is contended, gave up after {self._max_attempts} attempts")

    async def _try_update(self, key: str, fn: UpdateFn) -> int | None:
        """Single compare-and-swap round. Returns None when another writer won.

        Success is judged on matched_count: a write of an unchanged value matches
        but reports modified_count == 0.
        """
        doc = await self._collection.find_one({"_id": key})
        if doc is None:
            new_value = fn(None)
            try:
                await self._collection.insert_one({"_id": key, "seq": new_value})
            except DuplicateKeyError:
                return None
            return new_value

        current = Counter.model_validate(doc).seq
        new_value = fn(current)
        result = await self._collection.update_one({"_id": key, "seq": current}, {"$set": {"seq": new_value}})
        if result.matched_count != 1:
            return None
        return new_value


class MemoryCounterStore:
    """In-process counter store, for tests and running without a database."""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._values: dict[str, int] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def read(self, key: str) -> int | None:
        return self._values.get(key)

    async def atomic_update(self, key: str, fn: UpdateFn) -> int:
        async with self._lock:
            current = self._values.get(key)
            # Yield so concurrent callers actually interleave at this point
            await asyncio.sleep(0)
            new_value = fn(current)
            self._values[key] = new_value
            return new_value
