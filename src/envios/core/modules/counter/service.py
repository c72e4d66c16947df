from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from envios.core.core import Service
from envios.core.modules.counter.models import CounterStore, format_shipment_number

logger = structlog.get_logger(__name__)


class CounterService(Service):
    """Allocates shipment numbers from a single persistent counter."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], store: CounterStore, key: str) -> None:
        super().__init__(database)
        self._store = store
        self._key = key

    async def peek_next(self) -> str:
        """Return the number the next allocation would produce, without consuming it.

        Concurrent callers may see the same value; only allocate_next is binding.
        """
        current = await self._store.read(self._key)
        return format_shipment_number((current or 0) + 1)

    async def allocate_next(self) -> str:
        """Atomically increment the counter and return the new shipment number.

        Raises StoreUnavailableError if the store cannot commit the increment;
        the counter is unchanged in that case.
        """
        value = await self._store.atomic_update(self._key, lambda current: (current or 0) + 1)
        logger.debug("shipment_number_allocated", key=self._key, value=value)
        return format_shipment_number(value)
