from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from envios.config import Config
from envios.core.modules.counter.store import MongoCounterStore

if TYPE_CHECKING:
    from envios.core.modules.client.service import ClientService
    from envios.core.modules.counter.models import CounterStore
    from envios.core.modules.counter.service import CounterService
    from envios.core.modules.shipment.service import ShipmentService
    from envios.core.modules.transport.service import TransportService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry. Initialization order is start order."""

    counter: CounterService
    client: ClientService
    transport: TransportService
    shipment: ShipmentService

    def __init__(self, database: AsyncDatabase[dict[str, Any]], counter_store: CounterStore, counter_key: str) -> None:
        from envios.core.modules.client.service import ClientService  # noqa: PLC0415
        from envios.core.modules.counter.service import CounterService  # noqa: PLC0415
        from envios.core.modules.shipment.service import ShipmentService  # noqa: PLC0415
        from envios.core.modules.transport.service import TransportService  # noqa: PLC0415

        self.counter = CounterService(database, counter_store, counter_key)
        self.client = ClientService(database)
        self.transport = TransportService(database)
        self.shipment = ShipmentService(database)
        self._services: list[Service] = [self.counter, self.client, self.transport, self.shipment]

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and the shipment counter store."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard")
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        counter_store = MongoCounterStore(
            self.database.get_collection("counters"),
            max_attempts=config.counter_max_attempts,
            timeout_ms=config.counter_timeout_ms,
        )
        self.services = Services(self.database, counter_store, config.counter_key)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
