from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from importlib.metadata import PackageNotFoundError, version
from typing import Any
from uuid import UUID

from envios.config import Config
from envios.core.core import Core
from envios.core.modules.client.models import Client, ClientDetails
from envios.core.modules.identifier.codec import decode_invoice, decode_remito, remito_prefix
from envios.core.modules.identifier.models import INVOICE_PREFIXES, InvoiceIdentifier, InvoiceType, RemitoIdentifier, RemitoType
from envios.core.modules.shipment.models import ShipmentDraft, ShipmentStatus, ShipmentView
from envios.core.modules.transport.models import Transport, TransportDetails
from envios.core.pagination import PaginationResult


class App:
    """Facade for all application operations, delegating to Core services."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def preview_shipment_number(self) -> str:
        """Number the next created shipment will most likely get (not reserved)."""
        return await self._core.services.counter.peek_next()

    async def list_shipments(
        self,
        limit: int = 50,
        offset: int = 0,
        status: ShipmentStatus | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> PaginationResult[ShipmentView]:
        result = await self._core.services.shipment.list_shipments(limit, offset, status, date_from, date_to)
        return PaginationResult(
            items=[ShipmentView.from_domain(shipment) for shipment in result.items],
            total=result.total,
            limit=result.limit,
            offset=result.offset,
        )

    async def get_shipment(self, shipment_id: UUID) -> ShipmentView:
        shipment = await self._core.services.shipment.get_shipment(shipment_id)
        return ShipmentView.from_domain(shipment)

    async def get_shipment_by_number(self, shipment_number: str) -> ShipmentView:
        shipment = await self._core.services.shipment.get_shipment_by_number(shipment_number)
        return ShipmentView.from_domain(shipment)

    async def create_shipment(self, draft: ShipmentDraft) -> ShipmentView:
        shipment = await self._core.services.shipment.create_shipment(draft)
        return ShipmentView.from_domain(shipment)

    async def update_shipment(self, shipment_id: UUID, changes: dict[str, Any]) -> ShipmentView:
        """Partially update a shipment (only provided fields change)."""
        shipment = await self._core.services.shipment.update_shipment(shipment_id, changes)
        return ShipmentView.from_domain(shipment)

    async def set_shipment_status(self, shipment_id: UUID, status: ShipmentStatus) -> ShipmentView:
        shipment = await self._core.services.shipment.set_status(shipment_id, status)
        return ShipmentView.from_domain(shipment)

    async def delete_shipment(self, shipment_id: UUID) -> None:
        await self._core.services.shipment.delete_shipment(shipment_id)

    # === Clients ===
    async def list_clients(self) -> list[Client]:
        return await self._core.services.client.list_clients()

    async def get_client(self, client_id: UUID) -> Client:
        return await self._core.services.client.get_client(client_id)

    async def get_client_by_code(self, client_code: str) -> Client:
        return await self._core.services.client.get_client_by_code(client_code)

    async def create_client(self, details: ClientDetails) -> Client:
        return await self._core.services.client.create_client(details)

    async def update_client(self, client_id: UUID, changes: dict[str, Any]) -> Client:
        return await self._core.services.client.update_client(client_id, changes)

    async def delete_client(self, client_id: UUID) -> None:
        await self._core.services.client.delete_client(client_id)

    # === Transports ===
    async def list_transports(self) -> list[Transport]:
        return await self._core.services.transport.list_transports()

    async def get_transport(self, transport_id: UUID) -> Transport:
        return await self._core.services.transport.get_transport(transport_id)

    async def get_transport_by_code(self, transport_code: str) -> Transport:
        return await self._core.services.transport.get_transport_by_code(transport_code)

    async def create_transport(self, details: TransportDetails) -> Transport:
        return await self._core.services.transport.create_transport(details)

    async def update_transport(self, transport_id: UUID, changes: dict[str, Any]) -> Transport:
        return await self._core.services.transport.update_transport(transport_id, changes)

    async def delete_transport(self, transport_id: UUID) -> None:
        await self._core.services.transport.delete_transport(transport_id)

    # === Identifier helpers ===
    @staticmethod
    def decode_remito(value: str) -> RemitoIdentifier:
        return decode_remito(value)

    @staticmethod
    def decode_invoice(value: str) -> InvoiceIdentifier:
        return decode_invoice(value)

    @staticmethod
    def get_identifier_types() -> dict[str, dict[str, str]]:
        """Literal prefix written before the suffix, per remito and invoice type."""
        return {
            "remito": {remito_type: remito_prefix(remito_type) for remito_type in RemitoType},
            "invoice": {invoice_type: INVOICE_PREFIXES[invoice_type] for invoice_type in InvoiceType},
        }

    def get_version(self) -> dict[str, str]:
        try:
            package_version = version("envios")
        except PackageNotFoundError:
            package_version = "unknown"
        return {
            "version": package_version,
            "git_commit_hash": self._core.config.git_commit_hash,
            "build_time": self._core.config.build_time,
        }
