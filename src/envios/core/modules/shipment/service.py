from datetime import date, timedelta
from typing import Any
from uuid import UUID

import pydantic
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from envios.core.core import Service
from envios.core.modules.identifier.codec import (
    decode_invoice,
    decode_remito,
    encode_invoice_identifier,
    encode_remito_identifier,
)
from envios.core.modules.shipment.formatting import sort_by_shipment_number
from envios.core.modules.shipment.models import Shipment, ShipmentDetails, ShipmentDraft, ShipmentStatus
from envios.core.pagination import PaginationResult
from envios.errors import NotFoundError, ValidationError
from envios.utils import now

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = frozenset(ShipmentDetails.model_fields) | {"remito", "invoice"}


def ensure_required_fields(details: ShipmentDetails) -> None:
    if not details.client_code.strip():
        raise ValidationError("Client code is required")
    if not details.transport.strip():
        raise ValidationError("Transport is required")


class ShipmentService(Service):
    """Manages shipment records, numbering them on creation."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("shipments")

    async def on_start(self) -> None:
        """Create indexes for number lookup and status/date filtering."""
        await self._collection.create_index([("shipment_number", 1)], unique=True)
        await self._collection.create_index([("status", 1)])
        await self._collection.create_index([("date", 1)])

    async def create_shipment(self, draft: ShipmentDraft) -> Shipment:
        """Validate, number and store a new shipment.

        The number is allocated before anything is written, so a failed
        allocation leaves no shipment behind.
        """
        ensure_required_fields(draft)

        remit_number = encode_remito_identifier(draft.remito)
        invoice_number = encode_invoice_identifier(draft.invoice)

        shipment_number = await self.core.services.counter.allocate_next()
        shipment = Shipment(
            **draft.model_dump(exclude={"remito", "invoice"}),
            shipment_number=shipment_number,
            remit_number=remit_number,
            invoice_number=invoice_number,
        )
        await self._collection.insert_one(shipment.to_mongo())
        logger.info("shipment_created", shipment_number=shipment_number, client=shipment.client, status=shipment.status)
        return shipment

    async def get_shipment(self, shipment_id: UUID) -> Shipment:
        doc = await self._collection.find_one({"_id": shipment_id})
        if not doc:
            raise NotFoundError(f"Shipment not found: {shipment_id}")
        return Shipment.model_validate(doc)

    async def get_shipment_by_number(self, shipment_number: str) -> Shipment:
        doc = await self._collection.find_one({"shipment_number": shipment_number})
        if not doc:
            raise NotFoundError(f"Shipment not found: {shipment_number}")
        return Shipment.model_validate(doc)

    async def list_shipments(
        self,
        limit: int = 50,
        offset: int = 0,
        status: ShipmentStatus | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> PaginationResult[Shipment]:
        """Get paginated shipments, newest shipment number first.

        Args:
            limit: Maximum number of shipments to return
            offset: Number of shipments to skip
            status: Only shipments with this status
            date_from: First dispatch day included
            date_to: Last dispatch day included
        """
        query: dict[str, Any] = {}
        if status is not None:
            query["status"] = status
        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValidationError(f"Invalid date range: {date_from} is after {date_to}")
        # date is stored as entered (YYYY-MM-DD, sometimes with a time part), so compare
        # as ISO strings and bound the end by the following day to include the whole of date_to
        date_query: dict[str, str] = {}
        if date_from is not None:
            date_query["$gte"] = date_from.isoformat()
        if date_to is not None:
            date_query["$lt"] = (date_to + timedelta(days=1)).isoformat()
        if date_query:
            query["date"] = date_query

        # Sorted here rather than by the server: ordering is by the numeric value
        # of shipment_number, which a string sort only matches at a fixed width
        docs = await self._collection.find(query).to_list()
        shipments = sort_by_shipment_number(
            [Shipment.model_validate(doc) for doc in docs], key=lambda shipment: shipment.shipment_number
        )
        items = shipments[offset : offset + limit]

        logger.debug("list_shipments", query=query, total=len(shipments), limit=limit, offset=offset, returned=len(items))
        return PaginationResult(items=items, total=len(shipments), limit=limit, offset=offset)

    async def update_shipment(self, shipment_id: UUID, changes: dict[str, Any]) -> Shipment:
        """Partially update a shipment.

        Remito and invoice changes arrive decoded, as {"type", "suffix"}, and
        are stored re-encoded. The shipment number is never editable.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        shipment = await self.get_shipment(shipment_id)
        current = ShipmentDraft(
            **shipment.model_dump(include=set(ShipmentDetails.model_fields)),
            remito=decode_remito(shipment.remit_number),
            invoice=decode_invoice(shipment.invoice_number),
        )
        try:
            merged = ShipmentDraft.model_validate({**current.model_dump(), **changes})
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid shipment data: {e}") from e
        ensure_required_fields(merged)

        update_doc: dict[str, Any] = {"edited_at": now()}
        for field_name in changes:
            if field_name == "remito":
                update_doc["remit_number"] = encode_remito_identifier(merged.remito)
            elif field_name == "invoice":
                update_doc["invoice_number"] = encode_invoice_identifier(merged.invoice)
            else:
                update_doc[field_name] = getattr(merged, field_name)

        await self._collection.update_one({"_id": shipment_id}, {"$set": update_doc})
        logger.debug("update_shipment", shipment_id=shipment_id, fields=sorted(changes))
        return await self.get_shipment(shipment_id)

    async def set_status(self, shipment_id: UUID, status: ShipmentStatus) -> Shipment:
        shipment = await self.get_shipment(shipment_id)
        if shipment.status != status:
            await self._collection.update_one({"_id": shipment_id}, {"$set": {"status": status, "edited_at": now()}})
            logger.info(
                "shipment_status_changed", shipment_number=shipment.shipment_number, old=shipment.status, new=status
            )
        return await self.get_shipment(shipment_id)

    async def delete_shipment(self, shipment_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": shipment_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Shipment not found: {shipment_id}")
        logger.info("shipment_deleted", shipment_id=shipment_id)
