from typing import Any
from uuid import UUID

import pydantic
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from envios.core.core import Service
from envios.core.modules.transport.models import Transport, TransportDetails
from envios.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def validate_transport(details: TransportDetails) -> None:
    if not details.name.strip():
        raise ValidationError("Transport name is required")
    if not details.transport_code.strip():
        raise ValidationError("Transport code is required")


class TransportService(Service):
    """Manages the carriers shipments can be dispatched with."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("transports")

    async def on_start(self) -> None:
        await self._collection.create_index([("transport_code", 1)], unique=True)

    async def _ensure_code_free(self, transport_code: str, transport_id: UUID | None = None) -> None:
        doc = await self._collection.find_one({"transport_code": transport_code})
        if doc is not None and doc["_id"] != transport_id:
            raise ValidationError(f"Transport code already exists: {transport_code}")

    async def create_transport(self, details: TransportDetails) -> Transport:
        validate_transport(details)
        await self._ensure_code_free(details.transport_code)

        transport = Transport(**details.model_dump())
        try:
            await self._collection.insert_one(transport.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError(f"Transport code already exists: {transport.transport_code}") from e
        logger.info("transport_created", transport_code=transport.transport_code, name=transport.name)
        return transport

    async def get_transport(self, transport_id: UUID) -> Transport:
        doc = await self._collection.find_one({"_id": transport_id})
        if not doc:
            raise NotFoundError(f"Transport not found: {transport_id}")
        return Transport.model_validate(doc)

    async def get_transport_by_code(self, transport_code: str) -> Transport:
        doc = await self._collection.find_one({"transport_code": transport_code})
        if not doc:
            raise NotFoundError(f"Transport not found: {transport_code}")
        return Transport.model_validate(doc)

    async def list_transports(self) -> list[Transport]:
        docs = await self._collection.find({}).to_list()
        return sorted((Transport.model_validate(doc) for doc in docs), key=lambda transport: transport.name.casefold())

    async def update_transport(self, transport_id: UUID, changes: dict[str, Any]) -> Transport:
        unknown = set(changes) - set(TransportDetails.model_fields)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        transport = await self.get_transport(transport_id)
        if not changes:
            return transport
        try:
            merged = TransportDetails.model_validate(
                {**transport.model_dump(include=set(TransportDetails.model_fields)), **changes}
            )
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid transport data: {e}") from e
        validate_transport(merged)
        if merged.transport_code != transport.transport_code:
            await self._ensure_code_free(merged.transport_code, transport_id)

        try:
            await self._collection.update_one({"_id": transport_id}, {"$set": merged.model_dump(include=set(changes))})
        except DuplicateKeyError as e:
            raise ValidationError(f"Transport code already exists: {merged.transport_code}") from e
        logger.debug("update_transport", transport_id=transport_id, fields=sorted(changes))
        return await self.get_transport(transport_id)

    async def delete_transport(self, transport_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": transport_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Transport not found: {transport_id}")
        logger.info("transport_deleted", transport_id=transport_id)
