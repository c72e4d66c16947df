from typing import Any
from uuid import UUID

import pydantic
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from envios.core.core import Service
from envios.core.modules.client.models import Client, ClientDetails
from envios.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def validate_client(details: ClientDetails) -> None:
    if not details.business_name.strip():
        raise ValidationError("Business name is required")
    if not details.client_code.strip():
        raise ValidationError("Client code is required")
    if sum(address.is_default for address in details.addresses) > 1:
        raise ValidationError("Only one address can be the default")


class ClientService(Service):
    """Manages the client directory used to fill in shipments."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("clients")

    async def on_start(self) -> None:
        await self._collection.create_index([("client_code", 1)], unique=True)
        await self._collection.create_index([("business_name", 1)])

    async def _ensure_code_free(self, client_code: str, client_id: UUID | None = None) -> None:
        doc = await self._collection.find_one({"client_code": client_code})
        if doc is not None and doc["_id"] != client_id:
            raise ValidationError(f"Client code already exists: {client_code}")

    async def create_client(self, details: ClientDetails) -> Client:
        validate_client(details)
        await self._ensure_code_free(details.client_code)

        client = Client(**details.model_dump())
        try:
            await self._collection.insert_one(client.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError(f"Client code already exists: {client.client_code}") from e
        logger.info("client_created", client_code=client.client_code, business_name=client.business_name)
        return client

    async def get_client(self, client_id: UUID) -> Client:
        doc = await self._collection.find_one({"_id": client_id})
        if not doc:
            raise NotFoundError(f"Client not found: {client_id}")
        return Client.model_validate(doc)

    async def get_client_by_code(self, client_code: str) -> Client:
        doc = await self._collection.find_one({"client_code": client_code})
        if not doc:
            raise NotFoundError(f"Client not found: {client_code}")
        return Client.model_validate(doc)

    async def list_clients(self) -> list[Client]:
        """All clients ordered by business name, ignoring case."""
        docs = await self._collection.find({}).to_list()
        clients = [Client.model_validate(doc) for doc in docs]
        return sorted(clients, key=lambda client: client.business_name.casefold())

    async def update_client(self, client_id: UUID, changes: dict[str, Any]) -> Client:
        """Partially update a client. Addresses are replaced as a whole list."""
        unknown = set(changes) - set(ClientDetails.model_fields)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        client = await self.get_client(client_id)
        if not changes:
            return client
        try:
            merged = ClientDetails.model_validate({**client.model_dump(include=set(ClientDetails.model_fields)), **changes})
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid client data: {e}") from e
        validate_client(merged)
        if merged.client_code != client.client_code:
            await self._ensure_code_free(merged.client_code, client_id)

        update_doc = merged.model_dump(include=set(changes))
        try:
            await self._collection.update_one({"_id": client_id}, {"$set": update_doc})
        except DuplicateKeyError as e:
            raise ValidationError(f"Client code already exists: {merged.client_code}") from e
        logger.debug("update_client", client_id=client_id, fields=sorted(changes))
        return await self.get_client(client_id)

    async def delete_client(self, client_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": client_id})
        if result.deleted_count == 0:
            raise NotFoundError(f"Client not found: {client_id}")
        logger.info("client_deleted", client_id=client_id)
