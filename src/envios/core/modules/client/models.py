from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from envios.core.db import MongoModel


class ClientAddress(BaseModel):
    """Delivery address of a client; shipments copy its text when created."""

    id: UUID = Field(default_factory=uuid4)
    street: str
    city: str = ""
    title: str = ""  # Short label, e.g. "Depósito"
    is_default: bool = False

    def display(self) -> str:
        return ", ".join(part for part in (self.street, self.city) if part)


class ClientDetails(BaseModel):
    business_name: str = ""
    client_code: str = ""
    email: str = ""
    phone: str = ""
    addresses: list[ClientAddress] = Field(default_factory=list)


class Client(MongoModel, ClientDetails):
    """Client directory entry. client_code is unique."""

    @property
    def default_address(self) -> ClientAddress | None:
        """Address flagged as default, else the first one, else None."""
        return next((address for address in self.addresses if address.is_default), None) or next(
            iter(self.addresses), None
        )
