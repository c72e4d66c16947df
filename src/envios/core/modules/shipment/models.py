from datetime import datetime
from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field

from envios.core.db import MongoModel
from envios.core.modules.identifier.codec import decode_invoice, decode_remito
from envios.core.modules.identifier.models import InvoiceIdentifier, RemitoIdentifier
from envios.core.modules.shipment.formatting import format_pallets_and_packages
from envios.utils import now


class ShipmentStatus(StrEnum):
    PENDING = "pending"
    SENT = "sent"


class ShipmentDetails(BaseModel):
    """Shipment fields entered by staff, shared by drafts and stored shipments."""

    client: str = ""
    client_code: str = ""
    client_email: str = ""
    client_phone: str = ""
    client_address: str = ""
    transport: str = ""
    transport_email: str = ""
    transport_phone: str = ""
    date: str = ""  # Dispatch date as entered, YYYY-MM-DD
    packages: int = Field(0, ge=0)
    pallets: int = Field(0, ge=0)
    weight: float | None = None
    declared_value: float | None = None
    shipping_cost: float | None = None
    status: ShipmentStatus = ShipmentStatus.PENDING
    delivery_note: str = ""  # Manually entered delivery note number
    order_note: str = ""
    notes: str = ""
    has_cold_chain: bool = False
    is_urgent: bool = False
    is_fragile: bool = False
    remito_triplicado: bool = False


class ShipmentDraft(ShipmentDetails):
    """A shipment before it has a number; identifiers still in decoded form."""

    remito: RemitoIdentifier = Field(default_factory=RemitoIdentifier)
    invoice: InvoiceIdentifier = Field(default_factory=InvoiceIdentifier)


class Shipment(MongoModel, ShipmentDetails):
    """Stored shipment. remit_number and invoice_number hold the encoded display strings."""

    shipment_number: str  # ENV-NNNNNN, assigned once at creation
    remit_number: str = ""
    invoice_number: str = ""
    created_at: datetime = Field(default_factory=now)
    edited_at: datetime | None = None


class ShipmentView(Shipment):
    """Shipment with its identifiers decoded for editing screens."""

    remito: RemitoIdentifier
    invoice: InvoiceIdentifier
    pallets_and_packages: str

    @classmethod
    def from_domain(cls, shipment: Shipment) -> Self:
        return cls(
            **shipment.model_dump(),
            remito=decode_remito(shipment.remit_number),
            invoice=decode_invoice(shipment.invoice_number),
            pallets_and_packages=format_pallets_and_packages(shipment.pallets, shipment.packages),
        )
