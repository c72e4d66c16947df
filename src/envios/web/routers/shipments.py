from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from envios.core.modules.identifier.models import InvoiceIdentifier, RemitoIdentifier
from envios.core.modules.shipment.models import ShipmentDraft, ShipmentStatus, ShipmentView
from envios.core.pagination import PaginationResult
from envios.web.deps import AppDep
from envios.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["shipments"])


class CreateShipmentRequest(ShipmentDraft):
    """Request to create a new shipment. The shipment number is assigned by the server."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client": "Farmacia Central",
                    "client_code": "C-0142",
                    "transport": "Expreso Sur",
                    "date": "2025-03-14",
                    "packages": 12,
                    "pallets": 2,
                    "status": "pending",
                    "remito": {"type": "R", "suffix": "00012345"},
                    "invoice": {"type": "A", "suffix": "00004567"},
                    "has_cold_chain": True,
                }
            ]
        }
    }


class UpdateShipmentRequest(BaseModel):
    """Partial shipment update. Only fields present in the request are changed."""

    client: str | None = None
    client_code: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    client_address: str | None = None
    transport: str | None = None
    transport_email: str | None = None
    transport_phone: str | None = None
    date: str | None = None
    packages: int | None = Field(None, ge=0)
    pallets: int | None = Field(None, ge=0)
    weight: float | None = None
    declared_value: float | None = None
    shipping_cost: float | None = None
    status: ShipmentStatus | None = None
    delivery_note: str | None = None
    order_note: str | None = None
    notes: str | None = None
    has_cold_chain: bool | None = None
    is_urgent: bool | None = None
    is_fragile: bool | None = None
    remito_triplicado: bool | None = None
    remito: RemitoIdentifier | None = Field(None, description="Remito type and number; empty number clears it")
    invoice: InvoiceIdentifier | None = Field(None, description="Invoice type and number; empty number clears it")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"remito": {"type": "X", "suffix": "777"}, "notes": "Entregar por la tarde"},
            ]
        }
    }


class UpdateStatusRequest(BaseModel):
    status: ShipmentStatus


@router.get(
    "/shipments/next-number",
    summary="Preview next shipment number",
    description=(
        "Returns the number the next created shipment is expected to receive. The number is not reserved: "
        "if two shipments are being prepared at the same time both see the same preview, and the actual "
        "number is assigned only when the shipment is created."
    ),
    operation_id="previewShipmentNumber",
    responses={
        200: {"description": "Next shipment number"},
        503: {"model": ErrorResponse, "description": "Counter store unavailable"},
    },
)
async def preview_shipment_number(app: AppDep) -> dict[str, str]:
    return {"shipment_number": await app.preview_shipment_number()}


@router.get(
    "/shipments",
    summary="List shipments",
    description=(
        "Get paginated shipments, highest shipment number first, optionally filtered by status "
        "and by an inclusive dispatch date range."
    ),
    operation_id="listShipments",
    responses={
        200: {"description": "Paginated list of shipments"},
        400: {"model": ErrorResponse, "description": "date_from is after date_to"},
    },
)
async def list_shipments(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    status: Annotated[ShipmentStatus | None, Query(description="Only shipments with this status")] = None,
    date_from: Annotated[date | None, Query(description="First dispatch date included (YYYY-MM-DD)")] = None,
    date_to: Annotated[date | None, Query(description="Last dispatch date included (YYYY-MM-DD)")] = None,
) -> PaginationResult[ShipmentView]:
    return await app.list_shipments(limit, offset, status, date_from, date_to)


@router.get(
    "/shipments/by-number/{shipment_number}",
    summary="Get shipment by number",
    description="Get a shipment by its number, e.g. `ENV-000042`.",
    operation_id="getShipmentByNumber",
    responses={
        200: {"description": "Shipment details"},
        404: {"model": ErrorResponse, "description": "Shipment not found"},
    },
)
async def get_shipment_by_number(shipment_number: str, app: AppDep) -> ShipmentView:
    return await app.get_shipment_by_number(shipment_number)


@router.post(
    "/shipments",
    summary="Create shipment",
    description=(
        "Create a shipment. A shipment number is allocated atomically; if allocation fails "
        "the shipment is not saved and the request may be retried."
    ),
    operation_id="createShipment",
    status_code=201,
    responses={
        201: {"description": "Shipment created successfully"},
        400: {"model": ErrorResponse, "description": "Missing client code or transport"},
        503: {"model": ErrorResponse, "description": "Counter store unavailable, nothing was saved"},
    },
)
async def create_shipment(request: CreateShipmentRequest, app: AppDep) -> ShipmentView:
    return await app.create_shipment(request)


@router.get(
    "/shipments/{shipment_id}",
    summary="Get shipment",
    description="Get a shipment by id, with remito and invoice decoded for editing.",
    operation_id="getShipment",
    responses={
        200: {"description": "Shipment details"},
        404: {"model": ErrorResponse, "description": "Shipment not found"},
    },
)
async def get_shipment(shipment_id: UUID, app: AppDep) -> ShipmentView:
    return await app.get_shipment(shipment_id)


@router.patch(
    "/shipments/{shipment_id}",
    summary="Update shipment",
    description="Partially update a shipment. The shipment number cannot be changed.",
    operation_id="updateShipment",
    responses={
        200: {"description": "Shipment updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid shipment data"},
        404: {"model": ErrorResponse, "description": "Shipment not found"},
    },
)
async def update_shipment(shipment_id: UUID, request: UpdateShipmentRequest, app: AppDep) -> ShipmentView:
    return await app.update_shipment(shipment_id, request.model_dump(exclude_unset=True))


@router.put(
    "/shipments/{shipment_id}/status",
    summary="Set shipment status",
    description="Mark a shipment as pending or sent.",
    operation_id="setShipmentStatus",
    responses={
        200: {"description": "Status updated"},
        404: {"model": ErrorResponse, "description": "Shipment not found"},
    },
)
async def set_shipment_status(shipment_id: UUID, request: UpdateStatusRequest, app: AppDep) -> ShipmentView:
    return await app.set_shipment_status(shipment_id, request.status)


@router.delete(
    "/shipments/{shipment_id}",
    summary="Delete shipment",
    description="Delete a shipment. Its number is not reused.",
    operation_id="deleteShipment",
    status_code=204,
    responses={
        204: {"description": "Shipment deleted"},
        404: {"model": ErrorResponse, "description": "Shipment not found"},
    },
)
async def delete_shipment(shipment_id: UUID, app: AppDep) -> None:
    await app.delete_shipment(shipment_id)
