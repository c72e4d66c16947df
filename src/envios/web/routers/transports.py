from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel

from envios.core.modules.transport.models import Transport, TransportDetails
from envios.web.deps import AppDep
from envios.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["transports"])


class CreateTransportRequest(TransportDetails):
    """Request to create a transport. Name and transport code are required."""


class UpdateTransportRequest(BaseModel):
    name: str | None = None
    transport_code: str | None = None
    email: str | None = None
    phone: str | None = None


@router.get(
    "/transports",
    summary="List transports",
    description="Get all transports ordered by name.",
    operation_id="listTransports",
    responses={200: {"description": "List of transports"}},
)
async def list_transports(app: AppDep) -> list[Transport]:
    return await app.list_transports()


@router.get(
    "/transports/by-code/{transport_code}",
    summary="Get transport by code",
    operation_id="getTransportByCode",
    responses={
        200: {"description": "Transport details"},
        404: {"model": ErrorResponse, "description": "Transport not found"},
    },
)
async def get_transport_by_code(transport_code: str, app: AppDep) -> Transport:
    return await app.get_transport_by_code(transport_code)


@router.post(
    "/transports",
    summary="Create transport",
    operation_id="createTransport",
    status_code=201,
    responses={
        201: {"description": "Transport created successfully"},
        400: {"model": ErrorResponse, "description": "Missing fields or transport code already in use"},
    },
)
async def create_transport(request: CreateTransportRequest, app: AppDep) -> Transport:
    return await app.create_transport(request)


@router.get(
    "/transports/{transport_id}",
    summary="Get transport",
    operation_id="getTransport",
    responses={
        200: {"description": "Transport details"},
        404: {"model": ErrorResponse, "description": "Transport not found"},
    },
)
async def get_transport(transport_id: UUID, app: AppDep) -> Transport:
    return await app.get_transport(transport_id)


@router.patch(
    "/transports/{transport_id}",
    summary="Update transport",
    operation_id="updateTransport",
    responses={
        200: {"description": "Transport updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid transport data or transport code already in use"},
        404: {"model": ErrorResponse, "description": "Transport not found"},
    },
)
async def update_transport(transport_id: UUID, request: UpdateTransportRequest, app: AppDep) -> Transport:
    return await app.update_transport(transport_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/transports/{transport_id}",
    summary="Delete transport",
    operation_id="deleteTransport",
    status_code=204,
    responses={
        204: {"description": "Transport deleted"},
        404: {"model": ErrorResponse, "description": "Transport not found"},
    },
)
async def delete_transport(transport_id: UUID, app: AppDep) -> None:
    await app.delete_transport(transport_id)
