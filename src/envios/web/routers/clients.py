from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel

from envios.core.modules.client.models import Client, ClientAddress, ClientDetails
from envios.web.deps import AppDep
from envios.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["clients"])


class CreateClientRequest(ClientDetails):
    """Request to create a client. Business name and client code are required."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "business_name": "Farmacia Central",
                    "client_code": "C-0142",
                    "email": "compras@farmaciacentral.com.ar",
                    "phone": "+54 11 4555-0101",
                    "addresses": [{"street": "Av. Rivadavia 1234", "city": "CABA", "is_default": True}],
                }
            ]
        }
    }


class UpdateClientRequest(BaseModel):
    """Partial client update. A provided address list replaces the stored one."""

    business_name: str | None = None
    client_code: str | None = None
    email: str | None = None
    phone: str | None = None
    addresses: list[ClientAddress] | None = None


@router.get(
    "/clients",
    summary="List clients",
    description="Get all clients ordered by business name.",
    operation_id="listClients",
    responses={200: {"description": "List of clients"}},
)
async def list_clients(app: AppDep) -> list[Client]:
    return await app.list_clients()


@router.get(
    "/clients/by-code/{client_code}",
    summary="Get client by code",
    description="Look up a client by its unique client code.",
    operation_id="getClientByCode",
    responses={
        200: {"description": "Client details"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def get_client_by_code(client_code: str, app: AppDep) -> Client:
    return await app.get_client_by_code(client_code)


@router.post(
    "/clients",
    summary="Create client",
    operation_id="createClient",
    status_code=201,
    responses={
        201: {"description": "Client created successfully"},
        400: {"model": ErrorResponse, "description": "Missing fields or client code already in use"},
    },
)
async def create_client(request: CreateClientRequest, app: AppDep) -> Client:
    return await app.create_client(request)


@router.get(
    "/clients/{client_id}",
    summary="Get client",
    operation_id="getClient",
    responses={
        200: {"description": "Client details"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def get_client(client_id: UUID, app: AppDep) -> Client:
    return await app.get_client(client_id)


@router.patch(
    "/clients/{client_id}",
    summary="Update client",
    operation_id="updateClient",
    responses={
        200: {"description": "Client updated successfully"},
        400: {"model": ErrorResponse, "description": "Invalid client data or client code already in use"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def update_client(client_id: UUID, request: UpdateClientRequest, app: AppDep) -> Client:
    return await app.update_client(client_id, request.model_dump(exclude_unset=True))


@router.delete(
    "/clients/{client_id}",
    summary="Delete client",
    description="Delete a client. Shipments keep the client data they were created with.",
    operation_id="deleteClient",
    status_code=204,
    responses={
        204: {"description": "Client deleted"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def delete_client(client_id: UUID, app: AppDep) -> None:
    await app.delete_client(client_id)
