"""Remito and invoice decoding for edit forms."""

from typing import Annotated

from fastapi import APIRouter, Query

from envios.core.modules.identifier.models import InvoiceIdentifier, RemitoIdentifier
from envios.web.deps import AppDep

router: APIRouter = APIRouter(tags=["identifiers"])


@router.get(
    "/identifiers/remito/decode",
    summary="Decode remito number",
    description=(
        "Split a stored remito string (e.g. `R - 0003 - 123`) into type and number. "
        "Values that match no known format are returned whole as the number with type `R`."
    ),
    operation_id="decodeRemito",
    responses={200: {"description": "Decoded remito"}},
)
async def decode_remito(app: AppDep, value: Annotated[str, Query(description="Stored remito string")] = "") -> RemitoIdentifier:
    return app.decode_remito(value)


@router.get(
    "/identifiers/invoice/decode",
    summary="Decode invoice number",
    description=(
        "Split a stored invoice string (e.g. `E 00004-4567`) into type and number. "
        "Values that match no known format are returned whole as the number with type `A`."
    ),
    operation_id="decodeInvoice",
    responses={200: {"description": "Decoded invoice"}},
)
async def decode_invoice(
    app: AppDep, value: Annotated[str, Query(description="Stored invoice string")] = ""
) -> InvoiceIdentifier:
    return app.decode_invoice(value)
