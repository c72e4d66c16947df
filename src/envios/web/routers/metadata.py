"""Metadata endpoints for exposing system information."""

from fastapi import APIRouter

from envios.web.deps import AppDep

router = APIRouter(tags=["metadata"])


@router.get(
    "/metadata/identifier-types",
    summary="Get remito and invoice types",
    description=(
        "Returns, for each remito and invoice type, the literal text written before the user-entered number. "
        "The frontend uses it to build the type selectors and preview the stored format."
    ),
    operation_id="getIdentifierTypes",
    responses={200: {"description": "Prefix per type, grouped by family"}},
)
async def get_identifier_types(app: AppDep) -> dict[str, dict[str, str]]:
    return app.get_identifier_types()


@router.get(
    "/metadata/version",
    summary="Get version information",
    description="Returns package version, git commit hash and build time.",
    operation_id="getVersion",
    responses={200: {"description": "Version and build information"}},
)
async def get_version(app: AppDep) -> dict[str, str]:
    return app.get_version()
