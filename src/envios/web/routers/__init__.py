from envios.web.routers.clients import router as clients_router
from envios.web.routers.identifiers import router as identifiers_router
from envios.web.routers.metadata import router as metadata_router
from envios.web.routers.shipments import router as shipments_router
from envios.web.routers.transports import router as transports_router

__all__ = [
    "clients_router",
    "identifiers_router",
    "metadata_router",
    "shipments_router",
    "transports_router",
]
