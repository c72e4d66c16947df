from pydantic import BaseModel

from envios.core.db import MongoModel


class TransportDetails(BaseModel):
    name: str = ""
    transport_code: str = ""
    email: str = ""
    phone: str = ""


class Transport(MongoModel, TransportDetails):
    """Carrier directory entry. transport_code is unique."""
