"""Remito and invoice identifier families."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class RemitoType(StrEnum):
    """Remito (delivery note) book types."""

    R = "R"
    X = "X"
    RM = "RM"


class InvoiceType(StrEnum):
    """Invoice letters."""

    A = "A"
    B = "B"
    E = "E"


# Series per remito type; RM carries no series segment
REMITO_SERIES: dict[RemitoType, str] = {
    RemitoType.R: "0003",
    RemitoType.X: "R00001",
    RemitoType.RM: "",
}

INVOICE_PREFIXES: dict[InvoiceType, str] = {
    InvoiceType.A: "A 00001-",
    InvoiceType.B: "B 00001-",
    InvoiceType.E: "E 00004-",
}

DEFAULT_REMITO_TYPE = RemitoType.R
DEFAULT_INVOICE_TYPE = InvoiceType.A


class RemitoIdentifier(BaseModel):
    """Decoded remito number: type plus the user-entered number within its series."""

    type: RemitoType = DEFAULT_REMITO_TYPE
    suffix: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def series(self) -> str:
        return REMITO_SERIES[self.type]


class InvoiceIdentifier(BaseModel):
    """Decoded invoice number: type plus the user-entered number after the prefix."""

    type: InvoiceType = DEFAULT_INVOICE_TYPE
    suffix: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def prefix(self) -> str:
        return INVOICE_PREFIXES[self.type]
