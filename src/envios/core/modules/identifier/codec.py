"""Encoding and decoding of remito and invoice display strings.

Remito:  "R - 0003 - 123", "X - R00001 - 123", "RM - 123"
Invoice: "A 00001-123", "B 00001-123", "E 00004-123"

Decoding is total: strings that match no known pattern are kept whole as the
suffix of the family's default type, so legacy free-text values survive an
edit round trip.
"""

from envios.core.modules.identifier.models import (
    DEFAULT_INVOICE_TYPE,
    DEFAULT_REMITO_TYPE,
    INVOICE_PREFIXES,
    REMITO_SERIES,
    InvoiceIdentifier,
    InvoiceType,
    RemitoIdentifier,
    RemitoType,
)
from envios.errors import InvalidTypeError


def remito_prefix(remito_type: RemitoType) -> str:
    """Literal text that precedes the suffix in an encoded remito."""
    series = REMITO_SERIES[remito_type]
    if not series:
        return f"{remito_type} - "
    return f"{remito_type} - {series} - "


# Decode priority order
REMITO_PATTERNS: list[tuple[RemitoType, str]] = [(t, remito_prefix(t)) for t in (RemitoType.R, RemitoType.X, RemitoType.RM)]
INVOICE_PATTERNS: list[tuple[InvoiceType, str]] = [(t, INVOICE_PREFIXES[t]) for t in (InvoiceType.A, InvoiceType.B, InvoiceType.E)]


def _coerce[E: (RemitoType, InvoiceType)](enum_cls: type[E], value: E | str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidTypeError(f"Invalid {enum_cls.__name__} '{value}', expected one of: {allowed}") from None


def _match_prefix[E: (RemitoType, InvoiceType)](patterns: list[tuple[E, str]], value: str) -> tuple[E, str] | None:
    for identifier_type, prefix in patterns:
        # The suffix must be non-empty for the pattern to count as a match
        if value.startswith(prefix) and len(value) > len(prefix):
            return identifier_type, value[len(prefix) :]
    return None


def encode_remito(remito_type: RemitoType | str, suffix: str) -> str:
    """Build the canonical remito string. Empty suffix means no remito is set."""
    remito_type = _coerce(RemitoType, remito_type)
    if not suffix:
        return ""
    return f"{remito_prefix(remito_type)}{suffix}"


def decode_remito(value: str | None) -> RemitoIdentifier:
    """Split a stored remito string back into type and suffix. Never raises."""
    if not value:
        return RemitoIdentifier(type=DEFAULT_REMITO_TYPE, suffix="")
    match = _match_prefix(REMITO_PATTERNS, value)
    if match is None:
        return RemitoIdentifier(type=DEFAULT_REMITO_TYPE, suffix=value)
    remito_type, suffix = match
    return RemitoIdentifier(type=remito_type, suffix=suffix)


def encode_invoice(invoice_type: InvoiceType | str, suffix: str) -> str:
    """Build the canonical invoice string. Empty suffix means no invoice is set."""
    invoice_type = _coerce(InvoiceType, invoice_type)
    if not suffix:
        return ""
    return f"{INVOICE_PREFIXES[invoice_type]}{suffix}"


def decode_invoice(value: str | None) -> InvoiceIdentifier:
    """Split a stored invoice string back into type and suffix. Never raises."""
    if not value:
        return InvoiceIdentifier(type=DEFAULT_INVOICE_TYPE, suffix="")
    match = _match_prefix(INVOICE_PATTERNS, value)
    if match is None:
        return InvoiceIdentifier(type=DEFAULT_INVOICE_TYPE, suffix=value)
    invoice_type, suffix = match
    return InvoiceIdentifier(type=invoice_type, suffix=suffix)


def encode_remito_identifier(identifier: RemitoIdentifier) -> str:
    return encode_remito(identifier.type, identifier.suffix)


def encode_invoice_identifier(identifier: InvoiceIdentifier) -> str:
    return encode_invoice(identifier.type, identifier.suffix)
