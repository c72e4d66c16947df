"""Tests for remito and invoice encoding/decoding."""

import pytest

from envios.core.modules.identifier.codec import decode_invoice, decode_remito, encode_invoice, encode_remito
from envios.core.modules.identifier.models import InvoiceIdentifier, InvoiceType, RemitoIdentifier, RemitoType
from envios.errors import InvalidTypeError


class TestEncodeRemito:
    """Tests for encode_remito."""

    def test_r_includes_series(self):
        assert encode_remito(RemitoType.R, "123") == "R - 0003 - 123"

    def test_x_includes_series(self):
        assert encode_remito(RemitoType.X, "456") == "X - R00001 - 456"

    def test_rm_has_no_series(self):
        assert encode_remito(RemitoType.RM, "789") == "RM - 789"

    def test_plain_string_type_accepted(self):
        assert encode_remito("X", "1") == "X - R00001 - 1"

    @pytest.mark.parametrize("remito_type", list(RemitoType))
    def test_empty_suffix_encodes_to_empty(self, remito_type):
        assert encode_remito(remito_type, "") == ""

    def test_unknown_type_raises(self):
        with pytest.raises(InvalidTypeError, match="expected one of: R, X, RM"):
            encode_remito("Z", "123")

    def test_invoice_type_is_not_a_remito_type(self):
        with pytest.raises(InvalidTypeError):
            encode_remito("A", "123")


class TestDecodeRemito:
    """Tests for decode_remito."""

    def test_decode_r(self):
        assert decode_remito("R - 0003 - 123") == RemitoIdentifier(type=RemitoType.R, suffix="123")

    def test_decode_x(self):
        assert decode_remito("X - R00001 - 00045") == RemitoIdentifier(type=RemitoType.X, suffix="00045")

    def test_decode_rm(self):
        assert decode_remito("RM - 9") == RemitoIdentifier(type=RemitoType.RM, suffix="9")

    def test_empty_returns_default(self):
        assert decode_remito("") == RemitoIdentifier(type=RemitoType.R, suffix="")

    def test_none_returns_default(self):
        assert decode_remito(None) == RemitoIdentifier(type=RemitoType.R, suffix="")

    def test_free_text_kept_whole(self):
        value = "some free text that matches no pattern"
        assert decode_remito(value) == RemitoIdentifier(type=RemitoType.R, suffix=value)

    def test_suffix_captured_verbatim(self):
        """The remainder is not interpreted further, even if it looks like another pattern."""
        assert decode_remito("RM - X - R00001 - 5") == RemitoIdentifier(type=RemitoType.RM, suffix="X - R00001 - 5")

    def test_prefix_without_suffix_falls_back(self):
        assert decode_remito("R - 0003 - ") == RemitoIdentifier(type=RemitoType.R, suffix="R - 0003 - ")

    def test_wrong_series_falls_back(self):
        assert decode_remito("X - 0003 - 12") == RemitoIdentifier(type=RemitoType.R, suffix="X - 0003 - 12")

    def test_match_is_anchored_at_start(self):
        assert decode_remito(" R - 0003 - 12") == RemitoIdentifier(type=RemitoType.R, suffix=" R - 0003 - 12")

    @pytest.mark.parametrize("remito_type", list(RemitoType))
    @pytest.mark.parametrize("suffix", ["1", "0001-ABC", "R - 0003 - 7", "  spaced  "])
    def test_round_trip(self, remito_type, suffix):
        decoded = decode_remito(encode_remito(remito_type, suffix))
        assert (decoded.type, decoded.suffix) == (remito_type, suffix)

    def test_series_property(self):
        assert RemitoIdentifier(type=RemitoType.X, suffix="1").series == "R00001"
        assert RemitoIdentifier(type=RemitoType.RM, suffix="1").series == ""


class TestEncodeInvoice:
    """Tests for encode_invoice."""

    def test_a(self):
        assert encode_invoice(InvoiceType.A, "12") == "A 00001-12"

    def test_b(self):
        assert encode_invoice(InvoiceType.B, "12") == "B 00001-12"

    def test_e(self):
        assert encode_invoice(InvoiceType.E, "4567") == "E 00004-4567"

    @pytest.mark.parametrize("invoice_type", list(InvoiceType))
    def test_empty_suffix_encodes_to_empty(self, invoice_type):
        assert encode_invoice(invoice_type, "") == ""

    def test_unknown_type_raises(self):
        with pytest.raises(InvalidTypeError, match="expected one of: A, B, E"):
            encode_invoice("C", "1")


class TestDecodeInvoice:
    """Tests for decode_invoice."""

    def test_decode_e(self):
        assert decode_invoice("E 00004-4567") == InvoiceIdentifier(type=InvoiceType.E, suffix="4567")

    def test_decode_b(self):
        assert decode_invoice("B 00001-000123") == InvoiceIdentifier(type=InvoiceType.B, suffix="000123")

    def test_empty_returns_default(self):
        assert decode_invoice("") == InvoiceIdentifier(type=InvoiceType.A, suffix="")

    def test_free_text_kept_whole(self):
        value = "some free text that matches no pattern"
        assert decode_invoice(value) == InvoiceIdentifier(type=InvoiceType.A, suffix=value)

    def test_wrong_point_of_sale_falls_back(self):
        assert decode_invoice("E 00001-5") == InvoiceIdentifier(type=InvoiceType.A, suffix="E 00001-5")

    @pytest.mark.parametrize("invoice_type", list(InvoiceType))
    @pytest.mark.parametrize("suffix", ["1", "00001234", "A 00001-9"])
    def test_round_trip(self, invoice_type, suffix):
        decoded = decode_invoice(encode_invoice(invoice_type, suffix))
        assert (decoded.type, decoded.suffix) == (invoice_type, suffix)

    def test_prefix_property(self):
        assert InvoiceIdentifier(type=InvoiceType.E, suffix="1").prefix == "E 00004-"
