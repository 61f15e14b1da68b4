"""
Unit tests for address header parsing (addresses.py).
"""

import pytest

from eml_reader.models.extracted import AddressRecord
from eml_reader.parsing.addresses import (
    get_email_address,
    parse_address_list,
    to_email_address,
)


class TestParseAddressList:
    """Tests for parse_address_list()."""

    @pytest.mark.unit
    def test_quoted_names(self):
        records = parse_address_list('"A" <a@x.com>, "B" <b@x.com>')
        assert records == [
            AddressRecord(name="A", email="a@x.com"),
            AddressRecord(name="B", email="b@x.com"),
        ]

    @pytest.mark.unit
    def test_bare_address(self):
        assert parse_address_list("a@x.com") == [AddressRecord(name=None, email="a@x.com")]

    @pytest.mark.unit
    def test_comma_inside_quoted_name(self):
        records = parse_address_list('"Doe, John" <john@x.com>')
        assert records == [AddressRecord(name="Doe, John", email="john@x.com")]

    @pytest.mark.unit
    def test_encoded_display_name(self):
        records = parse_address_list("=?UTF-8?B?R3LDvMOfZSBhdXMgS8O2bG4=?= <koeln@example.com>")
        assert records == [AddressRecord(name="Grüße aus Köln", email="koeln@example.com")]

    @pytest.mark.unit
    def test_folded_list(self):
        records = parse_address_list("a@x.com,\r\nb@x.com")
        assert [record.email for record in records] == ["a@x.com", "b@x.com"]

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty(self, raw):
        assert parse_address_list(raw) == []


class TestGetEmailAddress:
    """Tests for get_email_address()."""

    @pytest.mark.unit
    def test_single_address_is_scalar(self):
        result = get_email_address("Sender <sender@example.com>")
        assert result == AddressRecord(name="Sender", email="sender@example.com")

    @pytest.mark.unit
    def test_multiple_addresses_are_a_list(self):
        result = get_email_address("a@x.com, b@x.com")
        assert isinstance(result, list)
        assert len(result) == 2

    @pytest.mark.unit
    def test_missing_header(self):
        assert get_email_address(None) is None


class TestToEmailAddress:
    """Tests for to_email_address()."""

    @pytest.mark.unit
    def test_single_record(self):
        record = AddressRecord(name="PayPal", email="noreply@paypal.com")
        assert to_email_address(record) == '"PayPal" <noreply@paypal.com>'

    @pytest.mark.unit
    def test_list_of_records(self):
        records = [
            AddressRecord(name="A", email="a@x.com"),
            AddressRecord(email="b@x.com"),
        ]
        assert to_email_address(records) == '"A" <a@x.com>, <b@x.com>'

    @pytest.mark.unit
    def test_string_is_passed_through(self):
        assert to_email_address("raw@x.com") == "raw@x.com"

    @pytest.mark.unit
    def test_none(self):
        assert to_email_address(None) == ""

    @pytest.mark.unit
    def test_round_trip(self):
        raw = '"A" <a@x.com>, "B" <b@x.com>'
        assert to_email_address(get_email_address(raw)) == raw
