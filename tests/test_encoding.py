"""Tests for credential schemas and attribute encoding."""

import hashlib

import pytest
from pydantic import ValidationError

from clcred.encoding import encode_attribute, encode_attributes
from clcred.exceptions import InvalidAttributeEncoding
from clcred.schema import AttributeType, CredentialSchema

NAME = AttributeType(name="name", encode=True)
AGE = AttributeType(name="age", encode=False)


class TestCredentialSchema:
    def test_from_flags_keeps_order(self):
        schema = CredentialSchema.from_flags({"name": True, "age": False, "sex": True})
        assert schema.attribute_names == ["name", "age", "sex"]
        assert schema.attributes[1] == AGE

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            CredentialSchema(attributes=[NAME, AttributeType(name="name", encode=False)])

    def test_empty_schema_rejected(self):
        with pytest.raises(ValidationError):
            CredentialSchema(attributes=[])

    def test_blank_attribute_name_rejected(self):
        with pytest.raises(ValidationError):
            AttributeType(name="  ", encode=True)


class TestEncodeAttribute:
    def test_encoded_string_is_sha256(self):
        expected = int(hashlib.sha256(b"Alice").hexdigest(), 16)
        assert encode_attribute(NAME, "Alice") == expected

    def test_distinct_values_distinct_encodings(self):
        assert encode_attribute(NAME, "Alice") != encode_attribute(NAME, "Alicf")

    def test_bytes_and_str_agree(self):
        assert encode_attribute(NAME, "Zoë".encode("utf-8")) == encode_attribute(NAME, "Zoë")

    def test_integer_under_encode_uses_string_form(self):
        assert encode_attribute(NAME, 28) == encode_attribute(NAME, "28")

    def test_raw_integer_passes_through(self):
        assert encode_attribute(AGE, 28) == 28

    def test_decimal_string_parsed_when_not_encoded(self):
        assert encode_attribute(AGE, " 28 ") == 28

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_string_rejected(self, value):
        with pytest.raises(InvalidAttributeEncoding) as exc_info:
            encode_attribute(NAME, value)
        assert exc_info.value.attribute == "name"

    def test_invalid_utf8_rejected(self):
        with pytest.raises(InvalidAttributeEncoding, match="UTF-8"):
            encode_attribute(NAME, b"\xff\xfe")

    @pytest.mark.parametrize("value", ["twenty", "-3", -3, True, 2.5, "²"])
    def test_non_integer_rejected_when_not_encoded(self, value):
        with pytest.raises(InvalidAttributeEncoding):
            encode_attribute(AGE, value)

    def test_unsupported_type_rejected(self):
        with pytest.raises(InvalidAttributeEncoding, match="unsupported type"):
            encode_attribute(NAME, 3.14)


class TestEncodeAttributes:
    def test_schema_order(self):
        schema = CredentialSchema(attributes=[NAME, AGE])
        encoded = encode_attributes(schema, {"age": 28, "name": "Alice"})
        assert list(encoded) == ["name", "age"]
        assert encoded["age"] == 28

    def test_missing_value_rejected(self):
        schema = CredentialSchema(attributes=[NAME, AGE])
        with pytest.raises(InvalidAttributeEncoding, match="Missing value") as exc_info:
            encode_attributes(schema, {"name": "Alice"})
        assert exc_info.value.attribute == "age"

    def test_extra_value_rejected(self):
        schema = CredentialSchema(attributes=[NAME])
        with pytest.raises(InvalidAttributeEncoding, match="not in schema"):
            encode_attributes(schema, {"name": "Alice", "height": 175})
