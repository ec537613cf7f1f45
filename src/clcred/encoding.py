# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Attribute Encoding

Maps raw attribute values to the integers that get exponentiated during
issuance. Integers pass through; values flagged ``encode`` are hashed from
their canonical UTF-8 string form with SHA-256.
"""

from __future__ import annotations

import logging
from typing import Mapping, Union

from clcred.exceptions import InvalidAttributeEncoding
from clcred.primitives.numbers import sha256_int
from clcred.schema import AttributeType, CredentialSchema

logger = logging.getLogger(__name__)

RawValue = Union[str, int, bytes]


def _canonical_string(attribute: AttributeType, raw: RawValue) -> str:
    if isinstance(raw, bool):
        raise InvalidAttributeEncoding(
            f"Attribute '{attribute.name}' does not accept booleans", attribute=attribute.name
        )
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidAttributeEncoding(
                f"Attribute '{attribute.name}' is not valid UTF-8", attribute=attribute.name
            ) from exc
    if isinstance(raw, str):
        return raw
    raise InvalidAttributeEncoding(
        f"Attribute '{attribute.name}' has unsupported type {type(raw).__name__}",
        attribute=attribute.name,
    )


def encode_attribute(attribute: AttributeType, raw: RawValue) -> int:
    """Encode one raw value according to its attribute descriptor.

    Args:
        attribute: Schema entry for the value.
        raw: String, integer, or UTF-8 bytes.

    Returns:
        A non-negative integer suitable as an exponent.

    Raises:
        InvalidAttributeEncoding: If the value cannot be canonicalized.
    """
    if not attribute.encode:
        if isinstance(raw, bool):
            raise InvalidAttributeEncoding(
                f"Attribute '{attribute.name}' does not accept booleans", attribute=attribute.name
            )
        if isinstance(raw, int):
            value = raw
        else:
            text = _canonical_string(attribute, raw).strip()
            if not text.isascii() or not text.isdigit():
                raise InvalidAttributeEncoding(
                    f"Attribute '{attribute.name}' must be a non-negative integer",
                    attribute=attribute.name,
                )
            value = int(text)
        if value < 0:
            raise InvalidAttributeEncoding(
                f"Attribute '{attribute.name}' must be a non-negative integer",
                attribute=attribute.name,
            )
        return value

    text = _canonical_string(attribute, raw)
    if not text.strip():
        raise InvalidAttributeEncoding(
            f"Attribute '{attribute.name}' must not be empty", attribute=attribute.name
        )
    return sha256_int(text.encode("utf-8"))


def encode_attributes(schema: CredentialSchema, values: Mapping[str, RawValue]) -> dict[str, int]:
    """Encode every schema attribute, in schema order.

    Raises:
        InvalidAttributeEncoding: If a value is missing, unexpected, or unencodable.
    """
    unexpected = sorted(set(values) - set(schema.attribute_names))
    if unexpected:
        raise InvalidAttributeEncoding(
            f"Values supplied for attributes not in schema: {', '.join(unexpected)}",
            attribute=unexpected[0],
        )

    encoded: dict[str, int] = {}
    for attribute in schema.attributes:
        if attribute.name not in values:
            raise InvalidAttributeEncoding(
                f"Missing value for attribute '{attribute.name}'", attribute=attribute.name
            )
        encoded[attribute.name] = encode_attribute(attribute, values[attribute.name])

    logger.debug("Encoded %d attributes for schema %s", len(encoded), schema.name)
    return encoded
