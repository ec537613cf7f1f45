# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Credential Schema

Ordered attribute descriptors that an issuer signs over. The order fixes
which ``R_i`` generator each attribute is bound to.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class AttributeType(BaseModel):
    """One credential attribute.

    Attributes:
        name: Attribute name, unique within its schema.
        encode: True when the raw value must be hashed to an integer
            (strings); False when it is already an integer.
    """

    model_config = {"frozen": True}

    name: str = Field(..., description="Attribute name")
    encode: bool = Field(default=True, description="Hash the raw value before signing")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Attribute name must not be empty")
        return v


class CredentialSchema(BaseModel):
    """Ordered set of attributes a credential carries.

    Example:
        >>> schema = CredentialSchema(
        ...     name="person",
        ...     attributes=[
        ...         AttributeType(name="name", encode=True),
        ...         AttributeType(name="age", encode=False),
        ...     ],
        ... )
        >>> schema.attribute_names
        ['name', 'age']
    """

    model_config = {"frozen": True}

    name: str = Field(default="credential", description="Schema name")
    version: str = Field(default="1.0", description="Schema version")
    attributes: tuple[AttributeType, ...] = Field(..., description="Attributes in signing order")

    @field_validator("attributes")
    @classmethod
    def validate_attributes(cls, v: tuple[AttributeType, ...]) -> tuple[AttributeType, ...]:
        if not v:
            raise ValueError("Schema must declare at least one attribute")
        names = [attr.name for attr in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate attribute names: {', '.join(duplicates)}")
        return v

    @property
    def attribute_names(self) -> list[str]:
        return [attr.name for attr in self.attributes]

    @classmethod
    def from_flags(cls, flags: dict[str, bool], name: str = "credential") -> "CredentialSchema":
        """Build a schema from ``{attribute_name: encode}`` in insertion order."""
        return cls(
            name=name,
            attributes=tuple(AttributeType(name=k, encode=v) for k, v in flags.items()),
        )
