# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Holder Master Secret

The link secret every credential of one holder is blinded around.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from clcred.config import CredentialConfig, resolve_config
from clcred.primitives.numbers import random_bits
from clcred.types import BigInt


class MasterSecret(BaseModel):
    """Holder's secret value ``ms``. Never sent to the issuer."""

    model_config = {"frozen": True}

    value: BigInt = Field(..., repr=False)
    bits: int = Field(default=256, ge=8)

    @model_validator(mode="after")
    def _check_width(self) -> "MasterSecret":
        if self.value.bit_length() > self.bits:
            raise ValueError("Master secret value exceeds its declared bit length")
        return self

    def to_bytes(self) -> bytes:
        """Fixed-width big-endian encoding (32 bytes at the default size)."""
        return self.value.to_bytes((self.bits + 7) // 8, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> "MasterSecret":
        return cls(value=int.from_bytes(data, "big"), bits=len(data) * 8)


def generate_master_secret(config: Optional[CredentialConfig] = None) -> MasterSecret:
    """Draw a fresh uniformly random master secret."""
    config = resolve_config(config)
    bits = config.master_secret_bits
    return MasterSecret(value=random_bits(bits), bits=bits)
