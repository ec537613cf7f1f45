# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Credential Scheme Configuration

Named security parameters shared by issuer and holder, with YAML
loading for deployments that pin them in a file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from clcred.constants import (
    LARGE_E_END_RANGE,
    LARGE_E_START,
    LARGE_MASTER_SECRET,
    LARGE_PRIME,
    LARGE_VPRIME,
    LARGE_VPRIME_PRIME,
    PRIME_SEARCH_ITERATIONS,
    SAFE_PRIME_ATTEMPTS,
)


class CredentialConfig(BaseModel):
    """Bit lengths and search budgets for the CL credential scheme.

    The defaults are the production parameters. Tests shrink
    ``prime_bits`` to keep safe-prime generation fast; everything else
    should normally be left alone.

    Example:
        >>> config = CredentialConfig.from_yaml("prime_bits: 512")
        >>> config.prime_bits
        512
    """

    model_config = {"frozen": True}

    master_secret_bits: int = Field(default=LARGE_MASTER_SECRET, ge=8)
    prime_bits: int = Field(default=LARGE_PRIME, ge=16, description="Bit length of p' and q'")
    v_prime_bits: int = Field(default=LARGE_VPRIME, ge=8, description="Holder blinding exponent size")
    v_double_prime_bits: int = Field(
        default=LARGE_VPRIME_PRIME, ge=8, description="Issuer randomizer size"
    )
    e_start_bits: int = Field(default=LARGE_E_START, ge=2)
    e_range_bits: int = Field(default=LARGE_E_END_RANGE, ge=1)
    prime_search_iterations: int = Field(default=PRIME_SEARCH_ITERATIONS, ge=1)
    safe_prime_attempts: int = Field(default=SAFE_PRIME_ATTEMPTS, ge=1)
    min_primality_rounds: int = Field(
        default=0, ge=0, description="Lower bound applied on top of the size table"
    )

    @model_validator(mode="after")
    def _check_window(self) -> "CredentialConfig":
        if self.e_range_bits >= self.e_start_bits:
            raise ValueError("e_range_bits must be smaller than e_start_bits")
        return self

    @property
    def e_start(self) -> int:
        """Lower bound of the signature exponent window."""
        return 1 << self.e_start_bits

    @property
    def e_end(self) -> int:
        """Exclusive upper bound of the signature exponent window."""
        return (1 << self.e_start_bits) + (1 << self.e_range_bits)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "CredentialConfig":
        """Load configuration from YAML; missing keys keep their defaults."""
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError("Credential config YAML must be a mapping")
        return cls(**data)

    def to_yaml(self) -> str:
        """Export configuration as YAML."""
        return yaml.dump(self.model_dump(), default_flow_style=False, sort_keys=True)


DEFAULT_CONFIG = CredentialConfig()


def load_config(path: str | Path) -> CredentialConfig:
    """Read a :class:`CredentialConfig` from a YAML file."""
    return CredentialConfig.from_yaml(Path(path).read_text())


def resolve_config(config: Optional[CredentialConfig]) -> CredentialConfig:
    """Return *config* or the production defaults."""
    return config if config is not None else DEFAULT_CONFIG
