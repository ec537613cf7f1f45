# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Claim Request

The holder's blinded commitment ``u = S^v' * R_ms^ms mod n``. The issuer
signs ``u`` without learning ``ms``; the holder keeps ``v'`` to complete
the credential afterwards.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import BaseModel, Field

from clcred.config import CredentialConfig, resolve_config
from clcred.holder.master_secret import MasterSecret
from clcred.issuer.keys import IssuerPublicKey
from clcred.primitives.numbers import mod_exp, mod_mul, random_bits
from clcred.types import BigInt

logger = logging.getLogger(__name__)


class ClaimRequest(BaseModel):
    """Blinded commitment sent to the issuer."""

    model_config = {"frozen": True}

    u: BigInt

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, json_content: str) -> "ClaimRequest":
        return cls.model_validate(json.loads(json_content))


class BlindingFactor(BaseModel):
    """Holder-side ``v'``; stays local and is never serialized into a request."""

    model_config = {"frozen": True}

    v_prime: BigInt = Field(..., repr=False)


def build_claim_request(
    public_key: IssuerPublicKey,
    master_secret: MasterSecret,
    config: Optional[CredentialConfig] = None,
) -> tuple[ClaimRequest, BlindingFactor]:
    """Blind *master_secret* against *public_key*.

    Returns:
        ``(request, blinding)``; send ``request`` to the issuer and keep
        ``blinding`` until the credential comes back.
    """
    config = resolve_config(config)
    v_prime = random_bits(config.v_prime_bits)

    n = public_key.n
    u = mod_mul(mod_exp(public_key.s, v_prime, n), mod_exp(public_key.rms, master_secret.value, n), n)

    logger.debug("Built claim request against %d-bit modulus", n.bit_length())
    return ClaimRequest(u=u), BlindingFactor(v_prime=v_prime)
