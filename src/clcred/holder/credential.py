# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Credential Completion

Folds the holder's ``v'`` into the issuer's ``v''`` so the credential is a
plain CL signature over the attributes and the master secret:

    A^e = Z * prod(R_i^m_i) * S^(v' + v'') * R_ms^ms  (mod n)
"""

from __future__ import annotations

import json
from typing import Optional

from pydantic import BaseModel, Field

from clcred.config import CredentialConfig, resolve_config
from clcred.holder.claim_request import BlindingFactor
from clcred.holder.master_secret import MasterSecret
from clcred.issuer.credential import (
    PrimaryCredential,
    in_exponent_window,
    signature_target,
)
from clcred.issuer.keys import IssuerPublicKey
from clcred.primitives.numbers import is_probable_prime, mod_exp, primality_rounds
from clcred.types import BigInt


class CompletedCredential(BaseModel):
    """Holder-side credential with the full randomizer ``v = v' + v''``."""

    model_config = {"frozen": True}

    a: BigInt
    e: BigInt
    v: BigInt = Field(..., repr=False)
    encoded_attributes: dict[str, BigInt] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)


def complete_credential(
    credential: PrimaryCredential, blinding: BlindingFactor
) -> CompletedCredential:
    return CompletedCredential(
        a=credential.a,
        e=credential.e,
        v=credential.v_double_prime + blinding.v_prime,
        encoded_attributes=dict(credential.encoded_attributes),
    )


def verify_completed_credential(
    public_key: IssuerPublicKey,
    credential: CompletedCredential,
    master_secret: MasterSecret,
    config: Optional[CredentialConfig] = None,
) -> bool:
    """Check a completed credential against the issuer key and master secret."""
    config = resolve_config(config)
    if not in_exponent_window(credential.e, config):
        return False
    if not is_probable_prime(
        credential.e, primality_rounds(credential.e.bit_length(), config.min_primality_rounds)
    ):
        return False

    n = public_key.n
    try:
        expected = signature_target(
            public_key,
            credential.encoded_attributes,
            credential.v,
            mod_exp(public_key.rms, master_secret.value, n),
        )
    except KeyError:
        return False
    return mod_exp(credential.a, credential.e, n) == expected
