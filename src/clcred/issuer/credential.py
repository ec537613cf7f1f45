# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Primary Credential Issuance

The issuer's blind CL signature over encoded attributes and the holder's
commitment ``u``. A credential ``(A, e, v'')`` satisfies

    A^e = Z * R_1^m_1 * ... * R_k^m_k * S^v'' * u  (mod n)

where ``A`` is found by raising the right-hand side to ``e^-1 mod phi(n)``,
which only the holder of the factorization can compute.
"""

from __future__ import annotations

import json
import logging
import math
import threading
from typing import TYPE_CHECKING, Mapping, Optional

from pydantic import BaseModel, Field

from clcred.config import CredentialConfig, resolve_config
from clcred.encoding import RawValue, encode_attributes
from clcred.issuer.keys import IssuerKeyPair, IssuerPublicKey
from clcred.primitives.numbers import (
    is_probable_prime,
    mod_exp,
    mod_inverse,
    mod_mul,
    primality_rounds,
    random_bits,
)
from clcred.primitives.search import find_prime_in_range
from clcred.schema import CredentialSchema
from clcred.types import BigInt

if TYPE_CHECKING:
    from clcred.holder.claim_request import ClaimRequest

logger = logging.getLogger(__name__)


class PrimaryCredential(BaseModel):
    """Issued signature together with the attribute encodings it covers."""

    model_config = {"frozen": True}

    a: BigInt
    e: BigInt
    v_double_prime: BigInt
    encoded_attributes: dict[str, BigInt] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)

    @classmethod
    def from_json(cls, json_content: str) -> "PrimaryCredential":
        return cls.model_validate(json.loads(json_content))


def signature_target(
    public_key: IssuerPublicKey,
    encoded_attributes: Mapping[str, int],
    randomizer: int,
    commitment: int,
) -> int:
    """``Z * prod(R_i^m_i) * S^randomizer * commitment mod n``.

    Raises:
        KeyError: If the key has no base for one of the attributes.
    """
    n = public_key.n
    target = public_key.z
    for name, value in encoded_attributes.items():
        target = mod_mul(target, mod_exp(public_key.r[name], value, n), n)
    target = mod_mul(target, mod_exp(public_key.s, randomizer, n), n)
    return mod_mul(target, commitment, n)


def in_exponent_window(e: int, config: CredentialConfig) -> bool:
    return config.e_start <= e < config.e_end


def issue_primary_credential(
    key_pair: IssuerKeyPair,
    claim_request: ClaimRequest,
    schema: CredentialSchema,
    values: Mapping[str, RawValue],
    config: Optional[CredentialConfig] = None,
    cancel: Optional[threading.Event] = None,
) -> PrimaryCredential:
    """Sign *values* and the holder's commitment.

    Args:
        key_pair: Issuer key for the current epoch.
        claim_request: Holder's blinded commitment.
        schema: Attributes in signing order.
        values: Raw attribute values keyed by name.
        config: Scheme parameters; production defaults when omitted.
        cancel: Optional event that stops the search for ``e``.

    Returns:
        The :class:`PrimaryCredential`. Nothing is returned on failure.

    Raises:
        InvalidAttributeEncoding: If a value does not fit the schema.
        PrimeNotFound: If no ``e`` turns up within the iteration budget.
        ValueError: If ``u`` is not a unit modulo ``n`` or the key lacks a
            base for a schema attribute.
    """
    config = resolve_config(config)
    public_key = key_pair.public
    n = public_key.n

    u = claim_request.u
    if not 0 < u < n or math.gcd(u, n) != 1:
        raise ValueError("Claim request commitment is not a unit modulo n")

    missing = [name for name in schema.attribute_names if name not in public_key.r]
    if missing:
        raise ValueError(f"Issuer key has no base for attributes: {', '.join(missing)}")

    encoded = encode_attributes(schema, values)
    v_double_prime = random_bits(config.v_double_prime_bits, msb_set=True)

    e = find_prime_in_range(
        config.e_start,
        config.e_end,
        config.prime_search_iterations,
        rounds=primality_rounds(config.e_end.bit_length(), config.min_primality_rounds),
        cancel=cancel,
    )

    q = signature_target(public_key, encoded, v_double_prime, u)
    a = mod_exp(q, mod_inverse(e, key_pair.private.phi), n)

    logger.info("Issued primary credential over %d attributes (schema %s)", len(encoded), schema.name)
    return PrimaryCredential(a=a, e=e, v_double_prime=v_double_prime, encoded_attributes=encoded)


def verify_primary_credential(
    public_key: IssuerPublicKey,
    credential: PrimaryCredential,
    u: int,
    config: Optional[CredentialConfig] = None,
) -> bool:
    """Check an issued credential against the issuer key and commitment ``u``.

    Returns:
        ``True`` if ``e`` is a prime in the exponent window and the
        signature relation holds, ``False`` otherwise.
    """
    config = resolve_config(config)
    if not in_exponent_window(credential.e, config):
        return False
    if not is_probable_prime(
        credential.e, primality_rounds(credential.e.bit_length(), config.min_primality_rounds)
    ):
        return False
    try:
        expected = signature_target(
            public_key, credential.encoded_attributes, credential.v_double_prime, u
        )
    except KeyError:
        return False
    return mod_exp(credential.a, credential.e, public_key.n) == expected
