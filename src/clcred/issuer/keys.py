# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Issuer Key Generation

Builds the CL signing key for one issuer epoch: an RSA-style modulus from
two safe primes, a quadratic-residue generator ``S`` and the bases
``R_ms`` (master secret), ``R_i`` (one per attribute) and ``Z``, each a
secret power of ``S``.

The private half never leaves the issuer; only :class:`IssuerPublicKey`
is meant for publication.
"""

from __future__ import annotations

import json
import logging
import math
import threading
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from clcred.config import CredentialConfig, resolve_config
from clcred.constants import KEY_GENERATION_RETRIES
from clcred.exceptions import KeyGenerationFailed
from clcred.primitives.numbers import is_probable_prime, mod_exp, primality_rounds
from clcred.primitives.search import generate_safe_prime, random_in_range, random_quadratic_residue
from clcred.types import BigInt

logger = logging.getLogger(__name__)


class IssuerPublicKey(BaseModel):
    """Published signing parameters.

    Attributes:
        n: Modulus ``p * q``.
        s: Random quadratic residue modulo ``n``.
        rms: Base for the holder's master secret.
        r: Base per attribute name.
        z: Base the signature is anchored to.
    """

    model_config = {"frozen": True}

    n: BigInt
    s: BigInt
    rms: BigInt
    r: dict[str, BigInt] = Field(default_factory=dict)
    z: BigInt

    @property
    def attribute_names(self) -> list[str]:
        return list(self.r)

    def to_json(self) -> str:
        """Serialize for embedding in a credential-definition transaction."""
        return json.dumps(self.model_dump(mode="json"), sort_keys=True)

    @classmethod
    def from_json(cls, json_content: str) -> "IssuerPublicKey":
        """Parse a key produced by :meth:`to_json`."""
        return cls.model_validate(json.loads(json_content))


class IssuerPrivateKey(BaseModel):
    """Factorization of the modulus. Field values are hidden from ``repr``."""

    model_config = {"frozen": True}

    p: BigInt = Field(..., repr=False)
    q: BigInt = Field(..., repr=False)
    p_prime: BigInt = Field(..., repr=False)
    q_prime: BigInt = Field(..., repr=False)

    @property
    def phi(self) -> int:
        """Euler's totient of ``n``."""
        return (self.p - 1) * (self.q - 1)

    @property
    def qr_order(self) -> int:
        """Order of the quadratic-residue subgroup, ``p' * q'``."""
        return self.p_prime * self.q_prime


class IssuerKeyPair(BaseModel):
    """Public and private key for one issuer epoch.

    Dumping the pair only ever yields the public half.
    """

    model_config = {"frozen": True}

    public: IssuerPublicKey
    private: IssuerPrivateKey = Field(..., repr=False, exclude=True)

    def public_json(self) -> str:
        return self.public.to_json()


def _gen_x(qr_order: int) -> int:
    """Secret exponent in ``[3, p'q' - 2]``."""
    return random_in_range(0, qr_order - 3) + 2


def _gen_generator(n: int) -> int:
    """Random quadratic residue ``S`` that is a unit modulo *n*."""
    for _ in range(KEY_GENERATION_RETRIES):
        s = random_quadratic_residue(n)
        if math.gcd(s, n) == 1:
            return s
    raise KeyGenerationFailed("Could not draw a generator coprime to the modulus")


def _check_supplied_primes(
    p_prime: int, q_prime: int, config: CredentialConfig
) -> tuple[int, int]:
    if p_prime == q_prime:
        raise KeyGenerationFailed("Supplied primes must be distinct")

    safe = []
    for label, prime in (("p'", p_prime), ("q'", q_prime)):
        derived = 2 * prime + 1
        rounds = primality_rounds(derived.bit_length(), config.min_primality_rounds)
        if not (is_probable_prime(prime, rounds) and is_probable_prime(derived, rounds)):
            raise KeyGenerationFailed(f"Supplied {label} does not yield a safe prime")
        safe.append(derived)
    return safe[0], safe[1]


def generate_issuer_keys(
    attribute_names: Iterable[str] = (),
    config: Optional[CredentialConfig] = None,
    primes: Optional[tuple[int, int]] = None,
    cancel: Optional[threading.Event] = None,
) -> IssuerKeyPair:
    """Generate an issuer key pair.

    Args:
        attribute_names: Attributes that get their own ``R_i`` base.
        config: Scheme parameters; production defaults when omitted.
        primes: Optional ``(p', q')`` Sophie Germain primes, used instead of
            searching for fresh ones (deterministic setups and tests).
        cancel: Optional event that stops the safe-prime search.

    Returns:
        The new :class:`IssuerKeyPair`.

    Raises:
        KeyGenerationFailed: If safe primes cannot be found or the supplied
            primes are unusable.
        ValueError: If *attribute_names* repeats a name.
    """
    config = resolve_config(config)
    names = list(attribute_names)
    if len(set(names)) != len(names):
        raise ValueError("Attribute names must be unique")

    if primes is None:
        p, p_prime = generate_safe_prime(
            config.prime_bits, config.safe_prime_attempts, config.min_primality_rounds, cancel
        )
        for _ in range(KEY_GENERATION_RETRIES):
            q, q_prime = generate_safe_prime(
                config.prime_bits, config.safe_prime_attempts, config.min_primality_rounds, cancel
            )
            if q_prime != p_prime:
                break
        else:
            raise KeyGenerationFailed("Could not draw a second safe prime distinct from the first")
    else:
        p_prime, q_prime = primes
        p, q = _check_supplied_primes(p_prime, q_prime, config)

    n = p * q
    s = _gen_generator(n)
    qr_order = p_prime * q_prime

    rms = mod_exp(s, _gen_x(qr_order), n)
    r = {name: mod_exp(s, _gen_x(qr_order), n) for name in names}
    z = mod_exp(s, _gen_x(qr_order), n)

    public = IssuerPublicKey(n=n, s=s, rms=rms, r=r, z=z)
    private = IssuerPrivateKey(p=p, q=q, p_prime=p_prime, q_prime=q_prime)
    logger.info(
        "Generated issuer key: %d-bit modulus, %d attribute bases", n.bit_length(), len(names)
    )
    return IssuerKeyPair(public=public, private=private)
