# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Big-Integer Primitives

Arbitrary-precision helpers used by issuer and holder: decimal parsing,
bounded random generation, probabilistic primality testing, exact modular
arithmetic and hashing to integers.

Every fallible operation raises :class:`ArithmeticFailure` instead of
leaking a bare ``ValueError`` or ``ZeroDivisionError`` from the
underlying library.
"""

from __future__ import annotations

import secrets
from typing import Union

from cryptography.hazmat.primitives import hashes
from sympy import mod_inverse as sympy_mod_inverse
from sympy import primerange

from clcred.constants import (
    PRIMALITY_ROUNDS_FLOOR,
    PRIMALITY_ROUNDS_TABLE,
    TRIAL_DIVISION_BOUND,
)
from clcred.exceptions import ArithmeticFailure

_SMALL_PRIMES: tuple[int, ...] = tuple(primerange(3, TRIAL_DIVISION_BOUND))


def from_decimal(text: str) -> int:
    """Parse a non-negative decimal string.

    Raises:
        ArithmeticFailure: If *text* is not a plain decimal integer.
    """
    if isinstance(text, bool) or not isinstance(text, str):
        raise ArithmeticFailure(f"Expected a decimal string, got {type(text).__name__}")
    stripped = text.strip()
    if not stripped.isdigit() or not stripped.isascii():
        raise ArithmeticFailure("Value is not a non-negative decimal integer")
    return int(stripped)


def to_decimal(value: int) -> str:
    """Render an integer as a decimal string."""
    return str(value)


def random_bits(bits: int, msb_set: bool = False) -> int:
    """Return a uniform random integer below ``2**bits``.

    Args:
        bits: Target bit length.
        msb_set: Force the top bit so the result has exactly *bits* bits.
            When False the most significant bit may be zero.

    Raises:
        ArithmeticFailure: If *bits* is not positive.
    """
    if bits <= 0:
        raise ArithmeticFailure(f"Bit length must be positive, got {bits}")
    value = secrets.randbits(bits)
    if msb_set:
        value |= 1 << (bits - 1)
    return value


def primality_rounds(bits: int, minimum: int = 0) -> int:
    """Number of Miller-Rabin rounds for a candidate of *bits* bits.

    Uses a fixed size table so the false-positive bound tracks the
    candidate's bit length; *minimum* lets callers demand more.
    """
    for threshold, rounds in PRIMALITY_ROUNDS_TABLE:
        if bits >= threshold:
            return max(rounds, minimum)
    return max(PRIMALITY_ROUNDS_FLOOR, minimum)


def has_small_factor(candidate: int) -> bool:
    """True if *candidate* is divisible by a small odd prime other than itself."""
    for prime in _SMALL_PRIMES:
        if candidate == prime:
            return False
        if candidate % prime == 0:
            return True
    return False


def is_probable_prime(candidate: int, rounds: int) -> bool:
    """Miller-Rabin test with *rounds* random witnesses.

    Raises:
        ArithmeticFailure: If *rounds* is less than one.
    """
    if rounds < 1:
        raise ArithmeticFailure(f"Primality test needs at least one round, got {rounds}")
    if candidate < 2:
        return False
    if candidate in (2, 3):
        return True
    if candidate % 2 == 0 or has_small_factor(candidate):
        return False
    if candidate < TRIAL_DIVISION_BOUND:
        return True

    d = candidate - 1
    r = 0
    while d % 2 == 0:
        d //= 2
        r += 1

    for _ in range(rounds):
        a = 2 + secrets.randbelow(candidate - 3)
        x = pow(a, d, candidate)
        if x == 1 or x == candidate - 1:
            continue
        for _ in range(r - 1):
            x = pow(x, 2, candidate)
            if x == candidate - 1:
                break
        else:
            return False
    return True


def _check_modulus(modulus: int) -> None:
    if modulus <= 0:
        raise ArithmeticFailure(f"Modulus must be positive, got {modulus}")


def mod_add(a: int, b: int, modulus: int) -> int:
    _check_modulus(modulus)
    return (a + b) % modulus


def mod_mul(a: int, b: int, modulus: int) -> int:
    _check_modulus(modulus)
    return (a * b) % modulus


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """``base ** exponent mod modulus``; negative exponents use the inverse."""
    _check_modulus(modulus)
    try:
        return pow(base, exponent, modulus)
    except ValueError as exc:
        raise ArithmeticFailure(f"Modular exponentiation failed: {exc}") from exc


def mod_inverse(value: int, modulus: int) -> int:
    """Multiplicative inverse of *value* modulo *modulus*.

    Raises:
        ArithmeticFailure: If the inverse does not exist.
    """
    _check_modulus(modulus)
    try:
        return int(sympy_mod_inverse(value, modulus))
    except ValueError as exc:
        raise ArithmeticFailure("Value is not invertible modulo the given modulus") from exc


def sha256_int(data: bytes) -> int:
    """SHA-256 digest of *data* read as a big-endian integer."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(data)
    return int.from_bytes(digest.finalize(), "big")


def _part_bytes(part: Union[int, str, bytes]) -> bytes:
    if isinstance(part, bool):
        raise ArithmeticFailure("Booleans cannot be hashed as challenge input")
    if isinstance(part, int):
        if part < 0:
            raise ArithmeticFailure("Negative integers cannot be hashed as challenge input")
        return part.to_bytes(max(1, (part.bit_length() + 7) // 8), "big")
    if isinstance(part, str):
        return part.encode("utf-8")
    if isinstance(part, bytes):
        return part
    raise ArithmeticFailure(f"Unsupported hash input type: {type(part).__name__}")


def hash_to_int(*parts: Union[int, str, bytes]) -> int:
    """Hash an ordered sequence of values to an integer challenge.

    Each part is length-prefixed so ``("ab", "c")`` and ``("a", "bc")``
    hash differently.
    """
    digest = hashes.Hash(hashes.SHA256())
    for part in parts:
        data = _part_bytes(part)
        digest.update(len(data).to_bytes(4, "big"))
        digest.update(data)
    return int.from_bytes(digest.finalize(), "big")
