# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Randomness & Prime Search

Range sampling, quadratic-residue sampling and bounded prime searches.
Searches check an optional ``threading.Event`` before every iteration so a
caller running them on a worker thread can stop them between candidates.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from clcred.exceptions import KeyGenerationFailed, OperationCancelled, PrimeNotFound
from clcred.primitives.numbers import (
    has_small_factor,
    is_probable_prime,
    primality_rounds,
    random_bits,
)

logger = logging.getLogger(__name__)


def _check_cancel(cancel: Optional[threading.Event], what: str, iteration: int) -> None:
    if cancel is not None and cancel.is_set():
        logger.info("%s cancelled after %d iterations", what, iteration)
        raise OperationCancelled(f"{what} cancelled after {iteration} iterations")


def random_in_range(start: int, end: int) -> int:
    """Return a uniform random ``x`` with ``start < x < end``.

    Resamples an offset bounded to the bit length of ``end - start`` until
    it falls strictly inside the interval.

    Raises:
        ValueError: If no integer lies strictly between *start* and *end*.
    """
    span = end - start
    if span < 2:
        raise ValueError(f"Empty range: no integer strictly between {start} and {end}")

    bits = span.bit_length()
    while True:
        offset = random_bits(bits)
        if 0 < offset < span:
            return start + offset


def random_quadratic_residue_with_root(n: int) -> tuple[int, int]:
    """Return ``(root**2 mod n, root)`` for a random ``0 < root < n``."""
    root = random_in_range(0, n)
    return (root * root) % n, root


def random_quadratic_residue(n: int) -> int:
    """Return a random quadratic residue modulo *n*."""
    residue, _ = random_quadratic_residue_with_root(n)
    return residue


def find_prime_in_range(
    start: int,
    end: int,
    max_iterations: int,
    rounds: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
) -> int:
    """Sample ``random_in_range(start, end)`` until a probable prime turns up.

    Args:
        start: Exclusive lower bound.
        end: Exclusive upper bound.
        max_iterations: Number of candidates to try before giving up.
        rounds: Miller-Rabin rounds; defaults to the size table for *end*.
        cancel: Optional event; when set no further candidate is drawn.

    Returns:
        The first probable prime found.

    Raises:
        PrimeNotFound: After exactly *max_iterations* composite candidates.
        OperationCancelled: If *cancel* is set.
    """
    if max_iterations < 1:
        raise ValueError("max_iterations must be at least 1")
    if rounds is None:
        rounds = primality_rounds(end.bit_length())

    for iteration in range(max_iterations):
        _check_cancel(cancel, "Prime search", iteration)
        candidate = random_in_range(start, end)
        if is_probable_prime(candidate, rounds):
            logger.debug("Found prime in window after %d iterations", iteration + 1)
            return candidate

    logger.warning("Prime search exhausted %d iterations", max_iterations)
    raise PrimeNotFound(
        f"Cannot find prime in {max_iterations} iterations", attempts=max_iterations
    )


def generate_safe_prime(
    bits: int,
    max_attempts: int,
    min_rounds: int = 0,
    cancel: Optional[threading.Event] = None,
) -> tuple[int, int]:
    """Search for a Sophie Germain prime ``p'`` of *bits* bits.

    Returns:
        ``(p, p_prime)`` with ``p = 2 * p_prime + 1`` and both prime.

    Raises:
        KeyGenerationFailed: If no pair is found within *max_attempts* candidates.
        OperationCancelled: If *cancel* is set.
    """
    inner_rounds = primality_rounds(bits, min_rounds)
    outer_rounds = primality_rounds(bits + 1, min_rounds)

    for attempt in range(max_attempts):
        _check_cancel(cancel, "Safe prime search", attempt)
        p_prime = random_bits(bits, msb_set=True) | 1
        # p' = 1 mod 3 makes 2p'+1 divisible by 3
        if p_prime % 3 != 2:
            continue
        p = 2 * p_prime + 1
        if has_small_factor(p_prime) or has_small_factor(p):
            continue
        if is_probable_prime(p_prime, inner_rounds) and is_probable_prime(p, outer_rounds):
            logger.debug("Safe prime of %d bits found after %d candidates", bits + 1, attempt + 1)
            return p, p_prime

    raise KeyGenerationFailed(
        f"Safe prime generation did not converge within {max_attempts} candidates"
    )
