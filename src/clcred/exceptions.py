# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""Centralized exception hierarchy for CLCred.

All CLCred exceptions inherit from ClCredError, enabling consistent
error handling for callers that drive issuance on behalf of holders
and issuers.
"""

from __future__ import annotations

from typing import Optional


class ClCredError(Exception):
    """Base exception for all CLCred errors."""


class ArithmeticFailure(ClCredError):
    """Big-integer operation could not be completed (bad modulus, no inverse, bad input)."""


class PrimeNotFound(ClCredError):
    """Bounded prime search exhausted its iteration budget."""

    def __init__(self, message: str, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts


class KeyGenerationFailed(ClCredError):
    """Safe-prime construction did not converge or supplied primes are unusable."""


class InvalidAttributeEncoding(ClCredError):
    """An attribute value does not fit its schema entry."""

    def __init__(self, message: str, attribute: Optional[str] = None) -> None:
        super().__init__(message)
        self.attribute = attribute


class OperationCancelled(ClCredError):
    """A long-running search was cancelled before completion."""


class CredentialVerificationError(ClCredError):
    """A returned credential does not satisfy the signature relation."""


__all__ = [
    "ClCredError",
    "ArithmeticFailure",
    "PrimeNotFound",
    "KeyGenerationFailed",
    "InvalidAttributeEncoding",
    "OperationCancelled",
    "CredentialVerificationError",
]
