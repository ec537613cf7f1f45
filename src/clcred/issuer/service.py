# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Issuer Service

Holds one schema and the key pair of the current epoch, and issues
primary credentials against it.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Mapping, Optional

from clcred.config import CredentialConfig, resolve_config
from clcred.encoding import RawValue
from clcred.issuer.credential import PrimaryCredential, issue_primary_credential
from clcred.issuer.keys import IssuerKeyPair, IssuerPublicKey, generate_issuer_keys
from clcred.schema import CredentialSchema

if TYPE_CHECKING:
    from clcred.holder.claim_request import ClaimRequest

logger = logging.getLogger(__name__)


class Issuer:
    """Credential issuer for a single schema.

    The key pair is read-only once created, so :meth:`issue` may be called
    from several threads at once. :meth:`rotate_keys` swaps in a new pair;
    calls already running keep the pair they started with.

    Args:
        schema: Attributes every issued credential carries.
        config: Scheme parameters; production defaults when omitted.
        key_pair: Existing key pair to adopt instead of generating one.

    Example:
        >>> issuer = Issuer(schema, config=config)  # doctest: +SKIP
        >>> credential = issuer.issue(request, {"name": "Alice", "age": 28})  # doctest: +SKIP
    """

    def __init__(
        self,
        schema: CredentialSchema,
        config: Optional[CredentialConfig] = None,
        key_pair: Optional[IssuerKeyPair] = None,
    ) -> None:
        self._schema = schema
        self._config = resolve_config(config)
        if key_pair is None:
            key_pair = generate_issuer_keys(schema.attribute_names, self._config)
        else:
            self._check_key_covers_schema(key_pair.public)
        self._key_pair = key_pair
        self._epoch = 1

    def _check_key_covers_schema(self, public_key: IssuerPublicKey) -> None:
        missing = [n for n in self._schema.attribute_names if n not in public_key.r]
        if missing:
            raise ValueError(f"Key pair has no base for attributes: {', '.join(missing)}")

    @property
    def schema(self) -> CredentialSchema:
        return self._schema

    @property
    def public_key(self) -> IssuerPublicKey:
        return self._key_pair.public

    @property
    def epoch(self) -> int:
        return self._epoch

    def issue(
        self,
        claim_request: ClaimRequest,
        values: Mapping[str, RawValue],
        cancel: Optional[threading.Event] = None,
    ) -> PrimaryCredential:
        """Issue a primary credential for *claim_request* over *values*."""
        return issue_primary_credential(
            self._key_pair, claim_request, self._schema, values, self._config, cancel
        )

    def rotate_keys(
        self,
        primes: Optional[tuple[int, int]] = None,
        cancel: Optional[threading.Event] = None,
    ) -> IssuerPublicKey:
        """Start a new key epoch and return its public key."""
        key_pair = generate_issuer_keys(self._schema.attribute_names, self._config, primes, cancel)
        self._key_pair = key_pair
        self._epoch += 1
        logger.info("Issuer for schema %s rotated to epoch %d", self._schema.name, self._epoch)
        return key_pair.public
