# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Holder Service

Keeps the master secret and the blinding factors of outstanding claim
requests, and turns issued credentials into completed ones.
"""

from __future__ import annotations

import logging
from typing import Optional

from clcred.config import CredentialConfig, resolve_config
from clcred.exceptions import CredentialVerificationError
from clcred.holder.claim_request import BlindingFactor, ClaimRequest, build_claim_request
from clcred.holder.credential import (
    CompletedCredential,
    complete_credential,
    verify_completed_credential,
)
from clcred.holder.master_secret import MasterSecret, generate_master_secret
from clcred.issuer.credential import PrimaryCredential, verify_primary_credential
from clcred.issuer.keys import IssuerPublicKey

logger = logging.getLogger(__name__)


class Holder:
    """Credential holder bound to one master secret.

    Nothing is persisted; callers own storage of the master secret and of
    completed credentials.

    Args:
        config: Scheme parameters; production defaults when omitted.
        master_secret: Existing secret to reuse; a fresh one is drawn otherwise.
    """

    def __init__(
        self,
        config: Optional[CredentialConfig] = None,
        master_secret: Optional[MasterSecret] = None,
    ) -> None:
        self._config = resolve_config(config)
        self._master_secret = master_secret or generate_master_secret(self._config)
        self._pending: dict[int, tuple[IssuerPublicKey, BlindingFactor]] = {}

    @property
    def master_secret(self) -> MasterSecret:
        return self._master_secret

    @property
    def pending_requests(self) -> int:
        return len(self._pending)

    def request_credential(self, public_key: IssuerPublicKey) -> ClaimRequest:
        """Build a claim request and remember its blinding factor."""
        request, blinding = build_claim_request(public_key, self._master_secret, self._config)
        self._pending[request.u] = (public_key, blinding)
        return request

    def store_credential(
        self, claim_request: ClaimRequest, credential: PrimaryCredential
    ) -> CompletedCredential:
        """Verify an issued credential and complete it with the stored ``v'``.

        Raises:
            KeyError: If *claim_request* was not produced by this holder or
                was already consumed.
            CredentialVerificationError: If the credential does not verify.
        """
        if claim_request.u not in self._pending:
            raise KeyError("No pending claim request matches this credential")
        public_key, blinding = self._pending[claim_request.u]

        if not verify_primary_credential(public_key, credential, claim_request.u, self._config):
            raise CredentialVerificationError("Issued credential does not verify against request")

        completed = complete_credential(credential, blinding)
        if not verify_completed_credential(public_key, completed, self._master_secret, self._config):
            raise CredentialVerificationError("Completed credential does not verify")

        del self._pending[claim_request.u]
        logger.info("Stored credential over %d attributes", len(completed.encoded_attributes))
        return completed
