# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Issuer side: key generation and primary credential issuance.
"""

from .keys import IssuerPublicKey, IssuerPrivateKey, IssuerKeyPair, generate_issuer_keys
from .credential import (
    PrimaryCredential,
    issue_primary_credential,
    verify_primary_credential,
    signature_target,
)
from .service import Issuer

__all__ = [
    "IssuerPublicKey",
    "IssuerPrivateKey",
    "IssuerKeyPair",
    "generate_issuer_keys",
    "PrimaryCredential",
    "issue_primary_credential",
    "verify_primary_credential",
    "signature_target",
    "Issuer",
]
