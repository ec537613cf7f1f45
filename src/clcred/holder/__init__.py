# Copyright (c) CLCred Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Holder side: master secret, claim requests and credential completion.
"""

from .master_secret import MasterSecret, generate_master_secret
from .claim_request import ClaimRequest, BlindingFactor, build_claim_request
from .credential import CompletedCredential, complete_credential, verify_completed_credential
from .service import Holder

__all__ = [
    "MasterSecret",
    "generate_master_secret",
    "ClaimRequest",
    "BlindingFactor",
    "build_claim_request",
    "CompletedCredential",
    "complete_credential",
    "verify_completed_credential",
    "Holder",
]
