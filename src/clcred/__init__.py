"""
CLCred - Camenisch-Lysyanskaya credential issuance

Key generation · Blinded claim requests · Primary credential issuance

The holder blinds its master secret into a claim request; the issuer signs
that commitment together with encoded attributes without learning the
secret; the holder completes and checks the result.

Version: 0.1.0
"""

__version__ = "0.1.0"

# Configuration
from .config import CredentialConfig, load_config

# Schema & encoding
from .schema import AttributeType, CredentialSchema
from .encoding import encode_attribute, encode_attributes

# Issuer
from .issuer import (
    IssuerPublicKey,
    IssuerPrivateKey,
    IssuerKeyPair,
    generate_issuer_keys,
    PrimaryCredential,
    issue_primary_credential,
    verify_primary_credential,
    Issuer,
)

# Holder
from .holder import (
    MasterSecret,
    generate_master_secret,
    ClaimRequest,
    BlindingFactor,
    build_claim_request,
    CompletedCredential,
    complete_credential,
    verify_completed_credential,
    Holder,
)

# Exceptions
from .exceptions import (
    ClCredError,
    ArithmeticFailure,
    PrimeNotFound,
    KeyGenerationFailed,
    InvalidAttributeEncoding,
    OperationCancelled,
    CredentialVerificationError,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "CredentialConfig",
    "load_config",
    # Schema & encoding
    "AttributeType",
    "CredentialSchema",
    "encode_attribute",
    "encode_attributes",
    # Issuer
    "IssuerPublicKey",
    "IssuerPrivateKey",
    "IssuerKeyPair",
    "generate_issuer_keys",
    "PrimaryCredential",
    "issue_primary_credential",
    "verify_primary_credential",
    "Issuer",
    # Holder
    "MasterSecret",
    "generate_master_secret",
    "ClaimRequest",
    "BlindingFactor",
    "build_claim_request",
    "CompletedCredential",
    "complete_credential",
    "verify_completed_credential",
    "Holder",
    # Exceptions
    "ClCredError",
    "ArithmeticFailure",
    "PrimeNotFound",
    "KeyGenerationFailed",
    "InvalidAttributeEncoding",
    "OperationCancelled",
    "CredentialVerificationError",
]
