"""ssi_trust.credentials — credential records, issuance, and revocation."""
from __future__ import annotations

from ssi_trust.credentials.issuer import CredentialIssuer, available_attributes
from ssi_trust.credentials.models import (
    BASE_CREDENTIAL_TYPE,
    CREDENTIAL_CONTEXT,
    PROOF_TYPE,
    AnchorRecord,
    IssuedCredential,
    Proof,
    ProofPurpose,
    RevocationRecord,
    VerifiableCredential,
)

__all__ = [
    "AnchorRecord",
    "BASE_CREDENTIAL_TYPE",
    "CREDENTIAL_CONTEXT",
    "CredentialIssuer",
    "IssuedCredential",
    "PROOF_TYPE",
    "Proof",
    "ProofPurpose",
    "RevocationRecord",
    "VerifiableCredential",
    "available_attributes",
]
