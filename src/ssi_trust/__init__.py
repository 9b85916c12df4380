"""ssi-trust — decentralized identities, verifiable credentials, and selective disclosure.

An authority issues a signed set of claims to an identity owner; the owner
later discloses a subset of those claims to a third party, which validates
the disclosure without contacting the authority.

Public API
----------
The stable public surface is everything exported from this module.
Names reachable only through submodules are internal
and may change without notice.

Example
-------
>>> import ssi_trust
>>> ssi_trust.__version__
'0.1.0'

Quick start
-----------
::

    from ssi_trust import (
        # Identities
        IdentityManager, Identity,
        # Issuance
        CredentialIssuer, VerifiableCredential,
        # Disclosure
        PresentationBuilder, Presentation,
        # Verification
        VerificationEngine, VerificationReport,
        # Ledger
        InMemoryLedger,
        # Everything wired together
        TrustNetwork,
    )
"""
from __future__ import annotations

__version__: str = "0.1.0"

from ssi_trust.config import ProtocolSettings
from ssi_trust.convenience import TrustNetwork
from ssi_trust.errors import (
    ExpiredCredentialError,
    IdentityConflictError,
    InvalidClaimsError,
    InvalidExpiryError,
    InvalidSignatureError,
    KeyMaterialError,
    NotFoundError,
    RevokedCredentialError,
    StaleChallengeError,
    TrustProtocolError,
    UnknownAttributeError,
)
from ssi_trust.runtime import FixedClock, SecureRandom, SeededRandom, SystemClock

# ------------------------------------------------------------------
# Identities
# ------------------------------------------------------------------
from ssi_trust.did.identity import (
    Identity,
    IdentityManager,
    PublicIdentityRecord,
    derive_identifier,
    resolve_identity,
)
from ssi_trust.did.key_manager import Ed25519KeyManager

# ------------------------------------------------------------------
# Credentials
# ------------------------------------------------------------------
from ssi_trust.credentials.issuer import CredentialIssuer, available_attributes
from ssi_trust.credentials.models import (
    AnchorRecord,
    IssuedCredential,
    Proof,
    RevocationRecord,
    VerifiableCredential,
)

# ------------------------------------------------------------------
# Presentations
# ------------------------------------------------------------------
from ssi_trust.presentation.builder import Disclosure, PresentationBuilder, commit
from ssi_trust.presentation.models import Presentation

# ------------------------------------------------------------------
# Verification
# ------------------------------------------------------------------
from ssi_trust.verification.engine import VerificationEngine
from ssi_trust.verification.report import (
    CheckName,
    CheckOutcome,
    VerificationReport,
    VerificationStep,
)

# ------------------------------------------------------------------
# Ledger
# ------------------------------------------------------------------
from ssi_trust.ledger.base import Ledger
from ssi_trust.ledger.memory import InMemoryLedger

__all__ = [
    "__version__",
    # configuration and runtime
    "FixedClock",
    "ProtocolSettings",
    "SecureRandom",
    "SeededRandom",
    "SystemClock",
    "TrustNetwork",
    # errors
    "ExpiredCredentialError",
    "IdentityConflictError",
    "InvalidClaimsError",
    "InvalidExpiryError",
    "InvalidSignatureError",
    "KeyMaterialError",
    "NotFoundError",
    "RevokedCredentialError",
    "StaleChallengeError",
    "TrustProtocolError",
    "UnknownAttributeError",
    # identities
    "Ed25519KeyManager",
    "Identity",
    "IdentityManager",
    "PublicIdentityRecord",
    "derive_identifier",
    "resolve_identity",
    # credentials
    "AnchorRecord",
    "CredentialIssuer",
    "IssuedCredential",
    "Proof",
    "RevocationRecord",
    "VerifiableCredential",
    "available_attributes",
    # presentations
    "Disclosure",
    "Presentation",
    "PresentationBuilder",
    "commit",
    # verification
    "CheckName",
    "CheckOutcome",
    "VerificationEngine",
    "VerificationReport",
    "VerificationStep",
    # ledger
    "InMemoryLedger",
    "Ledger",
]
