"""ssi_trust.did — key pairs and self-derived decentralized identifiers.

Submodules
----------
key_manager
    Ed25519KeyManager for key generation, signing, and verification.
identity
    Identity, PublicIdentityRecord, IdentityManager, derive_identifier,
    and resolve_identity.

Quick start
-----------
::

    from ssi_trust.did import IdentityManager

    manager = IdentityManager()
    authority = manager.create_identity("Civil Registry")
    print(authority.identifier)          # did:example:<32 hex chars>
    print(authority.did_document()["authentication"])
"""
from __future__ import annotations

from ssi_trust.did.identity import (
    DID_CONTEXT,
    KEY_FRAGMENT,
    Identity,
    IdentityManager,
    IdentityRegistry,
    PublicIdentityRecord,
    derive_identifier,
    resolve_identity,
)
from ssi_trust.did.key_manager import KEY_TYPE, Ed25519KeyManager

__all__ = [
    "DID_CONTEXT",
    "Ed25519KeyManager",
    "Identity",
    "IdentityManager",
    "IdentityRegistry",
    "KEY_FRAGMENT",
    "KEY_TYPE",
    "PublicIdentityRecord",
    "derive_identifier",
    "resolve_identity",
]
