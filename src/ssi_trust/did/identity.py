"""Identities — key pairs bound to self-derived decentralized identifiers.

Identifier derivation
---------------------
1. Take the 32-byte raw Ed25519 public key.
2. Hash it with SHA-256.
3. Keep the first ``identifier_length`` hex characters (32 by default,
   a 128-bit truncation).
4. Assemble: ``did:<method>:<digest>``.

The identifier is therefore a deterministic function of the public key;
anyone holding the key can recompute it without contacting a registry.

Only the :class:`PublicIdentityRecord` (identifier and public key) is ever
published. The private key stays inside the :class:`Identity` value owned
by the holder and is excluded from every serialization.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from ssi_trust.canonical import format_timestamp, sha256_hex
from ssi_trust.config import ProtocolSettings
from ssi_trust.did.key_manager import KEY_TYPE, Ed25519KeyManager
from ssi_trust.errors import NotFoundError
from ssi_trust.runtime import Clock, RandomSource, SystemClock

logger = logging.getLogger(__name__)

DID_CONTEXT: str = "https://www.w3.org/ns/did/v1"
KEY_FRAGMENT: str = "key-1"


# ------------------------------------------------------------------
# Records
# ------------------------------------------------------------------


@dataclass(frozen=True)
class PublicIdentityRecord:
    """The publishable half of an identity.

    Parameters
    ----------
    identifier:
        The ``did:<method>:<digest>`` identifier.
    public_key:
        The 32-byte raw Ed25519 public key.
    registered_at:
        UTC datetime at which the record was created or registered.
    """

    identifier: str
    public_key: bytes
    registered_at: datetime.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "did": self.identifier,
            "publicKeyHex": self.public_key.hex(),
            "timestamp": format_timestamp(self.registered_at),
        }


@dataclass(frozen=True)
class Identity:
    """An identity owned by one party: identifier plus key pair.

    Immutable once created. ``private_key`` is hidden from ``repr`` and
    omitted from :meth:`to_dict`; it must never leave the owner's process.

    Parameters
    ----------
    identifier:
        Identifier derived from ``public_key``.
    label:
        Human-readable name given at onboarding (never published).
    public_key:
        32-byte raw Ed25519 public key.
    private_key:
        32-byte raw Ed25519 private key.
    created_at:
        UTC datetime of creation.
    """

    identifier: str
    label: str
    public_key: bytes
    private_key: bytes = field(repr=False)
    created_at: datetime.datetime

    @property
    def key_reference(self) -> str:
        """Verification method reference used in proofs (``<did>#key-1``)."""
        return f"{self.identifier}#{KEY_FRAGMENT}"

    def public_record(self) -> PublicIdentityRecord:
        """Return the record suitable for publication on a ledger."""
        return PublicIdentityRecord(
            identifier=self.identifier,
            public_key=self.public_key,
            registered_at=self.created_at,
        )

    def did_document(self) -> dict[str, Any]:
        """Build the W3C DID document describing this identity."""
        return {
            "@context": DID_CONTEXT,
            "id": self.identifier,
            "controller": self.identifier,
            "verificationMethod": [
                {
                    "id": self.key_reference,
                    "type": KEY_TYPE,
                    "controller": self.identifier,
                    "publicKeyHex": self.public_key.hex(),
                }
            ],
            "authentication": [self.key_reference],
            "created": format_timestamp(self.created_at),
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the public fields; the private key is never included."""
        return {
            "did": self.identifier,
            "label": self.label,
            "public_key_hex": self.public_key.hex(),
            "created_at": format_timestamp(self.created_at),
        }


# ------------------------------------------------------------------
# Registry protocol
# ------------------------------------------------------------------


class IdentityRegistry(Protocol):
    """Anything that can look up published identity records."""

    def lookup_identity(self, identifier: str) -> PublicIdentityRecord: ...


# ------------------------------------------------------------------
# Derivation and resolution
# ------------------------------------------------------------------


def derive_identifier(
    public_key: bytes,
    method: str = "example",
    length: int = 32,
) -> str:
    """Derive the ``did:<method>:<digest>`` identifier for a public key."""
    return f"did:{method}:{sha256_hex(public_key)[:length]}"


def resolve_identity(identifier: str, registry: IdentityRegistry) -> PublicIdentityRecord:
    """Look up a previously published identity.

    This is a pure lookup; no signature or key-binding check is performed.

    Raises
    ------
    NotFoundError
        If *registry* has no record for *identifier*.
    """
    if not identifier:
        raise NotFoundError(identifier)
    return registry.lookup_identity(identifier)


# ------------------------------------------------------------------
# IdentityManager
# ------------------------------------------------------------------


class IdentityManager:
    """Creates identities and resolves published ones.

    Parameters
    ----------
    settings:
        Protocol settings (identifier method and length).
    clock:
        Source of creation timestamps.
    random_source:
        Entropy for key generation. Ignored when *key_manager* is given.
    key_manager:
        Optional pre-built key manager.

    Example
    -------
    ::

        manager = IdentityManager()
        alice = manager.create_identity("Alice")
        print(alice.identifier)  # did:example:3f1c...
    """

    def __init__(
        self,
        settings: ProtocolSettings | None = None,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
        key_manager: Ed25519KeyManager | None = None,
    ) -> None:
        self._settings = settings or ProtocolSettings()
        self._clock: Clock = clock or SystemClock()
        self._key_manager = key_manager or Ed25519KeyManager(random_source)

    def create_identity(self, label: str) -> Identity:
        """Generate a fresh key pair and derive its identifier.

        Nothing is persisted or transmitted; publishing the identity's
        :meth:`Identity.public_record` is the caller's decision.
        """
        private_bytes, public_bytes = self._key_manager.generate_keypair()
        identifier = derive_identifier(
            public_bytes, self._settings.did_method, self._settings.identifier_length
        )
        identity = Identity(
            identifier=identifier,
            label=label,
            public_key=public_bytes,
            private_key=private_bytes,
            created_at=self._clock.now(),
        )
        logger.info("Created identity %s", identifier)
        return identity

    def resolve_identity(
        self, identifier: str, registry: IdentityRegistry
    ) -> PublicIdentityRecord:
        """Instance form of :func:`resolve_identity`."""
        return resolve_identity(identifier, registry)


__all__ = [
    "DID_CONTEXT",
    "Identity",
    "IdentityManager",
    "IdentityRegistry",
    "KEY_FRAGMENT",
    "PublicIdentityRecord",
    "derive_identifier",
    "resolve_identity",
]
