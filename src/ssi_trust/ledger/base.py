"""Ledger — the append-only store the core publishes to and reads from.

The issuer appends anchor and revocation records; the verification engine
reads identity records and a snapshot of the revocation set. Presentations
never touch the ledger: they travel peer to peer.

Implementations must be append-only and monotonic: a registered identity
is never replaced by a different key, and a revoked credential id never
leaves the revocation set.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ssi_trust.credentials.models import AnchorRecord, RevocationRecord
from ssi_trust.did.identity import PublicIdentityRecord


class Ledger(ABC):
    """Abstract base class for ledger backends."""

    @abstractmethod
    def register_identity(self, identifier: str, public_key: bytes) -> PublicIdentityRecord:
        """Publish an identifier and its public key.

        Idempotent for the same ``(identifier, public_key)`` pair.

        Raises
        ------
        IdentityConflictError
            If *identifier* is already registered with another key.
        """

    @abstractmethod
    def anchor_credential_hash(self, anchor: AnchorRecord) -> None:
        """Append a credential anchor (hash and identifiers only)."""

    @abstractmethod
    def publish_revocation(self, record: RevocationRecord) -> None:
        """Append a revocation, growing the revocation set."""

    @abstractmethod
    def lookup_identity(self, identifier: str) -> PublicIdentityRecord:
        """Return the published record for *identifier*.

        Raises
        ------
        NotFoundError
            If the identifier was never registered.
        """

    @abstractmethod
    def revocation_set(self) -> frozenset[str]:
        """Return an immutable snapshot of revoked credential ids."""

    def is_revoked(self, credential_id: str) -> bool:
        """Return ``True`` if *credential_id* is in the current revocation set."""
        return credential_id in self.revocation_set()


__all__ = ["Ledger"]
