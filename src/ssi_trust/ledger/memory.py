"""InMemoryLedger — an illustrative hash-chained, append-only ledger.

Every mutation appends a :class:`Block` whose hash covers its payload and
the previous block's hash, starting from a genesis block. The chain holds
public data only:

- identity registrations (identifier and public key)
- credential anchors (content hash, identifiers, type)
- revocations (credential id and revoking issuer)

Claim values, private keys, presentations, and revocation reasons are
kept off-chain. All public methods are thread-safe via a single
:class:`threading.Lock`; reads return immutable snapshots.
"""
from __future__ import annotations

import datetime
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from ssi_trust.canonical import canonicalize, format_timestamp, sha256_hex
from ssi_trust.credentials.models import AnchorRecord, RevocationRecord
from ssi_trust.did.identity import PublicIdentityRecord
from ssi_trust.errors import IdentityConflictError, NotFoundError
from ssi_trust.ledger.base import Ledger
from ssi_trust.runtime import Clock, SystemClock

logger = logging.getLogger(__name__)

GENESIS_PREVIOUS_HASH: str = "0"


class BlockKind(str, Enum):
    """What a block records."""

    GENESIS = "GENESIS"
    IDENTITY_REGISTRATION = "IDENTITY_REGISTRATION"
    CREDENTIAL_ANCHOR = "CREDENTIAL_ANCHOR"
    REVOCATION = "REVOCATION"


@dataclass(frozen=True)
class Block:
    """One entry of the chain.

    Parameters
    ----------
    index:
        Position in the chain; the genesis block is ``0``.
    timestamp:
        UTC datetime the block was appended.
    kind:
        The record type carried in ``payload``.
    payload:
        Public data recorded by the block, as a read-only mapping.
    previous_hash:
        ``hash`` of the preceding block (``"0"`` for genesis).
    hash:
        SHA-256 over the canonical form of all other fields.
    """

    index: int
    timestamp: datetime.datetime
    kind: BlockKind
    payload: Mapping[str, Any]
    previous_hash: str
    hash: str

    @staticmethod
    def compute_hash(
        index: int,
        timestamp: datetime.datetime,
        kind: BlockKind,
        payload: Mapping[str, Any],
        previous_hash: str,
    ) -> str:
        return sha256_hex(
            canonicalize(
                {
                    "index": index,
                    "timestamp": format_timestamp(timestamp),
                    "kind": kind.value,
                    "payload": dict(payload),
                    "previousHash": previous_hash,
                }
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": format_timestamp(self.timestamp),
            "kind": self.kind.value,
            "payload": dict(self.payload),
            "previousHash": self.previous_hash,
            "hash": self.hash,
        }


class InMemoryLedger(Ledger):
    """Append-only ledger held in process memory.

    Parameters
    ----------
    clock:
        Source of block timestamps. Defaults to :class:`~ssi_trust.runtime.SystemClock`.

    Example
    -------
    ::

        ledger = InMemoryLedger()
        ledger.register_identity(alice.identifier, alice.public_key)
        record = ledger.lookup_identity(alice.identifier)
        assert ledger.verify_chain()
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._identities: dict[str, PublicIdentityRecord] = {}
        self._anchors: list[AnchorRecord] = []
        self._revocations: list[RevocationRecord] = []
        self._revoked_ids: frozenset[str] = frozenset()
        self._chain: list[Block] = [self._genesis_block()]

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register_identity(self, identifier: str, public_key: bytes) -> PublicIdentityRecord:
        if not identifier:
            raise ValueError("identifier must not be empty.")
        with self._lock:
            existing = self._identities.get(identifier)
            if existing is not None:
                if existing.public_key != public_key:
                    raise IdentityConflictError(identifier)
                return existing
            record = PublicIdentityRecord(
                identifier=identifier,
                public_key=bytes(public_key),
                registered_at=self._clock.now(),
            )
            self._identities[identifier] = record
            self._append(
                BlockKind.IDENTITY_REGISTRATION,
                {"did": identifier, "publicKeyHex": record.public_key.hex()},
            )
        logger.info("Registered identity %s", identifier)
        return record

    def anchor_credential_hash(self, anchor: AnchorRecord) -> None:
        with self._lock:
            self._anchors.append(anchor)
            self._append(BlockKind.CREDENTIAL_ANCHOR, anchor.to_dict())
        logger.info(
            "Anchored credential hash %s issued by %s",
            anchor.content_hash,
            anchor.issuer_identifier,
        )

    def publish_revocation(self, record: RevocationRecord) -> None:
        with self._lock:
            self._revocations.append(record)
            # Rebinding keeps snapshots handed out earlier untouched.
            self._revoked_ids = self._revoked_ids | {record.credential_id}
            self._append(
                BlockKind.REVOCATION,
                {
                    "credentialId": record.credential_id,
                    "revokedBy": record.revoked_by,
                    "timestamp": format_timestamp(record.timestamp),
                },
            )
        logger.info(
            "Published revocation of %s by %s", record.credential_id, record.revoked_by
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_identity(self, identifier: str) -> PublicIdentityRecord:
        with self._lock:
            record = self._identities.get(identifier)
        if record is None:
            raise NotFoundError(identifier)
        return record

    def revocation_set(self) -> frozenset[str]:
        with self._lock:
            return self._revoked_ids

    def registered_identifiers(self) -> list[str]:
        """Return a sorted list of registered identifiers."""
        with self._lock:
            return sorted(self._identities)

    def anchors(self) -> tuple[AnchorRecord, ...]:
        with self._lock:
            return tuple(self._anchors)

    def revocations(self) -> tuple[RevocationRecord, ...]:
        with self._lock:
            return tuple(self._revocations)

    def blocks(self) -> tuple[Block, ...]:
        with self._lock:
            return tuple(self._chain)

    # ------------------------------------------------------------------
    # Integrity
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Recompute every block hash and link.

        Returns
        -------
        bool
            ``True`` if each block's hash matches its contents and each
            ``previous_hash`` matches the preceding block.
        """
        chain = self.blocks()
        for position, block in enumerate(chain):
            expected_previous = GENESIS_PREVIOUS_HASH if position == 0 else chain[position - 1].hash
            if block.index != position or block.previous_hash != expected_previous:
                return False
            recomputed = Block.compute_hash(
                block.index, block.timestamp, block.kind, block.payload, block.previous_hash
            )
            if recomputed != block.hash:
                return False
        return True

    def __len__(self) -> int:
        """Return the number of blocks, genesis included."""
        with self._lock:
            return len(self._chain)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _genesis_block(self) -> Block:
        timestamp = self._clock.now()
        payload = {"message": "Genesis block of the trust ledger"}
        return Block(
            index=0,
            timestamp=timestamp,
            kind=BlockKind.GENESIS,
            payload=MappingProxyType(dict(payload)),
            previous_hash=GENESIS_PREVIOUS_HASH,
            hash=Block.compute_hash(0, timestamp, BlockKind.GENESIS, payload, GENESIS_PREVIOUS_HASH),
        )

    def _append(self, kind: BlockKind, payload: dict[str, Any]) -> Block:
        # Caller holds self._lock.
        previous = self._chain[-1]
        index = len(self._chain)
        timestamp = self._clock.now()
        block = Block(
            index=index,
            timestamp=timestamp,
            kind=kind,
            payload=MappingProxyType(dict(payload)),
            previous_hash=previous.hash,
            hash=Block.compute_hash(index, timestamp, kind, payload, previous.hash),
        )
        self._chain.append(block)
        return block


__all__ = ["Block", "BlockKind", "GENESIS_PREVIOUS_HASH", "InMemoryLedger"]
