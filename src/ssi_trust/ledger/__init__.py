"""ssi_trust.ledger — the append-only ledger collaborator.

Submodules
----------
base
    The Ledger abstract base class consumed by the issuer and the verifier.
memory
    InMemoryLedger, a hash-chained illustrative implementation.
"""
from __future__ import annotations

from ssi_trust.ledger.base import Ledger
from ssi_trust.ledger.memory import Block, BlockKind, InMemoryLedger

__all__ = ["Block", "BlockKind", "InMemoryLedger", "Ledger"]
