#!/usr/bin/env python3
"""Example: Create Identities

Demonstrates creating identities for an authority, a citizen, and a
verifier, and publishing only their public records on the ledger.

Usage:
    python examples/01_create_identities.py

Requirements:
    pip install ssi-trust
"""
from __future__ import annotations

import json

import ssi_trust
from ssi_trust import IdentityManager, InMemoryLedger, derive_identifier


def main() -> None:
    print(f"ssi-trust version: {ssi_trust.__version__}")

    # Step 1: Each party creates its own identity locally
    manager = IdentityManager()
    registry = manager.create_identity("Civil Registry")
    maria = manager.create_identity("Maria")
    landlord = manager.create_identity("Landlord")
    for identity in (registry, maria, landlord):
        print(f"{identity.label:15s} {identity.identifier}")

    # Step 2: The identifier is a function of the public key alone
    assert derive_identifier(maria.public_key) == maria.identifier
    print("\nIdentifier recomputed from the public key: OK")

    # Step 3: The DID document is public; the private key never appears in it
    print("\nMaria's DID document:")
    print(json.dumps(maria.did_document(), indent=2))

    # Step 4: Publish the public records
    ledger = InMemoryLedger()
    for identity in (registry, maria, landlord):
        ledger.register_identity(identity.identifier, identity.public_key)
    record = ledger.lookup_identity(maria.identifier)
    print(f"\nResolved from ledger: {record.identifier} -> {record.public_key.hex()[:16]}...")
    print(f"Ledger blocks: {len(ledger)}, chain intact: {ledger.verify_chain()}")


if __name__ == "__main__":
    main()
