#!/usr/bin/env python3
"""Example: Revocation

Demonstrates the civil registry revoking a credential issued with wrong
data, and every later verification of it failing.

Usage:
    python examples/05_revocation.py

Requirements:
    pip install ssi-trust
"""
from __future__ import annotations

import ssi_trust
from ssi_trust import InMemoryLedger, TrustNetwork
from ssi_trust.reporting import render_ledger, render_report


def main() -> None:
    print(f"ssi-trust version: {ssi_trust.__version__}")

    ledger = InMemoryLedger()
    network = TrustNetwork(ledger=ledger)
    registry = network.onboard("Civil Registry")
    maria = network.onboard("Maria")
    bank = network.onboard("Bank")
    issued = network.issue(
        registry,
        maria.identifier,
        "NationalIdentity",
        {"name": "Maria", "nationality": "DO", "id_number": "001"},
    )

    # Step 1: Before revocation the presentation verifies
    presentation = network.present(maria, issued.credential, {"name"}, bank.identifier, "Account opening")
    print(f"Before revocation: valid={network.verify(presentation).valid}")

    # Step 2: The issuer revokes; the ledger records id and issuer, not the reason
    record = network.revoke(issued.credential.id, registry, "Issued with incorrect data")
    print(f"Revoked {record.credential_id} at {record.timestamp.isoformat()}")

    # Step 3: The same credential now fails, however it is presented
    render_report(network.verify(presentation))
    render_ledger(ledger)


if __name__ == "__main__":
    main()
