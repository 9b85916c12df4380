#!/usr/bin/env python3
"""Example: Verify a Presentation

Demonstrates a landlord verifying Maria's presentation without contacting
the civil registry, then detecting a tampered copy.

Usage:
    python examples/04_verify_presentation.py

Requirements:
    pip install ssi-trust
"""
from __future__ import annotations

import ssi_trust
from ssi_trust import Presentation, TrustNetwork
from ssi_trust.reporting import render_report


def main() -> None:
    print(f"ssi-trust version: {ssi_trust.__version__}")

    network = TrustNetwork()
    registry = network.onboard("Civil Registry")
    maria = network.onboard("Maria")
    landlord = network.onboard("Landlord")
    issued = network.issue(
        registry,
        maria.identifier,
        "NationalIdentity",
        {"name": "Maria", "nationality": "DO", "id_number": "001"},
    )
    presentation = network.present(
        maria, issued.credential, {"name", "nationality"}, landlord.identifier, "Rental application"
    )

    # Step 1: Verify using keys and revocations from the ledger
    render_report(network.verify(presentation))

    # Step 2: Change one revealed value in transit
    data = presentation.to_dict()
    data["verifiableCredential"][0]["credentialSubject"]["nationality"] = "US"
    tampered = Presentation.from_dict(data)
    report = network.verify(tampered)
    print(f"\nTampered copy valid: {report.valid}")
    for entry in report.failed_steps():
        print(f"  {entry.step.value}: {entry.detail}")


if __name__ == "__main__":
    main()
