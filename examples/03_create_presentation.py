#!/usr/bin/env python3
"""Example: Selective Disclosure

Demonstrates Maria sharing only her name and nationality with a landlord
while her document number stays hidden behind a hash commitment.

Usage:
    python examples/03_create_presentation.py

Requirements:
    pip install ssi-trust
"""
from __future__ import annotations

import ssi_trust
from ssi_trust import TrustNetwork, UnknownAttributeError


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

    # Step 1: Reveal two attributes, hide the rest
    presentation = network.present(
        maria, issued.credential, {"name", "nationality"}, landlord.identifier, "Rental application"
    )
    print(f"Revealed: {presentation.revealed_attributes}")
    print(f"Hidden:   {presentation.hidden_attributes}")

    # Step 2: What the landlord actually receives
    for key, value in presentation.verifiable_credential[0].claims.items():
        print(f"  {key}: {value}")
    print(f"Challenge: {presentation.challenge}")

    # Step 3: Asking for an attribute the credential does not carry is an error
    try:
        network.present(maria, issued.credential, {"salary"}, landlord.identifier, "Job")
    except UnknownAttributeError as exc:
        print(f"\nRejected: {exc}")


if __name__ == "__main__":
    main()
