#!/usr/bin/env python3
"""Example: Issue a Credential

Demonstrates a civil registry issuing a national identity credential to
Maria, and what ends up on the ledger (a hash) versus in Maria's hands
(the full signed credential).

Usage:
    python examples/02_issue_credential.py

Requirements:
    pip install ssi-trust
"""
from __future__ import annotations

import ssi_trust
from ssi_trust import TrustNetwork, available_attributes


def main() -> None:
    print(f"ssi-trust version: {ssi_trust.__version__}")

    network = TrustNetwork()
    registry = network.onboard("Civil Registry")
    maria = network.onboard("Maria")

    # Step 1: Issue the credential
    issued = network.issue(
        registry,
        maria.identifier,
        "NationalIdentity",
        {
            "name": "Maria Garcia",
            "birth_date": "1990-05-15",
            "nationality": "DO",
            "id_number": "001-1234567-8",
        },
    )
    credential = issued.credential
    print(f"Credential id:   {credential.id}")
    print(f"Type:            {credential.credential_type}")
    print(f"Valid until:     {credential.expiration_date.date()}")
    print(f"Attributes:      {', '.join(available_attributes(credential))}")

    # Step 2: Anyone holding the issuer key can check the signature
    authentic = network.issuer.verify_credential_signature(credential, registry.public_key)
    print(f"Issuer signature valid: {authentic}")

    # Step 3: Only the hash and identifiers were anchored
    print("\nAnchor record published on the ledger:")
    for key, value in issued.anchor_record.to_dict().items():
        print(f"  {key}: {value}")

    print("\nFull credential (kept by Maria, off-chain):")
    print(credential.to_json())


if __name__ == "__main__":
    main()
