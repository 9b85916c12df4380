"""Tests for ssi_trust.did.identity — derivation, records, and resolution."""
from __future__ import annotations

import datetime
import hashlib
import re

import pytest

from ssi_trust.config import ProtocolSettings
from ssi_trust.did.identity import (
    DID_CONTEXT,
    Identity,
    IdentityManager,
    derive_identifier,
    resolve_identity,
)
from ssi_trust.errors import NotFoundError
from ssi_trust.ledger.memory import InMemoryLedger
from ssi_trust.runtime import FixedClock, SeededRandom


class TestDeriveIdentifier:
    def test_format(self) -> None:
        identifier = derive_identifier(b"\x01" * 32)
        assert re.fullmatch(r"did:example:[0-9a-f]{32}", identifier)

    def test_is_truncated_sha256_of_public_key(self) -> None:
        public_key = bytes(range(32))
        expected = hashlib.sha256(public_key).hexdigest()[:32]
        assert derive_identifier(public_key) == f"did:example:{expected}"

    def test_custom_method_and_length(self) -> None:
        identifier = derive_identifier(b"\x02" * 32, method="test", length=64)
        assert identifier.startswith("did:test:")
        assert len(identifier.split(":")[2]) == 64


class TestCreateIdentity:
    def test_identifier_derived_from_public_key(self, maria: Identity) -> None:
        assert maria.identifier == derive_identifier(maria.public_key)

    def test_created_at_comes_from_clock(self, maria: Identity, start: datetime.datetime) -> None:
        assert maria.created_at == start

    def test_distinct_identities_have_distinct_identifiers(
        self, authority: Identity, maria: Identity
    ) -> None:
        assert authority.identifier != maria.identifier

    def test_settings_control_method(self, clock: FixedClock) -> None:
        manager = IdentityManager(
            settings=ProtocolSettings(did_method="acme"),
            clock=clock,
            random_source=SeededRandom(3),
        )
        assert manager.create_identity("x").identifier.startswith("did:acme:")

    def test_label_is_kept(self, maria: Identity) -> None:
        assert maria.label == "Maria"


class TestIdentitySerialization:
    def test_repr_hides_private_key(self, maria: Identity) -> None:
        assert maria.private_key.hex() not in repr(maria)
        assert "private_key" not in repr(maria)

    def test_to_dict_has_no_private_key(self, maria: Identity) -> None:
        data = maria.to_dict()
        assert "private_key" not in data
        assert maria.private_key.hex() not in str(data)
        assert data["public_key_hex"] == maria.public_key.hex()

    def test_public_record(self, maria: Identity) -> None:
        record = maria.public_record()
        assert record.identifier == maria.identifier
        assert record.public_key == maria.public_key
        assert record.to_dict()["publicKeyHex"] == maria.public_key.hex()

    def test_did_document(self, maria: Identity) -> None:
        document = maria.did_document()
        assert document["@context"] == DID_CONTEXT
        assert document["id"] == maria.identifier
        assert document["authentication"] == [f"{maria.identifier}#key-1"]
        method = document["verificationMethod"][0]
        assert method["type"] == "Ed25519VerificationKey2020"
        assert method["publicKeyHex"] == maria.public_key.hex()

    def test_key_reference(self, maria: Identity) -> None:
        assert maria.key_reference == f"{maria.identifier}#key-1"


class TestResolveIdentity:
    def test_resolves_registered(self, maria: Identity, clock: FixedClock) -> None:
        ledger = InMemoryLedger(clock=clock)
        ledger.register_identity(maria.identifier, maria.public_key)
        record = resolve_identity(maria.identifier, ledger)
        assert record.public_key == maria.public_key

    def test_unknown_raises_not_found(self, clock: FixedClock) -> None:
        with pytest.raises(NotFoundError) as excinfo:
            resolve_identity("did:example:missing", InMemoryLedger(clock=clock))
        assert excinfo.value.identifier == "did:example:missing"

    def test_empty_identifier_raises_not_found(self, clock: FixedClock) -> None:
        with pytest.raises(NotFoundError):
            resolve_identity("", InMemoryLedger(clock=clock))

    def test_manager_resolve_delegates(
        self, identity_manager: IdentityManager, maria: Identity, clock: FixedClock
    ) -> None:
        ledger = InMemoryLedger(clock=clock)
        ledger.register_identity(maria.identifier, maria.public_key)
        assert identity_manager.resolve_identity(maria.identifier, ledger).identifier == maria.identifier
