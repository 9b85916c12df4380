"""Shared fixtures: a fixed clock, seeded randomness, and a wired network."""
from __future__ import annotations

import datetime

import pytest

from ssi_trust.config import ProtocolSettings
from ssi_trust.convenience import TrustNetwork
from ssi_trust.did.identity import Identity, IdentityManager
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.runtime import FixedClock, SeededRandom

START = datetime.datetime(2025, 3, 1, 12, 0, tzinfo=datetime.timezone.utc)

MARIA_CLAIMS: dict[str, str] = {
    "name": "Maria",
    "nationality": "DO",
    "id_number": "001",
}


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture()
def random_source() -> SeededRandom:
    return SeededRandom(42)


@pytest.fixture()
def settings() -> ProtocolSettings:
    return ProtocolSettings()


@pytest.fixture()
def key_manager(random_source: SeededRandom) -> Ed25519KeyManager:
    return Ed25519KeyManager(random_source)


@pytest.fixture()
def identity_manager(
    settings: ProtocolSettings, clock: FixedClock, key_manager: Ed25519KeyManager
) -> IdentityManager:
    return IdentityManager(settings=settings, clock=clock, key_manager=key_manager)


@pytest.fixture()
def authority(identity_manager: IdentityManager) -> Identity:
    return identity_manager.create_identity("Civil Registry")


@pytest.fixture()
def maria(identity_manager: IdentityManager) -> Identity:
    return identity_manager.create_identity("Maria")


@pytest.fixture()
def landlord(identity_manager: IdentityManager) -> Identity:
    return identity_manager.create_identity("Landlord")


@pytest.fixture()
def network(clock: FixedClock, random_source: SeededRandom) -> TrustNetwork:
    return TrustNetwork(clock=clock, random_source=random_source)


@pytest.fixture()
def start() -> datetime.datetime:
    return START


@pytest.fixture()
def maria_claims() -> dict[str, str]:
    return dict(MARIA_CLAIMS)
