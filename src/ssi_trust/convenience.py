"""Convenience API for ssi-trust — a whole trust network in a few lines.

Example
-------
::

    from ssi_trust import TrustNetwork

    network = TrustNetwork()
    registry = network.onboard("Civil Registry")
    maria = network.onboard("Maria")
    landlord = network.onboard("Landlord")

    issued = network.issue(registry, maria.identifier, "NationalIdentity",
                           {"name": "Maria", "nationality": "DO", "id_number": "001"})
    presentation = network.present(maria, issued.credential, {"name", "nationality"},
                                   landlord.identifier, "Rental application")
    print(network.verify(presentation).valid)  # True
"""
from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping

from ssi_trust.config import ProtocolSettings
from ssi_trust.credentials.issuer import CredentialIssuer
from ssi_trust.credentials.models import IssuedCredential, RevocationRecord, VerifiableCredential
from ssi_trust.did.identity import Identity, IdentityManager
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.ledger.base import Ledger
from ssi_trust.ledger.memory import InMemoryLedger
from ssi_trust.presentation.builder import PresentationBuilder
from ssi_trust.presentation.models import Presentation
from ssi_trust.runtime import Clock, RandomSource, SecureRandom, SystemClock
from ssi_trust.verification.engine import VerificationEngine
from ssi_trust.verification.report import VerificationReport


class TrustNetwork:
    """One ledger wired to an identity manager, issuer, builder, and verifier.

    Every component shares the same settings, clock, and randomness
    source, so a network built with a fixed clock and a seeded source is
    fully reproducible.
    """

    def __init__(
        self,
        settings: ProtocolSettings | None = None,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
        ledger: Ledger | None = None,
    ) -> None:
        self.settings = settings or ProtocolSettings()
        self.clock: Clock = clock or SystemClock()
        random_source = random_source or SecureRandom()
        key_manager = Ed25519KeyManager(random_source)

        self.ledger: Ledger = ledger if ledger is not None else InMemoryLedger(clock=self.clock)
        self.identities = IdentityManager(
            settings=self.settings, clock=self.clock, key_manager=key_manager
        )
        self.issuer = CredentialIssuer(
            key_manager=key_manager,
            settings=self.settings,
            clock=self.clock,
            random_source=random_source,
            ledger=self.ledger,
        )
        self.builder = PresentationBuilder(
            key_manager=key_manager, clock=self.clock, random_source=random_source
        )
        self.engine = VerificationEngine(
            key_manager=key_manager, settings=self.settings, clock=self.clock
        )

    def onboard(self, label: str) -> Identity:
        """Create an identity and publish its public record."""
        identity = self.identities.create_identity(label)
        self.ledger.register_identity(identity.identifier, identity.public_key)
        return identity

    def issue(
        self,
        issuer: Identity,
        subject_identifier: str,
        credential_type: str,
        claims: Mapping[str, str],
        expiry: datetime.datetime | None = None,
    ) -> IssuedCredential:
        """Issue a credential and anchor it on the ledger."""
        return self.issuer.issue_credential(
            issuer, subject_identifier, credential_type, claims, expiry
        )

    def revoke(self, credential_id: str, issuer: Identity, reason: str) -> RevocationRecord:
        """Revoke a credential and publish the revocation."""
        return self.issuer.revoke_credential(credential_id, issuer, reason)

    def present(
        self,
        holder: Identity,
        credential: VerifiableCredential,
        reveal_set: Iterable[str],
        recipient_identifier: str,
        purpose: str,
    ) -> Presentation:
        """Build a presentation (peer to peer; the ledger is not involved)."""
        return self.builder.create_presentation(
            holder, credential, reveal_set, recipient_identifier, purpose
        )

    def verify(self, presentation: Presentation) -> VerificationReport:
        """Verify using keys and revocations from the ledger."""
        return self.engine.verify_with_ledger(presentation, self.ledger)

    def __repr__(self) -> str:
        return f"TrustNetwork(ledger={type(self.ledger).__name__}, did_method={self.settings.did_method!r})"
