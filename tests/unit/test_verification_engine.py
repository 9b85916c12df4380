"""Tests for ssi_trust.verification — the five checks and the aggregate verdict."""
from __future__ import annotations

import datetime

import pytest

from ssi_trust.config import ProtocolSettings
from ssi_trust.credentials.issuer import CredentialIssuer
from ssi_trust.credentials.models import Proof, ProofPurpose, RevocationRecord, VerifiableCredential
from ssi_trust.did.identity import Identity
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.ledger.memory import InMemoryLedger
from ssi_trust.presentation.builder import PresentationBuilder
from ssi_trust.presentation.models import Presentation
from ssi_trust.runtime import FixedClock, SeededRandom
from ssi_trust.verification.engine import VerificationEngine
from ssi_trust.verification.report import CheckName, CheckOutcome, VerificationReport


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def engine(
    key_manager: Ed25519KeyManager, settings: ProtocolSettings, clock: FixedClock
) -> VerificationEngine:
    return VerificationEngine(key_manager=key_manager, settings=settings, clock=clock)


@pytest.fixture()
def issuer(
    key_manager: Ed25519KeyManager, clock: FixedClock, random_source: SeededRandom
) -> CredentialIssuer:
    return CredentialIssuer(key_manager=key_manager, clock=clock, random_source=random_source)


@pytest.fixture()
def credential(
    issuer: CredentialIssuer,
    authority: Identity,
    maria: Identity,
    maria_claims: dict[str, str],
) -> VerifiableCredential:
    return issuer.issue_credential(
        authority, maria.identifier, "NationalIdentity", maria_claims
    ).credential


@pytest.fixture()
def builder(
    key_manager: Ed25519KeyManager, clock: FixedClock, random_source: SeededRandom
) -> PresentationBuilder:
    return PresentationBuilder(key_manager=key_manager, clock=clock, random_source=random_source)


@pytest.fixture()
def presentation(
    builder: PresentationBuilder,
    maria: Identity,
    landlord: Identity,
    credential: VerifiableCredential,
) -> Presentation:
    return builder.create_presentation(
        maria, credential, {"name", "nationality"}, landlord.identifier, "Rental application"
    )


def _verify(
    engine: VerificationEngine,
    presentation: Presentation,
    authority: Identity,
    holder_key: bytes | None,
    revoked: object = (),
) -> VerificationReport:
    return engine.verify_presentation(
        presentation,
        issuer_public_key=authority.public_key,
        holder_public_key=holder_key,
        revocation_set=revoked,  # type: ignore[arg-type]
    )


def _outcomes(report: VerificationReport) -> dict[CheckName, CheckOutcome]:
    return {entry.step: entry.outcome for entry in report.steps}


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestValidPresentation:
    def test_is_valid(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.valid is True
        assert report.failed_steps() == []
        assert report.errors() == []

    def test_all_five_checks_in_order(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key)
        assert [entry.step for entry in report.steps] == [
            CheckName.HOLDER_SIGNATURE,
            CheckName.ISSUER_PROVENANCE,
            CheckName.EXPIRY,
            CheckName.REVOCATION,
            CheckName.FRESHNESS,
        ]

    def test_issuer_check_is_provenance_only(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key)
        (provenance,) = report.steps_for(CheckName.ISSUER_PROVENANCE)
        assert provenance.outcome == CheckOutcome.PROVENANCE_ONLY
        assert authority.identifier in provenance.detail
        assert "matches the issuer identifier" in provenance.detail

    def test_mismatched_issuer_key_is_noted_not_failed(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        landlord: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, landlord, maria.public_key)
        (provenance,) = report.steps_for(CheckName.ISSUER_PROVENANCE)
        assert "does not match" in provenance.detail
        assert report.valid is True

    def test_disclosure_summary(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.disclosure.holder == maria.identifier
        assert report.disclosure.recipient == landlord.identifier
        assert report.disclosure.revealed_attributes == ("name", "nationality")
        assert report.disclosure.hidden_attributes == ("id_number",)

    def test_same_inputs_same_report(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        first = _verify(engine, presentation, authority, maria.public_key)
        second = _verify(engine, presentation, authority, maria.public_key)
        assert first == second
        assert first.to_dict() == second.to_dict()


# ---------------------------------------------------------------------------
# Holder signature
# ---------------------------------------------------------------------------


class TestHolderSignature:
    def test_missing_holder_key(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, None)
        assert report.valid is False
        assert _outcomes(report)[CheckName.HOLDER_SIGNATURE] == CheckOutcome.FAILED
        # The remaining checks still run.
        assert len(report.steps) == 5

    def test_wrong_holder_key(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        landlord: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, landlord.public_key)
        assert report.valid is False
        (holder,) = report.steps_for(CheckName.HOLDER_SIGNATURE)
        assert holder.error == "InvalidSignatureError"

    def test_tampered_revealed_value(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        data = presentation.to_dict()
        data["verifiableCredential"][0]["credentialSubject"]["nationality"] = "US"
        report = _verify(engine, Presentation.from_dict(data), authority, maria.public_key)
        assert report.valid is False
        assert report.passed(CheckName.HOLDER_SIGNATURE) is False

    def test_tampered_challenge(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        data = presentation.to_dict()
        data["challenge"] = "0" * 32
        report = _verify(engine, Presentation.from_dict(data), authority, maria.public_key)
        assert report.passed(CheckName.HOLDER_SIGNATURE) is False

    def test_substituted_holder(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        landlord: Identity,
    ) -> None:
        data = presentation.to_dict()
        data["holder"] = landlord.identifier
        report = _verify(engine, Presentation.from_dict(data), authority, landlord.public_key)
        assert report.valid is False
        (holder,) = report.steps_for(CheckName.HOLDER_SIGNATURE)
        assert "impersonation" in holder.detail

    def test_wrong_proof_purpose(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        assert presentation.proof is not None
        forged = presentation.model_copy(
            update={
                "proof": presentation.proof.model_copy(
                    update={"proof_purpose": ProofPurpose.ASSERTION_METHOD}
                )
            }
        )
        report = _verify(engine, forged, authority, maria.public_key)
        assert report.passed(CheckName.HOLDER_SIGNATURE) is False

    def test_non_hex_proof_value(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        assert presentation.proof is not None
        forged = presentation.model_copy(
            update={"proof": presentation.proof.model_copy(update={"proof_value": "zz"})}
        )
        report = _verify(engine, forged, authority, maria.public_key)
        (holder,) = report.steps_for(CheckName.HOLDER_SIGNATURE)
        assert holder.failed
        assert "hex" in holder.detail

    def test_unsigned_presentation(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        unsigned = presentation.model_copy(update={"proof": None})
        report = _verify(engine, unsigned, authority, maria.public_key)
        assert report.valid is False


# ---------------------------------------------------------------------------
# Expiry
# ---------------------------------------------------------------------------


class TestExpiry:
    def test_one_millisecond_before_expiry_passes(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        clock.set(credential.expiration_date - datetime.timedelta(milliseconds=1))
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.passed(CheckName.EXPIRY) is True
        assert report.valid is True

    def test_at_expiry_fails(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        clock.set(credential.expiration_date)
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.valid is False
        (expiry,) = report.steps_for(CheckName.EXPIRY)
        assert expiry.error == "ExpiredCredentialError"
        assert expiry.detail.startswith("Expired on")

    def test_one_millisecond_after_expiry_fails(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        clock.advance(datetime.timedelta(days=365, milliseconds=1))
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.valid is False
        assert [entry.step for entry in report.failed_steps()] == [CheckName.EXPIRY]


# ---------------------------------------------------------------------------
# Revocation
# ---------------------------------------------------------------------------


class TestRevocation:
    def test_revoked_credential(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key, {credential.id})
        assert report.valid is False
        assert [entry.step for entry in report.failed_steps()] == [CheckName.REVOCATION]
        assert report.errors() == ["RevokedCredentialError"]

    def test_accepts_revocation_records(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
        start: datetime.datetime,
    ) -> None:
        record = RevocationRecord(credential.id, authority.identifier, "error", start)
        report = _verify(engine, presentation, authority, maria.public_key, [record])
        assert report.passed(CheckName.REVOCATION) is False

    def test_unrelated_revocation_ignored(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        authority: Identity,
        maria: Identity,
    ) -> None:
        report = _verify(engine, presentation, authority, maria.public_key, {"urn:uuid:other"})
        assert report.valid is True

    def test_monotonic(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
    ) -> None:
        revoked = {credential.id}
        assert _verify(engine, presentation, authority, maria.public_key, revoked).valid is False
        revoked.add("urn:uuid:another")
        assert _verify(engine, presentation, authority, maria.public_key, revoked).valid is False


# ---------------------------------------------------------------------------
# Freshness
# ---------------------------------------------------------------------------


class TestFreshness:
    def test_stale_presentation_warns(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        clock.advance(datetime.timedelta(minutes=31))
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.valid is True
        (warning,) = report.warnings()
        assert warning.step == CheckName.FRESHNESS
        assert warning.error == "StaleChallengeError"

    def test_within_window_passes(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        clock.advance(datetime.timedelta(minutes=29))
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.passed(CheckName.FRESHNESS) is True
        assert report.warnings() == []

    def test_strict_freshness_invalidates(
        self,
        key_manager: Ed25519KeyManager,
        presentation: Presentation,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
    ) -> None:
        strict = VerificationEngine(
            key_manager=key_manager,
            settings=ProtocolSettings(strict_freshness=True),
            clock=clock,
        )
        clock.advance(datetime.timedelta(hours=1))
        report = _verify(strict, presentation, authority, maria.public_key)
        assert report.valid is False
        assert _outcomes(report)[CheckName.FRESHNESS] == CheckOutcome.FAILED


# ---------------------------------------------------------------------------
# Multiple and missing credentials
# ---------------------------------------------------------------------------


class TestCredentialCount:
    def test_empty_presentation_is_invalid(
        self,
        engine: VerificationEngine,
        key_manager: Ed25519KeyManager,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
        start: datetime.datetime,
    ) -> None:
        unsigned = Presentation(
            holder=maria.identifier,
            verifiable_credential=[],
            purpose="nothing",
            recipient=landlord.identifier,
            revealed_attributes=[],
            hidden_attributes=[],
            created=start,
            challenge="ab" * 16,
        )
        signature = key_manager.sign(maria.private_key, unsigned.signing_payload())
        signed = unsigned.model_copy(
            update={
                "proof": Proof(
                    created=start,
                    verification_method=maria.key_reference,
                    proof_purpose=ProofPurpose.AUTHENTICATION,
                    proof_value=signature.hex(),
                )
            }
        )
        report = _verify(engine, signed, authority, maria.public_key)
        assert report.passed(CheckName.HOLDER_SIGNATURE) is True
        assert report.valid is False

    def test_per_credential_checks_repeat(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(credential, ["nationality"])],
            landlord.identifier,
            "Twice",
        )
        report = _verify(engine, presentation, authority, maria.public_key, {credential.id})
        assert len(report.steps_for(CheckName.REVOCATION)) == 2
        assert len(report.steps) == 8
        assert report.valid is False

    def test_one_revoked_credential_invalidates_all(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        issuer: CredentialIssuer,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        residence = issuer.issue_credential(
            authority, maria.identifier, "Residence", {"city": "Santo Domingo"}
        ).credential
        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(residence, ["city"])],
            landlord.identifier,
            "Rental application",
        )
        report = _verify(engine, presentation, authority, maria.public_key, {residence.id})
        assert report.valid is False
        outcomes = {entry.credential_id: entry.outcome for entry in report.steps_for(CheckName.REVOCATION)}
        assert outcomes == {credential.id: CheckOutcome.PASSED, residence.id: CheckOutcome.FAILED}
        assert report.passed(CheckName.EXPIRY) is True
        assert [entry.credential_id for entry in report.failed_steps()] == [residence.id]

    def test_one_expired_credential_invalidates_all(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        issuer: CredentialIssuer,
        credential: VerifiableCredential,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
        start: datetime.datetime,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        permit = issuer.issue_credential(
            authority,
            maria.identifier,
            "TemporaryPermit",
            {"permit": "P-7"},
            start + datetime.timedelta(days=1),
        ).credential
        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(permit, ["permit"])],
            landlord.identifier,
            "Rental application",
        )
        clock.advance(datetime.timedelta(days=2))
        report = _verify(engine, presentation, authority, maria.public_key)
        assert report.valid is False
        outcomes = {entry.credential_id: entry.outcome for entry in report.steps_for(CheckName.EXPIRY)}
        assert outcomes == {credential.id: CheckOutcome.PASSED, permit.id: CheckOutcome.FAILED}
        assert report.passed(CheckName.REVOCATION) is True


# ---------------------------------------------------------------------------
# Issuer keys across several issuers
# ---------------------------------------------------------------------------


class TestIssuerKeys:
    def test_each_credential_noted_against_its_own_issuer(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        issuer: CredentialIssuer,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        # The landlord doubles as a second issuer here.
        reference = issuer.issue_credential(
            landlord, maria.identifier, "TenantReference", {"rating": "good"}
        ).credential
        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(reference, ["rating"])],
            landlord.identifier,
            "Rental application",
        )
        report = engine.verify_presentation(
            presentation,
            issuer_public_key=None,
            holder_public_key=maria.public_key,
            issuer_keys={
                authority.identifier: authority.public_key,
                landlord.identifier: landlord.public_key,
            },
        )
        assert report.valid is True
        for entry in report.steps_for(CheckName.ISSUER_PROVENANCE):
            assert "supplied issuer key matches the issuer identifier" in entry.detail

    def test_single_key_mismatch_still_reported(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        issuer: CredentialIssuer,
        credential: VerifiableCredential,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        reference = issuer.issue_credential(
            landlord, maria.identifier, "TenantReference", {"rating": "good"}
        ).credential
        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(reference, ["rating"])],
            landlord.identifier,
            "Rental application",
        )
        report = _verify(engine, presentation, authority, maria.public_key)
        first, second = report.steps_for(CheckName.ISSUER_PROVENANCE)
        assert "does not match" not in first.detail
        assert "does not match" in second.detail


# ---------------------------------------------------------------------------
# verify_with_ledger
# ---------------------------------------------------------------------------


class TestVerifyWithLedger:
    def test_resolves_keys_and_revocations(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        credential: VerifiableCredential,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
        start: datetime.datetime,
    ) -> None:
        ledger = InMemoryLedger(clock=clock)
        ledger.register_identity(authority.identifier, authority.public_key)
        ledger.register_identity(maria.identifier, maria.public_key)
        assert engine.verify_with_ledger(presentation, ledger).valid is True

        ledger.publish_revocation(
            RevocationRecord(credential.id, authority.identifier, "error", start)
        )
        assert engine.verify_with_ledger(presentation, ledger).valid is False

    def test_unregistered_holder_is_reported(
        self,
        engine: VerificationEngine,
        presentation: Presentation,
        clock: FixedClock,
    ) -> None:
        report = engine.verify_with_ledger(presentation, InMemoryLedger(clock=clock))
        assert report.valid is False
        (holder,) = report.steps_for(CheckName.HOLDER_SIGNATURE)
        assert "No public key" in holder.detail

    def test_resolves_every_issuer(
        self,
        engine: VerificationEngine,
        builder: PresentationBuilder,
        issuer: CredentialIssuer,
        credential: VerifiableCredential,
        clock: FixedClock,
        authority: Identity,
        maria: Identity,
        landlord: Identity,
    ) -> None:
        from ssi_trust.presentation.builder import Disclosure

        reference = issuer.issue_credential(
            landlord, maria.identifier, "TenantReference", {"rating": "good"}
        ).credential
        presentation = builder.create_combined_presentation(
            maria,
            [Disclosure.of(credential, ["name"]), Disclosure.of(reference, ["rating"])],
            landlord.identifier,
            "Rental application",
        )
        ledger = InMemoryLedger(clock=clock)
        for party in (authority, maria, landlord):
            ledger.register_identity(party.identifier, party.public_key)

        report = engine.verify_with_ledger(presentation, ledger)
        assert report.valid is True
        provenance = report.steps_for(CheckName.ISSUER_PROVENANCE)
        assert len(provenance) == 2
        for entry in provenance:
            assert "supplied issuer key matches the issuer identifier" in entry.detail
