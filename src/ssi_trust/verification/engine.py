"""VerificationEngine — validates presentations without contacting the issuer.

Verification flow
-----------------
1. ``holder_signature``  — the holder's Ed25519 proof covers the
   presentation exactly as received.
2. ``issuer_provenance`` — per credential; records the issuer reference.
   The issuer signature is preserved on each derived credential but is NOT
   re-verified, because hidden claims no longer match the signed values.
3. ``expiry``            — per credential; ``now < expirationDate``.
4. ``revocation``        — per credential; id absent from the revocation set.
5. ``freshness``         — ``now - created < replay_window``; advisory
   unless ``strict_freshness`` is set.

Every check runs regardless of earlier failures, so a report always lists
the full diagnostic. ``valid`` is the conjunction of checks 1, 3, and 4.
Conditions are reported, never raised.
"""
from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Mapping

from ssi_trust.config import ProtocolSettings
from ssi_trust.credentials.models import ProofPurpose, RevocationRecord, VerifiableCredential
from ssi_trust.did.identity import derive_identifier
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.errors import (
    ExpiredCredentialError,
    InvalidSignatureError,
    NotFoundError,
    RevokedCredentialError,
    StaleChallengeError,
)
from ssi_trust.ledger.base import Ledger
from ssi_trust.presentation.models import Presentation
from ssi_trust.runtime import Clock, SystemClock
from ssi_trust.verification.report import (
    CheckName,
    CheckOutcome,
    DisclosureSummary,
    VerificationReport,
    VerificationStep,
)

logger = logging.getLogger(__name__)

_AGGREGATED_CHECKS: frozenset[CheckName] = frozenset(
    {CheckName.HOLDER_SIGNATURE, CheckName.EXPIRY, CheckName.REVOCATION}
)


class VerificationEngine:
    """Runs the verification battery over a presentation.

    Stateless apart from its configuration: one engine may verify many
    presentations concurrently.

    Parameters
    ----------
    key_manager:
        Signature verification backend.
    settings:
        Replay window, freshness policy, and identifier derivation settings.
    clock:
        Source of "now" for expiry and freshness.

    Example
    -------
    ::

        engine = VerificationEngine()
        report = engine.verify_presentation(
            presentation,
            issuer_public_key=authority.public_key,
            holder_public_key=maria.public_key,
            revocation_set=ledger.revocation_set(),
        )
        if not report.valid:
            print([step.error for step in report.failed_steps()])
    """

    def __init__(
        self,
        key_manager: Ed25519KeyManager | None = None,
        settings: ProtocolSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._key_manager = key_manager or Ed25519KeyManager()
        self._settings = settings or ProtocolSettings()
        self._clock: Clock = clock or SystemClock()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def verify_presentation(
        self,
        presentation: Presentation,
        issuer_public_key: bytes | None,
        holder_public_key: bytes | None,
        revocation_set: Iterable[str | RevocationRecord] = (),
        issuer_keys: Mapping[str, bytes | None] | None = None,
    ) -> VerificationReport:
        """Verify a presentation against known keys and a revocation set.

        Parameters
        ----------
        presentation:
            The presentation as received from the holder.
        issuer_public_key:
            Public key of the credential issuer, if known. Only used for the
            informational provenance note.
        holder_public_key:
            Public key of the presenting holder. ``None`` fails the holder
            signature check.
        revocation_set:
            Revoked credential ids (or revocation records). Snapshotted
            once, before any check runs.
        issuer_keys:
            Optional map of issuer identifier to public key, for
            presentations combining credentials from several issuers. A
            credential whose issuer is in the map is noted against that
            key; any other falls back to *issuer_public_key*.

        Returns
        -------
        VerificationReport
        """
        revoked = _snapshot(revocation_set)
        now = self._clock.now()
        keys_by_issuer = dict(issuer_keys or {})

        steps: list[VerificationStep] = [
            self._check_holder_signature(presentation, holder_public_key)
        ]
        for credential in presentation.verifiable_credential:
            issuer_key = keys_by_issuer.get(credential.issuer, issuer_public_key)
            steps.append(self._check_issuer_provenance(credential, issuer_key))
            steps.append(self._check_expiry(credential, now))
            steps.append(self._check_revocation(credential, revoked))
        steps.append(self._check_freshness(presentation, now))

        gating = set(_AGGREGATED_CHECKS)
        if self._settings.strict_freshness:
            gating.add(CheckName.FRESHNESS)
        valid = not any(entry.failed for entry in steps if entry.step in gating)
        if not presentation.verifiable_credential:
            valid = False

        report = VerificationReport(
            steps=tuple(steps),
            valid=valid,
            disclosure=DisclosureSummary(
                holder=presentation.holder,
                purpose=presentation.purpose,
                recipient=presentation.recipient,
                revealed_attributes=tuple(presentation.revealed_attributes),
                hidden_attributes=tuple(presentation.hidden_attributes),
            ),
            verified_at=now,
        )
        if valid:
            logger.info("Presentation from %s verified as valid", presentation.holder)
        else:
            logger.warning(
                "Presentation from %s is invalid: %s",
                presentation.holder,
                ", ".join(entry.step.value for entry in report.failed_steps()) or "no credentials",
            )
        return report

    def verify_with_ledger(self, presentation: Presentation, ledger: Ledger) -> VerificationReport:
        """Verify using keys and revocations published on *ledger*.

        The holder key and the key of every distinct credential issuer are
        resolved from the ledger; an unregistered identifier resolves to
        ``None`` and is reported rather than raised.
        """
        holder_key = _lookup_key(ledger, presentation.holder)
        issuer_keys = {
            issuer: _lookup_key(ledger, issuer)
            for issuer in {cred.issuer for cred in presentation.verifiable_credential}
        }
        return self.verify_presentation(
            presentation,
            issuer_public_key=None,
            holder_public_key=holder_key,
            revocation_set=ledger.revocation_set(),
            issuer_keys=issuer_keys,
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_holder_signature(
        self, presentation: Presentation, holder_public_key: bytes | None
    ) -> VerificationStep:
        def failed(detail: str) -> VerificationStep:
            return VerificationStep(
                step=CheckName.HOLDER_SIGNATURE,
                outcome=CheckOutcome.FAILED,
                detail=detail,
                error=InvalidSignatureError.__name__,
            )

        proof = presentation.proof
        if proof is None:
            return failed("Presentation carries no holder proof")
        if holder_public_key is None:
            return failed(f"No public key available for holder {presentation.holder}")
        if not proof.verification_method.startswith(f"{presentation.holder}#"):
            return failed(
                f"Proof key {proof.verification_method} does not belong to holder "
                f"{presentation.holder} - possible impersonation"
            )
        if proof.proof_purpose != ProofPurpose.AUTHENTICATION:
            return failed(f"Holder proof has purpose {proof.proof_purpose.value}, expected authentication")
        try:
            signature = proof.signature_bytes()
        except ValueError:
            return failed("Holder proof value is not valid hex")

        if not self._key_manager.verify(holder_public_key, signature, presentation.signing_payload()):
            return failed("Holder signature is invalid - possible impersonation or tampering")

        logger.debug("Holder signature valid for %s", presentation.holder)
        return VerificationStep(
            step=CheckName.HOLDER_SIGNATURE,
            outcome=CheckOutcome.PASSED,
            detail="The holder authorized this presentation",
        )

    def _check_issuer_provenance(
        self, credential: VerifiableCredential, issuer_public_key: bytes | None
    ) -> VerificationStep:
        notes = [f"Credential issued by {credential.issuer}"]
        if credential.proof is None:
            notes.append("no issuer proof attached")
        else:
            notes.append(f"issuer proof {credential.proof.verification_method} preserved, not re-verified")
        if issuer_public_key is not None:
            derived = derive_identifier(
                issuer_public_key, self._settings.did_method, self._settings.identifier_length
            )
            if derived == credential.issuer:
                notes.append("supplied issuer key matches the issuer identifier")
            else:
                notes.append("supplied issuer key does not match the issuer identifier")
        return VerificationStep(
            step=CheckName.ISSUER_PROVENANCE,
            outcome=CheckOutcome.PROVENANCE_ONLY,
            detail="; ".join(notes),
            credential_id=credential.id,
        )

    def _check_expiry(
        self, credential: VerifiableCredential, now: datetime.datetime
    ) -> VerificationStep:
        expires = credential.expiration_date
        if credential.is_expired(now):
            return VerificationStep(
                step=CheckName.EXPIRY,
                outcome=CheckOutcome.FAILED,
                detail=f"Expired on {expires.isoformat()}",
                credential_id=credential.id,
                error=ExpiredCredentialError.__name__,
            )
        return VerificationStep(
            step=CheckName.EXPIRY,
            outcome=CheckOutcome.PASSED,
            detail=f"Valid until {expires.date().isoformat()}",
            credential_id=credential.id,
        )

    def _check_revocation(
        self, credential: VerifiableCredential, revoked: frozenset[str]
    ) -> VerificationStep:
        if credential.id in revoked:
            return VerificationStep(
                step=CheckName.REVOCATION,
                outcome=CheckOutcome.FAILED,
                detail="The issuer has revoked this credential",
                credential_id=credential.id,
                error=RevokedCredentialError.__name__,
            )
        return VerificationStep(
            step=CheckName.REVOCATION,
            outcome=CheckOutcome.PASSED,
            detail="The credential is not in the revocation set",
            credential_id=credential.id,
        )

    def _check_freshness(
        self, presentation: Presentation, now: datetime.datetime
    ) -> VerificationStep:
        window = self._settings.replay_window
        age = now - presentation.created
        minutes = round(age.total_seconds() / 60)
        if age < window:
            return VerificationStep(
                step=CheckName.FRESHNESS,
                outcome=CheckOutcome.PASSED,
                detail=f"Created {minutes} minute(s) ago",
            )
        return VerificationStep(
            step=CheckName.FRESHNESS,
            outcome=CheckOutcome.FAILED if self._settings.strict_freshness else CheckOutcome.WARNING,
            detail=(
                f"Created {minutes} minute(s) ago, older than the "
                f"{round(window.total_seconds() / 60)} minute replay window - possible replay"
            ),
            error=StaleChallengeError.__name__,
        )


def _snapshot(revocation_set: Iterable[str | RevocationRecord]) -> frozenset[str]:
    return frozenset(
        entry.credential_id if isinstance(entry, RevocationRecord) else str(entry)
        for entry in revocation_set
    )


def _lookup_key(ledger: Ledger, identifier: str) -> bytes | None:
    try:
        return ledger.lookup_identity(identifier).public_key
    except NotFoundError:
        logger.debug("Identifier %s is not registered on the ledger", identifier)
        return None


__all__ = ["VerificationEngine"]
