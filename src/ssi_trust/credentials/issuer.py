"""CredentialIssuer — signs claims about a subject and emits anchor records.

Issuance is stateless: every call builds a new record from its arguments
and the issuer's read-only key material, so one :class:`CredentialIssuer`
may be shared by many threads. The only write an issuer performs is the
optional append of the anchor (and revocation) record to an injected
ledger, whose write path the ledger serializes.
"""
from __future__ import annotations

import datetime
import logging
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ssi_trust.canonical import sha256_hex
from ssi_trust.config import ProtocolSettings
from ssi_trust.credentials.models import (
    BASE_CREDENTIAL_TYPE,
    SUBJECT_ID_KEY,
    AnchorRecord,
    IssuedCredential,
    Proof,
    ProofPurpose,
    RevocationRecord,
    VerifiableCredential,
)
from ssi_trust.did.identity import Identity
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.errors import InvalidClaimsError, InvalidExpiryError, InvalidSignatureError
from ssi_trust.runtime import Clock, RandomSource, SecureRandom, SystemClock

if TYPE_CHECKING:
    from ssi_trust.ledger.base import Ledger

logger = logging.getLogger(__name__)


class CredentialIssuer:
    """Issues and revokes verifiable credentials.

    Parameters
    ----------
    key_manager:
        Signing backend. Defaults to a new :class:`Ed25519KeyManager`.
    settings:
        Protocol settings (default validity period).
    clock:
        Source of issuance and revocation timestamps.
    random_source:
        Entropy for credential identifiers.
    ledger:
        Optional ledger. When given, anchor records and revocations are
        appended to it as they are produced.

    Example
    -------
    ::

        issuer = CredentialIssuer(ledger=ledger)
        issued = issuer.issue_credential(
            authority,
            subject_identifier=citizen.identifier,
            credential_type="NationalIdentity",
            claims={"name": "Maria", "nationality": "DO"},
        )
        issued.credential.proof.proof_value  # hex Ed25519 signature
    """

    def __init__(
        self,
        key_manager: Ed25519KeyManager | None = None,
        settings: ProtocolSettings | None = None,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
        ledger: Ledger | None = None,
    ) -> None:
        self._key_manager = key_manager or Ed25519KeyManager()
        self._settings = settings or ProtocolSettings()
        self._clock: Clock = clock or SystemClock()
        self._random: RandomSource = random_source or SecureRandom()
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def issue_credential(
        self,
        issuer: Identity,
        subject_identifier: str,
        credential_type: str,
        claims: Mapping[str, str],
        expiry: datetime.datetime | None = None,
    ) -> IssuedCredential:
        """Issue and sign a new credential.

        Parameters
        ----------
        issuer:
            The issuing identity; its private key signs the credential.
        subject_identifier:
            Identifier of the party the claims are about.
        credential_type:
            Domain-specific type appended after ``"VerifiableCredential"``.
        claims:
            Non-empty mapping of string claims. ``id`` is reserved.
        expiry:
            Expiration instant. Defaults to issuance time plus
            ``settings.default_validity``.

        Returns
        -------
        IssuedCredential
            The signed credential, its content hash, and its anchor record.

        Raises
        ------
        InvalidClaimsError
            If *claims* is empty, contains ``id``, or holds non-string keys
            or values, or if *subject_identifier* or *credential_type* is empty.
        InvalidExpiryError
            If *expiry* is not strictly after the issuance time.
        KeyMaterialError
            If the issuer's private key is unusable.
        """
        _validate_claims(claims)
        if not subject_identifier:
            raise InvalidClaimsError("subject_identifier must not be empty.")
        if not credential_type:
            raise InvalidClaimsError("credential_type must not be empty.")

        issued_at = self._clock.now()
        expires_at = expiry if expiry is not None else issued_at + self._settings.default_validity
        if expires_at.tzinfo is None or expires_at <= issued_at:
            raise InvalidExpiryError(issued_at, expires_at)

        types = [BASE_CREDENTIAL_TYPE]
        if credential_type != BASE_CREDENTIAL_TYPE:
            types.append(credential_type)

        unsigned = VerifiableCredential(
            id=self._new_credential_id(),
            type=types,
            issuer=issuer.identifier,
            issuance_date=issued_at,
            expiration_date=expires_at,
            subject_id=subject_identifier,
            claims=dict(claims),
        )
        payload = unsigned.signing_payload()
        signature = self._key_manager.sign(issuer.private_key, payload)
        proof = Proof(
            created=issued_at,
            verification_method=issuer.key_reference,
            proof_purpose=ProofPurpose.ASSERTION_METHOD,
            proof_value=signature.hex(),
        )
        credential = unsigned.model_copy(update={"proof": proof})

        content_hash = sha256_hex(payload)
        anchor = AnchorRecord(
            content_hash=content_hash,
            issuer_identifier=issuer.identifier,
            subject_identifier=subject_identifier,
            type=credential_type,
            timestamp=issued_at,
        )
        if self._ledger is not None:
            self._ledger.anchor_credential_hash(anchor)

        logger.info(
            "Issued credential %s (%s) from %s to %s with %d claim(s)",
            credential.id,
            credential_type,
            issuer.identifier,
            subject_identifier,
            len(claims),
        )
        return IssuedCredential(
            credential=credential, content_hash=content_hash, anchor_record=anchor
        )

    # ------------------------------------------------------------------
    # Revocation
    # ------------------------------------------------------------------

    def revoke_credential(
        self, credential_id: str, issuer: Identity, reason: str
    ) -> RevocationRecord:
        """Build a revocation record for *credential_id*.

        The record is not signed: revocation authority rests on the
        ``revoked_by`` identifier and is trusted at the ledger layer.
        When a ledger was injected, the record is published to it.

        Parameters
        ----------
        credential_id:
            The ``id`` of the credential being revoked.
        issuer:
            The identity that issued the credential.
        reason:
            Human-readable reason.

        Returns
        -------
        RevocationRecord
        """
        if not credential_id:
            raise ValueError("credential_id must not be empty.")
        record = RevocationRecord(
            credential_id=credential_id,
            revoked_by=issuer.identifier,
            reason=reason,
            timestamp=self._clock.now(),
        )
        if self._ledger is not None:
            self._ledger.publish_revocation(record)
        logger.info("Revoked credential %s by %s", credential_id, issuer.identifier)
        return record

    # ------------------------------------------------------------------
    # Full-credential checks
    # ------------------------------------------------------------------

    def verify_credential_signature(
        self, credential: VerifiableCredential, issuer_public_key: bytes
    ) -> bool:
        """Check the issuer signature of an unredacted credential.

        Derived credentials taken from a presentation will not verify here:
        their hidden claims no longer match the signed values.

        Returns
        -------
        bool
            ``True`` if the proof is present, well-formed, and valid.
        """
        if credential.proof is None:
            return False
        try:
            signature = credential.proof.signature_bytes()
        except ValueError:
            return False
        return self._key_manager.verify(
            issuer_public_key, signature, credential.signing_payload()
        )

    def assert_authentic(
        self, credential: VerifiableCredential, issuer_public_key: bytes
    ) -> None:
        """Raise :class:`InvalidSignatureError` unless the issuer signature verifies."""
        if not self.verify_credential_signature(credential, issuer_public_key):
            raise InvalidSignatureError(
                f"Issuer signature on credential {credential.id!r} does not verify "
                f"for issuer {credential.issuer!r}."
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _new_credential_id(self) -> str:
        return f"urn:uuid:{uuid.UUID(bytes=self._random.token_bytes(16), version=4)}"


def available_attributes(credential: VerifiableCredential) -> list[str]:
    """List the claim names a holder can choose to reveal."""
    return [key for key in credential.claim_keys() if key != SUBJECT_ID_KEY]


def _validate_claims(claims: Mapping[str, str]) -> None:
    if not claims:
        raise InvalidClaimsError("claims must be a non-empty mapping.")
    if SUBJECT_ID_KEY in claims:
        raise InvalidClaimsError(
            f"claims must not contain the reserved key {SUBJECT_ID_KEY!r}; "
            "it holds the subject reference."
        )
    for key, value in claims.items():
        if not isinstance(key, str) or not key:
            raise InvalidClaimsError(f"claim names must be non-empty strings, got {key!r}.")
        if not isinstance(value, str):
            raise InvalidClaimsError(
                f"claim {key!r} must have a string value, got {type(value).__name__}."
            )


__all__ = ["CredentialIssuer", "available_attributes"]
