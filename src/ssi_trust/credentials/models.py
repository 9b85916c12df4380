"""Verifiable credential records.

Implements the W3C Verifiable Credentials Data Model shape:
https://www.w3.org/TR/vc-data-model/

Wire form
---------
::

    {
      "@context": [...],
      "id": "urn:uuid:...",
      "type": ["VerifiableCredential", "<CredentialType>"],
      "issuer": "did:example:...",
      "issuanceDate": "...",
      "expirationDate": "...",
      "credentialSubject": {"id": "did:example:...", "<claim>": "<value>", ...},
      "proof": {"type", "created", "verificationMethod", "proofPurpose", "proofValue"}
    }

The signing payload is the canonical serialization of this dictionary
with ``proof`` removed. Records are frozen: a change to any claim is a new
record and invalidates the signature.
"""
from __future__ import annotations

import datetime
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from ssi_trust.canonical import canonicalize, format_timestamp, parse_timestamp

BASE_CREDENTIAL_TYPE: str = "VerifiableCredential"
CREDENTIAL_CONTEXT: tuple[str, ...] = (
    "https://www.w3.org/2018/credentials/v1",
    "https://www.w3.org/2018/credentials/examples/v1",
)
PROOF_TYPE: str = "Ed25519Signature2020"
SUBJECT_ID_KEY: str = "id"


# ------------------------------------------------------------------
# Proof
# ------------------------------------------------------------------


class ProofPurpose(str, Enum):
    """Why a proof was produced."""

    ASSERTION_METHOD = "assertionMethod"
    AUTHENTICATION = "authentication"


class Proof(BaseModel):
    """A detachable Ed25519 proof block.

    Parameters
    ----------
    type:
        Proof suite name.
    created:
        UTC datetime when the signature was produced.
    verification_method:
        Key reference of the signer (``<did>#key-1``).
    proof_purpose:
        ``assertionMethod`` for issuer proofs, ``authentication`` for holder proofs.
    proof_value:
        Hex-encoded 64-byte Ed25519 signature.
    """

    type: str = PROOF_TYPE
    created: datetime.datetime
    verification_method: str
    proof_purpose: ProofPurpose
    proof_value: str

    model_config = {"frozen": True}

    def signature_bytes(self) -> bytes:
        """Decode ``proof_value``.

        Raises
        ------
        ValueError
            If the value is not valid hex.
        """
        return bytes.fromhex(self.proof_value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "created": format_timestamp(self.created),
            "verificationMethod": self.verification_method,
            "proofPurpose": self.proof_purpose.value,
            "proofValue": self.proof_value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Proof":
        return cls(
            type=data.get("type", PROOF_TYPE),
            created=parse_timestamp(data["created"]),
            verification_method=data["verificationMethod"],
            proof_purpose=ProofPurpose(data["proofPurpose"]),
            proof_value=data["proofValue"],
        )


# ------------------------------------------------------------------
# VerifiableCredential
# ------------------------------------------------------------------


class VerifiableCredential(BaseModel):
    """A signed set of claims asserted by an issuer about a subject.

    Also used for derived credentials inside presentations, where hidden
    claim values are replaced by commitments and the issuer's ``proof`` is
    carried along unchanged.

    Parameters
    ----------
    context:
        JSON-LD context URIs.
    id:
        Globally unique credential identifier (``urn:uuid:...``).
    type:
        Credential type list. Always includes ``"VerifiableCredential"``.
    issuer:
        Identifier of the issuing authority.
    issuance_date:
        UTC datetime when the credential was issued.
    expiration_date:
        UTC datetime after which the credential is no longer valid.
    subject_id:
        Identifier of the subject (rendered as ``credentialSubject.id``).
    claims:
        String claims about the subject. ``id`` is reserved.
    proof:
        Issuer proof, ``None`` only while the record is being built.
    """

    context: list[str] = Field(default_factory=lambda: list(CREDENTIAL_CONTEXT))
    id: str
    type: list[str] = Field(default_factory=lambda: [BASE_CREDENTIAL_TYPE])
    issuer: str
    issuance_date: datetime.datetime
    expiration_date: datetime.datetime
    subject_id: str
    claims: dict[str, str]
    proof: Proof | None = None

    model_config = {"frozen": True}

    @field_validator("issuer", "subject_id", "id")
    @classmethod
    def validate_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty.")
        return value

    @field_validator("type")
    @classmethod
    def validate_type_includes_base(cls, value: list[str]) -> list[str]:
        if BASE_CREDENTIAL_TYPE not in value:
            raise ValueError(
                f"type list must include {BASE_CREDENTIAL_TYPE!r} as required by "
                "the W3C Verifiable Credentials Data Model."
            )
        return value

    @field_validator("claims")
    @classmethod
    def validate_claims_reserved_key(cls, value: dict[str, str]) -> dict[str, str]:
        if SUBJECT_ID_KEY in value:
            raise ValueError(f"claims must not contain the reserved key {SUBJECT_ID_KEY!r}.")
        return value

    @model_validator(mode="after")
    def validate_validity_period(self) -> "VerifiableCredential":
        if self.expiration_date <= self.issuance_date:
            raise ValueError("expiration_date must be after issuance_date.")
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def credential_type(self) -> str:
        """The domain-specific type (the first entry that is not the base marker)."""
        for entry in self.type:
            if entry != BASE_CREDENTIAL_TYPE:
                return entry
        return BASE_CREDENTIAL_TYPE

    def claim_keys(self) -> list[str]:
        """Claim names in issuance order (``id`` is never included)."""
        return list(self.claims)

    def is_expired(self, at: datetime.datetime) -> bool:
        """Return ``True`` if the credential is no longer valid at *at*."""
        return at >= self.expiration_date

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self, include_proof: bool = True) -> dict[str, Any]:
        """Serialize to the W3C wire dictionary."""
        data: dict[str, Any] = {
            "@context": list(self.context),
            "id": self.id,
            "type": list(self.type),
            "issuer": self.issuer,
            "issuanceDate": format_timestamp(self.issuance_date),
            "expirationDate": format_timestamp(self.expiration_date),
            "credentialSubject": {SUBJECT_ID_KEY: self.subject_id, **self.claims},
        }
        if include_proof and self.proof is not None:
            data["proof"] = self.proof.to_dict()
        return data

    def signing_payload(self) -> bytes:
        """Canonical bytes covered by the issuer signature."""
        return canonicalize(self.to_dict(include_proof=False))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VerifiableCredential":
        """Rebuild a credential from its wire dictionary.

        Raises
        ------
        ValueError
            If required fields are missing or fail validation.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Credential must be a JSON object, got {type(data).__name__}.")
        try:
            subject = dict(data["credentialSubject"])
            subject_id = subject.pop(SUBJECT_ID_KEY, "")
            proof_raw = data.get("proof")
            return cls(
                context=data.get("@context", list(CREDENTIAL_CONTEXT)),
                id=data["id"],
                type=data.get("type", [BASE_CREDENTIAL_TYPE]),
                issuer=data["issuer"],
                issuance_date=parse_timestamp(data["issuanceDate"]),
                expiration_date=parse_timestamp(data["expirationDate"]),
                subject_id=subject_id,
                claims=subject,
                proof=Proof.from_dict(proof_raw) if proof_raw else None,
            )
        except KeyError as exc:
            raise ValueError(f"Missing required credential field: {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed credential: {exc}") from exc

    @classmethod
    def from_json(cls, json_str: str) -> "VerifiableCredential":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON: {exc}") from exc
        return cls.from_dict(data)


# ------------------------------------------------------------------
# Ledger-facing records
# ------------------------------------------------------------------


@dataclass(frozen=True)
class AnchorRecord:
    """Privacy-preserving proof of issuance for an external ledger.

    Carries the content hash and identifiers only; claim values are never
    part of an anchor.
    """

    content_hash: str
    issuer_identifier: str
    subject_identifier: str
    type: str
    timestamp: datetime.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "contentHash": self.content_hash,
            "issuerIdentifier": self.issuer_identifier,
            "subjectIdentifier": self.subject_identifier,
            "type": self.type,
            "timestamp": format_timestamp(self.timestamp),
        }


@dataclass(frozen=True)
class RevocationRecord:
    """A permanent revocation of one credential by its issuer."""

    credential_id: str
    revoked_by: str
    reason: str
    timestamp: datetime.datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "credentialId": self.credential_id,
            "revokedBy": self.revoked_by,
            "reason": self.reason,
            "timestamp": format_timestamp(self.timestamp),
        }


@dataclass(frozen=True)
class IssuedCredential:
    """Everything produced by one issuance.

    Parameters
    ----------
    credential:
        The full signed credential, handed to the subject off-ledger.
    content_hash:
        SHA-256 hex digest of the canonical unsigned credential.
    anchor_record:
        Metadata suitable for publication on a ledger.
    """

    credential: VerifiableCredential
    content_hash: str
    anchor_record: AnchorRecord


__all__ = [
    "AnchorRecord",
    "BASE_CREDENTIAL_TYPE",
    "CREDENTIAL_CONTEXT",
    "IssuedCredential",
    "PROOF_TYPE",
    "Proof",
    "ProofPurpose",
    "RevocationRecord",
    "SUBJECT_ID_KEY",
    "VerifiableCredential",
]
