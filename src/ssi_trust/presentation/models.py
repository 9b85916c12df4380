"""Verifiable presentation records.

A presentation is the holder-signed, selectively redacted view of one or
more credentials, scoped to one recipient and one purpose. Its wire form
mirrors the W3C Verifiable Presentation shape (``holder``,
``verifiableCredential``, ``proof``) and adds the disclosure metadata the
verifier reports on.
"""
from __future__ import annotations

import datetime
import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ssi_trust.canonical import canonicalize, format_timestamp, parse_timestamp
from ssi_trust.credentials.models import Proof, VerifiableCredential

BASE_PRESENTATION_TYPE: str = "VerifiablePresentation"
PRESENTATION_CONTEXT: tuple[str, ...] = ("https://www.w3.org/2018/credentials/v1",)


class Presentation(BaseModel):
    """A holder-signed selective disclosure.

    Parameters
    ----------
    context:
        JSON-LD context URIs.
    type:
        Type list, always including ``"VerifiablePresentation"``.
    holder:
        Identifier of the presenting holder.
    verifiable_credential:
        Derived credentials: revealed claims verbatim, hidden claims as
        ``hidden:<sha256>`` commitments, issuer proof preserved.
    purpose:
        Why the holder is disclosing (e.g. a rental application).
    recipient:
        Identifier of the intended verifier.
    revealed_attributes:
        Claim names disclosed in clear, in credential order.
    hidden_attributes:
        Claim names replaced by commitments, in credential order.
    created:
        UTC datetime of creation.
    challenge:
        Random anti-replay nonce (32 hex characters).
    proof:
        Holder proof with purpose ``authentication``.
    """

    context: list[str] = Field(default_factory=lambda: list(PRESENTATION_CONTEXT))
    type: list[str] = Field(default_factory=lambda: [BASE_PRESENTATION_TYPE])
    holder: str
    verifiable_credential: list[VerifiableCredential]
    purpose: str
    recipient: str
    revealed_attributes: list[str]
    hidden_attributes: list[str]
    created: datetime.datetime
    challenge: str
    proof: Proof | None = None

    model_config = {"frozen": True}

    @field_validator("type")
    @classmethod
    def validate_type_includes_base(cls, value: list[str]) -> list[str]:
        if BASE_PRESENTATION_TYPE not in value:
            raise ValueError(f"type list must include {BASE_PRESENTATION_TYPE!r}.")
        return value

    def to_dict(self, include_proof: bool = True) -> dict[str, Any]:
        """Serialize to the wire dictionary."""
        data: dict[str, Any] = {
            "@context": list(self.context),
            "type": list(self.type),
            "holder": self.holder,
            "verifiableCredential": [cred.to_dict() for cred in self.verifiable_credential],
            "purpose": self.purpose,
            "recipient": self.recipient,
            "revealedAttributes": list(self.revealed_attributes),
            "hiddenAttributes": list(self.hidden_attributes),
            "created": format_timestamp(self.created),
            "challenge": self.challenge,
        }
        if include_proof and self.proof is not None:
            data["proof"] = self.proof.to_dict()
        return data

    def signing_payload(self) -> bytes:
        """Canonical bytes covered by the holder signature."""
        return canonicalize(self.to_dict(include_proof=False))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Presentation":
        """Rebuild a presentation from its wire dictionary.

        Raises
        ------
        ValueError
            If required fields are missing or fail validation.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Presentation must be a JSON object, got {type(data).__name__}.")
        try:
            proof_raw = data.get("proof")
            return cls(
                context=data.get("@context", list(PRESENTATION_CONTEXT)),
                type=data.get("type", [BASE_PRESENTATION_TYPE]),
                holder=data["holder"],
                verifiable_credential=[
                    VerifiableCredential.from_dict(raw) for raw in data["verifiableCredential"]
                ],
                purpose=data.get("purpose", ""),
                recipient=data.get("recipient", ""),
                revealed_attributes=list(data.get("revealedAttributes", [])),
                hidden_attributes=list(data.get("hiddenAttributes", [])),
                created=parse_timestamp(data["created"]),
                challenge=data["challenge"],
                proof=Proof.from_dict(proof_raw) if proof_raw else None,
            )
        except KeyError as exc:
            raise ValueError(f"Missing required presentation field: {exc}") from exc
        except (TypeError, AttributeError) as exc:
            raise ValueError(f"Malformed presentation: {exc}") from exc

    @classmethod
    def from_json(cls, json_str: str) -> "Presentation":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON: {exc}") from exc
        return cls.from_dict(data)


__all__ = ["BASE_PRESENTATION_TYPE", "PRESENTATION_CONTEXT", "Presentation"]
