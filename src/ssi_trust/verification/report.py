"""VerificationReport — the complete, immutable outcome of one verification."""
from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ssi_trust.canonical import format_timestamp


class CheckName(str, Enum):
    """The independent checks run by the verification engine."""

    HOLDER_SIGNATURE = "holder_signature"
    ISSUER_PROVENANCE = "issuer_provenance"
    EXPIRY = "expiry"
    REVOCATION = "revocation"
    FRESHNESS = "freshness"


class CheckOutcome(str, Enum):
    """Result of a single check.

    ``PROVENANCE_ONLY`` marks the issuer check: the issuer reference is
    recorded but the issuer signature is not re-verified against the
    redacted claims. ``WARNING`` is advisory and never invalidates a report.
    """

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"
    PROVENANCE_ONLY = "provenance_only"


@dataclass(frozen=True)
class VerificationStep:
    """One entry of a verification report.

    Parameters
    ----------
    step:
        Which check produced this entry.
    outcome:
        The check result.
    detail:
        Human-readable explanation.
    credential_id:
        The credential the check refers to, ``None`` for presentation-level checks.
    error:
        Name of the error class describing a failure or warning
        (e.g. ``"RevokedCredentialError"``), ``None`` otherwise.
    """

    step: CheckName
    outcome: CheckOutcome
    detail: str
    credential_id: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.outcome == CheckOutcome.FAILED

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step.value,
            "outcome": self.outcome.value,
            "detail": self.detail,
            "credentialId": self.credential_id,
            "error": self.error,
        }


@dataclass(frozen=True)
class DisclosureSummary:
    """What the holder chose to share, as recorded in the presentation."""

    holder: str
    purpose: str
    recipient: str
    revealed_attributes: tuple[str, ...] = ()
    hidden_attributes: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "holder": self.holder,
            "purpose": self.purpose,
            "recipient": self.recipient,
            "revealedAttributes": list(self.revealed_attributes),
            "hiddenAttributes": list(self.hidden_attributes),
        }


@dataclass(frozen=True)
class VerificationReport:
    """The outcome of :meth:`VerificationEngine.verify_presentation`.

    Parameters
    ----------
    steps:
        Every check that ran, in execution order.
    valid:
        Aggregate verdict.
    disclosure:
        Attribute-disclosure summary.
    verified_at:
        The instant the checks were evaluated against.
    """

    steps: tuple[VerificationStep, ...]
    valid: bool
    disclosure: DisclosureSummary
    verified_at: datetime.datetime
    _by_check: dict[CheckName, tuple[VerificationStep, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        grouped: dict[CheckName, list[VerificationStep]] = {}
        for entry in self.steps:
            grouped.setdefault(entry.step, []).append(entry)
        object.__setattr__(
            self, "_by_check", {name: tuple(entries) for name, entries in grouped.items()}
        )

    def steps_for(self, check: CheckName) -> tuple[VerificationStep, ...]:
        """Return every entry produced by *check* (one per credential for per-credential checks)."""
        return self._by_check.get(check, ())

    def passed(self, check: CheckName) -> bool:
        """Return ``True`` if *check* ran and none of its entries failed."""
        entries = self.steps_for(check)
        return bool(entries) and not any(entry.failed for entry in entries)

    def failed_steps(self) -> list[VerificationStep]:
        return [entry for entry in self.steps if entry.failed]

    def warnings(self) -> list[VerificationStep]:
        return [entry for entry in self.steps if entry.outcome == CheckOutcome.WARNING]

    def errors(self) -> list[str]:
        """Names of the error conditions surfaced by the report, in order."""
        return [entry.error for entry in self.steps if entry.error is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "verifiedAt": format_timestamp(self.verified_at),
            "steps": [entry.to_dict() for entry in self.steps],
            "disclosure": self.disclosure.to_dict(),
        }


__all__ = [
    "CheckName",
    "CheckOutcome",
    "DisclosureSummary",
    "VerificationReport",
    "VerificationStep",
]
