"""ssi_trust.verification — the presentation verification engine."""
from __future__ import annotations

from ssi_trust.verification.engine import VerificationEngine
from ssi_trust.verification.report import (
    CheckName,
    CheckOutcome,
    DisclosureSummary,
    VerificationReport,
    VerificationStep,
)

__all__ = [
    "CheckName",
    "CheckOutcome",
    "DisclosureSummary",
    "VerificationEngine",
    "VerificationReport",
    "VerificationStep",
]
