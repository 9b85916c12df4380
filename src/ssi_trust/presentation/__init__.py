"""ssi_trust.presentation — selective-disclosure presentations."""
from __future__ import annotations

from ssi_trust.presentation.builder import (
    COMMITMENT_PREFIX,
    Disclosure,
    PresentationBuilder,
    commit,
    is_commitment,
)
from ssi_trust.presentation.models import BASE_PRESENTATION_TYPE, Presentation

__all__ = [
    "BASE_PRESENTATION_TYPE",
    "COMMITMENT_PREFIX",
    "Disclosure",
    "Presentation",
    "PresentationBuilder",
    "commit",
    "is_commitment",
]
