"""ProtocolSettings — tunable protocol parameters.

Every component accepts an optional :class:`ProtocolSettings`; the
defaults reproduce the reference protocol (``did:example`` identifiers,
128-bit identifier digests, one-year credentials, a 30-minute replay
window with advisory freshness).
"""
from __future__ import annotations

import datetime
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_DID_METHOD: str = "example"
DEFAULT_IDENTIFIER_LENGTH: int = 32
DEFAULT_VALIDITY: datetime.timedelta = datetime.timedelta(days=365)
DEFAULT_REPLAY_WINDOW: datetime.timedelta = datetime.timedelta(minutes=30)


class ProtocolSettings(BaseModel):
    """Protocol configuration shared by the issuer, builder, and verifier.

    Parameters
    ----------
    did_method:
        Scheme tag placed in ``did:<method>:<digest>`` identifiers.
    identifier_length:
        Number of hex characters of the SHA-256 public key digest kept in
        the identifier. 32 characters is a 128-bit truncation, the minimum
        accepted.
    default_validity:
        Credential lifetime used when ``issue_credential`` receives no expiry.
    replay_window:
        Maximum presentation age before the freshness check reports it stale.
    strict_freshness:
        When ``True`` a stale presentation makes the whole report invalid.
        By default staleness is a warning only.
    """

    did_method: str = Field(default=DEFAULT_DID_METHOD, pattern=r"^[a-z0-9]+$")
    identifier_length: int = Field(default=DEFAULT_IDENTIFIER_LENGTH, ge=32, le=64)
    default_validity: datetime.timedelta = DEFAULT_VALIDITY
    replay_window: datetime.timedelta = DEFAULT_REPLAY_WINDOW
    strict_freshness: bool = False

    model_config = {"frozen": True}

    @field_validator("default_validity", "replay_window")
    @classmethod
    def validate_positive_duration(cls, value: datetime.timedelta) -> datetime.timedelta:
        if value <= datetime.timedelta(0):
            raise ValueError("duration must be positive.")
        return value

    @classmethod
    def from_json_file(cls, path: Path) -> "ProtocolSettings":
        """Load settings from a JSON object on disk.

        Durations may be given as seconds or as ISO 8601 durations
        (``"PT30M"``). Missing keys keep their defaults.

        Raises
        ------
        ValueError
            If the file is not valid JSON or fails validation.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid settings JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a JSON object.")
        return cls.model_validate(data)


__all__ = [
    "DEFAULT_DID_METHOD",
    "DEFAULT_IDENTIFIER_LENGTH",
    "DEFAULT_REPLAY_WINDOW",
    "DEFAULT_VALIDITY",
    "ProtocolSettings",
]
