"""Canonical serialization and content digests.

Signatures and content hashes are computed over the canonical form of a
record's wire dictionary: compact JSON with sorted keys, UTF-8 encoded.
Timestamps are rendered as ISO 8601 in UTC so the same instant always
serializes identically.
"""
from __future__ import annotations

import datetime
import hashlib
import json
from collections.abc import Mapping
from typing import Any


def canonicalize(data: Mapping[str, Any]) -> bytes:
    """Return the deterministic byte form of *data*."""
    return json.dumps(
        data, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def sha256_hex(data: bytes | str) -> str:
    """Return the lowercase hex SHA-256 digest of *data* (64 characters)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def format_timestamp(value: datetime.datetime) -> str:
    """Render an aware datetime as an ISO 8601 UTC string."""
    if value.tzinfo is None:
        raise ValueError("Timestamps must be timezone-aware.")
    return value.astimezone(datetime.timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime.datetime:
    """Parse an ISO 8601 string; naive values are taken as UTC."""
    parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


__all__ = ["canonicalize", "format_timestamp", "parse_timestamp", "sha256_hex"]
