"""Error taxonomy for ssi-trust.

Construction-time failures (bad expiry, malformed claims, unknown reveal
attributes, unusable key material) are raised to the caller. Verification
outcomes are never raised by the verification engine; the names of
:class:`ExpiredCredentialError`, :class:`RevokedCredentialError`,
:class:`InvalidSignatureError` and :class:`StaleChallengeError` appear in
the ``error`` field of the corresponding report step instead.
"""
from __future__ import annotations

import datetime


class TrustProtocolError(Exception):
    """Base exception for all ssi-trust errors."""


class NotFoundError(TrustProtocolError):
    """Raised when an identifier is absent from an identity registry."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Identifier {identifier!r} is not registered.")


class InvalidSignatureError(TrustProtocolError):
    """Raised when a signature does not match its claimed signer or content."""


class InvalidExpiryError(TrustProtocolError, ValueError):
    """Raised when a credential expiry is not strictly after its issuance."""

    def __init__(self, issued_at: datetime.datetime, expires_at: datetime.datetime) -> None:
        self.issued_at = issued_at
        self.expires_at = expires_at
        super().__init__(
            f"Expiry {expires_at.isoformat()} must be strictly after "
            f"issuance {issued_at.isoformat()}."
        )


class InvalidClaimsError(TrustProtocolError, ValueError):
    """Raised when a claims mapping is empty, malformed, or uses a reserved key."""


class ExpiredCredentialError(TrustProtocolError):
    """A credential was presented after its expiration date."""


class RevokedCredentialError(TrustProtocolError):
    """A credential was presented after its issuer revoked it."""


class StaleChallengeError(TrustProtocolError):
    """A presentation is older than the configured replay window."""


class UnknownAttributeError(TrustProtocolError, KeyError):
    """Raised when a reveal set names attributes the credential does not carry."""

    def __init__(self, unknown: list[str], credential_id: str) -> None:
        self.unknown = list(unknown)
        self.credential_id = credential_id
        super().__init__(
            f"Credential {credential_id!r} has no attribute(s): {', '.join(self.unknown)}"
        )

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class IdentityConflictError(TrustProtocolError):
    """Raised when an identifier is re-registered with a different public key."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"Identifier {identifier!r} is already registered with a different public key."
        )


class KeyMaterialError(TrustProtocolError, ValueError):
    """Raised when key bytes cannot be loaded as an Ed25519 key."""


__all__ = [
    "ExpiredCredentialError",
    "IdentityConflictError",
    "InvalidClaimsError",
    "InvalidExpiryError",
    "InvalidSignatureError",
    "KeyMaterialError",
    "NotFoundError",
    "RevokedCredentialError",
    "StaleChallengeError",
    "TrustProtocolError",
    "UnknownAttributeError",
]
