"""Ed25519KeyManager — Ed25519 key generation, signing, and verification.

Wraps the ``cryptography`` Ed25519 primitives used by identities,
issuers, and holders. Keys cross this boundary as raw 32-byte values;
signatures as raw 64-byte values.

Key generation draws its 32-byte seed from an injected
:class:`~ssi_trust.runtime.RandomSource`, which defaults to the operating
system's secure generator.
"""
from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from ssi_trust.errors import KeyMaterialError
from ssi_trust.runtime import RandomSource, SecureRandom

#: Scheme name recorded in verification methods and proofs.
KEY_TYPE: str = "Ed25519VerificationKey2020"

_SEED_LENGTH = 32


class Ed25519KeyManager:
    """Key pairs, signatures, and signature checks for one randomness source.

    Parameters
    ----------
    random_source:
        Where key seeds come from. Defaults to :class:`~ssi_trust.runtime.SecureRandom`.

    Example
    -------
    ::

        manager = Ed25519KeyManager()
        seed, public_key = manager.generate_keypair()
        signature = manager.sign(seed, b"payload")
        assert manager.verify(public_key, signature, b"payload")
    """

    def __init__(self, random_source: RandomSource | None = None) -> None:
        self._random: RandomSource = random_source or SecureRandom()

    def generate_keypair(self) -> tuple[bytes, bytes]:
        """Draw a fresh seed and derive its Ed25519 keypair.

        Returns
        -------
        tuple[bytes, bytes]
            A ``(private_key_bytes, public_key_bytes)`` pair. Both are
            32-byte raw representations.
        """
        seed = self._random.token_bytes(_SEED_LENGTH)
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        return seed, public_bytes

    def public_key_for(self, private_key_bytes: bytes) -> bytes:
        """Return the raw public key matching a raw private key."""
        private_key = _load_private_key(private_key_bytes)
        return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)

    def sign(self, private_key_bytes: bytes, data: bytes) -> bytes:
        """Sign *data* with a raw Ed25519 private key.

        Parameters
        ----------
        private_key_bytes:
            The 32-byte raw private key as returned by :meth:`generate_keypair`.
        data:
            The bytes to sign.

        Returns
        -------
        bytes
            The 64-byte Ed25519 signature.

        Raises
        ------
        KeyMaterialError
            If the private key bytes are not a usable Ed25519 key.
        """
        return _load_private_key(private_key_bytes).sign(data)

    def verify(self, public_key_bytes: bytes, signature: bytes, data: bytes) -> bool:
        """Check *signature* over *data* against a raw public key.

        Malformed public keys are treated as a failed verification rather
        than an error.

        Returns
        -------
        bool
            ``True`` if the signature is valid, ``False`` otherwise.
        """
        try:
            public_key = Ed25519PublicKey.from_public_bytes(public_key_bytes)
        except ValueError:
            return False
        try:
            public_key.verify(signature, data)
            return True
        except InvalidSignature:
            return False


def _load_private_key(private_key_bytes: bytes) -> Ed25519PrivateKey:
    try:
        return Ed25519PrivateKey.from_private_bytes(private_key_bytes)
    except (ValueError, TypeError) as exc:
        raise KeyMaterialError(
            f"Expected a 32-byte raw Ed25519 private key, got {len(private_key_bytes or b'')} bytes."
        ) from exc


__all__ = ["KEY_TYPE", "Ed25519KeyManager"]
