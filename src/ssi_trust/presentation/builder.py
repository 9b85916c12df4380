"""PresentationBuilder — selective disclosure by hash commitment.

For every claim of a credential the holder either reveals the value
verbatim or replaces it with a one-way commitment::

    hidden:<sha256(value) as 64 hex chars>

The commitment is deterministic, so the same value always yields the same
commitment, and it proves the claim existed without disclosing it. This is
hash masking, not a selective-disclosure signature scheme: the issuer's
signature stays on the derived credential for provenance but no longer
matches the redacted claim set.

The holder then signs the whole presentation (derived credentials,
disclosure lists, recipient, purpose, timestamp, challenge) so the
verifier can tell the holder authorized exactly this disclosure.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ssi_trust.canonical import sha256_hex
from ssi_trust.credentials.models import Proof, ProofPurpose, VerifiableCredential
from ssi_trust.did.identity import Identity
from ssi_trust.did.key_manager import Ed25519KeyManager
from ssi_trust.errors import UnknownAttributeError
from ssi_trust.presentation.models import Presentation
from ssi_trust.runtime import Clock, RandomSource, SecureRandom, SystemClock

logger = logging.getLogger(__name__)

COMMITMENT_PREFIX: str = "hidden:"
_CHALLENGE_BYTES = 16


def commit(value: str) -> str:
    """Return the one-way commitment for a hidden claim value."""
    return COMMITMENT_PREFIX + sha256_hex(value)


def is_commitment(value: str) -> bool:
    """Return ``True`` if *value* has the shape produced by :func:`commit`."""
    if not value.startswith(COMMITMENT_PREFIX):
        return False
    digest = value[len(COMMITMENT_PREFIX):]
    return len(digest) == 64 and all(char in "0123456789abcdef" for char in digest)


@dataclass(frozen=True)
class Disclosure:
    """One credential and the claim names to reveal from it."""

    credential: VerifiableCredential
    reveal: tuple[str, ...]

    @classmethod
    def of(cls, credential: VerifiableCredential, reveal: Iterable[str]) -> "Disclosure":
        return cls(credential=credential, reveal=tuple(reveal))


class PresentationBuilder:
    """Builds holder-signed presentations from issued credentials.

    The builder never consults a ledger; presentations are exchanged
    directly between holder and verifier.

    Parameters
    ----------
    key_manager:
        Signing backend.
    clock:
        Source of the ``created`` timestamp.
    random_source:
        Entropy for the anti-replay challenge.

    Example
    -------
    ::

        builder = PresentationBuilder()
        presentation = builder.create_presentation(
            holder=maria,
            credential=issued.credential,
            reveal_set={"name", "nationality"},
            recipient_identifier=landlord.identifier,
            purpose="Rental application",
        )
        presentation.hidden_attributes  # ['id_number']
    """

    def __init__(
        self,
        key_manager: Ed25519KeyManager | None = None,
        clock: Clock | None = None,
        random_source: RandomSource | None = None,
    ) -> None:
        self._key_manager = key_manager or Ed25519KeyManager()
        self._clock: Clock = clock or SystemClock()
        self._random: RandomSource = random_source or SecureRandom()

    def create_presentation(
        self,
        holder: Identity,
        credential: VerifiableCredential,
        reveal_set: Iterable[str],
        recipient_identifier: str,
        purpose: str,
    ) -> Presentation:
        """Disclose a subset of one credential's claims.

        Parameters
        ----------
        holder:
            The presenting identity; its private key signs the presentation.
        credential:
            A credential issued to the holder.
        reveal_set:
            Claim names to reveal. Every other claim is hidden.
        recipient_identifier:
            Identifier of the verifier the presentation is meant for.
        purpose:
            Why the data is being shared.

        Raises
        ------
        UnknownAttributeError
            If *reveal_set* names a claim the credential does not carry.
        """
        return self.create_combined_presentation(
            holder,
            [Disclosure.of(credential, reveal_set)],
            recipient_identifier,
            purpose,
        )

    def create_combined_presentation(
        self,
        holder: Identity,
        disclosures: Sequence[Disclosure],
        recipient_identifier: str,
        purpose: str,
    ) -> Presentation:
        """Disclose claims from several credentials in one signed presentation.

        Attribute lists are merged in disclosure order; a claim name that
        appears in more than one credential is listed once.
        """
        if not disclosures:
            raise ValueError("At least one disclosure is required.")

        derived: list[VerifiableCredential] = []
        revealed: list[str] = []
        hidden: list[str] = []
        for disclosure in disclosures:
            derived_credential, cred_revealed, cred_hidden = _derive(
                disclosure.credential, disclosure.reveal
            )
            derived.append(derived_credential)
            _extend_unique(revealed, cred_revealed)
            _extend_unique(hidden, cred_hidden)

        created = self._clock.now()
        unsigned = Presentation(
            holder=holder.identifier,
            verifiable_credential=derived,
            purpose=purpose,
            recipient=recipient_identifier,
            revealed_attributes=revealed,
            hidden_attributes=hidden,
            created=created,
            challenge=self._random.token_bytes(_CHALLENGE_BYTES).hex(),
        )
        signature = self._key_manager.sign(holder.private_key, unsigned.signing_payload())
        presentation = unsigned.model_copy(
            update={
                "proof": Proof(
                    created=created,
                    verification_method=holder.key_reference,
                    proof_purpose=ProofPurpose.AUTHENTICATION,
                    proof_value=signature.hex(),
                )
            }
        )
        logger.info(
            "Created presentation from %s for %s: %d revealed, %d hidden",
            holder.identifier,
            recipient_identifier,
            len(revealed),
            len(hidden),
        )
        return presentation


def _derive(
    credential: VerifiableCredential, reveal: Iterable[str]
) -> tuple[VerifiableCredential, list[str], list[str]]:
    """Return the derived credential plus its revealed and hidden claim names."""
    reveal_names = set(reveal)
    claim_keys = credential.claim_keys()
    unknown = sorted(reveal_names.difference(claim_keys))
    if unknown:
        raise UnknownAttributeError(unknown, credential.id)

    claims: dict[str, str] = {}
    revealed: list[str] = []
    hidden: list[str] = []
    for key in claim_keys:
        value = credential.claims[key]
        if key in reveal_names:
            claims[key] = value
            revealed.append(key)
        else:
            claims[key] = commit(value)
            hidden.append(key)

    # New value; the source credential and its proof are left as they are.
    return credential.model_copy(update={"claims": claims}), revealed, hidden


def _extend_unique(target: list[str], items: Iterable[str]) -> None:
    for item in items:
        if item not in target:
            target.append(item)


__all__ = [
    "COMMITMENT_PREFIX",
    "Disclosure",
    "PresentationBuilder",
    "commit",
    "is_commitment",
]
