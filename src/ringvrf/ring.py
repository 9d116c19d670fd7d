"""
Ring VRF: a Pedersen VRF signature plus a ring proof over its blinding.

    ring_sign:    (sig, b) := pedersen.sign(x, I, ad);  proof := prover.prove(b)
    ring_verify:  pedersen.verify(I, ad, sig);  Yb := sig.key_commitment();
                  verifier.verify_ring_proof(proof, Yb)

The ring proof is made over the very blinding scalar hidden in Yb, so the
two halves cannot be taken from different signing sessions. Every
verification rejection is the same VerificationFailure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from . import pedersen
from .domain import Domain
from .errors import RingCommitmentMismatch, VerificationFailure
from .interfaces import PolynomialCommitment
from .pedersen import Input, Output, PedersenSignature, Public, Secret
from .ring_proof import (
    PiopParams,
    ProverKey,
    RingCommitment,
    RingProof,
    RingProver,
    RingVerifier,
    VerifierKey,
    index,
    pad_ring,
    ring_columns,
)
from .suite import Suite
from .transcript import Transcript

logger = logging.getLogger(__name__)

RING_TRANSCRIPT_LABEL = b"ring-vrf"
OPENING_TRANSCRIPT_LABEL = b"ring-vrf/ring-opening"


@dataclass(frozen=True)
class Signature:
    vrf_signature: PedersenSignature
    ring_proof: RingProof

    @property
    def output(self) -> Output:
        return self.vrf_signature.output


@dataclass(frozen=True)
class RingOpening:
    """KZG openings of both ring columns at a Fiat-Shamir point."""

    x_value: int
    y_value: int
    x_proof: bytes
    y_proof: bytes


@dataclass(frozen=True, eq=False)
class RingContext:
    """Reusable ring setup: KZG parameters, ring-protocol parameters, domain size.

    Read-only after construction; one context serves any number of rings of
    at most `domain_size` members.
    """

    suite: Suite
    pcs: PolynomialCommitment[Any]
    piop_params: PiopParams
    domain_size: int

    def __post_init__(self) -> None:
        field_modulus = self.suite.curve.field_modulus
        if self.pcs.scalar_modulus != field_modulus:
            raise ValueError("PCS scalar field must equal the curve base field")
        if self.piop_params.domain.size != self.domain_size:
            raise ValueError(
                f"domain size mismatch: {self.piop_params.domain.size} != {self.domain_size}"
            )
        if self.piop_params.domain.modulus != field_modulus:
            raise ValueError("domain field must equal the curve base field")
        if self.pcs.max_degree < self.domain_size - 1:
            raise ValueError(
                f"PCS setup degree {self.pcs.max_degree} too small for domain size {self.domain_size}"
            )

    @classmethod
    def setup(cls, suite: Suite, pcs: PolynomialCommitment[Any], domain_size: int, padding_point: Any) -> "RingContext":
        domain = Domain(domain_size, modulus=suite.curve.field_modulus)
        piop_params = PiopParams(
            domain=domain,
            curve=suite.curve,
            blinding_base=suite.pedersen_base(),
            padding_point=padding_point,
        )
        return cls(suite=suite, pcs=pcs, piop_params=piop_params, domain_size=domain_size)

    def _members(self, ring_members: Sequence[Any]) -> list:
        return [m.point if isinstance(m, Public) else m for m in ring_members]

    def derive_prover_key(self, ring_members: Sequence[Any]) -> ProverKey:
        return index(self.pcs, self.piop_params, self._members(ring_members))[0]

    def derive_verifier_key(self, ring_members: Sequence[Any]) -> VerifierKey:
        return index(self.pcs, self.piop_params, self._members(ring_members))[1]

    def make_prover(self, prover_key: ProverKey, signer_index: int) -> RingProver:
        return RingProver(prover_key, self.piop_params, signer_index, Transcript(RING_TRANSCRIPT_LABEL))

    def make_verifier(self, verifier_key: VerifierKey) -> RingVerifier:
        return RingVerifier(verifier_key, self.piop_params, Transcript(RING_TRANSCRIPT_LABEL))

    # ----------------------------
    # Ring root: publish only the commitment, check member lists against it
    # ----------------------------

    def _opening_point(self, commitment: RingCommitment, points: Sequence[Any]) -> int:
        t = Transcript(OPENING_TRANSCRIPT_LABEL)
        t.append_message(b"ring-commitment", commitment.to_bytes())
        for P in points:
            t.append_message(b"member", self.suite.curve.encode(P))
        return t.challenge_scalar(b"z", self.suite.curve.field_modulus)

    def ring_opening(self, prover_key: ProverKey) -> RingOpening:
        z = self._opening_point(prover_key.commitment, prover_key.points)
        x_value, x_proof = self.pcs.open(prover_key.x_coeffs, z)
        y_value, y_proof = self.pcs.open(prover_key.y_coeffs, z)
        return RingOpening(
            x_value=x_value,
            y_value=y_value,
            x_proof=self.pcs.encode_commitment(x_proof),
            y_proof=self.pcs.encode_commitment(y_proof),
        )

    def verifier_key_from_commitment(
        self,
        commitment: RingCommitment,
        ring_members: Sequence[Any],
        opening: RingOpening,
    ) -> VerifierKey:
        """Verifier key for a trusted ring commitment and a claimed member list.

        Checks the list against the commitment with one opening per column
        instead of recommitting. Raises RingCommitmentMismatch on any mismatch.
        """
        points = pad_ring(self.piop_params, self._members(ring_members))
        z = self._opening_point(commitment, points)
        xs, ys = ring_columns(points)
        domain = self.piop_params.domain
        if domain.evaluate(xs, z) != opening.x_value or domain.evaluate(ys, z) != opening.y_value:
            raise RingCommitmentMismatch("ring members do not match the commitment")

        decoded = [
            self.pcs.decode_commitment(buf)
            for buf in (commitment.x, commitment.y, opening.x_proof, opening.y_proof)
        ]
        if any(d is None for d in decoded):
            raise RingCommitmentMismatch("malformed ring commitment or opening")
        cx, cy, px, py = decoded
        if not (
            self.pcs.verify(cx, z, opening.x_value, px)
            and self.pcs.verify(cy, z, opening.y_value, py)
        ):
            raise RingCommitmentMismatch("ring opening does not verify")
        return VerifierKey(points=points, commitment=commitment)


# ----------------------------
# Sign / verify
# ----------------------------

def ring_sign(secret: Secret, input: Input, ad: bytes, prover: RingProver) -> Signature:
    """Sign (input, ad) as an anonymous member of the prover's ring.

    The prover's key index is not checked against `secret`; a wrong index
    yields a signature that fails verification.
    """
    vrf_signature, blinding = pedersen.sign(secret, input, ad)
    ring_proof = prover.prove(blinding)
    return Signature(vrf_signature=vrf_signature, ring_proof=ring_proof)


def ring_verify(input: Input, ad: bytes, signature: Signature, verifier: RingVerifier) -> None:
    """Raise VerificationFailure unless `signature` is a ring signature on (input, ad)."""
    curve = input.suite.curve
    try:
        pedersen.verify(input, ad, signature.vrf_signature)
        # The identity has no affine form and is never a ring member commitment.
        key_commitment = curve.xy(signature.vrf_signature.key_commitment())
        if key_commitment is None:
            raise VerificationFailure()
        # Ring proof takes the raw coordinates: whole curve group, no subgroup check.
        if not verifier.verify_ring_proof(signature.ring_proof, key_commitment):
            raise VerificationFailure()
    except VerificationFailure:
        logger.debug("ring signature rejected")
        raise
