"""
Ring-membership proof.

Statement: for a result point C and a padded ring (P_0, ..., P_{n-1}) the
prover knows b and an index k with C - P_k = b*H. The proof is an
Abe-Ohkubo-Suzuki chain of Schnorr proofs, one per ring slot:

    R_i     = s_i*H + c_i*(C - P_i)
    c_{i+1} = challenge(transcript, R_i)         (indices mod n)

The prover starts the chain at its own slot with R_k = alpha*H and closes
it with s_k = alpha - c_k*b; the verifier recomputes the chain from c_0 and
accepts iff it returns to c_0. Nothing in the proof depends on k.

The transcript is seeded with a fixed label and absorbs the KZG ring
commitment, so a proof made against one ring never verifies against
another. Points are handled as raw affine coordinates of the whole curve
group, without subgroup checks.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Tuple

from .codec import split_fixed
from .domain import Domain
from .errors import RingTooLargeError
from .interfaces import CurveOps, PolynomialCommitment
from .pedersen import BlindingSecret
from .transcript import Transcript

logger = logging.getLogger(__name__)

RingPoint = Tuple[int, int]


@dataclass(frozen=True)
class PiopParams:
    domain: Domain
    curve: CurveOps[Any]
    blinding_base: Any
    padding_point: Any


@dataclass(frozen=True)
class RingCommitment:
    """KZG commitments to the x and y columns of the padded ring."""

    x: bytes
    y: bytes

    def to_bytes(self) -> bytes:
        return self.x + self.y

    @classmethod
    def from_bytes(cls, data: bytes, width: int = 48) -> Optional["RingCommitment"]:
        parts = split_fixed(data, width)
        if parts is None or len(parts) != 2:
            return None
        return cls(x=parts[0], y=parts[1])


@dataclass(frozen=True)
class VerifierKey:
    points: Tuple[RingPoint, ...]
    commitment: RingCommitment


@dataclass(frozen=True)
class ProverKey:
    points: Tuple[RingPoint, ...]
    commitment: RingCommitment
    x_coeffs: Tuple[int, ...] = field(repr=False, compare=False)
    y_coeffs: Tuple[int, ...] = field(repr=False, compare=False)

    def verifier_key(self) -> VerifierKey:
        return VerifierKey(points=self.points, commitment=self.commitment)


@dataclass(frozen=True)
class RingProof:
    c0: int
    responses: Tuple[int, ...]


# ----------------------------
# Indexing
# ----------------------------

def pad_ring(params: PiopParams, members: Sequence[Any]) -> Tuple[RingPoint, ...]:
    """Affine coordinates of `members`, padded to the domain size."""
    n = params.domain.size
    if len(members) > n:
        raise RingTooLargeError(len(members), n)
    curve = params.curve
    padded = []
    for i, P in enumerate(list(members) + [params.padding_point] * (n - len(members))):
        xy = curve.xy(P)
        if xy is None:
            raise ValueError(f"ring member {i} is the identity")
        padded.append(xy)
    return tuple(padded)


def ring_columns(points: Sequence[RingPoint]) -> Tuple[list, list]:
    return [P[0] for P in points], [P[1] for P in points]


def index(
    pcs: PolynomialCommitment[Any],
    params: PiopParams,
    members: Sequence[Any],
) -> Tuple[ProverKey, VerifierKey]:
    """Pad the ring, interpolate its coordinate columns and commit to them."""
    points = pad_ring(params, members)
    xs, ys = ring_columns(points)
    x_coeffs = params.domain.ifft(xs)
    y_coeffs = params.domain.ifft(ys)
    commitment = RingCommitment(
        x=pcs.encode_commitment(pcs.commit(x_coeffs)),
        y=pcs.encode_commitment(pcs.commit(y_coeffs)),
    )
    logger.debug("indexed ring: members=%d domain=%d", len(members), params.domain.size)
    prover_key = ProverKey(
        points=points,
        commitment=commitment,
        x_coeffs=tuple(x_coeffs),
        y_coeffs=tuple(y_coeffs),
    )
    return prover_key, prover_key.verifier_key()


# ----------------------------
# Prover / verifier
# ----------------------------

def _statement_transcript(base: Transcript, key: VerifierKey, curve: CurveOps[Any], result: RingPoint) -> Transcript:
    t = base.copy()
    t.append_message(b"ring-commitment", key.commitment.to_bytes())
    t.append_u64(b"ring-size", len(key.points))
    t.append_message(b"result", curve.encode(result))
    return t


def _link(t: Transcript, curve: CurveOps[Any], R: Any) -> int:
    h = t.copy()
    h.append_message(b"R", curve.encode(R))
    return h.challenge_scalar(b"c", curve.order)


def _link_point(curve: CurveOps[Any], H: Any, s: int, c: int, result: RingPoint, member: RingPoint) -> Any:
    # s*H + c*(C - P_i)
    return curve.multi_mul([s, c, c], [H, result, curve.neg(member)])


class RingProver:
    """Ring prover bound to a prover key and the signer's slot in it.

    The seeded transcript is copied for every proof, so one prover can be
    reused for any number of signatures.
    """

    def __init__(self, prover_key: ProverKey, params: PiopParams, key_index: int, transcript: Transcript) -> None:
        if not 0 <= key_index < len(prover_key.points):
            raise IndexError(f"key index {key_index} outside ring of {len(prover_key.points)}")
        self.prover_key = prover_key
        self.params = params
        self.key_index = key_index
        self._transcript = transcript

    @property
    def public_key(self) -> RingPoint:
        return self.prover_key.points[self.key_index]

    def prove(self, blinding: BlindingSecret) -> RingProof:
        curve = self.params.curve
        order = curve.order
        H = self.params.blinding_base
        points = self.prover_key.points
        n = len(points)
        k = self.key_index

        b = blinding.consume()
        result = curve.xy(curve.add(self.public_key, curve.mul(b, H)))
        if result is None:  # pragma: no cover - needs b*H = -P_k
            raise ValueError("degenerate result point")
        t = _statement_transcript(self._transcript, self.prover_key.verifier_key(), curve, result)

        challenges = [0] * n
        responses = [0] * n
        alpha = secrets.randbelow(order - 1) + 1
        i = (k + 1) % n
        challenges[i] = _link(t, curve, curve.mul(alpha, H))
        while i != k:
            responses[i] = secrets.randbelow(order)
            R = _link_point(curve, H, responses[i], challenges[i], result, points[i])
            i = (i + 1) % n
            challenges[i] = _link(t, curve, R)
        responses[k] = (alpha - challenges[k] * b) % order

        return RingProof(c0=challenges[0], responses=tuple(responses))


class RingVerifier:
    def __init__(self, verifier_key: VerifierKey, params: PiopParams, transcript: Transcript) -> None:
        self.verifier_key = verifier_key
        self.params = params
        self._transcript = transcript

    def verify_ring_proof(self, proof: RingProof, result: RingPoint) -> bool:
        curve = self.params.curve
        order = curve.order
        H = self.params.blinding_base
        points = self.verifier_key.points

        if len(proof.responses) != len(points):
            return False
        if not 0 <= proof.c0 < order or any(not 0 <= s < order for s in proof.responses):
            return False

        t = _statement_transcript(self._transcript, self.verifier_key, curve, result)
        c = proof.c0
        for s, member in zip(proof.responses, points):
            c = _link(t, curve, _link_point(curve, H, s, c, result, member))
        return c == proof.c0
