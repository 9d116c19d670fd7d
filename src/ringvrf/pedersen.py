"""
Pedersen VRF: a VRF whose proof hides the signer's public key behind a
Pedersen commitment.

    Yb = x*G + b*B          (key commitment, b = blinding, B = blinding base)
    O  = x*I                (VRF output for input point I)

The proof shows knowledge of (x, b) opening Yb such that O = x*I:

    R  = k*G + kb*B,  Ok = k*I
    c  = challenge(Yb, I, O, R, Ok, ad)
    s  = k + c*x,     sb = kb + c*b

    check:  c*O + Ok == s*I   and   c*Yb + R == s*G + sb*B

Without b nothing links Yb to x*G; the ring proof later shows that Yb - b*B
is one of the ring keys.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .codec import scalar_to_bytes
from .errors import BlindingReuseError, VerificationFailure
from .h2c import hash_to_curve_tai
from .suite import Suite

logger = logging.getLogger(__name__)

CHALLENGE_DOM_SEP = 0x02
OUTPUT_DOM_SEP = 0x03
DOM_SEP_BACK = 0x00


# ----------------------------
# Keys, input, output
# ----------------------------

@dataclass(frozen=True)
class Public:
    suite: Suite
    point: Any

    def to_bytes(self) -> bytes:
        return self.suite.curve.encode(self.point)


@dataclass(frozen=True)
class Secret:
    suite: Suite
    scalar: int = field(repr=False)

    def __post_init__(self) -> None:
        if not 0 < self.scalar < self.suite.curve.order:
            raise ValueError("secret scalar must be in [1, order)")

    @classmethod
    def from_seed(cls, suite: Suite, seed: bytes) -> "Secret":
        """Deterministic key: scalar = hash(seed) mod order."""
        scalar = int.from_bytes(suite.hash(seed), "little") % suite.curve.order
        return cls(suite=suite, scalar=scalar)

    @classmethod
    def random(cls, suite: Suite) -> "Secret":
        return cls(suite=suite, scalar=secrets.randbelow(suite.curve.order - 1) + 1)

    @property
    def public(self) -> Public:
        curve = self.suite.curve
        return Public(suite=self.suite, point=curve.mul(self.scalar, curve.generator()))

    def output(self, input: "Input") -> "Output":
        return Output(suite=self.suite, point=self.suite.curve.mul(self.scalar, input.point))


@dataclass(frozen=True)
class Input:
    suite: Suite
    point: Any

    @classmethod
    def new(cls, suite: Suite, data: bytes) -> Optional["Input"]:
        """Map `data` to an input point, or None if no point was found."""
        pt = hash_to_curve_tai(suite, data)
        if pt is None:
            return None
        return cls(suite=suite, point=pt)


@dataclass(frozen=True)
class Output:
    suite: Suite
    point: Any

    def hash(self) -> bytes:
        """VRF output bytes: hash(suite_id || 0x03 || cofactor*O || 0x00)."""
        curve = self.suite.curve
        buf = (
            self.suite.id_byte
            + bytes([OUTPUT_DOM_SEP])
            + curve.encode(curve.clear_cofactor(self.point))
            + bytes([DOM_SEP_BACK])
        )
        return self.suite.hash(buf)


class BlindingSecret:
    """The blinding scalar b of one signature; can be consumed only once.

    Reusing b across two ring proofs would link them, so the second
    `consume()` raises BlindingReuseError.
    """

    __slots__ = ("_scalar",)

    def __init__(self, scalar: int) -> None:
        self._scalar: Optional[int] = scalar

    @property
    def consumed(self) -> bool:
        return self._scalar is None

    def consume(self) -> int:
        if self._scalar is None:
            raise BlindingReuseError("blinding secret already consumed")
        scalar, self._scalar = self._scalar, None
        return scalar

    def __repr__(self) -> str:
        return f"BlindingSecret(consumed={self.consumed})"


# ----------------------------
# Signature
# ----------------------------

@dataclass(frozen=True)
class PedersenProof:
    pk_blind: Any
    r: Any
    ok: Any
    s: int
    sb: int


@dataclass(frozen=True)
class PedersenSignature:
    output: Output
    proof: PedersenProof

    def key_commitment(self) -> Any:
        """Yb = x*G + b*B, the blinded public key."""
        return self.proof.pk_blind


# ----------------------------
# Hashing helpers
# ----------------------------

def challenge(suite: Suite, points, ad: bytes) -> int:
    """RFC 9381 style challenge: first cLen bytes of the hash, little-endian."""
    curve = suite.curve
    buf = suite.id_byte + bytes([CHALLENGE_DOM_SEP])
    for P in points:
        buf += curve.encode(P)
    buf += bytes(ad) + bytes([DOM_SEP_BACK])
    digest = suite.hash(buf)
    if len(digest) < suite.challenge_len:
        raise ValueError(f"suite {suite.name}: digest shorter than challenge_len")
    return int.from_bytes(digest[: suite.challenge_len], "little") % curve.order


def nonce(suite: Suite, scalar: int, input: Input, extra: bytes = b"") -> int:
    """RFC 8032 style nonce: hash(hash(sk)[32:] || I || extra) mod order."""
    curve = suite.curve
    h = suite.hash(scalar_to_bytes(scalar, curve.scalar_bytes))
    buf = h[len(h) // 2:] + curve.encode(input.point) + extra
    return int.from_bytes(suite.hash(buf), "little") % curve.order


# ----------------------------
# Sign / verify
# ----------------------------

def sign(secret: Secret, input: Input, ad: bytes = b"") -> Tuple[PedersenSignature, BlindingSecret]:
    """Blinded VRF signature over (input, ad) and the blinding secret used for Yb.

    The blinding is fresh per call. Both nonces depend on it, so signing the
    same input twice never reuses a nonce with a different challenge.
    """
    suite = secret.suite
    curve = suite.curve
    order = curve.order
    G = curve.generator()
    B = suite.pedersen_base()
    ad = bytes(ad)

    output = secret.output(input)
    blinding = secrets.randbelow(order - 1) + 1

    k = nonce(suite, secret.scalar, input, scalar_to_bytes(blinding, curve.scalar_bytes) + ad)
    kb = nonce(suite, blinding, input, ad)

    pk_blind = curve.multi_mul([secret.scalar, blinding], [G, B])
    r = curve.multi_mul([k, kb], [G, B])
    ok = curve.mul(k, input.point)

    c = challenge(suite, [pk_blind, input.point, output.point, r, ok], ad)
    s = (k + c * secret.scalar) % order
    sb = (kb + c * blinding) % order

    proof = PedersenProof(pk_blind=pk_blind, r=r, ok=ok, s=s, sb=sb)
    return PedersenSignature(output=output, proof=proof), BlindingSecret(blinding)


def verify(input: Input, ad: bytes, signature: PedersenSignature) -> None:
    """Raise VerificationFailure unless `signature` is valid for (input, ad)."""
    suite = input.suite
    curve = suite.curve
    order = curve.order
    proof = signature.proof
    output = signature.output

    if not (0 <= proof.s < order and 0 <= proof.sb < order):
        raise VerificationFailure()

    c = challenge(suite, [proof.pk_blind, input.point, output.point, proof.r, proof.ok], bytes(ad))

    # c*O + Ok == s*I
    lhs1 = curve.add(curve.mul(c, output.point), proof.ok)
    rhs1 = curve.mul(proof.s, input.point)
    if lhs1 != rhs1:
        raise VerificationFailure()

    # c*Yb + R == s*G + sb*B
    lhs2 = curve.add(curve.mul(c, proof.pk_blind), proof.r)
    rhs2 = curve.multi_mul([proof.s, proof.sb], [curve.generator(), suite.pedersen_base()])
    if lhs2 != rhs2:
        raise VerificationFailure()
