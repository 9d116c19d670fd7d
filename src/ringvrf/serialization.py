"""
Ring signature wire format.

    O || Yb || R || Ok || s || sb || c0 || s_0 || ... || s_{n-1}

Points use the suite's compressed encoding, scalars are little-endian and
fixed width. Decoders return None for anything malformed: wrong length,
non-canonical scalars, points off the curve or outside the prime-order
subgroup.
"""

from __future__ import annotations

from typing import Optional

from .codec import point_from_bytes, scalar_from_bytes, scalar_to_bytes, split_fixed
from .pedersen import Output, PedersenProof, PedersenSignature
from .ring import Signature
from .ring_proof import RingProof
from .suite import Suite

_POINTS = 4
_SCALARS = 2


def encode_pedersen_signature(signature: PedersenSignature) -> bytes:
    suite = signature.output.suite
    curve = suite.curve
    proof = signature.proof
    return (
        curve.encode(signature.output.point)
        + curve.encode(proof.pk_blind)
        + curve.encode(proof.r)
        + curve.encode(proof.ok)
        + scalar_to_bytes(proof.s, curve.scalar_bytes)
        + scalar_to_bytes(proof.sb, curve.scalar_bytes)
    )


def decode_pedersen_signature(suite: Suite, data: bytes) -> Optional[PedersenSignature]:
    curve = suite.curve
    pw, sw = curve.field_bytes, curve.scalar_bytes
    if len(data) != _POINTS * pw + _SCALARS * sw:
        return None
    points = []
    for i in range(_POINTS):
        P = point_from_bytes(suite, data[i * pw : (i + 1) * pw])
        if P is None:
            return None
        points.append(P)
    scalars = []
    for raw in split_fixed(data[_POINTS * pw :], sw) or []:
        k = scalar_from_bytes(raw, curve.order)
        if k is None:
            return None
        scalars.append(k)
    output, pk_blind, r, ok = points
    s, sb = scalars
    return PedersenSignature(
        output=Output(suite=suite, point=output),
        proof=PedersenProof(pk_blind=pk_blind, r=r, ok=ok, s=s, sb=sb),
    )


def encode_signature(signature: Signature) -> bytes:
    curve = signature.output.suite.curve
    ring_proof = signature.ring_proof
    body = b"".join(scalar_to_bytes(s, curve.scalar_bytes) for s in ring_proof.responses)
    return (
        encode_pedersen_signature(signature.vrf_signature)
        + scalar_to_bytes(ring_proof.c0, curve.scalar_bytes)
        + body
    )


def decode_signature(suite: Suite, data: bytes) -> Optional[Signature]:
    """Decode a ring signature; the ring size follows from the length."""
    curve = suite.curve
    head = _POINTS * curve.field_bytes + _SCALARS * curve.scalar_bytes
    vrf_signature = decode_pedersen_signature(suite, data[:head])
    if vrf_signature is None:
        return None
    chunks = split_fixed(data[head:], curve.scalar_bytes)
    if chunks is None or len(chunks) < 2:
        return None
    scalars = []
    for raw in chunks:
        k = scalar_from_bytes(raw, curve.order)
        if k is None:
            return None
        scalars.append(k)
    return Signature(
        vrf_signature=vrf_signature,
        ring_proof=RingProof(c0=scalars[0], responses=tuple(scalars[1:])),
    )
