from __future__ import annotations

from typing import Any, List, Optional

from .suite import Suite


def scalar_to_bytes(k: int, length: int = 32) -> bytes:
    """Fixed-width little-endian scalar encoding (int_to_string)."""
    return int(k).to_bytes(length, "little")


def scalar_from_bytes(buf: bytes, modulus: int) -> Optional[int]:
    """Decode a canonical little-endian scalar, or None if it is >= modulus."""
    k = int.from_bytes(buf, "little")
    if k >= modulus:
        return None
    return k


def point_from_bytes(suite: Suite, buf: bytes, subgroup: bool = True) -> Optional[Any]:
    """Decode a compressed point; with `subgroup`, reject points outside the prime-order subgroup."""
    curve = suite.curve
    P = curve.decode(buf)
    if P is None:
        return None
    if subgroup and not curve.in_subgroup(P):
        return None
    return P


def split_fixed(buf: bytes, width: int) -> Optional[List[bytes]]:
    """Split `buf` into `width`-byte chunks, or None if it does not divide evenly."""
    if width <= 0 or len(buf) % width:
        return None
    return [buf[i : i + width] for i in range(0, len(buf), width)]
