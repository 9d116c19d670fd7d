# src/instantiations/bls12_381/inst.py
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from hashlib import sha256
from typing import Optional, Sequence, Tuple

# py_ecc for BLS12-381 G1/G2 group ops, pairing and G1 point compression.
# Install: pip install py-ecc
try:
    from py_ecc.bls.point_compression import compress_G1, decompress_G1
    from py_ecc.optimized_bls12_381 import (
        G1,
        G2,
        Z1,
        add,
        b,
        curve_order,
        double,
        is_inf,
        is_on_curve,
        multiply,
        neg,
        pairing,
    )
except Exception as e:  # pragma: no cover
    raise ImportError(
        "BLS12-381 instantiation requires 'py-ecc'. Install via: pip install py-ecc"
    ) from e

logger = logging.getLogger(__name__)


# ----------------------------
# Point representation note
# - py_ecc optimized curve arithmetic expects Jacobian points (x, y, z).
# Commitments are kept Jacobian; compare them through their 48-byte
# compressed encoding, which is canonical.
# ----------------------------

_G1_LEN = 48  # BLS12-381 G1 compressed size


def _g1_to_bytes_compressed(P) -> bytes:
    return int(compress_G1(P)).to_bytes(_G1_LEN, "big")


def _g1_from_bytes_compressed(buf: bytes):
    if len(buf) != _G1_LEN:
        return None
    try:
        P = decompress_G1(int.from_bytes(buf, "big"))
    except Exception:
        return None
    try:
        if not is_on_curve(P, b):
            return None
    except Exception:
        return None
    return P


# ----------------------------
# Multi-scalar multiplication (bucket method)
# ----------------------------

def _msm(points: Sequence, scalars: Sequence[int]):
    pairs = [(P, s % curve_order) for P, s in zip(points, scalars)]
    pairs = [(P, s) for P, s in pairs if s and not is_inf(P)]
    if not pairs:
        return Z1
    if len(pairs) < 32:
        acc = Z1
        for P, s in pairs:
            acc = add(acc, multiply(P, s))
        return acc

    c = 8 if len(pairs) >= 512 else 5
    mask = (1 << c) - 1
    num_windows = (curve_order.bit_length() + c - 1) // c

    result = Z1
    for w in reversed(range(num_windows)):
        for _ in range(c):
            result = double(result)
        buckets: list = [None] * mask
        shift = w * c
        for P, s in pairs:
            idx = (s >> shift) & mask
            if idx:
                cur = buckets[idx - 1]
                buckets[idx - 1] = P if cur is None else add(cur, P)
        running = Z1
        window_sum = Z1
        for bucket in reversed(buckets):
            if bucket is not None:
                running = add(running, bucket)
            window_sum = add(window_sum, running)
        result = add(result, window_sum)
    return result


def _eval_poly(coeffs: Sequence[int], z: int) -> int:
    acc = 0
    for c in reversed(coeffs):
        acc = (acc * z + c) % curve_order
    return acc


# ----------------------------
# KZG polynomial commitments over BLS12-381
# URS = ([tau^i]G1 for i = 0..max_degree, [tau]G2)
# ----------------------------

@dataclass(frozen=True, eq=False)
class KZG:
    g1_powers: Tuple
    tau_g2: Tuple
    scalar_modulus: int = curve_order
    commitment_bytes: int = _G1_LEN

    @classmethod
    def setup(cls, max_degree: int, seed: Optional[bytes] = None) -> "KZG":
        """Generate a URS supporting polynomials of degree <= max_degree.

        With a seed, tau is derived deterministically (tests, benchmarks);
        a real deployment takes its URS from a ceremony.
        """
        if max_degree < 0:
            raise ValueError("max_degree must be non-negative")
        if seed is None:
            tau = secrets.randbelow(curve_order - 1) + 1
        else:
            tau = int.from_bytes(sha256(b"ring-vrf/kzg/tau" + seed).digest(), "big") % curve_order
            if tau == 0:  # pragma: no cover
                raise ValueError("degenerate seed")

        logger.info("KZG setup: max_degree=%d seeded=%s", max_degree, seed is not None)
        powers = []
        t = 1
        for _ in range(max_degree + 1):
            powers.append(multiply(G1, t))
            t = t * tau % curve_order
        return cls(g1_powers=tuple(powers), tau_g2=multiply(G2, tau))

    @property
    def max_degree(self) -> int:
        return len(self.g1_powers) - 1

    def commit(self, coeffs: Sequence[int]):
        if len(coeffs) > len(self.g1_powers):
            raise ValueError(
                f"polynomial of degree {len(coeffs) - 1} exceeds setup degree {self.max_degree}"
            )
        return _msm(self.g1_powers[: len(coeffs)], coeffs)

    def open(self, coeffs: Sequence[int], z: int):
        """Return (f(z), [q(tau)]G1) with q(x) = (f(x) - f(z)) / (x - z)."""
        z %= curve_order
        n = len(coeffs)
        quotient = [0] * max(n - 1, 0)
        carry = 0
        for i in range(n - 1, 0, -1):
            carry = (coeffs[i] + carry * z) % curve_order
            quotient[i - 1] = carry
        return _eval_poly(coeffs, z), self.commit(quotient)

    def verify(self, commitment, z: int, value: int, proof) -> bool:
        """Check e(C - v*G1, G2) == e(pi, [tau]G2 - z*G2)."""
        lhs = add(commitment, neg(multiply(G1, value % curve_order)))
        shifted = add(self.tau_g2, neg(multiply(G2, z % curve_order)))
        return pairing(G2, lhs) == pairing(shifted, proof)

    def encode_commitment(self, commitment) -> bytes:
        return _g1_to_bytes_compressed(commitment)

    def decode_commitment(self, data: bytes):
        return _g1_from_bytes_compressed(data)

