# src/instantiations/bandersnatch/inst.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from ringvrf.config import RingSetupConfig
from ringvrf.h2c import hash_to_curve_tai
from ringvrf.ring import RingContext
from ringvrf.suite import Suite

from instantiations.bls12_381 import KZG

# Square roots / inverses in F_q via `ecdsa` number theory helpers
try:
    from ecdsa.numbertheory import SquareRootError, inverse_mod, square_root_mod_prime
except Exception as e:  # pragma: no cover
    raise ImportError(
        "Bandersnatch instantiation requires the 'ecdsa' package. Install via: pip install ecdsa"
    ) from e


Affine = Tuple[int, int]
_Projective = Tuple[int, int, int]


# ----------------------------
# Bandersnatch, twisted Edwards form: a*x^2 + y^2 = 1 + d*x^2*y^2 over F_q,
# q = BLS12-381 scalar field modulus. Prime subgroup order r, cofactor 4.
# ----------------------------

Q = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
R = 13108968793781547619861935127046491459309155893440570251786403306729687672801
COFACTOR = 4
COEFF_A = Q - 5
COEFF_D = 45022363124591815672509500913686876175488063829319466900776701791074614335719
GENERATOR_X = 18886178867200960497001835917649091219057080094937609519140440539760939937304
GENERATOR_Y = 19188667384257783945677642223292697773471335439753913231509108946878080696678

_FIELD_BYTES = 32
_SIGN_BIT = 0x80


@dataclass(frozen=True)
class BandersnatchOps:
    """Bandersnatch group law on affine tuples (x, y).

    Outputs are affine so that equality is plain tuple equality. Scalar
    multiplication runs in projective coordinates and normalizes once.
    """

    field_modulus: int = Q
    order: int = R
    cofactor: int = COFACTOR
    a: int = COEFF_A
    d: int = COEFF_D
    field_bytes: int = _FIELD_BYTES
    scalar_bytes: int = _FIELD_BYTES

    def identity(self) -> Affine:
        return (0, 1)

    def generator(self) -> Affine:
        return (GENERATOR_X, GENERATOR_Y)

    def is_identity(self, P: Affine) -> bool:
        return P[0] % self.field_modulus == 0 and P[1] % self.field_modulus == 1

    def is_on_curve(self, P: Affine) -> bool:
        q = self.field_modulus
        x, y = P
        xx = x * x % q
        yy = y * y % q
        return (self.a * xx + yy - 1 - self.d * xx % q * yy) % q == 0

    def neg(self, P: Affine) -> Affine:
        return ((-P[0]) % self.field_modulus, P[1])

    def add(self, P1: Affine, P2: Affine) -> Affine:
        return self._to_affine(self._proj_add(self._to_proj(P1), self._to_proj(P2)))

    def mul(self, k: int, P: Affine) -> Affine:
        return self.multi_mul([k], [P])

    def multi_mul(self, scalars: Sequence[int], points: Sequence[Affine]) -> Affine:
        """Compute sum(k_i * P_i) with interleaved double-and-add (Straus)."""
        if len(scalars) != len(points):
            raise ValueError("scalars and points must have the same length")
        ks = []
        ps = []
        for k, P in zip(scalars, points):
            k = int(k)
            if k < 0:
                k, P = -k, self.neg(P)
            if k == 0:
                continue
            ks.append(k)
            ps.append(self._to_proj(P))
        if not ks:
            return self.identity()

        acc: _Projective = (0, 1, 1)
        for bit in reversed(range(max(k.bit_length() for k in ks))):
            acc = self._proj_add(acc, acc)
            for k, P in zip(ks, ps):
                if (k >> bit) & 1:
                    acc = self._proj_add(acc, P)
        return self._to_affine(acc)

    def in_subgroup(self, P: Affine) -> bool:
        return self.is_on_curve(P) and self.is_identity(self.mul(self.order, P))

    def clear_cofactor(self, P: Affine) -> Affine:
        return self.mul(self.cofactor, P)

    def xy(self, P: Affine) -> Optional[Affine]:
        if self.is_identity(P):
            return None
        return (P[0] % self.field_modulus, P[1] % self.field_modulus)

    # ----------------------------
    # Compressed encoding: y little-endian, MSB of the last byte = sign of x
    # ----------------------------

    def encode(self, P: Affine) -> bytes:
        x, y = P
        buf = bytearray(y.to_bytes(self.field_bytes, "little"))
        if x > (self.field_modulus - 1) // 2:
            buf[-1] |= _SIGN_BIT
        return bytes(buf)

    def decode(self, buf: bytes) -> Optional[Affine]:
        """Decode any curve point (no subgroup check), or None."""
        if len(buf) != self.field_bytes:
            return None
        q = self.field_modulus
        negative = bool(buf[-1] & _SIGN_BIT)
        y = int.from_bytes(bytes(buf[:-1]) + bytes([buf[-1] & 0x7F]), "little")
        if y >= q:
            return None

        yy = y * y % q
        num = (1 - yy) % q
        den = (self.a - self.d * yy) % q
        if den == 0:
            return None
        try:
            x = square_root_mod_prime(num * inverse_mod(den, q) % q, q)
        except SquareRootError:
            return None

        if x == 0 and negative:
            return None
        if (x > (q - 1) // 2) != negative:
            x = q - x
        return (x, y)

    # ----------------------------
    # Projective coordinates (X : Y : Z), x = X/Z, y = Y/Z
    # add-2008-bbjlp, unified so it also doubles.
    # ----------------------------

    @staticmethod
    def _to_proj(P: Affine) -> _Projective:
        return (P[0], P[1], 1)

    def _to_affine(self, P: _Projective) -> Affine:
        q = self.field_modulus
        X, Y, Z = P
        z_inv = inverse_mod(Z, q)
        return (X * z_inv % q, Y * z_inv % q)

    def _proj_add(self, P1: _Projective, P2: _Projective) -> _Projective:
        q = self.field_modulus
        X1, Y1, Z1 = P1
        X2, Y2, Z2 = P2
        A = Z1 * Z2 % q
        B = A * A % q
        C = X1 * X2 % q
        D = Y1 * Y2 % q
        E = self.d * C % q * D % q
        F = (B - E) % q
        G = (B + E) % q
        X3 = A * F % q * (((X1 + Y1) * (X2 + Y2) - C - D) % q) % q
        Y3 = A * G % q * ((D - self.a * C) % q) % q
        Z3 = F * G % q
        return (X3, Y3, Z3)


# ----------------------------
# Hash
# ----------------------------

def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


# ----------------------------
# Suite catalog
# ----------------------------

SUITE_NAME = "bandersnatch-sha512-tai"
SUITE_ID = 0x33
CHALLENGE_LEN = 32

BLINDING_BASE_SEED = b"ring-vrf/pedersen/blinding-base"
PADDING_SEED = b"ring-vrf/ring-proof/padding"


def with_blinding_base(suite: Suite) -> Suite:
    """Return `suite` with its Pedersen blinding base derived from a public seed."""
    h = hash_to_curve_tai(suite, BLINDING_BASE_SEED)
    if h is None:  # pragma: no cover - fixed seed decodes
        raise ValueError(f"suite {suite.name}: no blinding base found")
    return replace(suite, blinding_base=h)


@lru_cache(maxsize=None)
def make_bandersnatch_suite() -> Suite:
    """ECVRF-BANDERSNATCH-SHA512-TAI: suite_id 0x33, cLen 32, SHA-512."""
    suite = Suite(
        name=SUITE_NAME,
        suite_id=SUITE_ID,
        challenge_len=CHALLENGE_LEN,
        curve=BandersnatchOps(),
        hash=sha512,
    )
    return with_blinding_base(suite)


# ----------------------------
# RingContext factory (plug-in for the ring-VRF core)
# ----------------------------

def make_ring_context(config: RingSetupConfig) -> RingContext:
    """
    Return a RingContext for the Bandersnatch suite over a BLS12-381 KZG setup.

    - Ring columns live in F_q = BLS12-381 scalar field
    - KZG setup degree = domain size (columns have degree < domain size)
    - srs_seed=None samples a fresh toxic-waste scalar
    """
    if config.suite != SUITE_NAME:
        raise ValueError(f"Unsupported suite={config.suite}.")
    suite = make_bandersnatch_suite()
    pcs = KZG.setup(config.domain_size, seed=config.srs_seed)
    padding = hash_to_curve_tai(suite, PADDING_SEED)
    if padding is None:  # pragma: no cover - fixed seed decodes
        raise ValueError("no padding point found")
    return RingContext.setup(suite, pcs, config.domain_size, padding)
