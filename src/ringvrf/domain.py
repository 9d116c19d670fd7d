"""
Radix-2 evaluation domain over a prime field.

The domain is the multiplicative subgroup {1, w, w^2, ..., w^(n-1)} of size
n = 2^k. Ring columns are given as evaluations over the domain; `ifft`
turns them into coefficients for committing and `evaluate` computes the
interpolant at an arbitrary point with the barycentric formula

    f(z) = (z^n - 1) / n * sum_i e_i * w^i / (z - w^i)

in O(n) field operations, without interpolating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

# BLS12-381 scalar field: q - 1 = 2^32 * t, multiplicative generator 7.
BLS12_381_FR = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
BLS12_381_FR_GENERATOR = 7
BLS12_381_FR_TWO_ADICITY = 32


def _fft(vals: Sequence[int], root: int, p: int) -> List[int]:
    n = len(vals)
    if n == 1:
        return [vals[0] % p]
    root_sq = root * root % p
    even = _fft(vals[0::2], root_sq, p)
    odd = _fft(vals[1::2], root_sq, p)
    half = n // 2
    out = [0] * n
    w = 1
    for i in range(half):
        t = w * odd[i] % p
        out[i] = (even[i] + t) % p
        out[i + half] = (even[i] - t) % p
        w = w * root % p
    return out


def batch_inverse(values: Sequence[int], p: int) -> List[int]:
    """Invert all (non-zero) values with a single modular inversion."""
    prefix = [1] * (len(values) + 1)
    for i, v in enumerate(values):
        prefix[i + 1] = prefix[i] * v % p
    inv = pow(prefix[-1], p - 2, p)
    out = [0] * len(values)
    for i in reversed(range(len(values))):
        out[i] = inv * prefix[i] % p
        inv = inv * values[i] % p
    return out


@dataclass(frozen=True)
class Domain:
    size: int
    modulus: int = BLS12_381_FR
    generator: int = BLS12_381_FR_GENERATOR
    two_adicity: int = BLS12_381_FR_TWO_ADICITY
    omega: int = field(init=False)

    def __post_init__(self) -> None:
        n = self.size
        if n < 1 or n & (n - 1):
            raise ValueError(f"domain size must be a power of two, got {n}")
        if n.bit_length() - 1 > self.two_adicity:
            raise ValueError(f"domain size {n} exceeds 2^{self.two_adicity}")
        omega = pow(self.generator, (self.modulus - 1) // n, self.modulus)
        object.__setattr__(self, "omega", omega)

    def elements(self) -> List[int]:
        p = self.modulus
        out = [1] * self.size
        for i in range(1, self.size):
            out[i] = out[i - 1] * self.omega % p
        return out

    def fft(self, coeffs: Sequence[int]) -> List[int]:
        """Coefficients (degree < n) -> evaluations over the domain."""
        if len(coeffs) > self.size:
            raise ValueError(f"{len(coeffs)} coefficients do not fit a domain of size {self.size}")
        padded = list(coeffs) + [0] * (self.size - len(coeffs))
        return _fft(padded, self.omega, self.modulus)

    def ifft(self, evals: Sequence[int]) -> List[int]:
        """Evaluations over the domain -> coefficients of the interpolant."""
        if len(evals) != self.size:
            raise ValueError(f"expected {self.size} evaluations, got {len(evals)}")
        p = self.modulus
        omega_inv = pow(self.omega, p - 2, p)
        n_inv = pow(self.size, p - 2, p)
        return [c * n_inv % p for c in _fft(evals, omega_inv, p)]

    def evaluate(self, evals: Sequence[int], z: int) -> int:
        """Evaluate the interpolant of `evals` at z."""
        if len(evals) != self.size:
            raise ValueError(f"expected {self.size} evaluations, got {len(evals)}")
        p = self.modulus
        z %= p
        zn_minus_one = (pow(z, self.size, p) - 1) % p
        elements = self.elements()
        if zn_minus_one == 0:
            return evals[elements.index(z)] % p

        denoms = batch_inverse([(z - w) % p for w in elements], p)
        acc = 0
        for e, w, d in zip(evals, elements, denoms):
            acc = (acc + e * w % p * d) % p
        n_inv = pow(self.size, p - 2, p)
        return acc * zn_minus_one % p * n_inv % p
