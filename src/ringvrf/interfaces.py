"""Interface definitions for ring-VRF components."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple, TypeVar

Point = TypeVar("Point")
Commitment = TypeVar("Commitment")


class HashFn(Protocol):
    """Suite hash: bytes -> fixed-length digest."""

    def __call__(self, data: bytes) -> bytes:
        ...


class CurveOps(Protocol[Point]):
    """Group law, subgroup checks and point codec of a suite's curve."""

    field_modulus: int
    order: int
    cofactor: int
    field_bytes: int
    scalar_bytes: int

    def identity(self) -> Point:
        ...

    def generator(self) -> Point:
        ...

    def is_identity(self, P: Point) -> bool:
        ...

    def is_on_curve(self, P: Point) -> bool:
        ...

    def in_subgroup(self, P: Point) -> bool:
        ...

    def add(self, P1: Point, P2: Point) -> Point:
        ...

    def neg(self, P: Point) -> Point:
        ...

    def mul(self, k: int, P: Point) -> Point:
        ...

    def multi_mul(self, scalars: Sequence[int], points: Sequence[Point]) -> Point:
        ...

    def clear_cofactor(self, P: Point) -> Point:
        ...

    def xy(self, P: Point) -> Optional[Tuple[int, int]]:
        """Affine coordinates, or None for the identity."""
        ...

    def encode(self, P: Point) -> bytes:
        ...

    def decode(self, buf: bytes) -> Optional[Point]:
        ...


class PolynomialCommitment(Protocol[Commitment]):
    """Univariate polynomial commitment over a prime field (coefficient form)."""

    scalar_modulus: int
    commitment_bytes: int

    @property
    def max_degree(self) -> int:
        ...

    def commit(self, coeffs: Sequence[int]) -> Commitment:
        ...

    def open(self, coeffs: Sequence[int], z: int) -> Tuple[int, Commitment]:
        ...

    def verify(self, commitment: Commitment, z: int, value: int, proof: Commitment) -> bool:
        ...

    def encode_commitment(self, commitment: Commitment) -> bytes:
        ...

    def decode_commitment(self, data: bytes) -> Optional[Commitment]:
        ...
