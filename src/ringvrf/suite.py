from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .interfaces import CurveOps, HashFn


@dataclass(frozen=True)
class Suite:
    """A cryptographic instantiation: domain separator, curve and hash.

    Values derived under one suite (inputs, keys, signatures) never
    interoperate with another suite's; `suite_id` is mixed into every hash.
    The hash digest must be at least `curve.field_bytes` long, otherwise
    hash-to-curve never finds a point.
    """

    name: str
    suite_id: int
    challenge_len: int
    curve: CurveOps[Any]
    hash: HashFn
    blinding_base: Optional[Any] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.suite_id <= 0xFF:
            raise ValueError(f"suite_id must fit in one byte, got {self.suite_id}")
        if self.challenge_len <= 0:
            raise ValueError("challenge_len must be positive")

    @property
    def id_byte(self) -> bytes:
        return bytes([self.suite_id])

    def pedersen_base(self) -> Any:
        """Blinding base B of the Pedersen key commitment."""
        if self.blinding_base is None:
            raise ValueError(f"suite {self.name} has no blinding base")
        return self.blinding_base
