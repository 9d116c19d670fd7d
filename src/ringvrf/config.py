"""
Ring setup configuration.

A `RingSetupConfig` names the suite, the domain size (maximum ring size)
and, optionally, a seed for a deterministic KZG setup. Instantiations turn
it into a `RingContext` (see `instantiations.bandersnatch.make_ring_context`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

DEFAULT_SUITE = "bandersnatch-sha512-tai"
DEFAULT_DOMAIN_SIZE = 1024


@dataclass(frozen=True)
class RingSetupConfig:
    suite: str = DEFAULT_SUITE
    domain_size: int = DEFAULT_DOMAIN_SIZE
    srs_seed: Optional[Union[bytes, str]] = None

    def __post_init__(self) -> None:
        n = self.domain_size
        if n < 1 or n & (n - 1):
            raise ValueError(f"domain_size must be a power of two, got {n}")
        if isinstance(self.srs_seed, str):
            object.__setattr__(self, "srs_seed", self.srs_seed.encode("utf-8"))
        if self.srs_seed is not None and not self.srs_seed:
            raise ValueError("srs_seed must be non-empty when given")
