"""
Ring-VRF errors.

Every rejection on the verification path is reported as the single
`VerificationFailure`: callers (and anyone observing them) must not learn
which of the two sub-proofs was rejected. The remaining classes signal
integration mistakes and double as the matching builtin exceptions.
"""

from __future__ import annotations


class RingVrfError(Exception):
    """Base class for all ring-VRF errors."""
    pass


class VerificationFailure(RingVrfError):
    """Raised when a (ring) VRF signature does not verify."""

    def __init__(self, message: str = "verification failure") -> None:
        super().__init__(message)


class RingTooLargeError(RingVrfError, ValueError):
    """Raised when a ring has more members than the context's domain size."""

    def __init__(self, ring_size: int, domain_size: int) -> None:
        super().__init__(f"ring of {ring_size} keys exceeds domain size {domain_size}")
        self.ring_size = ring_size
        self.domain_size = domain_size


class BlindingReuseError(RingVrfError, RuntimeError):
    """Raised when a blinding secret is consumed a second time."""
    pass


class RingCommitmentMismatch(RingVrfError, ValueError):
    """Raised when a member list does not open a trusted ring commitment."""
    pass


__all__ = [
    "RingVrfError",
    "VerificationFailure",
    "RingTooLargeError",
    "BlindingReuseError",
    "RingCommitmentMismatch",
]
