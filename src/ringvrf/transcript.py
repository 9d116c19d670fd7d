"""
Fiat-Shamir transcript.

Messages are absorbed into a running BLAKE2b state as
`len(label) || label || len(msg) || msg` (little-endian u32 / u64 lengths),
so no two distinct message sequences share an encoding. Prover and verifier
that absorb the same messages in the same order derive the same challenges.
"""

from __future__ import annotations

import hashlib

_DIGEST_SIZE = 64


class Transcript:
    """Labelled BLAKE2b transcript with forkable state.

    Example:
        >>> t = Transcript(b"ring-vrf")
        >>> t.append_message(b"point", encoded)
        >>> c = t.challenge_scalar(b"c", order)
    """

    def __init__(self, label: bytes) -> None:
        self._hasher = hashlib.blake2b(digest_size=_DIGEST_SIZE)
        self.append_message(b"dom-sep", label)

    def append_message(self, label: bytes, message: bytes) -> None:
        self._hasher.update(len(label).to_bytes(4, "little"))
        self._hasher.update(label)
        self._hasher.update(len(message).to_bytes(8, "little"))
        self._hasher.update(message)

    def append_u64(self, label: bytes, value: int) -> None:
        self.append_message(label, value.to_bytes(8, "little"))

    def challenge_bytes(self, label: bytes, length: int = _DIGEST_SIZE) -> bytes:
        """Squeeze `length` (<= 64) bytes and ratchet the state with them."""
        if not 0 < length <= _DIGEST_SIZE:
            raise ValueError(f"challenge length must be in 1..{_DIGEST_SIZE}")
        h = self._hasher.copy()
        h.update(len(label).to_bytes(4, "little"))
        h.update(label)
        h.update(b"challenge")
        out = h.digest()[:length]
        self.append_message(label, out)
        return out

    def challenge_scalar(self, label: bytes, modulus: int) -> int:
        """Challenge reduced into [0, modulus) from a full 64-byte squeeze."""
        return int.from_bytes(self.challenge_bytes(label), "little") % modulus

    def copy(self) -> "Transcript":
        other = Transcript.__new__(Transcript)
        other._hasher = self._hasher.copy()
        return other
