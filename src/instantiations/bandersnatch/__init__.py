from .inst import (
    BandersnatchOps,
    make_bandersnatch_suite,
    make_ring_context,
    sha512,
    with_blinding_base,
)

__all__ = [
    "BandersnatchOps",
    "make_bandersnatch_suite",
    "make_ring_context",
    "sha512",
    "with_blinding_base",
]
