from __future__ import annotations

import logging
from typing import Any, Optional

from .suite import Suite

logger = logging.getLogger(__name__)

DOM_SEP_FRONT = 0x01
DOM_SEP_BACK = 0x00


def hash_to_curve_tai(suite: Suite, data: bytes) -> Optional[Any]:
    """Try-And-Increment encode-to-curve (RFC 9381, section 5.4.1.1).

    buf = suite_id || 0x01 || data || ctr || 0x00 is hashed for ctr = 0..255
    and the leading field-length bytes of the digest are decoded as a
    compressed point (any curve point is accepted). The first hit is mapped
    into the prime-order subgroup by clearing the cofactor.

    Returns None when no counter decodes, or when the suite hash is shorter
    than the base field encoding.
    """
    curve = suite.curve
    mod_size = curve.field_bytes

    for ctr in range(256):
        buf = bytes([suite.suite_id, DOM_SEP_FRONT]) + data + bytes([ctr, DOM_SEP_BACK])
        digest = suite.hash(buf)
        if len(digest) < mod_size:
            logger.warning(
                "suite %s: %d-byte digest is shorter than the %d-byte field encoding",
                suite.name,
                len(digest),
                mod_size,
            )
            return None
        pt = curve.decode(digest[:mod_size])
        if pt is not None:
            return curve.clear_cofactor(pt)
    return None
