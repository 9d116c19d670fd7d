"""Ring verifiable random function: Pedersen VRF + ring-membership proof."""

from .config import RingSetupConfig
from .errors import (
    BlindingReuseError,
    RingCommitmentMismatch,
    RingTooLargeError,
    RingVrfError,
    VerificationFailure,
)
from .h2c import hash_to_curve_tai
from .pedersen import BlindingSecret, Input, Output, PedersenSignature, Public, Secret, sign, verify
from .ring import RingContext, RingOpening, Signature, ring_sign, ring_verify
from .ring_proof import ProverKey, RingCommitment, RingProof, RingProver, RingVerifier, VerifierKey
from .serialization import decode_signature, encode_signature
from .suite import Suite

__all__ = [
    "BlindingReuseError",
    "BlindingSecret",
    "Input",
    "Output",
    "PedersenSignature",
    "ProverKey",
    "Public",
    "RingCommitment",
    "RingCommitmentMismatch",
    "RingContext",
    "RingOpening",
    "RingProof",
    "RingProver",
    "RingSetupConfig",
    "RingTooLargeError",
    "RingVerifier",
    "RingVrfError",
    "Secret",
    "Signature",
    "Suite",
    "VerificationFailure",
    "VerifierKey",
    "decode_signature",
    "encode_signature",
    "hash_to_curve_tai",
    "ring_sign",
    "ring_verify",
    "sign",
    "verify",
]
