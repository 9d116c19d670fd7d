from __future__ import annotations

from dataclasses import replace

import pytest

from instantiations.bandersnatch import make_ring_context
from instantiations.bls12_381 import KZG
from ringvrf import (
    BlindingReuseError,
    Input,
    RingCommitmentMismatch,
    RingContext,
    RingSetupConfig,
    RingTooLargeError,
    Signature,
    VerificationFailure,
    hash_to_curve_tai,
    ring_sign,
    ring_verify,
    sign,
)
from ringvrf.pedersen import PedersenProof


def _keys(ring_ctx, members):
    return ring_ctx.derive_prover_key(members), ring_ctx.derive_verifier_key(members)


def test_ring_sign_verify_end_to_end(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 3)
    prover_key, verifier_key = _keys(ring_ctx, members)

    prover = ring_ctx.make_prover(prover_key, 3)
    signature = ring_sign(signer, vrf_input, b"foo", prover)

    ring_verify(vrf_input, b"foo", signature, ring_ctx.make_verifier(verifier_key))
    assert signature.output == signer.output(vrf_input)
    assert len(signature.ring_proof.responses) == ring_ctx.domain_size


def test_full_ring_and_single_member_ring(suite, ring_ctx, signer, make_ring, vrf_input):
    for size, idx in ((ring_ctx.domain_size, ring_ctx.domain_size - 1), (1, 0)):
        members = make_ring(suite, size, signer, idx)
        prover_key, verifier_key = _keys(ring_ctx, members)
        signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, idx))
        ring_verify(vrf_input, b"foo", signature, ring_ctx.make_verifier(verifier_key))


def test_prover_and_verifier_keys_agree(suite, ring_ctx, signer, make_ring):
    members = make_ring(suite, 5, signer, 0)
    prover_key, verifier_key = _keys(ring_ctx, members)
    assert prover_key.verifier_key() == verifier_key
    assert ring_ctx.derive_verifier_key(members) == verifier_key
    assert len(verifier_key.points) == ring_ctx.domain_size


def test_prover_is_reusable(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 4, signer, 1)
    prover_key, verifier_key = _keys(ring_ctx, members)
    prover = ring_ctx.make_prover(prover_key, 1)
    verifier = ring_ctx.make_verifier(verifier_key)
    for ad in (b"one", b"two"):
        ring_verify(vrf_input, ad, ring_sign(signer, vrf_input, ad, prover), verifier)


def test_ring_verify_rejects_altered_ad(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 2)
    prover_key, verifier_key = _keys(ring_ctx, members)
    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 2))
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"bar", signature, ring_ctx.make_verifier(verifier_key))


def test_ring_verify_rejects_altered_input(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 2)
    prover_key, verifier_key = _keys(ring_ctx, members)
    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 2))
    with pytest.raises(VerificationFailure):
        ring_verify(Input.new(suite, b"other input"), b"foo", signature, ring_ctx.make_verifier(verifier_key))


def test_ring_proof_from_another_ring_rejected(suite, ring_ctx, signer, make_ring, vrf_input):
    ring_a = make_ring(suite, 5, signer, 2)
    ring_b = list(ring_a)
    ring_b[0], ring_b[4] = ring_b[4], ring_b[0]

    prover_a, verifier_a = _keys(ring_ctx, ring_a)
    prover_b = ring_ctx.derive_prover_key(ring_b)

    sig_a = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_a, 2))
    sig_b = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_b, 2))
    verifier = ring_ctx.make_verifier(verifier_a)

    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", sig_b, verifier)
    mixed = Signature(vrf_signature=sig_a.vrf_signature, ring_proof=sig_b.ring_proof)
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", mixed, verifier)


def test_ring_proof_from_another_session_rejected(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 2)
    prover_key, verifier_key = _keys(ring_ctx, members)
    prover = ring_ctx.make_prover(prover_key, 2)
    first = ring_sign(signer, vrf_input, b"foo", prover)
    second = ring_sign(signer, vrf_input, b"foo", prover)

    mixed = Signature(vrf_signature=first.vrf_signature, ring_proof=second.ring_proof)
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", mixed, ring_ctx.make_verifier(verifier_key))


def test_wrong_signer_index_fails_verification(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 3)
    prover_key, verifier_key = _keys(ring_ctx, members)
    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 1))
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", signature, ring_ctx.make_verifier(verifier_key))


def test_non_member_cannot_sign(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 3)
    outsider_ring = make_ring(suite, 5, signer, 3)
    outsider_ring[3] = members[0]  # signer is not in this ring
    prover_key = ring_ctx.derive_prover_key(outsider_ring)
    verifier_key = ring_ctx.derive_verifier_key(outsider_ring)
    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 3))
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", signature, ring_ctx.make_verifier(verifier_key))


def test_identity_key_commitment_rejected(monkeypatch, suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 3)
    prover_key, verifier_key = _keys(ring_ctx, members)
    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 3))

    proof = signature.vrf_signature.proof
    degenerate = replace(
        signature,
        vrf_signature=replace(
            signature.vrf_signature,
            proof=PedersenProof(pk_blind=suite.curve.identity(), r=proof.r, ok=proof.ok, s=proof.s, sb=proof.sb),
        ),
    )
    # isolate the identity check from the blinded-VRF check
    monkeypatch.setattr("ringvrf.ring.pedersen.verify", lambda *args: None)
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"foo", degenerate, ring_ctx.make_verifier(verifier_key))


def test_ring_larger_than_domain_rejected(suite, ring_ctx, signer, make_ring):
    members = make_ring(suite, ring_ctx.domain_size + 1, signer, 0)
    with pytest.raises(RingTooLargeError):
        ring_ctx.derive_prover_key(members)
    with pytest.raises(RingTooLargeError):
        ring_ctx.derive_verifier_key(members)


def test_prover_index_outside_ring_rejected(suite, ring_ctx, signer, make_ring):
    prover_key = ring_ctx.derive_prover_key(make_ring(suite, 5, signer, 0))
    with pytest.raises(IndexError):
        ring_ctx.make_prover(prover_key, ring_ctx.domain_size)


def test_context_rejects_domain_size_mismatch(ring_ctx):
    with pytest.raises(ValueError):
        replace(ring_ctx, domain_size=ring_ctx.domain_size * 2)


def test_context_rejects_undersized_kzg_setup(suite, ring_ctx):
    n = ring_ctx.domain_size
    pcs = KZG.setup(n // 2, seed=b"undersized")
    with pytest.raises(ValueError):
        RingContext.setup(suite, pcs, n, ring_ctx.piop_params.padding_point)


def test_context_rejects_kzg_over_another_field(suite, ring_ctx):
    pcs = replace(ring_ctx.pcs, scalar_modulus=suite.curve.order)
    with pytest.raises(ValueError):
        RingContext.setup(suite, pcs, ring_ctx.domain_size, ring_ctx.piop_params.padding_point)


def test_prover_refuses_reused_blinding(suite, ring_ctx, signer, make_ring, vrf_input):
    prover_key = ring_ctx.derive_prover_key(make_ring(suite, 5, signer, 2))
    prover = ring_ctx.make_prover(prover_key, 2)
    _, blinding = sign(signer, vrf_input, b"foo")

    prover.prove(blinding)
    assert blinding.consumed
    with pytest.raises(BlindingReuseError):
        prover.prove(blinding)


def test_verifier_key_from_commitment(suite, ring_ctx, signer, make_ring, vrf_input):
    members = make_ring(suite, 5, signer, 4)
    prover_key = ring_ctx.derive_prover_key(members)
    opening = ring_ctx.ring_opening(prover_key)

    verifier_key = ring_ctx.verifier_key_from_commitment(prover_key.commitment, members, opening)
    assert verifier_key == prover_key.verifier_key()

    signature = ring_sign(signer, vrf_input, b"foo", ring_ctx.make_prover(prover_key, 4))
    ring_verify(vrf_input, b"foo", signature, ring_ctx.make_verifier(verifier_key))


def test_verifier_key_from_commitment_rejects_other_members(suite, ring_ctx, signer, make_ring):
    members = make_ring(suite, 5, signer, 4)
    prover_key = ring_ctx.derive_prover_key(members)
    opening = ring_ctx.ring_opening(prover_key)

    swapped = list(members)
    swapped[0], swapped[1] = swapped[1], swapped[0]
    with pytest.raises(RingCommitmentMismatch):
        ring_ctx.verifier_key_from_commitment(prover_key.commitment, swapped, opening)

    forged = replace(opening, x_value=(opening.x_value + 1) % suite.curve.field_modulus)
    with pytest.raises(RingCommitmentMismatch):
        ring_ctx.verifier_key_from_commitment(prover_key.commitment, members, forged)


@pytest.mark.slow
def test_ring_of_1024_signer_at_index_3():
    from instantiations.bandersnatch import make_bandersnatch_suite
    from ringvrf import Secret

    suite = make_bandersnatch_suite()
    ring_ctx = make_ring_context(RingSetupConfig(domain_size=1024, srs_seed=b"ring of 1024"))

    secret = Secret.from_seed(suite, b"test seed")
    vrf_input = Input.new(suite, b"scenario input")
    members = [hash_to_curve_tai(suite, b"synthetic key %d" % i) for i in range(1024)]
    members[3] = secret.public.point

    prover = ring_ctx.make_prover(ring_ctx.derive_prover_key(members), 3)
    signature = ring_sign(secret, vrf_input, b"foo", prover)

    verifier = ring_ctx.make_verifier(ring_ctx.derive_verifier_key(members))
    ring_verify(vrf_input, b"foo", signature, verifier)
    with pytest.raises(VerificationFailure):
        ring_verify(vrf_input, b"bar", signature, verifier)
