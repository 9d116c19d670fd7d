from __future__ import annotations

from dataclasses import replace

import pytest

from ringvrf import BlindingReuseError, Input, Secret, VerificationFailure, sign, verify


def test_pedersen_sign_verify_end_to_end(signer, vrf_input):
    signature, _blinding = sign(signer, vrf_input, b"foo")
    verify(vrf_input, b"foo", signature)
    assert signature.output == signer.output(vrf_input)


def test_key_commitment_blinds_public_key(suite, signer, vrf_input):
    signature, blinding = sign(signer, vrf_input, b"foo")
    b = blinding.consume()
    curve = suite.curve
    expected = curve.add(signer.public.point, curve.mul(b, suite.pedersen_base()))
    assert signature.key_commitment() == expected
    assert signature.key_commitment() != signer.public.point


def test_fresh_blinding_per_signature(signer, vrf_input):
    first, _ = sign(signer, vrf_input, b"foo")
    second, _ = sign(signer, vrf_input, b"foo")
    assert first.output == second.output
    assert first.key_commitment() != second.key_commitment()


def test_pedersen_rejects_altered_ad_and_input(suite, signer, vrf_input):
    signature, _ = sign(signer, vrf_input, b"foo")
    with pytest.raises(VerificationFailure):
        verify(vrf_input, b"bar", signature)
    with pytest.raises(VerificationFailure):
        verify(Input.new(suite, b"another input"), b"foo", signature)


def test_pedersen_rejects_tampered_proof(signer, vrf_input):
    signature, _ = sign(signer, vrf_input, b"foo")
    tampered = replace(signature, proof=replace(signature.proof, s=(signature.proof.s + 1)))
    with pytest.raises(VerificationFailure):
        verify(vrf_input, b"foo", tampered)


def test_pedersen_rejects_output_of_another_key(suite, signer, vrf_input):
    signature, _ = sign(signer, vrf_input, b"foo")
    other = Secret.from_seed(suite, b"someone else")
    forged = replace(signature, output=other.output(vrf_input))
    with pytest.raises(VerificationFailure):
        verify(vrf_input, b"foo", forged)


def test_blinding_secret_is_consumed_once(signer, vrf_input):
    _, blinding = sign(signer, vrf_input, b"foo")
    assert not blinding.consumed
    blinding.consume()
    assert blinding.consumed
    with pytest.raises(BlindingReuseError):
        blinding.consume()


def test_output_hash_is_deterministic_per_key_and_input(suite, signer, vrf_input):
    first, _ = sign(signer, vrf_input, b"foo")
    second, _ = sign(signer, vrf_input, b"bar")
    assert first.output.hash() == second.output.hash()
    assert len(first.output.hash()) == 64
    other = Secret.from_seed(suite, b"someone else")
    assert other.output(vrf_input).hash() != first.output.hash()


def test_secret_repr_hides_scalar(signer):
    assert str(signer.scalar) not in repr(signer)


def test_secret_rejects_zero(suite):
    with pytest.raises(ValueError):
        Secret(suite=suite, scalar=0)
