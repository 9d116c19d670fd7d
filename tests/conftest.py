from __future__ import annotations

import pytest

from instantiations.bandersnatch import make_bandersnatch_suite, make_ring_context
from ringvrf import Input, RingSetupConfig, Secret

SMALL_DOMAIN = 8


@pytest.fixture(scope="session")
def suite():
    return make_bandersnatch_suite()


@pytest.fixture(scope="session")
def ring_ctx():
    return make_ring_context(RingSetupConfig(domain_size=SMALL_DOMAIN, srs_seed=b"tests"))


@pytest.fixture(scope="session")
def signer(suite):
    return Secret.from_seed(suite, b"test seed")


@pytest.fixture
def vrf_input(suite):
    pt = Input.new(suite, b"vrf input")
    assert pt is not None
    return pt


@pytest.fixture(scope="session")
def make_ring():
    def _make_ring(suite, size: int, signer: Secret, signer_index: int) -> list:
        """`size` synthetic members with the signer's public key at `signer_index`."""
        members = [Secret.from_seed(suite, b"member-%d" % i).public for i in range(size)]
        members[signer_index] = signer.public
        return members

    return _make_ring
