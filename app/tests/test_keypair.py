# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import pytest

from umbra_core.errors import KeyExchangeError, LengthMismatchError
from umbra_core.keypair import X25519Keypair, x25519_public_key, x25519_shared_secret

# RFC 7748 section 6.1
ALICE_PRIVATE = bytes.fromhex("77076d0a7318a57d3c16c17251b26645df4c2f87ebc0992ab177fba51db92c2a")
ALICE_PUBLIC = bytes.fromhex("8520f0098930a754748b7ddcb43ef75a0dbf3a0d26381af4eba4a98eaa9b4e6a")
BOB_PRIVATE = bytes.fromhex("5dab087e624a8a4b79e17f8b83800ee66f3bb1292618b6fd1c2f8b27ff88e0eb")
BOB_PUBLIC = bytes.fromhex("de9edb7d7b7dc1b4d35b61c2ece435373f8343c85b78674dadfc7e146f882b4f")
SHARED = bytes.fromhex("4a5d9d5ba4ce2de1728e3bf480350f25e07e21c947d19e3376f09b3c1e161742")


def test_public_keys():
    assert x25519_public_key(ALICE_PRIVATE) == ALICE_PUBLIC
    assert x25519_public_key(BOB_PRIVATE) == BOB_PUBLIC


def test_shared_secret():
    alice = X25519Keypair(private_key=ALICE_PRIVATE)
    bob = X25519Keypair(private_key=BOB_PRIVATE)
    assert alice.shared_secret(bob.public_key) == SHARED
    assert bob.shared_secret(alice.public_key) == SHARED


def test_alice_is_not_bob():
    alice = X25519Keypair.generate()
    bob = X25519Keypair.generate()
    assert alice != bob
    assert alice.shared_secret(bob.public_key) == bob.shared_secret(alice.public_key)


def test_public_only():
    bob = X25519Keypair.from_public(BOB_PUBLIC)
    assert bob.private_key is None
    with pytest.raises(KeyExchangeError):
        bob.shared_secret(ALICE_PUBLIC)


def test_public_only_requires_a_key():
    with pytest.raises(ValueError):
        X25519Keypair()
    with pytest.raises(LengthMismatchError):
        X25519Keypair.from_public(bytes(31))


def test_private_key_length():
    with pytest.raises(LengthMismatchError):
        x25519_public_key(bytes(16))


def test_low_order_point_is_rejected():
    # the all-zero u-coordinate yields the all-zero shared secret
    with pytest.raises(KeyExchangeError):
        x25519_shared_secret(ALICE_PRIVATE, bytes(32))


def test_private_key_is_not_in_repr():
    alice = X25519Keypair(private_key=ALICE_PRIVATE)
    assert ALICE_PRIVATE.hex() not in repr(alice)


if __name__ == "__main__":
    pytest.main()
