# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import cbor2
import pytest

from umbra_core.cipher import CipherBundle, PayloadCipher
from umbra_core.constants import CIPHER_FIELD_MODULUS, FIELD_MODULUS
from umbra_core.errors import CipherInputError, KeyExchangeError, LengthMismatchError
from umbra_core.keypair import X25519Keypair

SHARED = bytes(range(32))


class TestEncryptDecrypt:
    def test_roundtrip(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        values = [0, 1, 2**64, FIELD_MODULUS - 1, CIPHER_FIELD_MODULUS - 1]
        ciphertexts, nonce = cipher.encrypt(values)
        assert len(ciphertexts) == len(values)
        assert all(len(c) == 32 for c in ciphertexts)
        assert cipher.decrypt(ciphertexts, nonce) == values

    def test_empty(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        ciphertexts, nonce = cipher.encrypt([])
        assert ciphertexts == []
        assert cipher.decrypt([], nonce) == []

    def test_fresh_nonce_per_call(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        first, nonce_a = cipher.encrypt([42])
        second, nonce_b = cipher.encrypt([42])
        assert nonce_a != nonce_b
        assert first != second

    def test_fixed_nonce_is_deterministic(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        assert cipher.encrypt_with_nonce([1, 2], 99) == cipher.encrypt_with_nonce([1, 2], 99)

    def test_wrong_nonce_is_garbage_not_an_error(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        ciphertexts = cipher.encrypt_with_nonce([1, 2, 3], 5)
        assert cipher.decrypt(ciphertexts, 6) != [1, 2, 3]

    def test_wrong_secret(self):
        ciphertexts, nonce = PayloadCipher.from_shared_secret(SHARED).encrypt([7])
        other = PayloadCipher.from_shared_secret(bytes(32))
        assert other.decrypt(ciphertexts, nonce) != [7]

    def test_equal_plaintexts_encrypt_differently(self):
        ciphertexts = PayloadCipher.from_shared_secret(SHARED).encrypt_with_nonce([5, 5], 1)
        assert ciphertexts[0] != ciphertexts[1]


def test_key_exchange_symmetry():
    alice = X25519Keypair.generate()
    bob = X25519Keypair.generate()
    alice_cipher = PayloadCipher.from_key_exchange(alice.private_key, bob.public_key)
    bob_cipher = PayloadCipher.from_key_exchange(bob.private_key, alice.public_key)
    assert alice_cipher.shared_secret == bob_cipher.shared_secret

    ciphertexts, nonce = alice_cipher.encrypt([10, 20, 30])
    assert bob_cipher.decrypt(ciphertexts, nonce) == [10, 20, 30]


def test_degenerate_key_exchange():
    alice = X25519Keypair.generate()
    with pytest.raises(KeyExchangeError):
        PayloadCipher.from_key_exchange(alice.private_key, bytes(32))


def test_random_nonce_width():
    for _ in range(16):
        assert 0 <= PayloadCipher.generate_random_nonce() < 2**128


def test_shared_secret_length():
    with pytest.raises(LengthMismatchError):
        PayloadCipher.from_shared_secret(bytes(31))


class TestInputErrors:
    def test_plaintext_outside_the_field(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        with pytest.raises(CipherInputError):
            cipher.encrypt([CIPHER_FIELD_MODULUS])
        with pytest.raises(CipherInputError):
            cipher.encrypt([-1])

    def test_short_block(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        with pytest.raises(CipherInputError):
            cipher.decrypt([bytes(31)], 0)

    def test_non_canonical_block(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        with pytest.raises(CipherInputError):
            cipher.decrypt([b"\xff" * 32], 0)

    def test_bad_nonce(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        with pytest.raises(CipherInputError):
            cipher.encrypt_with_nonce([1], 2**128)

    def test_input_errors_are_value_errors(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        with pytest.raises(ValueError):
            cipher.encrypt([CIPHER_FIELD_MODULUS])


class TestCipherBundle:
    def test_cbor_layout(self):
        bundle = CipherBundle(ciphertexts=[bytes(32), b"\x01" * 32], nonce=1)
        m = cbor2.loads(bundle.to_cbor())
        assert m == {0: b"\x01" + bytes(15), 1: [bytes(32), b"\x01" * 32]}

    def test_cbor_is_deterministic(self):
        bundle = CipherBundle(ciphertexts=[bytes(32)], nonce=12345)
        assert bundle.to_cbor() == CipherBundle(ciphertexts=[bytes(32)], nonce=12345).to_cbor()

    def test_parse(self):
        cipher = PayloadCipher.from_shared_secret(SHARED)
        ciphertexts, nonce = cipher.encrypt([3, 4])
        parsed = CipherBundle.from_cbor(CipherBundle(ciphertexts, nonce).to_cbor())
        assert parsed.nonce == nonce
        assert cipher.decrypt(parsed.ciphertexts, parsed.nonce) == [3, 4]

    def test_rejects_non_map(self):
        with pytest.raises(CipherInputError):
            CipherBundle.from_cbor(cbor2.dumps([1, 2]))

    def test_rejects_missing_fields(self):
        with pytest.raises(CipherInputError):
            CipherBundle.from_cbor(cbor2.dumps({0: bytes(16)}))

    def test_rejects_bad_block(self):
        with pytest.raises(CipherInputError):
            CipherBundle.from_cbor(cbor2.dumps({0: bytes(16), 1: [bytes(5)]}))

    def test_rejects_truncated_cbor(self):
        data = CipherBundle(ciphertexts=[bytes(32)], nonce=7).to_cbor()
        with pytest.raises(CipherInputError):
            CipherBundle.from_cbor(data[:-4])


if __name__ == "__main__":
    pytest.main()
