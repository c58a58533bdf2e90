# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import asyncio
import json

import pytest

from umbra_core.cipher import PayloadCipher
from umbra_core.constants import DEFAULT_SIGNING_MESSAGE, MXE_X25519_PUBLIC_KEY
from umbra_core.derivation import DerivedSecrets
from umbra_core.errors import (
    InvalidPurposeCodeError,
    LengthMismatchError,
    SignerError,
    WalletInitializationError,
)
from umbra_core.keypair import X25519Keypair
from umbra_core.linker import generate_claim_deposit_linker_hash
from umbra_core.wallet import LocalKeypairSigner, Signer, Wallet

# RFC 8032 section 7.1, test 1
RFC_SECRET = bytes.fromhex("9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60")
RFC_PUBLIC = bytes.fromhex("d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a")
RFC_SIGNATURE = bytes.fromhex(
    "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
)


class FixedSigner(Signer):
    def __init__(self, signature: bytes):
        self.signature = signature
        self.messages = []

    async def sign_message(self, message: bytes) -> bytes:
        self.messages.append(message)
        return self.signature

    async def get_public_key(self) -> bytes:
        return bytes(32)


class FailingSigner(Signer):
    def __init__(self, error: Exception):
        self.error = error

    async def sign_message(self, message: bytes) -> bytes:
        raise self.error

    async def get_public_key(self) -> bytes:
        return bytes(32)


class UserRejected(SignerError):
    pass


SEED = bytes(range(64))


def make_wallet() -> Wallet:
    return asyncio.run(Wallet.from_signer(FixedSigner(SEED)))


class TestLocalKeypairSigner:
    def test_rfc8032_vector(self):
        signer = LocalKeypairSigner(RFC_SECRET)
        assert asyncio.run(signer.get_public_key()) == RFC_PUBLIC
        assert asyncio.run(signer.sign_message(b"")) == RFC_SIGNATURE

    def test_solana_secret_key(self):
        signer = LocalKeypairSigner(RFC_SECRET + RFC_PUBLIC)
        assert asyncio.run(signer.sign_message(b"")) == RFC_SIGNATURE

    def test_mismatched_public_half(self):
        with pytest.raises(ValueError):
            LocalKeypairSigner(RFC_SECRET + bytes(32))

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            LocalKeypairSigner(bytes(48))

    def test_from_file(self, tmp_path):
        path = tmp_path / "id.json"
        path.write_text(json.dumps(list(RFC_SECRET + RFC_PUBLIC)))
        signer = LocalKeypairSigner.from_file(path)
        assert asyncio.run(signer.get_public_key()) == RFC_PUBLIC


class TestFromSigner:
    def test_signs_the_default_message(self):
        signer = FixedSigner(SEED)
        asyncio.run(Wallet.from_signer(signer))
        assert signer.messages == [DEFAULT_SIGNING_MESSAGE]

    def test_secrets_come_from_the_signature(self):
        wallet = make_wallet()
        assert wallet.secrets == DerivedSecrets.from_signature_seed(SEED)
        assert wallet.master_viewing_key == wallet.secrets.master_viewing_key

    def test_signer_error_is_not_wrapped(self):
        error = UserRejected("user rejected the request")
        with pytest.raises(UserRejected) as info:
            asyncio.run(Wallet.from_signer(FailingSigner(error)))
        assert info.value is error

    def test_other_errors_are_wrapped(self):
        error = RuntimeError("wallet adapter crashed")
        with pytest.raises(WalletInitializationError) as info:
            asyncio.run(Wallet.from_signer(FailingSigner(error)))
        assert info.value.cause is error
        assert info.value.__cause__ is error
        assert "Failed to initialize wallet" in str(info.value)

    def test_short_signature_is_wrapped(self):
        with pytest.raises(WalletInitializationError) as info:
            asyncio.run(Wallet.from_signer(FixedSigner(bytes(63))))
        assert isinstance(info.value.cause, LengthMismatchError)

    def test_local_signer_end_to_end(self):
        wallet = asyncio.run(Wallet.from_signer(LocalKeypairSigner(RFC_SECRET)))
        signature = asyncio.run(LocalKeypairSigner(RFC_SECRET).sign_message(DEFAULT_SIGNING_MESSAGE))
        assert wallet.secrets == DerivedSecrets.from_signature_seed(signature)


class TestCiphers:
    def test_mxe_cipher_is_prepopulated(self):
        wallet = make_wallet()
        assert wallet.mxe_cipher is wallet.cipher_for(MXE_X25519_PUBLIC_KEY)

    def test_cipher_is_cached(self):
        wallet = make_wallet()
        other = X25519Keypair.generate()
        assert wallet.cipher_for(other.public_key) is wallet.cipher_for(other.public_key)

    def test_counterparty_can_decrypt(self):
        wallet = make_wallet()
        other = X25519Keypair.generate()
        ciphertexts, nonce = wallet.cipher_for(other.public_key).encrypt([1, 2, 3])
        theirs = PayloadCipher.from_key_exchange(other.private_key, wallet.x25519_public_key)
        assert theirs.decrypt(ciphertexts, nonce) == [1, 2, 3]


class TestDerivedValues:
    def test_random_secret_and_nullifier(self):
        wallet = make_wallet()
        assert wallet.generate_random_secret(3) == wallet.secrets.random_secret(3)
        assert wallet.generate_nullifier(3) == wallet.secrets.nullifier(3)

    def test_linker_hash_uses_master_viewing_key(self):
        wallet = make_wallet()
        purpose = "claim_spl_deposit_with_public_amount"
        assert wallet.generate_claim_deposit_linker_hash(purpose, 1705314600, 9) == (
            generate_claim_deposit_linker_hash(wallet.master_viewing_key, purpose, 1705314600, 9)
        )

    def test_create_linker_hash(self):
        wallet = make_wallet()
        digest = wallet.generate_create_deposit_linker_hash(
            "create_spl_deposit_with_hidden_amount", 1705314600, bytes(range(32))
        )
        assert len(digest) == 32

    def test_invalid_purpose(self):
        with pytest.raises(InvalidPurposeCodeError):
            Wallet.get_purpose_code("transfer")

    def test_sign_message_delegates(self):
        signer = FixedSigner(SEED)
        wallet = asyncio.run(Wallet.from_signer(signer))
        assert asyncio.run(wallet.sign_message(b"hello")) == SEED
        assert signer.messages[-1] == b"hello"


if __name__ == "__main__":
    pytest.main()
