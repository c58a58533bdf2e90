# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
"""
Wallet facade: one signature from an external signer, every secret derived
from it, and a payload cipher per counterparty.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from umbra_core.cipher import PayloadCipher
from umbra_core.constants import DEFAULT_SIGNING_MESSAGE, MXE_X25519_PUBLIC_KEY
from umbra_core.derivation import DerivedSecrets, DomainTags
from umbra_core.errors import SignerError, WalletInitializationError
from umbra_core.files import load_keypair
from umbra_core.linker import (
    generate_claim_deposit_linker_hash,
    generate_create_deposit_linker_hash,
    generate_individual_transaction_viewing_key,
    get_purpose_code,
)
from umbra_core.primitives import U128, MasterViewingKey, Nullifier, PoseidonHash, X25519PublicKey

logger = logging.getLogger(__name__)


class Signer(ABC):
    """Message-signing capability of a user's account key."""

    @abstractmethod
    async def sign_message(self, message: bytes) -> bytes:
        """
        Sign `message` and return the 64-byte Ed25519 signature.

        Raises:
            SignerError: If the signer refuses or fails.
        """

    @abstractmethod
    async def get_public_key(self) -> bytes:
        """Return the 32-byte public key of the signing account."""


class LocalKeypairSigner(Signer):
    """
    Signer backed by an in-memory Ed25519 key.

    Args:
        secret_key: Either a 32-byte seed or a 64-byte Solana secret key
            (seed followed by public key).
    """

    def __init__(self, secret_key: bytes):
        secret_key = bytes(secret_key)
        if len(secret_key) not in (32, 64):
            raise ValueError(f"secret key must be 32 or 64 bytes, got {len(secret_key)}")
        self._key = Ed25519PrivateKey.from_private_bytes(secret_key[:32])
        self._public_key = self._key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        if len(secret_key) == 64 and secret_key[32:] != self._public_key:
            raise ValueError("public key half of the secret key does not match its seed")

    @classmethod
    def from_file(cls, path: str | Path) -> "LocalKeypairSigner":
        return cls(load_keypair(path))

    async def sign_message(self, message: bytes) -> bytes:
        try:
            return self._key.sign(bytes(message))
        except (TypeError, ValueError) as error:
            raise SignerError(f"local keypair failed to sign: {error}", error) from error

    async def get_public_key(self) -> bytes:
        return self._public_key


class Wallet:
    """
    Derived secrets of one user plus their payload ciphers.

    Build it with `await Wallet.from_signer(signer)`.
    """

    def __init__(
        self,
        signer: Signer,
        secrets: DerivedSecrets,
        mxe_public_key: bytes = MXE_X25519_PUBLIC_KEY,
    ):
        self.signer = signer
        self.secrets = secrets
        self.mxe_public_key = bytes(mxe_public_key)
        self._ciphers: dict[bytes, PayloadCipher] = {}
        self.cipher_for(self.mxe_public_key)

    @classmethod
    async def from_signer(
        cls,
        signer: Signer,
        message: bytes = DEFAULT_SIGNING_MESSAGE,
        tags: DomainTags = DomainTags(),
        mxe_public_key: bytes = MXE_X25519_PUBLIC_KEY,
    ) -> "Wallet":
        """
        Ask `signer` for the seed signature and derive every secret from it.

        Raises:
            SignerError: Unchanged, when the signer fails.
            WalletInitializationError: For any other failure, with the
                original exception as its cause.
        """
        try:
            seed = await signer.sign_message(message)
            wallet = cls(signer, DerivedSecrets.from_signature_seed(seed, tags), mxe_public_key)
        except SignerError:
            raise
        except Exception as error:
            raise WalletInitializationError(str(error), error) from error
        logger.debug("initialized wallet %s", wallet.x25519_public_key.hex())
        return wallet

    @property
    def x25519_public_key(self) -> X25519PublicKey:
        return self.secrets.x25519_public_key

    @property
    def master_viewing_key(self) -> MasterViewingKey:
        return self.secrets.master_viewing_key

    @property
    def mxe_cipher(self) -> PayloadCipher:
        return self._ciphers[self.mxe_public_key]

    def cipher_for(self, public_key: bytes) -> PayloadCipher:
        """Payload cipher shared with the holder of `public_key`, built once and cached."""
        public_key = bytes(public_key)
        cipher = self._ciphers.get(public_key)
        if cipher is None:
            cipher = PayloadCipher.from_key_exchange(self.secrets.x25519_private_key, public_key)
            self._ciphers[public_key] = cipher
        return cipher

    def generate_random_secret(self, index: int) -> U128:
        return self.secrets.random_secret(index)

    def generate_nullifier(self, index: int) -> Nullifier:
        return self.secrets.nullifier(index)

    @staticmethod
    def get_purpose_code(purpose: str) -> U128:
        return get_purpose_code(purpose)

    def generate_individual_transaction_viewing_key(
        self, purpose: str, year: int, month: int, day: int, hour: int, minute: int, second: int
    ) -> PoseidonHash:
        return generate_individual_transaction_viewing_key(
            self.master_viewing_key, purpose, year, month, day, hour, minute, second
        )

    def generate_create_deposit_linker_hash(self, purpose: str, time: int, address: bytes) -> PoseidonHash:
        return generate_create_deposit_linker_hash(self.master_viewing_key, purpose, time, address)

    def generate_claim_deposit_linker_hash(
        self, purpose: str, time: int, insertion_index: int
    ) -> PoseidonHash:
        return generate_claim_deposit_linker_hash(
            self.master_viewing_key, purpose, time, insertion_index
        )

    async def sign_message(self, message: bytes) -> bytes:
        return await self.signer.sign_message(message)
