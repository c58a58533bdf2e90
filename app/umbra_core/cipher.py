# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

import logging
from dataclasses import dataclass
from os import urandom
from typing import Sequence

import cbor2
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from umbra_core.constants import (
    CIPHER_FIELD_MODULUS,
    CIPHER_KEY_DOMAIN_TAG,
    CIPHER_SALT_DOMAIN_TAG,
    CIPHERTEXT_BLOCK_LENGTH,
    KEYSTREAM_BYTES_PER_ELEMENT,
    NONCE_LENGTH,
)
from umbra_core.convertors import le_bytes_to_u128, u128_to_le_bytes
from umbra_core.errors import CipherInputError, LengthMismatchError
from umbra_core.keypair import x25519_shared_secret
from umbra_core.primitives import Ciphertext, Nonce, SharedSecret

logger = logging.getLogger(__name__)


def _derive_key(shared_secret: bytes) -> bytes:
    hkdf = HKDF(
        algorithm=hashes.SHA3_256(),
        length=32,
        salt=CIPHER_SALT_DOMAIN_TAG,
        info=CIPHER_KEY_DOMAIN_TAG,
    )
    return hkdf.derive(shared_secret)


class PayloadCipher:
    """
    Additive stream cipher over the field of order 2**255 - 19.

    Each element is offset by a keystream element: 64 bytes of AES-256-CTR
    output (counter block = the little-endian nonce), read little-endian and
    reduced modulo the field order. The AES key is HKDF-SHA3-256 of the
    shared secret. The cipher carries no authentication; decrypting with the
    wrong nonce yields unrelated field elements rather than an error.
    """

    def __init__(self, shared_secret: bytes):
        if len(shared_secret) != 32:
            raise LengthMismatchError(f"shared secret must be 32 bytes, got {len(shared_secret)}")
        self.shared_secret = SharedSecret(bytes(shared_secret))
        self._key = _derive_key(self.shared_secret)

    @classmethod
    def from_shared_secret(cls, shared_secret: bytes) -> "PayloadCipher":
        return cls(shared_secret)

    @classmethod
    def from_key_exchange(cls, my_private_key: bytes, their_public_key: bytes) -> "PayloadCipher":
        """
        X25519 with the counterparty, then `from_shared_secret`.

        Raises:
            KeyExchangeError: If the exchange fails or is degenerate.
        """
        cipher = cls(x25519_shared_secret(my_private_key, their_public_key))
        logger.debug("created payload cipher for %s", bytes(their_public_key).hex())
        return cipher

    @staticmethod
    def generate_random_nonce() -> Nonce:
        return Nonce(le_bytes_to_u128(urandom(NONCE_LENGTH)))

    def _keystream(self, nonce: int, count: int) -> list[int]:
        if isinstance(nonce, bool) or not isinstance(nonce, int) or not 0 <= nonce < 2**128:
            raise CipherInputError(f"nonce must be an unsigned 128-bit int, got {nonce!r}")
        encryptor = Cipher(algorithms.AES(self._key), modes.CTR(u128_to_le_bytes(nonce))).encryptor()
        stream = encryptor.update(bytes(KEYSTREAM_BYTES_PER_ELEMENT * count)) + encryptor.finalize()
        return [
            int.from_bytes(stream[i : i + KEYSTREAM_BYTES_PER_ELEMENT], "little") % CIPHER_FIELD_MODULUS
            for i in range(0, len(stream), KEYSTREAM_BYTES_PER_ELEMENT)
        ]

    def encrypt_with_nonce(self, plaintexts: Sequence[int], nonce: int) -> list[Ciphertext]:
        """
        Encrypt under an explicit nonce. A nonce must never be reused with the
        same shared secret; prefer `encrypt`.

        Raises:
            CipherInputError: If a plaintext is outside [0, 2**255 - 19).
        """
        for position, value in enumerate(plaintexts):
            if isinstance(value, bool) or not isinstance(value, int):
                raise CipherInputError(f"plaintext {position} must be an int, got {type(value).__name__}")
            if not 0 <= value < CIPHER_FIELD_MODULUS:
                raise CipherInputError(f"plaintext {position} is outside the cipher field")
        keystream = self._keystream(nonce, len(plaintexts))
        return [
            Ciphertext(((m + k) % CIPHER_FIELD_MODULUS).to_bytes(CIPHERTEXT_BLOCK_LENGTH, "little"))
            for m, k in zip(plaintexts, keystream)
        ]

    def encrypt(self, plaintexts: Sequence[int]) -> tuple[list[Ciphertext], Nonce]:
        """
        Encrypt field elements under a fresh random nonce.

        Args:
            plaintexts: Integers in [0, 2**255 - 19).

        Returns:
            The 32-byte little-endian ciphertext blocks and the nonce used.
        """
        nonce = self.generate_random_nonce()
        return self.encrypt_with_nonce(plaintexts, nonce), nonce

    def decrypt(self, ciphertexts: Sequence[bytes], nonce: int) -> list[int]:
        """
        Invert `encrypt` for the nonce it returned.

        Raises:
            CipherInputError: If a block is not 32 bytes or not a canonical field element.
        """
        values = []
        for position, block in enumerate(ciphertexts):
            if not isinstance(block, (bytes, bytearray)) or len(block) != CIPHERTEXT_BLOCK_LENGTH:
                raise CipherInputError(
                    f"ciphertext {position} must be {CIPHERTEXT_BLOCK_LENGTH} bytes"
                )
            value = int.from_bytes(block, "little")
            if value >= CIPHER_FIELD_MODULUS:
                raise CipherInputError(f"ciphertext {position} is outside the cipher field")
            values.append(value)
        keystream = self._keystream(nonce, len(values))
        return [(c - k) % CIPHER_FIELD_MODULUS for c, k in zip(values, keystream)]


@dataclass(frozen=True)
class CipherBundle:
    ciphertexts: list[bytes]
    nonce: int

    def to_cbor(self) -> bytes:
        """
        Canonical CBOR map `{0: nonce (16 bytes LE), 1: [block, ...]}`.
        """
        return cbor2.dumps(
            {0: u128_to_le_bytes(self.nonce), 1: [bytes(c) for c in self.ciphertexts]},
            canonical=True,
        )

    @classmethod
    def from_cbor(cls, data: bytes) -> "CipherBundle":
        try:
            m = cbor2.loads(data)
        except cbor2.CBORDecodeError as e:
            raise CipherInputError.from_cause(f"invalid CBOR: {e}", e) from e
        if not isinstance(m, dict):
            raise CipherInputError(f"Expected CBOR map, got {type(m).__name__}")
        if 0 not in m or 1 not in m:
            raise CipherInputError("Missing required field 0 (nonce) or 1 (ciphertexts)")
        nonce, blocks = m[0], m[1]
        if not isinstance(nonce, bytes) or len(nonce) != NONCE_LENGTH:
            raise CipherInputError(f"nonce must be {NONCE_LENGTH} bytes")
        if not isinstance(blocks, list) or any(
            not isinstance(b, bytes) or len(b) != CIPHERTEXT_BLOCK_LENGTH for b in blocks
        ):
            raise CipherInputError(f"ciphertexts must be a list of {CIPHERTEXT_BLOCK_LENGTH}-byte strings")
        return cls(ciphertexts=blocks, nonce=le_bytes_to_u128(nonce))
