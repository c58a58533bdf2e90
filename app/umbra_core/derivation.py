# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
"""
Secrets derived from a wallet's signature seed.

Every secret is a KMAC (NIST SP 800-185, empty customisation string) of the
64-byte signature seed under its own domain tag, so no two secrets are related
and changing one tag changes only its own output.
"""
import logging
from dataclasses import dataclass, field

from Crypto.Hash import KMAC128, KMAC256

from umbra_core.constants import (
    MVK_DOMAIN_TAG,
    MVK_POSEIDON_BLINDING_DOMAIN_TAG,
    MVK_SHA3_BLINDING_DOMAIN_TAG,
    NULLIFIER_DOMAIN_TAG,
    RANDOM_SECRET_DOMAIN_TAG,
    SIGNATURE_SEED_LENGTH,
    X25519_DOMAIN_TAG,
)
from umbra_core.convertors import be_bytes_to_u128, u256_to_le_bytes, u128_to_le_bytes
from umbra_core.errors import LengthMismatchError
from umbra_core.keypair import x25519_public_key
from umbra_core.primitives import (
    U128,
    BlindingFactor,
    MasterViewingKey,
    Nullifier,
    X25519PrivateKey,
    X25519PublicKey,
)

logger = logging.getLogger(__name__)


def kmac128(key: bytes, message: bytes, length: int = 16) -> bytes:
    return KMAC128.new(key=key, data=message, mac_len=length).digest()


def kmac256(key: bytes, message: bytes, length: int = 32) -> bytes:
    return KMAC256.new(key=key, data=message, mac_len=length).digest()


def _check_seed(seed: bytes) -> bytes:
    if not isinstance(seed, (bytes, bytearray)):
        raise TypeError(f"signature seed must be bytes, got {type(seed).__name__}")
    if len(seed) != SIGNATURE_SEED_LENGTH:
        raise LengthMismatchError(
            f"signature seed must be {SIGNATURE_SEED_LENGTH} bytes, got {len(seed)}"
        )
    return bytes(seed)


def derive_x25519_private_key(seed: bytes, domain_tag: bytes = X25519_DOMAIN_TAG) -> X25519PrivateKey:
    return X25519PrivateKey(kmac256(_check_seed(seed), domain_tag))


def derive_master_viewing_key(seed: bytes, domain_tag: bytes = MVK_DOMAIN_TAG) -> MasterViewingKey:
    return MasterViewingKey(be_bytes_to_u128(kmac128(_check_seed(seed), domain_tag)))


def derive_poseidon_blinding_factor(
    seed: bytes, domain_tag: bytes = MVK_POSEIDON_BLINDING_DOMAIN_TAG
) -> BlindingFactor:
    return BlindingFactor(be_bytes_to_u128(kmac128(_check_seed(seed), domain_tag)))


def derive_sha3_blinding_factor(
    seed: bytes, domain_tag: bytes = MVK_SHA3_BLINDING_DOMAIN_TAG
) -> BlindingFactor:
    return BlindingFactor(be_bytes_to_u128(kmac128(_check_seed(seed), domain_tag)))


def derive_random_secret_master_seed(
    seed: bytes, domain_tag: bytes = RANDOM_SECRET_DOMAIN_TAG
) -> bytes:
    # the tag is the key here, the seed is the message
    return kmac256(domain_tag, _check_seed(seed))


def generate_random_secret(master_seed: bytes, index: int) -> U128:
    """
    Deterministic per-index secret from the random-secret master seed.

    Args:
        master_seed: 32-byte output of `derive_random_secret_master_seed`.
        index: Unsigned 256-bit index.

    Returns:
        A 128-bit secret.
    """
    return be_bytes_to_u128(kmac128(u256_to_le_bytes(index), master_seed))


def generate_nullifier(
    master_viewing_key: int, index: int, domain_tag: bytes = NULLIFIER_DOMAIN_TAG
) -> Nullifier:
    """
    Nullifier for the deposit at `index`, bound to a master viewing key.

    Args:
        master_viewing_key: The 128-bit master viewing key.
        index: Unsigned 256-bit index.
        domain_tag: Nullifier domain tag.

    Returns:
        A 128-bit nullifier.
    """
    nullifier_seed = kmac128(domain_tag, u128_to_le_bytes(master_viewing_key))
    return Nullifier(be_bytes_to_u128(kmac128(u256_to_le_bytes(index), nullifier_seed)))


@dataclass(frozen=True)
class DomainTags:
    x25519: bytes = X25519_DOMAIN_TAG
    master_viewing_key: bytes = MVK_DOMAIN_TAG
    poseidon_blinding_factor: bytes = MVK_POSEIDON_BLINDING_DOMAIN_TAG
    sha3_blinding_factor: bytes = MVK_SHA3_BLINDING_DOMAIN_TAG
    random_secret: bytes = RANDOM_SECRET_DOMAIN_TAG


@dataclass(frozen=True)
class DerivedSecrets:
    """
    Everything derived from one signature seed.

    Build it with `DerivedSecrets.from_signature_seed`; two calls with the same
    seed and tags produce equal objects.
    """

    x25519_private_key: X25519PrivateKey = field(repr=False)
    x25519_public_key: X25519PublicKey
    master_viewing_key: MasterViewingKey = field(repr=False)
    poseidon_blinding_factor: BlindingFactor = field(repr=False)
    sha3_blinding_factor: BlindingFactor = field(repr=False)
    random_secret_master_seed: bytes = field(repr=False)

    @classmethod
    def from_signature_seed(cls, seed: bytes, tags: DomainTags = DomainTags()) -> "DerivedSecrets":
        """
        Derive every secret from a 64-byte signature seed.

        Args:
            seed: The signature over `DEFAULT_SIGNING_MESSAGE`.
            tags: Domain tags, one per secret.

        Raises:
            TypeError: If `seed` is not bytes.
            LengthMismatchError: If `seed` is not 64 bytes.
        """
        seed = _check_seed(seed)
        private_key = derive_x25519_private_key(seed, tags.x25519)
        secrets = cls(
            x25519_private_key=private_key,
            x25519_public_key=x25519_public_key(private_key),
            master_viewing_key=derive_master_viewing_key(seed, tags.master_viewing_key),
            poseidon_blinding_factor=derive_poseidon_blinding_factor(
                seed, tags.poseidon_blinding_factor
            ),
            sha3_blinding_factor=derive_sha3_blinding_factor(seed, tags.sha3_blinding_factor),
            random_secret_master_seed=derive_random_secret_master_seed(seed, tags.random_secret),
        )
        logger.debug("derived secrets for x25519 public key %s", secrets.x25519_public_key.hex())
        return secrets

    def random_secret(self, index: int) -> U128:
        return generate_random_secret(self.random_secret_master_seed, index)

    def nullifier(self, index: int) -> Nullifier:
        return generate_nullifier(self.master_viewing_key, index)
