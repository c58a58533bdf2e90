# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

import hashlib

from umbra_core.constants import SHA3_BIT_GROUP_SIZES, SHA3_DIGEST_BITS
from umbra_core.errors import InternalConsistencyError, LengthMismatchError
from umbra_core.poseidon import DEFAULT_REGISTRY, PoseidonRegistry, poseidon_hash, poseidon_hash_int
from umbra_core.primitives import PoseidonHash, Sha3Hash


def sha3_hash(data: bytes) -> Sha3Hash:
    """
    Calculates the SHA3-256 digest of `data` in little-endian storage order.

    The digest bytes are reversed so the result can be fed straight into
    `aggregate_sha3_hash`.

    Args:
        data (bytes): The bytes to hash.

    Returns:
        Sha3Hash: The 32 digest bytes, reversed.
    """
    return Sha3Hash(hashlib.sha3_256(data).digest()[::-1])


def _digest_bits(digest: bytes) -> list[int]:
    # bytes reversed, then least significant bit first within each byte
    return [(byte >> i) & 1 for byte in digest[::-1] for i in range(8)]


def aggregate_sha3_hash(
    digest: bytes, registry: PoseidonRegistry = DEFAULT_REGISTRY
) -> PoseidonHash:
    """
    Fold a 256-bit SHA3 digest into a single Poseidon field element.

    The digest bits are split into 21 groups of 12 bits and one group of 4.
    Each group is Poseidon-hashed over its 0/1 bits, the first 11 group hashes
    and the last 11 group hashes are hashed again, and the two results are
    hashed into the root.

    Args:
        digest: 32-byte SHA3 digest in little-endian storage order.
        registry: Poseidon engine cache to use.

    Returns:
        The root as 32 little-endian bytes.

    Raises:
        TypeError: If `digest` is not bytes.
        LengthMismatchError: If `digest` is not 32 bytes long.
        InternalConsistencyError: If the grouping does not consume exactly 256 bits.
    """
    if not isinstance(digest, (bytes, bytearray)):
        raise TypeError(f"digest must be bytes, got {type(digest).__name__}")
    if len(digest) != SHA3_DIGEST_BITS // 8:
        raise LengthMismatchError(
            f"Expected {SHA3_DIGEST_BITS // 8} digest bytes, got {len(digest)}"
        )

    bits = _digest_bits(bytes(digest))
    group_hashes = []
    offset = 0
    for size in SHA3_BIT_GROUP_SIZES:
        group_hashes.append(poseidon_hash_int(bits[offset : offset + size], registry))
        offset += size

    if offset != SHA3_DIGEST_BITS:
        raise InternalConsistencyError(
            f"digest aggregation consumed {offset} bits instead of {SHA3_DIGEST_BITS}"
        )

    middle = len(group_hashes) // 2
    left = poseidon_hash_int(group_hashes[:middle], registry)
    right = poseidon_hash_int(group_hashes[middle:], registry)
    return poseidon_hash([left, right], registry)
