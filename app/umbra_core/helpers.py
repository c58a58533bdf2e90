# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

from os import urandom

from umbra_core.convertors import le_bytes_to_u64, le_bytes_to_u128
from umbra_core.errors import LengthMismatchError, OutOfRangeError
from umbra_core.primitives import U64, U128

ADDRESS_LENGTH = 32


def merkle_path_indices(index: int, depth: int) -> list[int]:
    """
    Left/right position of the path node at every level of a binary Merkle tree.

    Entry `l` is bit `l` of `index`: 0 when the node is a left child, 1 when it
    is a right child.

    Args:
        index: Leaf insertion index.
        depth: Tree depth.

    Returns:
        `depth` values, each 0 or 1, leaf level first.

    Raises:
        OutOfRangeError: If `index` does not fit in a tree of that depth.
    """
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    if index < 0 or index >= 1 << depth:
        raise OutOfRangeError(f"index {index} does not fit in a tree of depth {depth}")
    return [(index >> level) & 1 for level in range(depth)]


def break_address_into_two_parts(address: bytes) -> tuple[U128, U128]:
    """
    Split a 32-byte address into two 128-bit field-friendly halves.

    Returns:
        (low, high): little-endian readings of bytes 0..16 and 16..32.
    """
    if len(address) != ADDRESS_LENGTH:
        raise LengthMismatchError(f"address must be {ADDRESS_LENGTH} bytes, got {len(address)}")
    address = bytes(address)
    return le_bytes_to_u128(address[:16]), le_bytes_to_u128(address[16:])


def generate_random_computation_offset() -> U64:
    return le_bytes_to_u64(urandom(8))
