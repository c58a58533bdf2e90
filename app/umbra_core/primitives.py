# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
from typing import NewType

from eth_typing import Hash32

from umbra_core.constants import FIELD_MODULUS
from umbra_core.errors import OutOfRangeError

# unsigned integers of a declared width
U8 = NewType("U8", int)
U16 = NewType("U16", int)
U32 = NewType("U32", int)
U64 = NewType("U64", int)
U128 = NewType("U128", int)
U256 = NewType("U256", int)

# an integer in [0, FIELD_MODULUS)
FieldElement = NewType("FieldElement", int)

# 32-byte little-endian encodings of field elements / digests
PoseidonHash = NewType("PoseidonHash", bytes)
Sha3Hash = NewType("Sha3Hash", Hash32)

# x25519 material
X25519PrivateKey = NewType("X25519PrivateKey", bytes)
X25519PublicKey = NewType("X25519PublicKey", bytes)
SharedSecret = NewType("SharedSecret", bytes)

# cipher
Nonce = NewType("Nonce", int)
Ciphertext = NewType("Ciphertext", bytes)

# derived secrets
MasterViewingKey = NewType("MasterViewingKey", U128)
BlindingFactor = NewType("BlindingFactor", U128)
Nullifier = NewType("Nullifier", U128)


def to_field_element(value: int) -> FieldElement:
    """
    Validate that `value` is a canonical BN254 scalar field element.

    Args:
        value: Integer to check.

    Returns:
        The same integer tagged as a FieldElement.

    Raises:
        TypeError: If `value` is not an int.
        OutOfRangeError: If `value` is negative or not below the field modulus.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"field element must be an int, got {type(value).__name__}")
    if value < 0 or value >= FIELD_MODULUS:
        raise OutOfRangeError(f"Value {value} is not a field element")
    return FieldElement(value)
