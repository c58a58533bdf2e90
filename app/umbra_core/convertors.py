# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
from typing import Literal

from umbra_core.errors import LengthMismatchError, OutOfRangeError, UnsupportedWidthError
from umbra_core.primitives import U8, U16, U32, U64, U128, U256

Endianness = Literal["little", "big"]

# widths in bytes: 8/16/32/64/128/256-bit integers
SUPPORTED_WIDTHS = (1, 2, 4, 8, 16, 32)


def _check_width(width: int) -> None:
    if width not in SUPPORTED_WIDTHS:
        raise UnsupportedWidthError(
            f"Unsupported width {width}; expected one of {SUPPORTED_WIDTHS}"
        )


def _check_endianness(endianness: str) -> None:
    if endianness not in ("little", "big"):
        raise ValueError(f"endianness must be 'little' or 'big', got {endianness!r}")


def encode(value: int, width: int, endianness: Endianness = "little") -> bytes:
    """
    Encode an unsigned integer into exactly `width` bytes.

    Args:
        value: Unsigned integer, must satisfy 0 <= value < 2**(8*width).
        width: Output length in bytes (1, 2, 4, 8, 16 or 32).
        endianness: "little" or "big".

    Returns:
        The fixed-width byte encoding.

    Raises:
        TypeError: If `value` is not an int.
        UnsupportedWidthError: If `width` is not a supported width.
        OutOfRangeError: If `value` does not fit in `width` bytes. Values are
            never truncated or wrapped.
    """
    _check_width(width)
    _check_endianness(endianness)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"value must be an int, got {type(value).__name__}")
    if value < 0 or value >> (8 * width):
        raise OutOfRangeError(f"Value {value} does not fit in {width} bytes")
    return value.to_bytes(width, endianness)


def decode(data: bytes, width: int, endianness: Endianness = "little") -> int:
    """
    Decode exactly `width` bytes into an unsigned integer.

    Args:
        data: The encoded bytes.
        width: Expected length in bytes (1, 2, 4, 8, 16 or 32).
        endianness: "little" or "big".

    Returns:
        The decoded integer.

    Raises:
        UnsupportedWidthError: If `width` is not a supported width.
        LengthMismatchError: If `len(data) != width`.
    """
    _check_width(width)
    _check_endianness(endianness)
    if len(data) != width:
        raise LengthMismatchError(f"Expected {width} bytes, got {len(data)}")
    return int.from_bytes(data, endianness)


def u8_to_le_bytes(value: int) -> bytes:
    return encode(value, 1, "little")


def u8_to_be_bytes(value: int) -> bytes:
    return encode(value, 1, "big")


def le_bytes_to_u8(data: bytes) -> U8:
    return U8(decode(data, 1, "little"))


def be_bytes_to_u8(data: bytes) -> U8:
    return U8(decode(data, 1, "big"))


def u16_to_le_bytes(value: int) -> bytes:
    return encode(value, 2, "little")


def u16_to_be_bytes(value: int) -> bytes:
    return encode(value, 2, "big")


def le_bytes_to_u16(data: bytes) -> U16:
    return U16(decode(data, 2, "little"))


def be_bytes_to_u16(data: bytes) -> U16:
    return U16(decode(data, 2, "big"))


def u32_to_le_bytes(value: int) -> bytes:
    return encode(value, 4, "little")


def u32_to_be_bytes(value: int) -> bytes:
    return encode(value, 4, "big")


def le_bytes_to_u32(data: bytes) -> U32:
    return U32(decode(data, 4, "little"))


def be_bytes_to_u32(data: bytes) -> U32:
    return U32(decode(data, 4, "big"))


def u64_to_le_bytes(value: int) -> bytes:
    return encode(value, 8, "little")


def u64_to_be_bytes(value: int) -> bytes:
    return encode(value, 8, "big")


def le_bytes_to_u64(data: bytes) -> U64:
    return U64(decode(data, 8, "little"))


def be_bytes_to_u64(data: bytes) -> U64:
    return U64(decode(data, 8, "big"))


def u128_to_le_bytes(value: int) -> bytes:
    return encode(value, 16, "little")


def u128_to_be_bytes(value: int) -> bytes:
    return encode(value, 16, "big")


def le_bytes_to_u128(data: bytes) -> U128:
    return U128(decode(data, 16, "little"))


def be_bytes_to_u128(data: bytes) -> U128:
    return U128(decode(data, 16, "big"))


def u256_to_le_bytes(value: int) -> bytes:
    return encode(value, 32, "little")


def u256_to_be_bytes(value: int) -> bytes:
    return encode(value, 32, "big")


def le_bytes_to_u256(data: bytes) -> U256:
    return U256(decode(data, 32, "little"))


def be_bytes_to_u256(data: bytes) -> U256:
    return U256(decode(data, 32, "big"))


def decimal_string_to_int(string: str) -> int:
    """
    Parse an unsigned base-10 integer literal, as emitted by proving systems.

    Only decimal digits are accepted: hex (`0x...`), signed and underscored
    literals are rejected rather than reinterpreted.

    Raises:
        ValueError: If `string` is not made of decimal digits only.
    """
    string = string.strip()
    if not string.isdigit() or not string.isascii():
        raise ValueError(f"not an unsigned decimal integer: {string!r}")
    return int(string)
