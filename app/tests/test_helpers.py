# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import pytest

from umbra_core.errors import LengthMismatchError, OutOfRangeError
from umbra_core.helpers import (
    break_address_into_two_parts,
    generate_random_computation_offset,
    merkle_path_indices,
)


def test_merkle_path_indices():
    assert merkle_path_indices(0, 4) == [0, 0, 0, 0]
    assert merkle_path_indices(5, 4) == [1, 0, 1, 0]
    assert merkle_path_indices(15, 4) == [1, 1, 1, 1]


def test_merkle_path_rebuilds_index():
    indices = merkle_path_indices(1234, 20)
    assert len(indices) == 20
    assert sum(bit << level for level, bit in enumerate(indices)) == 1234


def test_merkle_index_out_of_range():
    with pytest.raises(OutOfRangeError):
        merkle_path_indices(16, 4)
    with pytest.raises(OutOfRangeError):
        merkle_path_indices(-1, 4)


def test_address_split():
    address = bytes(range(32))
    low, high = break_address_into_two_parts(address)
    assert low == int.from_bytes(bytes(range(16)), "little")
    assert high == int.from_bytes(bytes(range(16, 32)), "little")
    assert low < 2**128 and high < 2**128


def test_address_length():
    with pytest.raises(LengthMismatchError):
        break_address_into_two_parts(bytes(31))


def test_random_computation_offset():
    offsets = {generate_random_computation_offset() for _ in range(8)}
    assert all(0 <= o < 2**64 for o in offsets)
    assert len(offsets) > 1


if __name__ == "__main__":
    pytest.main()
