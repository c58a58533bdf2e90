# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

from datetime import datetime, timezone

from umbra_core.constants import PURPOSE_CODES
from umbra_core.convertors import le_bytes_to_u256
from umbra_core.errors import InvalidPurposeCodeError
from umbra_core.helpers import break_address_into_two_parts
from umbra_core.poseidon import poseidon_hash
from umbra_core.primitives import U128, PoseidonHash


def get_purpose_code(purpose: str) -> U128:
    """
    Map a transaction purpose to the code mixed into its linker hash.

    Raises:
        InvalidPurposeCodeError: If `purpose` is not a known purpose.
    """
    try:
        return U128(PURPOSE_CODES[purpose])
    except KeyError as error:
        raise InvalidPurposeCodeError(purpose, error) from error


def utc_time_parts(time: int) -> tuple[int, int, int, int, int, int]:
    """Split a unix timestamp (seconds) into UTC year, month, day, hour, minute, second."""
    moment = datetime.fromtimestamp(time, tz=timezone.utc)
    return moment.year, moment.month, moment.day, moment.hour, moment.minute, moment.second


def generate_individual_transaction_viewing_key(
    master_viewing_key: int,
    purpose: str,
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
) -> PoseidonHash:
    """
    Viewing key scoped to one purpose and one second of UTC time.

    Args:
        master_viewing_key: The wallet's 128-bit master viewing key.
        purpose: One of the keys of `PURPOSE_CODES`.
        year, month, day, hour, minute, second: UTC time components.

    Returns:
        Poseidon hash of `[mvk, purpose_code, year, month, day, hour, minute, second]`.
    """
    return poseidon_hash(
        [master_viewing_key, get_purpose_code(purpose), year, month, day, hour, minute, second]
    )


def _itvk_at(master_viewing_key: int, purpose: str, time: int) -> int:
    itvk = generate_individual_transaction_viewing_key(
        master_viewing_key, purpose, *utc_time_parts(time)
    )
    return le_bytes_to_u256(itvk)


def generate_create_deposit_linker_hash(
    master_viewing_key: int, purpose: str, time: int, address: bytes
) -> PoseidonHash:
    """
    Linker hash for a deposit creation: `H([itvk, address_low, address_high])`.

    Args:
        master_viewing_key: The wallet's master viewing key.
        purpose: A `create_*` purpose.
        time: Unix timestamp in seconds.
        address: 32-byte destination address.
    """
    address_low, address_high = break_address_into_two_parts(address)
    return poseidon_hash([_itvk_at(master_viewing_key, purpose, time), address_low, address_high])


def generate_claim_deposit_linker_hash(
    master_viewing_key: int, purpose: str, time: int, insertion_index: int
) -> PoseidonHash:
    """
    Linker hash for a deposit claim: `H([itvk, insertion_index])`.
    """
    return poseidon_hash([_itvk_at(master_viewing_key, purpose, time), insertion_index])
