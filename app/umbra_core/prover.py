# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

# prover.py

"""
Boundary to the zero-knowledge proving system.

The prover itself is opaque: it takes a circuit id and decimal-string input
signals and returns a Groth16 proof over BN254. This module defines that
interface, builds the input signals the wallet owns, and converts snarkjs
proof objects into the big-endian byte layout the on-chain verifier reads:

  - a: Ax || Ay                      (64 bytes)
  - b: Bx_c1 || Bx_c0 || By_c1 || By_c0  (128 bytes)
  - c: Cx || Cy                      (64 bytes)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

from py_ecc.optimized_bn128 import FQ, FQ2, b, b2, field_modulus, is_on_curve

from umbra_core.convertors import decimal_string_to_int, le_bytes_to_u256, u256_to_be_bytes
from umbra_core.errors import ZkProverError
from umbra_core.primitives import PoseidonHash

MVK_REGISTRATION_CIRCUIT = "masterViewingKeyRegistration"


@dataclass(frozen=True)
class Groth16Proof:
    a: bytes
    b: bytes
    c: bytes

    def __post_init__(self):
        for name, value, length in (("a", self.a, 64), ("b", self.b, 128), ("c", self.c, 64)):
            if len(value) != length:
                raise ZkProverError(f"Groth16 proof `{name}` must be {length} bytes, got {len(value)}")

    def to_dict(self) -> dict[str, str]:
        return {"a": self.a.hex(), "b": self.b.hex(), "c": self.c.hex()}


class ZkProver(ABC):
    """Asynchronous Groth16 prover."""

    @abstractmethod
    async def generate_proof(self, circuit_id: str, inputs: Mapping[str, str]) -> Groth16Proof:
        """
        Prove `circuit_id` for the given decimal-string input signals.

        Raises:
            ZkProverError: If proving fails.
        """

    async def generate_master_viewing_key_registration_proof(
        self,
        master_viewing_key: int,
        poseidon_blinding_factor: int,
        sha3_blinding_factor: int,
        expected_poseidon_commitment: bytes,
        expected_sha3_commitment: bytes,
    ) -> Groth16Proof:
        inputs = master_viewing_key_registration_inputs(
            master_viewing_key,
            poseidon_blinding_factor,
            sha3_blinding_factor,
            expected_poseidon_commitment,
            expected_sha3_commitment,
        )
        return await self.generate_proof(MVK_REGISTRATION_CIRCUIT, inputs)


def to_circuit_signal(value: int | bytes) -> str:
    """
    Render a value as a circuit input signal.

    Integers are written in base 10; 32-byte buffers are read as
    little-endian field elements first.
    """
    if isinstance(value, (bytes, bytearray)):
        return str(le_bytes_to_u256(bytes(value)))
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"signal must be an unsigned int or 32 bytes, got {value!r}")
    return str(value)


def master_viewing_key_registration_inputs(
    master_viewing_key: int,
    poseidon_blinding_factor: int,
    sha3_blinding_factor: int,
    expected_poseidon_commitment: PoseidonHash | bytes,
    expected_sha3_commitment: PoseidonHash | bytes,
) -> dict[str, str]:
    """
    Input signals of the master viewing key registration circuit.

    Args:
        master_viewing_key: The 128-bit master viewing key.
        poseidon_blinding_factor: Blinding factor of the Poseidon commitment.
        sha3_blinding_factor: Blinding factor of the SHA3 commitment.
        expected_poseidon_commitment: 32-byte little-endian Poseidon commitment.
        expected_sha3_commitment: 32-byte little-endian aggregated SHA3 commitment.

    Returns:
        Signal name to decimal string.
    """
    return {
        "masterViewingKey": to_circuit_signal(master_viewing_key),
        "poseidonBlindingFactor": to_circuit_signal(poseidon_blinding_factor),
        "sha3BlindingFactor": to_circuit_signal(sha3_blinding_factor),
        "expectedPoseidonCommitment": to_circuit_signal(expected_poseidon_commitment),
        "expectedSha3Commitment": to_circuit_signal(expected_sha3_commitment),
    }


def _coordinate(value: Any, name: str) -> int:
    try:
        n = decimal_string_to_int(str(value))
    except ValueError as error:
        raise ZkProverError(f"Groth16 proof `{name}` has a malformed coordinate", error) from error
    if n >= field_modulus:
        raise ZkProverError(f"Groth16 proof `{name}` coordinate is outside the base field")
    return n


def _strip_projective(point: Any, length: int, one: Any, name: str) -> list:
    # snarkjs appends the projective z coordinate, always one for affine output
    if not isinstance(point, (list, tuple)):
        raise ZkProverError(f"Groth16 proof `{name}` must be an array")
    point = list(point)
    if len(point) == length + 1 and point[-1] == one:
        point = point[:-1]
    if len(point) != length:
        raise ZkProverError(f"Groth16 proof `{name}` must be an array of length {length}")
    return point


def _g1_bytes(point: Any, name: str) -> bytes:
    x_raw, y_raw = _strip_projective(point, 2, "1", name)
    x, y = _coordinate(x_raw, name), _coordinate(y_raw, name)
    if not is_on_curve((FQ(x), FQ(y), FQ.one()), b):
        raise ZkProverError(f"Groth16 proof `{name}` is not on the BN254 G1 curve")
    return u256_to_be_bytes(x) + u256_to_be_bytes(y)


def _g2_bytes(point: Any, name: str) -> bytes:
    x_raw, y_raw = _strip_projective(point, 2, ["1", "0"], name)
    coordinates = []
    for pair in (x_raw, y_raw):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ZkProverError(
                f"Groth16 proof `{name}` must be a 2x2 array: [[x_c0, x_c1], [y_c0, y_c1]]"
            )
        coordinates.append([_coordinate(pair[0], name), _coordinate(pair[1], name)])
    (x0, x1), (y0, y1) = coordinates
    if not is_on_curve((FQ2([x0, x1]), FQ2([y0, y1]), FQ2.one()), b2):
        raise ZkProverError(f"Groth16 proof `{name}` is not on the BN254 G2 curve")
    return b"".join(u256_to_be_bytes(v) for v in (x1, x0, y1, y0))


def snarkjs_proof_to_groth16(proof: Mapping[str, Any]) -> Groth16Proof:
    """
    Convert a snarkjs proof object to verifier byte layout.

    Args:
        proof: Dict with keys pi_a, pi_b, pi_c holding decimal strings.

    Returns:
        The proof as big-endian byte strings.

    Raises:
        ZkProverError: If a component is missing, malformed, or off-curve.
    """
    missing = [k for k in ("pi_a", "pi_b", "pi_c") if k not in proof]
    if missing:
        raise ZkProverError(f"snarkjs proof is missing {', '.join(missing)}")
    return Groth16Proof(
        a=_g1_bytes(proof["pi_a"], "pi_a"),
        b=_g2_bytes(proof["pi_b"], "pi_b"),
        c=_g1_bytes(proof["pi_c"], "pi_c"),
    )
