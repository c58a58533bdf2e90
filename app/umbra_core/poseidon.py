# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
"""
Circom-compatible Poseidon over the BN254 scalar field.

The permutation is evaluated in circomlib's optimised form: the round
constants are pre-folded, the middle round uses the pre-sparse matrix P and
every partial round multiplies by a sparse matrix S. The result is identical
to the textbook schedule and to the circom `Poseidon(n)` template.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Sequence

from circomlibpy.poseidon_constants import opt_c, opt_m, opt_p, opt_s

from umbra_core.constants import (
    FIELD_MODULUS,
    MAX_POSEIDON_INPUTS,
    ROUNDS_FULL,
    ROUNDS_PARTIAL,
    SBOX_POWER,
)
from umbra_core.convertors import u256_to_le_bytes
from umbra_core.errors import (
    PoseidonConstantError,
    PoseidonInputError,
    PoseidonParameterError,
)
from umbra_core.primitives import FieldElement, PoseidonHash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoseidonParameters:
    """
    Constants for one state width `t` (number of inputs plus one).

    Attributes:
        t: State width.
        rounds_full: Number of full rounds.
        rounds_partial: Number of partial rounds.
        round_constants: Folded round constants, `t * rounds_full + rounds_partial` long.
        sparse_matrices: Flattened sparse matrices, `(2t - 1) * rounds_partial` long.
        mds: The t x t MDS matrix.
        pre_sparse_mds: The t x t matrix applied on the middle full round.
    """

    t: int
    rounds_full: int
    rounds_partial: int
    round_constants: tuple[int, ...]
    sparse_matrices: tuple[int, ...]
    mds: tuple[tuple[int, ...], ...]
    pre_sparse_mds: tuple[tuple[int, ...], ...]

    @classmethod
    def for_state_width(cls, t: int) -> "PoseidonParameters":
        """
        Load and validate circomlib's constants for state width `t`.

        Raises:
            PoseidonParameterError: If `t` has no tabulated parameters.
            PoseidonConstantError: If the tabulated constants are malformed.
        """
        index = t - 2
        if index < 0 or index >= len(ROUNDS_PARTIAL):
            raise PoseidonParameterError(f"no parameters for state width t={t}")
        rounds_partial = ROUNDS_PARTIAL[index]

        c = opt_c(t)
        s = opt_s(t)
        m = opt_m(t)
        p = opt_p(t)

        if len(c) != t * ROUNDS_FULL + rounds_partial:
            raise PoseidonConstantError(
                f"expected {t * ROUNDS_FULL + rounds_partial} round constants for t={t}, got {len(c)}"
            )
        if len(s) != (2 * t - 1) * rounds_partial:
            raise PoseidonConstantError(
                f"expected {(2 * t - 1) * rounds_partial} sparse matrix entries for t={t}, got {len(s)}"
            )
        for name, matrix in (("M", m), ("P", p)):
            if len(matrix) != t or any(len(row) != t for row in matrix):
                raise PoseidonConstantError(f"matrix {name} for t={t} is not {t}x{t}")

        values = list(c) + list(s) + [v for row in m for v in row] + [v for row in p for v in row]
        if any(v < 0 or v >= FIELD_MODULUS for v in values):
            raise PoseidonConstantError(f"constant outside the field for t={t}")

        return cls(
            t=t,
            rounds_full=ROUNDS_FULL,
            rounds_partial=rounds_partial,
            round_constants=tuple(c),
            sparse_matrices=tuple(s),
            mds=tuple(tuple(row) for row in m),
            pre_sparse_mds=tuple(tuple(row) for row in p),
        )


def _sbox(x: int) -> int:
    return pow(x, SBOX_POWER, FIELD_MODULUS)


def _mix(state: list[int], matrix: tuple[tuple[int, ...], ...]) -> list[int]:
    t = len(state)
    return [sum(matrix[j][i] * state[j] for j in range(t)) % FIELD_MODULUS for i in range(t)]


class PoseidonEngine:
    """The permutation for one fixed state width."""

    def __init__(self, params: PoseidonParameters):
        self.params = params

    @property
    def t(self) -> int:
        return self.params.t

    def permute(self, state: Sequence[int]) -> list[int]:
        """
        Apply the Poseidon permutation to a full state of `t` field elements.

        Args:
            state: The input state, `[0, *inputs]` when hashing.

        Returns:
            The permuted state.
        """
        params = self.params
        t = params.t
        q = FIELD_MODULUS
        c = params.round_constants
        s = params.sparse_matrices
        half = params.rounds_full // 2
        rp = params.rounds_partial

        if len(state) != t:
            raise PoseidonInputError(f"state must have {t} elements, got {len(state)}")

        state = [(x + c[i]) % q for i, x in enumerate(state)]

        for r in range(half - 1):
            state = [(_sbox(x) + c[(r + 1) * t + i]) % q for i, x in enumerate(state)]
            state = _mix(state, params.mds)

        state = [(_sbox(x) + c[half * t + i]) % q for i, x in enumerate(state)]
        state = _mix(state, params.pre_sparse_mds)

        for r in range(rp):
            state[0] = (_sbox(state[0]) + c[(half + 1) * t + r]) % q
            offset = (2 * t - 1) * r
            s0 = sum(s[offset + j] * state[j] for j in range(t)) % q
            for k in range(1, t):
                state[k] = (state[k] + state[0] * s[offset + t + k - 1]) % q
            state[0] = s0

        for r in range(half - 1):
            state = [
                (_sbox(x) + c[(half + 1) * t + rp + r * t + i]) % q
                for i, x in enumerate(state)
            ]
            state = _mix(state, params.mds)

        state = [_sbox(x) for x in state]
        return _mix(state, params.mds)

    def hash(self, inputs: Sequence[int]) -> FieldElement:
        return FieldElement(self.permute([0, *inputs])[0])


class PoseidonRegistry:
    """
    Lazily built, never evicted, per-width cache of Poseidon engines.

    Safe to share across threads: concurrent first use of a width builds one
    engine and every caller sees that same instance.

    Args:
        loader: Builds the parameters for a state width. Defaults to
            `PoseidonParameters.for_state_width`.
    """

    def __init__(self, loader: Callable[[int], PoseidonParameters] | None = None):
        self._loader = loader or PoseidonParameters.for_state_width
        self._engines: dict[int, PoseidonEngine] = {}
        self._lock = threading.Lock()

    def engine_for(self, t: int) -> PoseidonEngine:
        engine = self._engines.get(t)
        if engine is not None:
            return engine
        with self._lock:
            engine = self._engines.get(t)
            if engine is None:
                engine = PoseidonEngine(self._loader(t))
                self._engines[t] = engine
                logger.debug("built poseidon engine for t=%d", t)
        return engine

    def __contains__(self, t: int) -> bool:
        return t in self._engines


DEFAULT_REGISTRY = PoseidonRegistry()


def _validate_inputs(inputs: Sequence[int]) -> list[int]:
    if len(inputs) == 0:
        raise PoseidonInputError("at least one input is required")
    if len(inputs) > MAX_POSEIDON_INPUTS:
        raise PoseidonInputError(
            f"at most {MAX_POSEIDON_INPUTS} inputs are supported, got {len(inputs)}"
        )
    values = []
    for position, value in enumerate(inputs):
        if isinstance(value, bool) or not isinstance(value, int):
            raise PoseidonInputError(
                f"input {position} must be an int, got {type(value).__name__}"
            )
        if value < 0 or value >= FIELD_MODULUS:
            raise PoseidonInputError(f"input {position} is not a field element")
        values.append(value)
    return values


def poseidon_hash_int(
    inputs: Sequence[int], registry: PoseidonRegistry = DEFAULT_REGISTRY
) -> FieldElement:
    """
    Hash 1 to 16 field elements with circomlib's Poseidon.

    Args:
        inputs: Field elements, each in `[0, FIELD_MODULUS)`.
        registry: Engine cache to use.

    Returns:
        The hash as a field element.

    Raises:
        PoseidonInputError: On empty input, too many inputs or values outside the field.
        PoseidonParameterError: If no parameters exist for `len(inputs) + 1`.
    """
    values = _validate_inputs(inputs)
    return registry.engine_for(len(values) + 1).hash(values)


def poseidon_hash(
    inputs: Sequence[int], registry: PoseidonRegistry = DEFAULT_REGISTRY
) -> PoseidonHash:
    """Same as `poseidon_hash_int`, encoded as 32 little-endian bytes."""
    return PoseidonHash(u256_to_le_bytes(poseidon_hash_int(inputs, registry)))
