# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
"""
Exception hierarchy shared by every umbra_core module.

Input validation errors also derive from `ValueError` so callers that only
care about "bad input" can keep catching the builtin.
"""


class UmbraError(Exception):
    """
    Base class for all umbra_core errors.

    Args:
        message: Human-readable description of what went wrong.
        cause: Optional underlying exception, kept for diagnostics.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def from_cause(cls, message: str, cause: BaseException) -> "UmbraError":
        return cls(message, cause)


# fixed-width codec
class CodecError(UmbraError):
    pass


class OutOfRangeError(CodecError, ValueError):
    pass


class LengthMismatchError(CodecError, ValueError):
    pass


class UnsupportedWidthError(CodecError, ValueError):
    pass


# poseidon
class PoseidonHasherError(UmbraError):
    pass


class PoseidonInputError(PoseidonHasherError, ValueError):
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Poseidon input error: {message}", cause)


class PoseidonParameterError(PoseidonHasherError):
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Poseidon parameter error: {message}", cause)


class PoseidonConstantError(PoseidonHasherError):
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Poseidon constant error: {message}", cause)


class InternalConsistencyError(UmbraError, RuntimeError):
    """Raised when an invariant of the implementation itself is broken."""


# payload cipher
class CipherError(UmbraError):
    pass


class CipherInputError(CipherError, ValueError):
    pass


class KeyExchangeError(CipherError):
    pass


# upstream collaborators
class SignerError(UmbraError):
    pass


class ZkProverError(UmbraError):
    pass


# wallet
class WalletError(UmbraError):
    pass


class WalletInitializationError(WalletError):
    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(f"Failed to initialize wallet: {message}", cause)


class InvalidPurposeCodeError(WalletError, ValueError):
    def __init__(self, purpose: str, cause: BaseException | None = None):
        super().__init__(
            f'Invalid purpose code: "{purpose}". Supported purposes are: '
            "create_spl_deposit_with_hidden_amount, create_spl_deposit_with_public_amount, "
            "claim_spl_deposit_with_hidden_amount, claim_spl_deposit_with_public_amount",
            cause,
        )
        self.purpose = purpose
