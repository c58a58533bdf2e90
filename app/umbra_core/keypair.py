# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only

from dataclasses import dataclass

from cryptography.hazmat.primitives.asymmetric import x25519
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from umbra_core.errors import KeyExchangeError, LengthMismatchError
from umbra_core.primitives import SharedSecret, X25519PrivateKey, X25519PublicKey

X25519_KEY_LENGTH = 32


def x25519_public_key(private_key: bytes) -> X25519PublicKey:
    """
    Multiply the X25519 base point by a 32-byte private scalar.

    Raises:
        LengthMismatchError: If `private_key` is not 32 bytes.
    """
    if len(private_key) != X25519_KEY_LENGTH:
        raise LengthMismatchError(
            f"X25519 private key must be {X25519_KEY_LENGTH} bytes, got {len(private_key)}"
        )
    public = x25519.X25519PrivateKey.from_private_bytes(bytes(private_key)).public_key()
    return X25519PublicKey(public.public_bytes(Encoding.Raw, PublicFormat.Raw))


def x25519_shared_secret(private_key: bytes, public_key: bytes) -> SharedSecret:
    """
    Diffie-Hellman over Curve25519.

    Raises:
        KeyExchangeError: If a key has the wrong length or the exchange
            produces the all-zero secret (low-order public key).
    """
    try:
        ours = x25519.X25519PrivateKey.from_private_bytes(bytes(private_key))
        theirs = x25519.X25519PublicKey.from_public_bytes(bytes(public_key))
        return SharedSecret(ours.exchange(theirs))
    except ValueError as error:
        raise KeyExchangeError(f"X25519 key exchange failed: {error}", error) from error


@dataclass
class X25519Keypair:
    private_key: bytes | None = None
    public_key: bytes | None = None

    def __post_init__(self):
        # Secret-known construction
        if self.private_key is not None:
            self.private_key = X25519PrivateKey(bytes(self.private_key))
            self.public_key = x25519_public_key(self.private_key)
            return

        # Public-only construction
        if self.public_key is None:
            raise ValueError("Must provide public_key if private_key is not known")
        if len(self.public_key) != X25519_KEY_LENGTH:
            raise LengthMismatchError(
                f"X25519 public key must be {X25519_KEY_LENGTH} bytes, got {len(self.public_key)}"
            )
        self.public_key = X25519PublicKey(bytes(self.public_key))

    def __repr__(self) -> str:
        return f"X25519Keypair(public_key={self.public_key.hex()})"

    @classmethod
    def from_public(cls, public_key: bytes) -> "X25519Keypair":
        return cls(private_key=None, public_key=public_key)

    @classmethod
    def generate(cls) -> "X25519Keypair":
        private = x25519.X25519PrivateKey.generate()
        return cls(private_key=private.private_bytes_raw())

    def shared_secret(self, their_public_key: bytes) -> SharedSecret:
        if self.private_key is None:
            raise KeyExchangeError("cannot derive a shared secret without the private key")
        return x25519_shared_secret(self.private_key, their_public_key)
