# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import asyncio
import logging
from pathlib import Path

from umbra_core.cipher import CipherBundle
from umbra_core.constants import MXE_X25519_PUBLIC_KEY
from umbra_core.errors import CipherInputError
from umbra_core.files import save_json
from umbra_core.wallet import LocalKeypairSigner, Wallet

logger = logging.getLogger(__name__)


def _load_wallet(keypair_path: str | Path) -> Wallet:
    signer = LocalKeypairSigner.from_file(keypair_path)
    return asyncio.run(Wallet.from_signer(signer))


def export_wallet(keypair_path: str | Path, output_path: str | Path) -> None:
    """
    Derive a wallet from a local key file and write its public keys to disk.

    Only public values are written: the signer's Ed25519 public key and the
    wallet's X25519 public key, both hex encoded.

    Args:
        keypair_path: Solana CLI key file (JSON array of 64 integers).
        output_path: Destination JSON file.
    """
    wallet = _load_wallet(keypair_path)
    signer_public_key = asyncio.run(wallet.signer.get_public_key())
    save_json(
        output_path,
        {
            "signer_public_key": signer_public_key.hex(),
            "x25519_public_key": wallet.x25519_public_key.hex(),
        },
    )


def encrypt_values(
    keypair_path: str | Path,
    values: list[int],
    output_path: str | Path,
    counterparty_public_key: bytes = MXE_X25519_PUBLIC_KEY,
) -> CipherBundle:
    """
    Encrypt field elements for a counterparty and write the bundle to disk.

    The file holds the canonical CBOR encoding of the bundle as hex.

    Args:
        keypair_path: Solana CLI key file of the sender.
        values: Plaintext field elements.
        output_path: Destination file.
        counterparty_public_key: X25519 public key of the recipient.

    Returns:
        The written bundle.
    """
    wallet = _load_wallet(keypair_path)
    ciphertexts, nonce = wallet.cipher_for(counterparty_public_key).encrypt(values)
    bundle = CipherBundle(ciphertexts=list(ciphertexts), nonce=nonce)

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(bundle.to_cbor().hex(), encoding="utf-8")
    logger.debug("encrypted %d values to %s", len(values), path)
    return bundle


def read_bundle(bundle_path: str | Path) -> CipherBundle:
    """
    Read a bundle file written by `encrypt_values`.

    Raises:
        CipherInputError: If the file is not hex encoded CBOR of a bundle.
    """
    text = Path(bundle_path).read_text(encoding="utf-8").strip()
    try:
        data = bytes.fromhex(text)
    except ValueError as e:
        raise CipherInputError.from_cause(f"bundle file {bundle_path} is not hex encoded", e) from e
    return CipherBundle.from_cbor(data)


def decrypt_values(
    keypair_path: str | Path,
    bundle_path: str | Path,
    counterparty_public_key: bytes = MXE_X25519_PUBLIC_KEY,
) -> list[int]:
    """
    Decrypt a bundle written by `encrypt_values`.

    Args:
        keypair_path: Solana CLI key file of either party.
        bundle_path: File produced by `encrypt_values`.
        counterparty_public_key: X25519 public key of the other party.

    Returns:
        The plaintext field elements.

    Raises:
        CipherInputError: If the bundle file is malformed.
    """
    bundle = read_bundle(bundle_path)
    wallet = _load_wallet(keypair_path)
    return wallet.cipher_for(counterparty_public_key).decrypt(bundle.ciphertexts, bundle.nonce)
