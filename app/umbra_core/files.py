# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any

SOLANA_SECRET_KEY_LENGTH = 64


def save_json(path: str | Path, data: Any) -> None:
    """Write wallet exports as sorted, two-space indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


def _read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_keypair(path: str | Path) -> bytes:
    """
    Read a Solana CLI key file.

    The file holds a JSON array of 64 integers in [0, 255]: the 32-byte
    Ed25519 seed followed by the 32-byte public key.

    Args:
        path: Path to the key file.

    Returns:
        The 64 secret key bytes.

    Raises:
        ValueError: If the file is not an array of 64 byte values.
    """
    data = _read_json(path)
    if not isinstance(data, list) or len(data) != SOLANA_SECRET_KEY_LENGTH:
        raise ValueError(f"key file must hold a JSON array of {SOLANA_SECRET_KEY_LENGTH} integers")
    if any(isinstance(v, bool) or not isinstance(v, int) or not 0 <= v <= 255 for v in data):
        raise ValueError("key file entries must be integers in [0, 255]")
    return bytes(data)
