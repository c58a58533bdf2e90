# Copyright (C) 2025 The umbra-core Authors
# SPDX-License-Identifier: GPL-3.0-only
from py_ecc.optimized_bn128 import curve_order

# domain tags
DOMAIN_NAMESPACE = "Umbra Privacy - "
X25519_DOMAIN_TAG = (DOMAIN_NAMESPACE + "X25519 Private Key").encode("utf-8")
MVK_DOMAIN_TAG = (DOMAIN_NAMESPACE + "Master Viewing Key").encode("utf-8")
MVK_POSEIDON_BLINDING_DOMAIN_TAG = (
    DOMAIN_NAMESPACE + "Master Viewing Key Blinding Factor"
).encode("utf-8")
MVK_SHA3_BLINDING_DOMAIN_TAG = (
    DOMAIN_NAMESPACE + "Master Viewing Key Sha3 Blinding Factor"
).encode("utf-8")
RANDOM_SECRET_DOMAIN_TAG = (DOMAIN_NAMESPACE + "Random Secret Master Seed").encode("utf-8")
NULLIFIER_DOMAIN_TAG = (DOMAIN_NAMESPACE + "Nullifier Master Seed").encode("utf-8")
CIPHER_SALT_DOMAIN_TAG = (DOMAIN_NAMESPACE + "Payload Cipher Salt v1").encode("utf-8")
CIPHER_KEY_DOMAIN_TAG = (DOMAIN_NAMESPACE + "Payload Cipher Key v1").encode("utf-8")

# the message every wallet signs once to obtain its signature seed
DEFAULT_SIGNING_MESSAGE = (
    "Umbra Privacy - do NOT sign this message unless you are using an application "
    "or integration with Umbra Privacy! Proceed cautiously as this signature will be "
    "used to derive sensitive information that can be used to control/transact/decrypt "
    "balances and funds from your Umbra Accounts."
).encode("utf-8")
SIGNATURE_SEED_LENGTH = 64

# public x25519 key of the multi-party execution environment
MXE_X25519_PUBLIC_KEY = bytes(
    [
        27, 146, 220, 227, 8, 51, 189, 69, 119, 116, 110, 176, 137, 108, 212, 154,
        185, 95, 149, 7, 4, 186, 213, 240, 72, 99, 178, 235, 183, 45, 153, 36,
    ]
)

# BN254 scalar field, shared by poseidon and the proving system
FIELD_MODULUS = curve_order
# field the payload cipher works over
CIPHER_FIELD_MODULUS = 2**255 - 19

# poseidon (circomlib parameters)
ROUNDS_FULL = 8
ROUNDS_PARTIAL = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]
SBOX_POWER = 5
MAX_POSEIDON_INPUTS = 17

# sha3 digest -> poseidon root: 21 groups of 12 bits and one of 4 bits
SHA3_DIGEST_BITS = 256
SHA3_BIT_GROUP_SIZES = [12] * 21 + [4]

# symmetric cipher wire format
CIPHERTEXT_BLOCK_LENGTH = 32
NONCE_LENGTH = 16
KEYSTREAM_BYTES_PER_ELEMENT = 64

# transaction purposes mixed into linker hashes
PURPOSE_CODES = {
    "create_spl_deposit_with_hidden_amount": 0,
    "create_spl_deposit_with_public_amount": 1,
    "claim_spl_deposit_with_hidden_amount": 2,
    "claim_spl_deposit_with_public_amount": 3,
}
