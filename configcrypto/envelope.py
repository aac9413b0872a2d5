"""Envelope encryption with AES-256-GCM.

Each payload gets a fresh random data key (DEK). The DEK is sealed with
the key-encryption key (KEK), and the key ID is bound to both layers as
associated data.
"""

from __future__ import annotations

import io
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from configcrypto.errors import (
    DecryptionFailedError,
    InvalidFormatError,
    InvalidKeySizeError,
)
from configcrypto.format import (
    AES_KEY_SIZE,
    GCM_NONCE_SIZE,
    GCM_TAG_SIZE,
    Header,
    read_header,
    write_header,
)
from configcrypto.keys import Key, KeyProvider


def _check_key_size(key: Key) -> None:
    size = len(key.material)
    if size != AES_KEY_SIZE:
        raise InvalidKeySizeError(f"got {size} bytes")


def encrypt(plaintext: bytes | bytearray | memoryview, kek: Key) -> bytes:
    """Encrypt ``plaintext`` under a fresh DEK sealed with ``kek``."""
    _check_key_size(kek)
    aad = kek.key_id.encode("utf-8")

    dek = bytearray(os.urandom(AES_KEY_SIZE))
    try:
        dek_nonce = os.urandom(GCM_NONCE_SIZE)
        encrypted_dek = AESGCM(bytes(kek.material)).encrypt(dek_nonce, bytes(dek), aad)
        data_nonce = os.urandom(GCM_NONCE_SIZE)
        ciphertext = AESGCM(bytes(dek)).encrypt(data_nonce, bytes(plaintext), aad)
    finally:
        dek[:] = bytes(len(dek))

    header = Header(
        key_id=kek.key_id,
        dek_nonce=dek_nonce,
        encrypted_dek=encrypted_dek,
        data_nonce=data_nonce,
    )
    buffer = io.BytesIO()
    write_header(buffer, header)
    buffer.write(ciphertext)
    return buffer.getvalue()


def decrypt(data: bytes | bytearray | memoryview, provider: KeyProvider) -> bytes:
    """Decrypt a payload, looking up its KEK in ``provider`` by key ID."""
    header, ciphertext = read_header(data)
    if len(ciphertext) < GCM_TAG_SIZE:
        raise InvalidFormatError("ciphertext too short")

    kek = provider.key_by_id(header.key_id)
    _check_key_size(kek)
    aad = header.key_id.encode("utf-8")

    try:
        dek = AESGCM(bytes(kek.material)).decrypt(
            header.dek_nonce, header.encrypted_dek, aad
        )
    except InvalidTag:
        raise DecryptionFailedError("failed to decrypt DEK") from None

    try:
        data_cipher = AESGCM(dek)
    except ValueError as exc:
        raise DecryptionFailedError(str(exc)) from exc

    try:
        return data_cipher.decrypt(header.data_nonce, ciphertext, aad)
    except InvalidTag:
        raise DecryptionFailedError("failed to decrypt data") from None