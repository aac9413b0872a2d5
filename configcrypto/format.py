"""Binary header of an encrypted payload.

Layout: magic "EC", version, algorithm, key ID length, key ID,
DEK nonce (12), encrypted DEK (48), data nonce (12), then the ciphertext.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from configcrypto.errors import InvalidFormatError

MAGIC = b"EC"
FORMAT_VERSION = 0x01
ALGORITHM_AES256GCM = 0x01
AES_KEY_SIZE = 32
GCM_NONCE_SIZE = 12
GCM_TAG_SIZE = 16
ENCRYPTED_DEK_SIZE = AES_KEY_SIZE + GCM_TAG_SIZE
MIN_HEADER_SIZE = 5
MAX_KEY_ID_LENGTH = 255


class _Writer(Protocol):
    def write(self, data: bytes) -> int | None: ...


@dataclass(frozen=True)
class Header:
    """Parsed header of an encrypted payload."""

    key_id: str
    dek_nonce: bytes
    encrypted_dek: bytes
    data_nonce: bytes
    version: int = FORMAT_VERSION
    algorithm: int = ALGORITHM_AES256GCM


def header_size(key_id: str) -> int:
    """Return the header size in bytes for the given key ID."""
    return (
        MIN_HEADER_SIZE
        + len(key_id.encode("utf-8"))
        + GCM_NONCE_SIZE
        + ENCRYPTED_DEK_SIZE
        + GCM_NONCE_SIZE
    )


def _write_all(writer: _Writer, chunk: bytes) -> None:
    written = writer.write(chunk)
    if written is not None and written != len(chunk):
        raise OSError(f"short write: {written} of {len(chunk)} bytes")


def write_header(writer: _Writer, header: Header) -> None:
    """Write the binary form of ``header`` to ``writer``."""
    key_id = header.key_id.encode("utf-8")
    if len(key_id) > MAX_KEY_ID_LENGTH:
        raise InvalidFormatError("key ID too long")
    chunks = (
        MAGIC,
        bytes((header.version, header.algorithm, len(key_id))),
        key_id,
        bytes(header.dek_nonce),
        bytes(header.encrypted_dek),
        bytes(header.data_nonce),
    )
    for chunk in chunks:
        _write_all(writer, chunk)


def read_header(data: bytes | bytearray | memoryview) -> tuple[Header, bytes]:
    """Parse the header at the start of ``data``.

    Returns the header and the ciphertext that follows it. Both are
    independent of the input buffer.
    """
    data = bytes(data)
    if len(data) < MIN_HEADER_SIZE:
        raise InvalidFormatError("data too short")
    if data[0:2] != MAGIC:
        raise InvalidFormatError("invalid magic bytes")

    version, algorithm, key_id_len = data[2], data[3], data[4]
    if version != FORMAT_VERSION:
        raise InvalidFormatError(f"unsupported version {version}")
    if algorithm != ALGORITHM_AES256GCM:
        raise InvalidFormatError(f"unsupported algorithm {algorithm}")

    offset = MIN_HEADER_SIZE
    needed = key_id_len + GCM_NONCE_SIZE + ENCRYPTED_DEK_SIZE + GCM_NONCE_SIZE
    if len(data) < offset + needed:
        raise InvalidFormatError("data too short for header")

    try:
        key_id = data[offset : offset + key_id_len].decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidFormatError("key ID is not valid UTF-8") from exc
    offset += key_id_len

    dek_nonce = data[offset : offset + GCM_NONCE_SIZE]
    offset += GCM_NONCE_SIZE
    encrypted_dek = data[offset : offset + ENCRYPTED_DEK_SIZE]
    offset += ENCRYPTED_DEK_SIZE
    data_nonce = data[offset : offset + GCM_NONCE_SIZE]
    offset += GCM_NONCE_SIZE

    header = Header(
        key_id=key_id,
        dek_nonce=dek_nonce,
        encrypted_dek=encrypted_dek,
        data_nonce=data_nonce,
        version=version,
        algorithm=algorithm,
    )
    return header, data[offset:]