"""Codecs that serialise values, and an encrypting wrapper around them."""

from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

from configcrypto.envelope import decrypt, encrypt
from configcrypto.errors import CryptoError
from configcrypto.keys import KeyProvider


@runtime_checkable
class InnerCodec(Protocol):
    """A named serialiser between values and bytes."""

    name: str

    def encode(self, value: Any) -> bytes:
        """Serialise ``value`` to bytes."""

    def decode(self, data: bytes) -> Any:
        """Deserialise ``data`` into a value."""


class JsonCodec:
    """Compact UTF-8 JSON codec."""

    name = "json"

    def encode(self, value: Any) -> bytes:
        """Serialise ``value`` as compact JSON."""
        text = json.dumps(
            value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        """Parse JSON ``data``."""
        return json.loads(bytes(data))


class EncryptedCodec:
    """Wraps an inner codec with envelope encryption.

    Encoding serialises with the inner codec, then encrypts; decoding
    decrypts, then deserialises. Thread-safe when the inner codec and the
    provider are.
    """

    def __init__(self, inner: InnerCodec, provider: KeyProvider) -> None:
        if inner is None:
            raise TypeError("inner codec is None")
        if provider is None:
            raise TypeError("provider is None")
        self._inner = inner
        self._provider = provider
        self._name = f"encrypted:{inner.name}"

    @property
    def name(self) -> str:
        """Codec name, e.g. ``encrypted:json``."""
        return self._name

    def encode(self, value: Any) -> bytes:
        """Serialise ``value`` with the inner codec and encrypt the result."""
        try:
            plaintext = self._inner.encode(value)
        except Exception as exc:
            raise CryptoError(f"inner encode failed: {exc}") from exc

        try:
            key = self._provider.current_key()
        except CryptoError:
            raise
        except Exception as exc:
            raise CryptoError(f"failed to get current key: {exc}") from exc

        try:
            return encrypt(plaintext, key)
        finally:
            if isinstance(key.material, bytearray):
                key.material[:] = bytes(len(key.material))

    def decode(self, data: bytes | bytearray | memoryview) -> Any:
        """Decrypt ``data`` and deserialise it with the inner codec."""
        try:
            plaintext = decrypt(data, self._provider)
        except CryptoError:
            raise
        except Exception as exc:
            raise CryptoError(f"decrypt failed: {exc}") from exc

        try:
            return self._inner.decode(plaintext)
        except Exception as exc:
            raise CryptoError(f"inner decode failed: {exc}") from exc