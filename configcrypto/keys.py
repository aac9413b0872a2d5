"""Named encryption keys and providers that hand them out."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from configcrypto.errors import (
    InvalidKeyIDError,
    InvalidKeySizeError,
    KeyNotFoundError,
    ProviderDestroyedError,
)
from configcrypto.format import AES_KEY_SIZE

KeyMaterial = bytes | bytearray | memoryview


@dataclass(frozen=True)
class Key:
    """A named encryption key; ``material`` must be 32 bytes for AES-256."""

    key_id: str
    material: bytearray = field(repr=False)

    def copy(self) -> Key:
        """Return a key with its own copy of the material."""
        return Key(self.key_id, bytearray(self.material))


@runtime_checkable
class KeyProvider(Protocol):
    """Source of keys for encryption and decryption."""

    def current_key(self) -> Key:
        """Return the key to use for new encryptions."""

    def key_by_id(self, key_id: str) -> Key:
        """Return the key with the given ID, raising KeyNotFoundError if unknown."""


def _wipe(material: object) -> None:
    if isinstance(material, bytearray):
        material[:] = bytes(len(material))
    elif isinstance(material, memoryview) and not material.readonly:
        view = material.cast("B")
        view[:] = bytes(view.nbytes)


class StaticKeyProvider:
    """Key provider backed by in-memory keys; safe for use across threads.

    ``old_keys`` is an iterable of ``(key_bytes, key_id)`` pairs kept for
    decrypting data written before a key rotation. Key bytes are copied.
    """

    def __init__(
        self,
        key_bytes: KeyMaterial,
        key_id: str,
        old_keys: Iterable[tuple[KeyMaterial, str]] = (),
    ) -> None:
        if len(key_bytes) != AES_KEY_SIZE:
            raise InvalidKeySizeError(f"got {len(key_bytes)} bytes")
        if not key_id:
            raise InvalidKeyIDError("key ID must not be empty")

        current = Key(key_id, bytearray(key_bytes))
        keys = {key_id: current}
        for old_bytes, old_id in old_keys:
            if len(old_bytes) != AES_KEY_SIZE:
                raise InvalidKeySizeError(
                    f"old key {old_id!r} has {len(old_bytes)} bytes"
                )
            if not old_id:
                raise InvalidKeyIDError("old key ID must not be empty")
            if old_id in keys:
                raise InvalidKeyIDError(f"duplicate key ID {old_id!r}")
            keys[old_id] = Key(old_id, bytearray(old_bytes))

        self._lock = threading.Lock()
        self._current: Key | None = current
        self._keys: dict[str, Key] = keys
        self._destroyed = False

    @classmethod
    def from_unwrapped(
        cls, keys: Iterable[tuple[KeyMaterial, str]]
    ) -> StaticKeyProvider:
        """Build a provider from ``(key_bytes, key_id)`` pairs, first one current.

        Writable input buffers are zeroed once their contents are copied.
        """
        pairs = list(keys)
        if not pairs:
            raise ValueError("at least one key is required")
        (first_bytes, first_id), *rest = pairs
        provider = cls(first_bytes, first_id, rest)
        for material, _ in pairs:
            _wipe(material)
        return provider

    def current_key(self) -> Key:
        """Return a copy of the current key."""
        with self._lock:
            if self._destroyed or self._current is None:
                raise ProviderDestroyedError()
            return self._current.copy()

    def key_by_id(self, key_id: str) -> Key:
        """Return a copy of the key with the given ID."""
        with self._lock:
            if self._destroyed:
                raise ProviderDestroyedError()
            try:
                key = self._keys[key_id]
            except KeyError:
                raise KeyNotFoundError(key_id) from None
            return key.copy()

    def destroy(self) -> None:
        """Zero all key material; later lookups raise ProviderDestroyedError."""
        with self._lock:
            for key in self._keys.values():
                _wipe(key.material)
            if self._current is not None:
                _wipe(self._current.material)
            self._current = None
            self._keys = {}
            self._destroyed = True

    def __enter__(self) -> StaticKeyProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.destroy()