"""Key provider whose keys are decrypted with a Vault Transit engine.

Key material encrypted with the Transit ``encrypt`` endpoint is decrypted
once at construction and cached in a
:class:`~configcrypto.keys.StaticKeyProvider`. The client is not kept.

The client needs a ``transit_decrypt(key_name, ciphertext)`` method that
takes the Transit key name and a ciphertext such as ``vault:v1:...`` and
returns the plaintext bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from configcrypto.errors import ProviderError
from configcrypto.keys import KeyMaterial, StaticKeyProvider


class _Client(Protocol):
    def transit_decrypt(self, key_name: str, ciphertext: str) -> KeyMaterial: ...


@dataclass(frozen=True)
class EncryptedKey:
    """A Transit-encrypted key, the ID it is known by, and its Transit key."""

    ciphertext: str
    key_id: str
    transit_key_name: str


def _unwrap(client: _Client, entry: EncryptedKey) -> KeyMaterial:
    try:
        return client.transit_decrypt(entry.transit_key_name, entry.ciphertext)
    except Exception as exc:
        raise ProviderError(
            f"vault: failed to decrypt key {entry.key_id!r}: {exc}"
        ) from exc


def new_provider(client: _Client, *args: EncryptedKey) -> StaticKeyProvider:
    """Decrypt every key with Vault Transit and return a provider holding them.

    The first key is current for new encryptions; the rest are kept for
    decrypting older data. Writable plaintext buffers returned by the
    client are zeroed once copied.
    """
    for entry in args:
        if not isinstance(entry, EncryptedKey):
            raise TypeError(f"expected EncryptedKey, got {type(entry).__name__}")
    if not args:
        raise ProviderError("vault: at least one encrypted key is required")

    unwrapped = [(_unwrap(client, entry), entry.key_id) for entry in args]
    return StaticKeyProvider.from_unwrapped(unwrapped)