"""Key provider whose keys are unwrapped with Azure Key Vault.

Key material wrapped with the Key Vault ``WrapKey`` operation is unwrapped
once at construction and cached in a
:class:`~configcrypto.keys.StaticKeyProvider`. The client is not kept.

The client needs an ``unwrap_key(key_name, key_version, algorithm, value)``
method returning the unwrapped key bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from configcrypto.errors import ProviderError
from configcrypto.keys import KeyMaterial, StaticKeyProvider

RSA_OAEP = "RSA-OAEP"
RSA_OAEP_256 = "RSA-OAEP-256"
RSA1_5 = "RSA1_5"


class _Client(Protocol):
    def unwrap_key(
        self, key_name: str, key_version: str, algorithm: str, value: bytes
    ) -> KeyMaterial: ...


@dataclass(frozen=True)
class WrappedKey:
    """A wrapped key, the ID it is known by, and the vault key that wrapped it."""

    ciphertext: bytes
    key_id: str
    key_name: str
    key_version: str
    algorithm: str = RSA_OAEP_256


def _unwrap(client: _Client, entry: WrappedKey) -> KeyMaterial:
    try:
        return client.unwrap_key(
            entry.key_name,
            entry.key_version,
            entry.algorithm,
            bytes(entry.ciphertext),
        )
    except Exception as exc:
        raise ProviderError(
            f"azurekv: failed to unwrap key {entry.key_id!r}: {exc}"
        ) from exc


def new_provider(client: _Client, *args: WrappedKey) -> StaticKeyProvider:
    """Unwrap every key with Key Vault and return a provider holding them.

    The first key is current for new encryptions; the rest are kept for
    decrypting older data. Writable buffers returned by the client are
    zeroed once copied.
    """
    for entry in args:
        if not isinstance(entry, WrappedKey):
            raise TypeError(f"expected WrappedKey, got {type(entry).__name__}")
    if not args:
        raise ProviderError("azurekv: at least one wrapped key is required")

    unwrapped = [(_unwrap(client, entry), entry.key_id) for entry in args]
    return StaticKeyProvider.from_unwrapped(unwrapped)