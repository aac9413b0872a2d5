"""Key provider whose keys are unwrapped with Google Cloud KMS.

Encrypted key material is decrypted once at construction with the Cloud
KMS ``Decrypt`` call and cached in a
:class:`~configcrypto.keys.StaticKeyProvider`. The client is not kept.

The client needs a ``decrypt(request=...)`` method that takes a mapping
with ``name`` and ``ciphertext`` entries and returns an object with a
``plaintext`` attribute. A ``KeyManagementServiceClient`` fits.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from configcrypto.errors import ProviderError
from configcrypto.keys import KeyMaterial, StaticKeyProvider


class _Client(Protocol):
    def decrypt(self, request: Mapping[str, Any]) -> Any: ...


@dataclass(frozen=True)
class EncryptedKey:
    """A Cloud KMS-encrypted key, the ID it is known by, and its CryptoKey.

    ``resource_name`` is the full CryptoKey resource name,
    ``projects/*/locations/*/keyRings/*/cryptoKeys/*``.
    """

    ciphertext: bytes
    key_id: str
    resource_name: str


def _unwrap(client: _Client, entry: EncryptedKey) -> KeyMaterial:
    request = {"name": entry.resource_name, "ciphertext": bytes(entry.ciphertext)}
    try:
        return client.decrypt(request=request).plaintext
    except Exception as exc:
        raise ProviderError(
            f"gcpkms: failed to decrypt key {entry.key_id!r}: {exc}"
        ) from exc


def new_provider(client: _Client, *args: EncryptedKey) -> StaticKeyProvider:
    """Decrypt every key with Cloud KMS and return a provider holding them.

    The first key is current for new encryptions; the rest are kept for
    decrypting older data. Writable plaintext buffers returned by the
    client are zeroed once copied.
    """
    for entry in args:
        if not isinstance(entry, EncryptedKey):
            raise TypeError(f"expected EncryptedKey, got {type(entry).__name__}")
    if not args:
        raise ProviderError("gcpkms: at least one encrypted key is required")

    unwrapped = [(_unwrap(client, entry), entry.key_id) for entry in args]
    return StaticKeyProvider.from_unwrapped(unwrapped)