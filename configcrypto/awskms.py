"""Key provider whose keys are unwrapped with AWS KMS.

Encrypted key material, as produced by KMS ``Encrypt`` or
``GenerateDataKey``, is decrypted once at construction and cached in a
:class:`~configcrypto.keys.StaticKeyProvider`. The client is not kept.

The client only needs a ``decrypt`` method that takes the keyword
arguments ``CiphertextBlob`` and, optionally, ``KeyId``, and returns a
mapping with a ``Plaintext`` entry. A boto3 KMS client fits.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from configcrypto.errors import ProviderError
from configcrypto.keys import StaticKeyProvider


class _Client(Protocol):
    def decrypt(self, **params: Any) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class EncryptedKey:
    """A KMS-encrypted key and the ID it is known by.

    ``kms_key_id`` is the ARN or alias of the KMS key that encrypted it;
    when empty, KMS works it out from the ciphertext.
    """

    ciphertext: bytes
    key_id: str
    kms_key_id: str = ""


def _unwrap(client: _Client, entry: EncryptedKey) -> Any:
    params: dict[str, Any] = {"CiphertextBlob": bytes(entry.ciphertext)}
    if entry.kms_key_id:
        params["KeyId"] = entry.kms_key_id
    try:
        return client.decrypt(**params)["Plaintext"]
    except Exception as exc:
        raise ProviderError(
            f"awskms: failed to decrypt key {entry.key_id!r}: {exc}"
        ) from exc


def new_provider(client: _Client, *args: EncryptedKey) -> StaticKeyProvider:
    """Decrypt every key with KMS and return a provider holding them.

    The first key is current for new encryptions; the rest are kept for
    decrypting older data. Writable plaintext buffers returned by the
    client are zeroed once copied.
    """
    for entry in args:
        if not isinstance(entry, EncryptedKey):
            raise TypeError(f"expected EncryptedKey, got {type(entry).__name__}")
    if not args:
        raise ProviderError("awskms: at least one encrypted key is required")

    unwrapped = [(_unwrap(client, entry), entry.key_id) for entry in args]
    return StaticKeyProvider.from_unwrapped(unwrapped)