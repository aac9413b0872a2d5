"""Exceptions raised by the envelope encryption package."""

from __future__ import annotations


class CryptoError(Exception):
    """Base class for every error raised by this package."""

    reason = "crypto"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = ": ".join(part for part in (self.reason, detail) if part)
        super().__init__(message)


class KeyNotFoundError(CryptoError, LookupError):
    """A key ID is not known to the provider."""

    reason = "crypto: key not found"


class InvalidKeySizeError(CryptoError, ValueError):
    """A key is not 32 bytes long (AES-256)."""

    reason = "crypto: invalid key size, must be 32 bytes"


class InvalidFormatError(CryptoError, ValueError):
    """Encrypted data does not follow the expected binary layout."""

    reason = "crypto: invalid encrypted data format"


class DecryptionFailedError(CryptoError):
    """Decryption failed: wrong key or tampered data."""

    reason = "crypto: decryption failed"


class InvalidKeyIDError(CryptoError, ValueError):
    """A key ID is empty, duplicated or otherwise unusable."""

    reason = "crypto: invalid key ID"


class ProviderDestroyedError(CryptoError, RuntimeError):
    """The key provider has been destroyed and holds no key material."""

    reason = "crypto: provider has been destroyed"


class ProviderError(CryptoError):
    """A remote key service could not supply key material.

    The message is the detail itself, which names the service.
    """

    reason = ""