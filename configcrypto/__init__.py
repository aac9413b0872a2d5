"""Envelope encryption for configuration values, with static, cloud KMS and Vault key providers."""

__version__ = "0.1.0"

__all__ = [
    "awskms",
    "azurekv",
    "codec",
    "envelope",
    "errors",
    "format",
    "gcpkms",
    "keys",
    "vault",
]