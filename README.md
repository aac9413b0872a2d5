# configcrypto

Envelope encryption for configuration values.

Each encoded value gets its own random 256-bit data key (DEK). The DEK
encrypts the serialised value with AES-256-GCM, and a key-encryption key
(KEK) from a key provider encrypts the DEK. The KEK's ID is written into a
small binary header and bound to both ciphertexts as associated data, so
keys can be rotated while values encrypted earlier stay readable.

## Installation

```
pip install configcrypto
```

The only runtime dependency is `cryptography`.

## Quick start

```python
from configcrypto.codec import EncryptedCodec, JsonCodec
from configcrypto.keys import StaticKeyProvider

key_bytes = bytes(range(32))            # 32 bytes for AES-256
provider = StaticKeyProvider(key_bytes, "key-1")

codec = EncryptedCodec(JsonCodec(), provider)
print(codec.name)                        # "encrypted:json"

blob = codec.encode({"host": "localhost", "port": 8080})
print(codec.decode(blob))                # {'host': 'localhost', 'port': 8080}
```

`JsonCodec` writes compact UTF-8 JSON. Any object with a `name` attribute
and `encode(value) -> bytes` / `decode(data) -> value` methods (the
`InnerCodec` protocol) can be wrapped instead. Two encodings of the same
value differ, because the DEK and nonces are random each time.

## Key providers

`configcrypto.keys` defines `Key` (a `key_id` and its `material`) and the
`KeyProvider` protocol: `current_key()` for new encryptions and
`key_by_id(key_id)` for decryption.

`StaticKeyProvider` keeps keys in memory and is safe to share between
threads. Key bytes are copied on construction, and every key it returns is
a fresh copy.

### Key rotation

Make the new key current and keep the old ones for existing data:

```python
provider = StaticKeyProvider(new_key_bytes, "key-v2",
                             old_keys=[(old_key_bytes, "key-v1")])
```

New values are encrypted with `key-v2`; values whose header names `key-v1`
are decrypted with the old key. Keys that are not 32 bytes raise
`InvalidKeySizeError`; empty or duplicate IDs raise `InvalidKeyIDError`.

`StaticKeyProvider.from_unwrapped(pairs)` builds a provider from
`(key_bytes, key_id)` pairs, the first one current, and zeroes any writable
input buffers after copying them.

### Destroying key material

`provider.destroy()` zeroes all key material held by the provider; later
lookups raise `ProviderDestroyedError`. The provider is also a context
manager that destroys itself on exit:

```python
with StaticKeyProvider(key_bytes, "key-1") as provider:
    blob = EncryptedCodec(JsonCodec(), provider).encode("value")
```

## Cloud and Vault key providers

`configcrypto.awskms`, `configcrypto.azurekv`, `configcrypto.gcpkms` and
`configcrypto.vault` each have `new_provider(client, *keys)`. It unwraps the
given keys once through the client you pass in and returns a
`StaticKeyProvider`; the first key is current, the rest are kept for
decryption, and the client is not kept. With no keys, or when the client
fails, it raises `ProviderError`.

| Module     | Key entry                                                        | Client method the module calls                                         |
|------------|------------------------------------------------------------------|-------------------------------------------------------------------------|
| `awskms`   | `EncryptedKey(ciphertext, key_id, kms_key_id="")`                | `decrypt(CiphertextBlob=..., KeyId=...)` returning a mapping with `Plaintext` |
| `azurekv`  | `WrappedKey(ciphertext, key_id, key_name, key_version, algorithm="RSA-OAEP-256")` | `unwrap_key(key_name, key_version, algorithm, value)` returning bytes |
| `gcpkms`   | `EncryptedKey(ciphertext, key_id, resource_name)`                | `decrypt(request={"name": ..., "ciphertext": ...})` returning an object with `plaintext` |
| `vault`    | `EncryptedKey(ciphertext, key_id, transit_key_name)`             | `transit_decrypt(key_name, ciphertext)` returning bytes                |

`configcrypto.azurekv` also has the algorithm names `RSA_OAEP`,
`RSA_OAEP_256` and `RSA1_5`.

```python
from configcrypto import vault

provider = vault.new_provider(
    transit_client,
    vault.EncryptedKey("vault:v1:...", "key-1", "transit-key"),
)
```

## Low-level API

- `configcrypto.envelope.encrypt(plaintext, kek)` encrypts raw bytes with a
  `Key`; `decrypt(data, provider)` reverses it.
- `configcrypto.format` reads and writes the binary header: `Header`,
  `read_header(data)`, `write_header(writer, header)` and
  `header_size(key_id)`.

## Binary format

```
"EC" | version (1) | algorithm (1) | key-id length (1) | key id
     | DEK nonce (12) | encrypted DEK (48) | data nonce (12) | ciphertext + tag (16)
```

Key IDs are at most 255 bytes of UTF-8.

## Errors

All errors derive from `configcrypto.errors.CryptoError`:
`KeyNotFoundError`, `InvalidKeySizeError`, `InvalidFormatError`,
`DecryptionFailedError` (wrong key or tampered data), `InvalidKeyIDError`,
`ProviderDestroyedError` and `ProviderError`. Failures of the inner codec or
of a provider that raises something else are reported as a plain
`CryptoError`.

## What it does not do

The package ships no clients for AWS, Azure, Google Cloud or Vault; you pass
in a client object with the method shown above. It has no configuration
store and no registry of codecs: it only turns values into encrypted bytes
and back.

## Running the tests

```
pip install -e ".[test]"
pytest
```