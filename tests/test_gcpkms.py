from types import SimpleNamespace

import pytest

from configcrypto.errors import InvalidKeySizeError, ProviderError
from configcrypto.gcpkms import EncryptedKey, new_provider
from configcrypto.keys import KeyProvider

RESOURCE = "projects/p/locations/l/keyRings/r/cryptoKeys/k"


def make_key(size, start=0):
    return bytearray((i + start) % 256 for i in range(size))


class MockClient:
    def __init__(self, keys=None, fail_on=None):
        self.keys = keys or {}
        self.fail_on = fail_on
        self.requests = []

    def decrypt(self, request):
        self.requests.append(dict(request))
        ciphertext = request["ciphertext"]
        if ciphertext == self.fail_on:
            raise RuntimeError("kms: permission denied")
        try:
            return SimpleNamespace(plaintext=self.keys[ciphertext])
        except KeyError:
            raise RuntimeError("kms: invalid ciphertext") from None


def test_new():
    client = MockClient({b"encrypted-key-1": make_key(32)})
    provider = new_provider(client, EncryptedKey(b"encrypted-key-1", "key-1", RESOURCE))
    key = provider.current_key()
    assert key.key_id == "key-1"
    assert key.material == make_key(32)


def test_request_carries_resource_name():
    client = MockClient({b"encrypted-key-1": make_key(32)})
    new_provider(client, EncryptedKey(b"encrypted-key-1", "key-1", RESOURCE))
    assert client.requests == [{"name": RESOURCE, "ciphertext": b"encrypted-key-1"}]


def test_new_with_rotation():
    client = MockClient(
        {b"encrypted-new": make_key(32), b"encrypted-old": make_key(32, 100)}
    )
    provider = new_provider(
        client,
        EncryptedKey(b"encrypted-new", "key-v2", RESOURCE),
        EncryptedKey(b"encrypted-old", "key-v1", RESOURCE),
    )
    assert provider.current_key().key_id == "key-v2"
    old = provider.key_by_id("key-v1")
    assert old.key_id == "key-v1"
    assert old.material == make_key(32, 100)


def test_new_no_keys():
    with pytest.raises(ProviderError, match="at least one encrypted key"):
        new_provider(MockClient())


def test_new_decrypt_failure():
    client = MockClient(fail_on=b"encrypted-key-1")
    with pytest.raises(ProviderError, match="failed to decrypt key 'key-1'"):
        new_provider(client, EncryptedKey(b"encrypted-key-1", "key-1", RESOURCE))


def test_new_unknown_ciphertext():
    with pytest.raises(ProviderError, match="invalid ciphertext"):
        new_provider(MockClient(), EncryptedKey(b"missing", "key-1", RESOURCE))


def test_new_decrypted_key_zeroed():
    plaintext = make_key(32)
    client = MockClient({b"encrypted": plaintext})
    provider = new_provider(client, EncryptedKey(b"encrypted", "key-1", RESOURCE))
    assert plaintext == bytearray(32)
    assert provider.current_key().material == make_key(32)


def test_new_returns_key_provider():
    client = MockClient({b"encrypted": make_key(32)})
    provider = new_provider(client, EncryptedKey(b"encrypted", "key-1", RESOURCE))
    assert isinstance(provider, KeyProvider)
    assert provider.key_by_id("key-1").key_id == "key-1"


def test_new_invalid_key_size():
    client = MockClient({b"encrypted": make_key(16)})
    with pytest.raises(InvalidKeySizeError):
        new_provider(client, EncryptedKey(b"encrypted", "key-1", RESOURCE))


def test_new_rejects_wrong_argument_type():
    with pytest.raises(TypeError, match="expected EncryptedKey"):
        new_provider(MockClient(), (b"encrypted", "key-1", RESOURCE))