import pytest

from configcrypto.azurekv import RSA_OAEP, RSA_OAEP_256, WrappedKey, new_provider
from configcrypto.errors import InvalidKeyIDError, ProviderError
from configcrypto.keys import KeyProvider


class MockClient:
    def __init__(self, keys=None, fail_on=None):
        self.keys = keys or {}
        self.fail_on = fail_on
        self.calls = []

    def unwrap_key(self, key_name, key_version, algorithm, value):
        self.calls.append((key_name, key_version, algorithm, value))
        if value == self.fail_on:
            raise RuntimeError("keyvault: access denied")
        if value not in self.keys:
            raise RuntimeError("keyvault: invalid ciphertext")
        return self.keys[value]


def make_key(size=32, start=0):
    return bytearray((i + start) % 256 for i in range(size))


def test_new():
    client = MockClient({b"wrapped-key-1": make_key()})
    provider = new_provider(
        client, WrappedKey(b"wrapped-key-1", "key-1", "my-key", "v1")
    )
    key = provider.current_key()
    assert key.key_id == "key-1"
    assert key.material == make_key()


def test_new_with_rotation():
    client = MockClient(
        {b"wrapped-new": make_key(), b"wrapped-old": make_key(start=100)}
    )
    provider = new_provider(
        client,
        WrappedKey(b"wrapped-new", "key-v2", "my-key", "v2"),
        WrappedKey(b"wrapped-old", "key-v1", "my-key", "v1"),
    )
    assert provider.current_key().key_id == "key-v2"
    old = provider.key_by_id("key-v1")
    assert old.key_id == "key-v1"
    assert old.material == make_key(start=100)


def test_new_no_keys():
    with pytest.raises(ProviderError, match="at least one wrapped key"):
        new_provider(MockClient())


def test_new_unwrap_failure():
    client = MockClient(fail_on=b"wrapped-key-1")
    with pytest.raises(ProviderError, match="key-1") as info:
        new_provider(client, WrappedKey(b"wrapped-key-1", "key-1", "my-key", "v1"))
    assert "access denied" in str(info.value)


def test_new_decrypted_key_zeroed():
    plaintext = make_key()
    client = MockClient({b"wrapped": plaintext})
    provider = new_provider(client, WrappedKey(b"wrapped", "key-1", "my-key", "v1"))
    assert plaintext == bytearray(32)
    assert provider.current_key().material == make_key()


def test_default_algorithm_and_key_reference():
    client = MockClient({b"wrapped": make_key()})
    new_provider(client, WrappedKey(b"wrapped", "key-1", "my-key", "v1"))
    assert client.calls == [("my-key", "v1", RSA_OAEP_256, b"wrapped")]


def test_new_with_algorithm():
    client = MockClient({b"wrapped": make_key()})
    provider = new_provider(
        client, WrappedKey(b"wrapped", "key-1", "my-key", "v1", RSA_OAEP)
    )
    assert isinstance(provider, KeyProvider)
    assert client.calls[0][2] == "RSA-OAEP"


def test_new_duplicate_ids_rejected():
    client = MockClient({b"a": make_key(), b"b": make_key(start=7)})
    with pytest.raises(InvalidKeyIDError):
        new_provider(
            client,
            WrappedKey(b"a", "key-1", "my-key", "v1"),
            WrappedKey(b"b", "key-1", "my-key", "v2"),
        )