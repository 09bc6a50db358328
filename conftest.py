"""Configures pytest further."""
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

from rsacryptor import KeyRole
from rsacryptor import RSAKey

e = 65537


class KeySet:
    """A generated key pair, both as cryptography objects and as rsacryptor keys."""

    def __init__(self, bits: int) -> None:
        self.bits = bits
        self.crypto = rsa.generate_private_key(public_exponent=e, key_size=bits)
        self.spki = self.crypto.public_key().public_bytes(serialization.Encoding.DER,
                                                          serialization.PublicFormat.SubjectPublicKeyInfo)
        self.pkcs1_pub = self.crypto.public_key().public_bytes(serialization.Encoding.DER,
                                                               serialization.PublicFormat.PKCS1)
        self.pkcs1_priv = self.crypto.private_bytes(serialization.Encoding.DER,
                                                    serialization.PrivateFormat.TraditionalOpenSSL,
                                                    serialization.NoEncryption())
        self.pkcs8 = self.crypto.private_bytes(serialization.Encoding.DER, serialization.PrivateFormat.PKCS8,
                                               serialization.NoEncryption())
        self.pub = RSAKey.from_der(self.spki, KeyRole.PUBLIC)
        self.priv = RSAKey.from_der(self.pkcs1_priv, KeyRole.PRIVATE)


_keysets: dict[tuple[int, int], KeySet] = {}


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--skip-slow"):
        return
    skip = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def make_keyset():
    """Returns a factory of cached key pairs, distinct per (bits, index)."""

    def _make(bits: int, index: int = 0) -> KeySet:
        if (bits, index) not in _keysets:
            _keysets[(bits, index)] = KeySet(bits)
        return _keysets[(bits, index)]

    return _make


@pytest.fixture(params=["openssl", "native"])
def provider(request):
    from rsacryptor.providers import create_provider
    return create_provider(request.param)
