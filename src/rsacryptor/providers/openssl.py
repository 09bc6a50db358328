"""Provider backed by the cryptography package and its OpenSSL bindings."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import os

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from rsacryptor.algorithms import AEAD_TAG_SIZE
from rsacryptor.algorithms import Padding
from rsacryptor.errors import AuthenticationFailure
from rsacryptor.errors import ProviderFailure
from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.keys import RSAKey
from rsacryptor.providers.base import CryptoProvider

HASHES = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def _hash(hash_name: str) -> hashes.HashAlgorithm:
    CryptoProvider.check_hash(hash_name)
    return HASHES[hash_name]()


def _public_key(key: RSAKey) -> rsa.RSAPublicKey:
    nums = key.public_numbers
    return rsa.RSAPublicNumbers(nums.public_exponent, nums.modulus).public_key()


def _private_key(key: RSAKey) -> rsa.RSAPrivateKey:
    nums = key.numbers
    pubs = rsa.RSAPublicNumbers(nums.public_exponent, nums.modulus)
    try:
        return rsa.RSAPrivateNumbers(nums.prime1, nums.prime2, nums.private_exponent, nums.exponent1, nums.exponent2,
                                     nums.coefficient, pubs).private_key()
    except ValueError as exc:
        raise ProviderFailure(f"Couldn't create key reference from key data: {exc}") from exc


def _encryption_padding(padding: Padding, hash_name: str) -> asym_padding.AsymmetricPadding:
    if padding is Padding.OAEP:
        algo = _hash(hash_name)
        return asym_padding.OAEP(mgf=asym_padding.MGF1(algorithm=algo), algorithm=algo, label=None)
    if padding is Padding.PKCS1V15:
        return asym_padding.PKCS1v15()
    raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for encryption")


def _signature_padding(padding: Padding, hash_name: str) -> asym_padding.AsymmetricPadding:
    if padding is Padding.PKCS1V15:
        return asym_padding.PKCS1v15()
    if padding is Padding.PSS:
        return asym_padding.PSS(mgf=asym_padding.MGF1(_hash(hash_name)), salt_length=asym_padding.PSS.DIGEST_LENGTH)
    raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for signatures")


class OpenSSLProvider(CryptoProvider):
    """CryptoProvider on top of cryptography's hazmat layer."""
    name = "openssl"

    def rsa_encrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        pad = _encryption_padding(padding, hash_name)
        try:
            return _public_key(key).encrypt(data, pad)
        except ValueError as exc:
            raise ProviderFailure(f"Encryption failed: {exc}") from exc

    def rsa_decrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        pad = _encryption_padding(padding, hash_name)
        privkey = _private_key(key)
        try:
            return privkey.decrypt(data, pad)
        except ValueError as exc:
            raise ProviderFailure(f"Decryption failed: {exc}") from exc

    def rsa_sign(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        pad = _signature_padding(padding, hash_name)
        privkey = _private_key(key)
        try:
            return privkey.sign(data, pad, _hash(hash_name))
        except ValueError as exc:
            raise ProviderFailure(f"Signing failed: {exc}") from exc

    def rsa_verify(self, key: RSAKey, data: bytes, signature: bytes, padding: Padding, hash_name: str) -> bool:
        pad = _signature_padding(padding, hash_name)
        try:
            _public_key(key).verify(signature, data, pad, _hash(hash_name))
        except InvalidSignature:
            return False
        except ValueError as exc:
            raise ProviderFailure(f"Verification failed: {exc}") from exc
        return True

    def aead_encrypt(self, key: bytes, nonce: bytes, data: bytes, aad: bytes) -> tuple[bytes, bytes]:
        try:
            sealed = AESGCM(key).encrypt(nonce, data, aad)
        except ValueError as exc:
            raise ProviderFailure(f"Encryption failed: {exc}") from exc
        return sealed[:-AEAD_TAG_SIZE], sealed[-AEAD_TAG_SIZE:]

    def aead_decrypt(self, key: bytes, nonce: bytes, data: bytes, tag: bytes, aad: bytes) -> bytes:
        if len(tag) != AEAD_TAG_SIZE:
            raise AuthenticationFailure(f"Decryption failed: tag is {len(tag)} bytes, expected {AEAD_TAG_SIZE}")
        try:
            return AESGCM(key).decrypt(nonce, data + tag, aad)
        except InvalidTag as exc:
            raise AuthenticationFailure("Decryption failed: authentication tag mismatch") from exc
        except ValueError as exc:
            raise ProviderFailure(f"Decryption failed: {exc}") from exc

    def random_bytes(self, size: int) -> bytes:
        return os.urandom(size)

    def digest(self, data: bytes, hash_name: str) -> bytes:
        hasher = hashes.Hash(_hash(hash_name))
        hasher.update(data)
        return hasher.finalize()
