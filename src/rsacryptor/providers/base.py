"""The capability interface every cryptographic backend implements.

The envelope and header code only ever talk to a CryptoProvider, never to a concrete library, so backends can be
swapped without changing any wire format.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import abc

from rsacryptor.algorithms import HASH_NAMES
from rsacryptor.algorithms import Padding
from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.keys import RSAKey


class CryptoProvider(abc.ABC):
    """RSA, AES-GCM, digest and randomness primitives.

    Implementations must raise ProviderFailure for errors reported by the underlying library, keeping its message,
    and AuthenticationFailure when an AEAD tag does not verify. Every call builds its own cipher and key objects.

    Attributes:
        name: Registry name of the provider.
    """
    name: str = ""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    @staticmethod
    def check_hash(hash_name: str) -> None:
        if hash_name not in HASH_NAMES:
            raise UnsupportedAlgorithm(f"Unknown hash function {hash_name!r}")

    @abc.abstractmethod
    def rsa_encrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        """Encrypts data with a public key.

        Args:
            key: The public key.
            data: The message, short enough for one RSA block under the padding.
            padding: Padding.OAEP or Padding.PKCS1V15.
            hash_name: OAEP and MGF1 digest. Ignored for PKCS#1 v1.5.

        Returns:
            The ciphertext, exactly key.size bytes.
        """

    @abc.abstractmethod
    def rsa_decrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        """Decrypts one RSA block with a private key."""

    @abc.abstractmethod
    def rsa_sign(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        """Hashes data and signs the digest with a private key.

        Args:
            key: The private key.
            data: The message to sign (not its digest).
            padding: Padding.PKCS1V15 or Padding.PSS. PSS uses MGF1 with the same digest and a salt as long as it.
            hash_name: The digest.

        Returns:
            The signature, exactly key.size bytes.
        """

    @abc.abstractmethod
    def rsa_verify(self, key: RSAKey, data: bytes, signature: bytes, padding: Padding, hash_name: str) -> bool:
        """Checks a signature with a public key. False for any signature that does not verify."""

    @abc.abstractmethod
    def aead_encrypt(self, key: bytes, nonce: bytes, data: bytes, aad: bytes) -> tuple[bytes, bytes]:
        """AES-GCM encryption with a 16 or 32-byte key.

        Returns:
            The ciphertext, as long as data, and the 16-byte tag.
        """

    @abc.abstractmethod
    def aead_decrypt(self, key: bytes, nonce: bytes, data: bytes, tag: bytes, aad: bytes) -> bytes:
        """AES-GCM decryption. Raises AuthenticationFailure if the tag does not verify."""

    @abc.abstractmethod
    def random_bytes(self, size: int) -> bytes:
        """Cryptographically secure random bytes."""

    @abc.abstractmethod
    def digest(self, data: bytes, hash_name: str) -> bytes:
        """Digest of data with one of HASH_NAMES."""
