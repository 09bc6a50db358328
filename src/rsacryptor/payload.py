"""Typed payloads: plaintext, encrypted and signed data.

A Payload is an immutable byte buffer tagged with its state. The state decides which operations are legal, and every
operation returns a new payload rather than changing the one it was given.

Typical usage example:

    msg = create_plaintext("Hi there!")
    enc = msg.encrypted(pubkey, Algorithm.GCM)
    assert enc.decrypted(privkey, Algorithm.GCM).string() == "Hi there!"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import enum
import typing

from rsacryptor import pem
from rsacryptor.algorithms import Algorithm
from rsacryptor.algorithms import Padding
from rsacryptor.errors import EncodingFailure

if typing.TYPE_CHECKING:
    from rsacryptor.keys import RSAKey
    from rsacryptor.providers import CryptoProvider


class PayloadState(enum.Enum):
    PLAINTEXT = "plaintext"
    ENCRYPTED = "encrypted"
    SIGNED = "signed"


@dataclasses.dataclass(frozen=True)
class Payload:
    """Data together with its state.

    Attributes:
        data: The raw bytes.
        state: Plaintext, encrypted or signed. Never changes.
    """
    data: bytes
    state: PayloadState = PayloadState.PLAINTEXT

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        object.__setattr__(self, "state", PayloadState(self.state))

    @property
    def base64_string(self) -> str:
        return pem.b64_encode(self.data)

    def encrypted(self,
                  key: "RSAKey",
                  algorithm: Algorithm | str,
                  padding: Padding = Padding.OAEP,
                  provider: "CryptoProvider | str | None" = None) -> "Payload":
        """Encrypts plaintext with a public key. See engine.encrypt."""
        from rsacryptor import engine
        return engine.encrypt(self, key, algorithm, padding, provider)

    def decrypted(self,
                  key: "RSAKey",
                  algorithm: Algorithm | str,
                  padding: Padding = Padding.OAEP,
                  provider: "CryptoProvider | str | None" = None) -> "Payload":
        """Decrypts encrypted data with a private key. See engine.decrypt."""
        from rsacryptor import engine
        return engine.decrypt(self, key, algorithm, padding, provider)

    def signed(self,
               key: "RSAKey",
               algorithm: Algorithm | str,
               padding: Padding = Padding.PKCS1V15,
               provider: "CryptoProvider | str | None" = None) -> "Payload":
        """Signs plaintext with a private key. See engine.sign."""
        from rsacryptor import engine
        return engine.sign(self, key, algorithm, padding, provider)

    def verify(self,
               key: "RSAKey",
               signature: "Payload",
               algorithm: Algorithm | str,
               padding: Padding = Padding.PKCS1V15,
               provider: "CryptoProvider | str | None" = None) -> bool:
        """Checks a signature over this plaintext. See engine.verify."""
        from rsacryptor import engine
        return engine.verify(self, key, signature, algorithm, padding, provider)

    def digest(self, algorithm: Algorithm | str, provider: "CryptoProvider | str | None" = None) -> bytes:
        from rsacryptor import engine
        return engine.digest(self, algorithm, provider)

    def string(self, encoding: str = "utf-8") -> str:
        """Decodes the data as text.

        Raises:
            EncodingFailure: If the data is not valid in the encoding, or the encoding is unknown.
        """
        try:
            return self.data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise EncodingFailure(f"Couldn't convert data to string representation: {exc}") from exc


def create_plaintext(data: bytes | str, encoding: str = "utf-8") -> Payload:
    """Creates a plaintext payload from bytes, or from a string in the given encoding.

    Raises:
        EncodingFailure: If the string cannot be encoded.
    """
    if isinstance(data, str):
        try:
            data = data.encode(encoding)
        except (UnicodeEncodeError, LookupError) as exc:
            raise EncodingFailure(f"Couldn't convert string to data using {encoding}: {exc}") from exc
    return Payload(data, PayloadState.PLAINTEXT)


def create_encrypted(data: bytes | str) -> Payload:
    """Creates an encrypted payload from bytes, or from their Base64 encoding.

    Raises:
        EncodingFailure: If a string is not valid Base64.
    """
    if isinstance(data, str):
        data = pem.b64_decode(data)
    return Payload(data, PayloadState.ENCRYPTED)


def create_signed(data: bytes | str) -> Payload:
    """Creates a signature payload from bytes, or from their Base64 encoding."""
    if isinstance(data, str):
        data = pem.b64_decode(data)
    return Payload(data, PayloadState.SIGNED)
