"""RSA encryption, decryption, signing and verification over typed payloads.

Provides RSA-OAEP and PKCS#1 v1.5 encryption, a hybrid RSA + AES-GCM envelope for payloads of any length, PKCS#1 v1.5
and PSS signatures, and the key plumbing (PEM, DER, Base64, X.509 and PKCS#8 headers) needed to use keys from other
platforms. The primitives come from an interchangeable CryptoProvider: "openssl" (cryptography) or "native".

Typical usage example:

    priv = RSAKey.from_file(pathlib.Path("key.pem"))
    pub = priv.public_key()
    c = create_plaintext("Hi there!").encrypted(pub, Algorithm.GCM)
    r = c.decrypted(priv, Algorithm.GCM).string()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacryptor.algorithms import Algorithm
from rsacryptor.algorithms import Padding
from rsacryptor.errors import AuthenticationFailure
from rsacryptor.errors import EncodingFailure
from rsacryptor.errors import InvalidKeyRole
from rsacryptor.errors import InvalidPayloadState
from rsacryptor.errors import MalformedKeyData
from rsacryptor.errors import ProviderFailure
from rsacryptor.errors import RSACryptorError
from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.keys import KeyRole
from rsacryptor.keys import RSAKey
from rsacryptor.payload import create_encrypted
from rsacryptor.payload import create_plaintext
from rsacryptor.payload import create_signed
from rsacryptor.payload import Payload
from rsacryptor.payload import PayloadState
from rsacryptor.providers import CryptoProvider
from rsacryptor.providers import get_provider
from rsacryptor.providers import set_default_provider

__version__ = "0.1.0"
__all__ = [
    "Algorithm",
    "AuthenticationFailure",
    "CryptoProvider",
    "EncodingFailure",
    "InvalidKeyRole",
    "InvalidPayloadState",
    "KeyRole",
    "MalformedKeyData",
    "Padding",
    "Payload",
    "PayloadState",
    "ProviderFailure",
    "RSACryptorError",
    "RSAKey",
    "UnsupportedAlgorithm",
    "create_encrypted",
    "create_plaintext",
    "create_signed",
    "get_provider",
    "set_default_provider",
]
