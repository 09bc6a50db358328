"""RSA key handles.

An RSAKey keeps the DER bytes it was built from together with its role. Public keys are kept as supplied, with or
without the X.509 header; private keys are normalized to PKCS#1. Both are decoded into their integer components up
front, so malformed material is rejected when the key is created rather than mid-operation.

Typical usage example:

    priv = RSAKey.from_file(pathlib.Path("id_rsa"))
    pub = RSAKey.from_pem(pem_text)
    pub.export(pathlib.Path("id_rsa.pub"))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import pathlib

from rsacryptor import headers
from rsacryptor import pem
from rsacryptor.errors import EncodingFailure
from rsacryptor.errors import MalformedKeyData


class KeyRole(enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class RSAKey:
    """An RSA public or private key.

    Attributes:
        der: The DER bytes of the key. X.509 or bare PKCS#1 for public keys, PKCS#1 for private keys.
        role: Whether the key is public or private.
        numbers: The decoded integer components, headers.PublicNumbers or headers.PrivateNumbers.
        bits: Length of the modulus in bits.
    """

    def __init__(self, data: bytes, role: KeyRole) -> None:
        """Builds a key from DER bytes.

        Args:
            data: DER key. Public keys may carry an X.509 header; private keys may be PKCS#8 or PKCS#1.
            role: The role of the key.

        Raises:
            MalformedKeyData: If the bytes do not form an RSA key of the given role.
        """
        self.role = KeyRole(role)
        if self.role is KeyRole.PUBLIC:
            self.der = bytes(data)
            self.numbers = headers.parse_public_numbers(headers.strip_x509_header(self.der))
        else:
            self.der = headers.unwrap_pkcs8(bytes(data))
            self.numbers = headers.parse_private_numbers(self.der)
        self.bits = self.numbers.modulus.bit_length()

    def __repr__(self) -> str:
        return f"<RSAKey {self.role.value.lower()} {self.bits} bits>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RSAKey):
            return NotImplemented
        return self.role is other.role and self.numbers == other.numbers

    def __hash__(self) -> int:
        return hash((self.role, self.numbers))

    @property
    def size(self) -> int:
        """Length of the modulus in bytes, which is also the size of every RSA block this key produces."""
        return (self.bits + 7) // 8

    @property
    def is_public(self) -> bool:
        return self.role is KeyRole.PUBLIC

    @property
    def is_private(self) -> bool:
        return self.role is KeyRole.PRIVATE

    @property
    def public_numbers(self) -> headers.PublicNumbers:
        if isinstance(self.numbers, headers.PrivateNumbers):
            return self.numbers.public
        return self.numbers

    @property
    def public_key_bytes(self) -> bytes:
        """The bare DER SEQUENCE { modulus, publicExponent } of the key, byte-exact to the source encoding."""
        if self.is_public:
            return headers.strip_x509_header(self.der)
        return headers.public_bytes_from_private(self.der)

    def public_key(self) -> "RSAKey":
        """Returns the public half of the key (the key itself if it is public)."""
        if self.is_public:
            return self
        return RSAKey(self.public_key_bytes, KeyRole.PUBLIC)

    @property
    def wrapped_der(self) -> bytes:
        """DER of the key in its interchange wrapper: X.509 SubjectPublicKeyInfo or PKCS#8."""
        if self.is_public:
            return headers.add_x509_header(self.public_key_bytes)
        return headers.wrap_pkcs8(self.der)

    @property
    def pem(self) -> str:
        return pem.der_to_pem(self.wrapped_der, self.role.value)

    def export(self, file: pathlib.Path) -> None:
        """Writes the key to file as PEM.

        We use the X.509 wrapper for public keys and PKCS#8 for private keys, as those are what OpenSSL and most
        other consumers expect behind generic PUBLIC KEY / PRIVATE KEY markers.

        Args:
            file: The file to export to.
        """
        pem.write_pem(file, self.role.value, self.wrapped_der)

    @classmethod
    def from_der(cls, data: bytes, role: KeyRole) -> "RSAKey":
        return cls(data, role)

    @classmethod
    def from_base64(cls, text: str, role: KeyRole) -> "RSAKey":
        """Builds a key from the Base64 encoding of its DER bytes."""
        return cls(pem.b64_decode(text), role)

    @classmethod
    def from_pem(cls, text: str, role: KeyRole | None = None) -> "RSAKey":
        """Builds a key from PEM text.

        Args:
            text: The PEM text.
            role: The role of the key. Read from the BEGIN marker if not given.

        Raises:
            MalformedKeyData: If no role is given and the markers do not name one.
            EncodingFailure: If the body is not Base64.
        """
        if role is None:
            subtype = pem.pem_subtype(text)
            if subtype is None:
                raise MalformedKeyData("Couldn't determine the key role from the PEM markers")
            role = KeyRole(subtype)
        return cls(pem.pem_to_der(text), role)

    @classmethod
    def from_file(cls, file: pathlib.Path, role: KeyRole | None = None) -> "RSAKey":
        """Loads a key from a PEM or DER file.

        Args:
            file: The file to read.
            role: The role of the key. Mandatory for DER files, read from the markers of PEM files if not given.

        Raises:
            MalformedKeyData: If the role cannot be determined or the key is malformed.
            EncodingFailure: If a PEM file is not ASCII or its body is not Base64.
        """
        with open(file, "rb") as f:
            data = f.read()
        if pem.is_pem(data):
            try:
                text = data.decode("ascii")
            except UnicodeDecodeError as exc:
                raise EncodingFailure(f"PEM file {file} is not ASCII text") from exc
            return cls.from_pem(text, role)
        if role is None:
            raise MalformedKeyData(f"Key role must be given for DER file {file}")
        return cls(data, role)
