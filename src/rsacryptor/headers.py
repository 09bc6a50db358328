"""Key header transcoding between X.509, PKCS#8 and bare PKCS#1 RSA keys.

The two byte-level routines, strip_x509_header and public_bytes_from_private, produce the additional authenticated
data of the hybrid envelope and therefore have to agree byte for byte: the sequence stripped from a public key must
equal the one derived from its private key. They walk the buffers directly instead of decoding and re-encoding, so
that a key is always authenticated exactly as it was supplied.

Wrapping and full decoding go through pyasn1, as those only have to be structurally correct.

Typical usage example:

    aad = strip_x509_header(spki_der)
    assert aad == public_bytes_from_private(pkcs1_private_der)
    mod, expo = parse_public_numbers(aad)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import typing

from pyasn1 import error
from pyasn1.codec.der import decoder
from pyasn1.codec.der import encoder
from pyasn1.codec.native import encoder as localize
from pyasn1.type import univ
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc5280
from pyasn1_modules import rfc8017

from rsacryptor import der
from rsacryptor.errors import MalformedKeyData

# SEQUENCE { OID rsaEncryption, NULL }: 0x30 0x0d 0x06 0x09 0x2a 0x86 0x48 0x86 0xf7 0x0d 0x01 0x01 0x01 0x05 0x00
X509_ALGORITHM_SPAN = 15
# INTEGER version: 0x02 0x01 0x00
PKCS1_VERSION_SPAN = 3


class PublicNumbers(typing.NamedTuple):
    modulus: int
    public_exponent: int


class PrivateNumbers(typing.NamedTuple):
    modulus: int
    public_exponent: int
    private_exponent: int
    prime1: int
    prime2: int
    exponent1: int
    exponent2: int
    coefficient: int

    @property
    def public(self) -> PublicNumbers:
        return PublicNumbers(self.modulus, self.public_exponent)


def strip_x509_header(data: bytes) -> bytes:
    """Strips the X.509 SubjectPublicKeyInfo header from a DER public key.

    A key that has no header, i.e. whose outer SEQUENCE directly holds the modulus INTEGER, is returned unchanged.

    Args:
        data: DER public key, with or without the X.509 header.

    Returns:
        The bare PKCS#1 SEQUENCE { INTEGER modulus, INTEGER publicExponent }.

    Raises:
        MalformedKeyData: If the key is empty or a byte at an expected position does not match.
    """
    if not data:
        raise MalformedKeyData("Provided public key is empty")
    if data[0] != der.SEQUENCE:
        raise MalformedKeyData(f"Provided key doesn't have a valid ASN.1 structure (byte 0 is 0x{data[0]:02x}, "
                               "expected SEQUENCE)")
    outer = der.read_node(data, 0, der.SEQUENCE)
    index = outer.start
    if index >= len(data):
        raise MalformedKeyData(f"Provided key ends at offset {index} before its first element")
    if data[index] == der.INTEGER:
        return data
    if data[index] != der.SEQUENCE:
        raise MalformedKeyData(f"Invalid byte at offset {index} (0x{data[index]:02x}), "
                               "provided key doesn't have a valid X509 header")
    index += X509_ALGORITHM_SPAN
    bits = der.read_node(data, index, der.BIT_STRING)
    if bits.length < 1 or data[bits.start] != 0:
        raise MalformedKeyData(f"Invalid byte at offset {bits.start} for public key header, "
                               "expected zero unused bits")
    return data[bits.start + 1:bits.end]


def public_bytes_from_private(data: bytes) -> bytes:
    """Derives the bare public key sequence from a PKCS#1 private key.

    Copies the modulus and publicExponent INTEGERs exactly as encoded in the private key and wraps them in a fresh
    SEQUENCE, so the result equals strip_x509_header applied to the matching public key.

    Args:
        data: DER PKCS#1 RSAPrivateKey.

    Returns:
        DER SEQUENCE { INTEGER modulus, INTEGER publicExponent }.

    Raises:
        MalformedKeyData: If the key is empty or its first elements are not where PKCS#1 puts them.
    """
    if not data:
        raise MalformedKeyData("Provided private key is empty")
    outer = der.read_node(data, 0, der.SEQUENCE)
    modulus = der.read_node(data, outer.start + PKCS1_VERSION_SPAN, der.INTEGER)
    exponent = der.read_node(data, modulus.end, der.INTEGER)
    body = modulus.tlv(data) + exponent.tlv(data)
    return bytes([der.SEQUENCE]) + der.encode_length(len(body)) + body


def is_pkcs8(data: bytes) -> bool:
    """Tells a PKCS#8 PrivateKeyInfo apart from a PKCS#1 RSAPrivateKey by its second element."""
    outer = der.read_node(data, 0, der.SEQUENCE)
    version = der.read_node(data, outer.start, der.INTEGER)
    return der.read_node(data, version.end).tag == der.SEQUENCE


def unwrap_pkcs8(data: bytes) -> bytes:
    """Extracts the PKCS#1 private key from a PKCS#8 wrapper.

    PKCS#1 input is returned as is.

    Args:
        data: DER private key, PKCS#8 or PKCS#1.

    Returns:
        DER PKCS#1 RSAPrivateKey.

    Raises:
        MalformedKeyData: If the wrapper cannot be decoded or does not hold an RSA key.
    """
    if not is_pkcs8(data):
        return data
    try:
        decdata, _ = decoder.decode(data, asn1Spec=rfc5208.PrivateKeyInfo())
    except error.PyAsn1Error as exc:
        raise MalformedKeyData(f"Invalid PKCS#8 private key: {exc}") from exc
    if decdata["version"] != 0:
        raise MalformedKeyData("Unsupported version of private key information wrapper")
    if decdata["privateKeyAlgorithm"]["algorithm"] != rfc8017.rsaEncryption:
        raise MalformedKeyData("Private Key Algorithm not supported.")
    return bytes(decdata["privateKey"])


def wrap_pkcs8(data: bytes) -> bytes:
    """Wraps a PKCS#1 private key into a PKCS#8 PrivateKeyInfo."""
    pkalgo = rfc5208.AlgorithmIdentifier()
    pkalgo["algorithm"] = rfc8017.rsaEncryption
    pkalgo["parameters"] = univ.Null("")
    pkraw = rfc5208.PrivateKeyInfo()
    pkraw["version"] = 0
    pkraw["privateKeyAlgorithm"] = pkalgo
    pkraw["privateKey"] = data
    return encoder.encode(pkraw)


def add_x509_header(data: bytes) -> bytes:
    """Wraps a bare PKCS#1 public key into an X.509 SubjectPublicKeyInfo."""
    algo = rfc5280.AlgorithmIdentifier()
    algo["algorithm"] = rfc8017.rsaEncryption
    algo["parameters"] = univ.Null("")
    spki = rfc5280.SubjectPublicKeyInfo()
    spki["algorithm"] = algo
    spki["subjectPublicKey"] = univ.BitString.fromOctetString(data)
    return encoder.encode(spki)


def parse_public_numbers(data: bytes) -> PublicNumbers:
    """Decodes a bare PKCS#1 RSAPublicKey into its integers.

    Raises:
        MalformedKeyData: If the data is not an RSAPublicKey.
    """
    try:
        keydata, rest = decoder.decode(data, asn1Spec=rfc8017.RSAPublicKey())
    except error.PyAsn1Error as exc:
        raise MalformedKeyData(f"Invalid RSA public key: {exc}") from exc
    if rest:
        raise MalformedKeyData(f"{len(rest)} trailing bytes after RSA public key")
    pykeyd = localize.encode(keydata)
    return PublicNumbers(pykeyd["modulus"], pykeyd["publicExponent"])


def parse_private_numbers(data: bytes) -> PrivateNumbers:
    """Decodes a PKCS#1 RSAPrivateKey into its integers.

    Raises:
        MalformedKeyData: If the data is not a two-prime RSAPrivateKey.
    """
    try:
        keydata, rest = decoder.decode(data, asn1Spec=rfc8017.RSAPrivateKey())
    except error.PyAsn1Error as exc:
        raise MalformedKeyData(f"Invalid RSA private key: {exc}") from exc
    if rest:
        raise MalformedKeyData(f"{len(rest)} trailing bytes after RSA private key")
    if keydata["version"] != 0:
        raise MalformedKeyData("Multi-prime keys are not supported.")
    pykeyd = localize.encode(keydata)
    return PrivateNumbers(pykeyd["modulus"], pykeyd["publicExponent"], pykeyd["privateExponent"], pykeyd["prime1"],
                          pykeyd["prime2"], pykeyd["exponent1"], pykeyd["exponent2"], pykeyd["coefficient"])
