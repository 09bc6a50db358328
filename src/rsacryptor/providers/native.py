"""Provider carrying out the RSA padding schemes in Python.

RSA encryption (RSAES-OAEP, RSAES-PKCS1-v1_5) and signatures (RSASSA-PKCS1-v1_5, RSASSA-PSS) follow PKCS#1 v2.2
(RFC 8017) on top of Python's big integers, with the CRT speed-up for private keys. AES-GCM comes from pycryptodome,
digests from hashlib and randomness from secrets.

Output is interchangeable with the openssl provider in both directions.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib
from math import ceil
from secrets import compare_digest
from secrets import token_bytes

from Crypto.Cipher import AES
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc4055
from pyasn1_modules import rfc8017

from rsacryptor.algorithms import AEAD_TAG_SIZE
from rsacryptor.algorithms import Padding
from rsacryptor.errors import AuthenticationFailure
from rsacryptor.errors import ProviderFailure
from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.keys import RSAKey
from rsacryptor.providers.base import CryptoProvider

HASH_TLL = {
    "sha1": (hashlib.sha1, rfc4055.id_sha1, 20),
    "sha224": (hashlib.sha224, rfc4055.id_sha224, 28),
    "sha256": (hashlib.sha256, rfc4055.id_sha256, 32),
    "sha384": (hashlib.sha384, rfc4055.id_sha384, 48),
    "sha512": (hashlib.sha512, rfc4055.id_sha512, 64),
}


class RSAPrimitive:
    """The bare RSA permutation for one key.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
        bsize: Length of the modulus in bytes.
    """

    def __init__(self,
                 mod: int,
                 expo: int,
                 p: int | None = None,
                 q: int | None = None,
                 exp1: int | None = None,
                 exp2: int | None = None,
                 coeff: int | None = None) -> None:
        self.mod = mod
        self.expo = expo
        self.bsize = (self.mod.bit_length() + 7) // 8
        self.p = p
        self.q = q
        self.exp1 = exp1
        self.exp2 = exp2
        self.coeff = coeff

    @classmethod
    def for_key(cls, key: RSAKey) -> "RSAPrimitive":
        if key.is_public:
            return cls(key.numbers.modulus, key.numbers.public_exponent)
        nums = key.numbers
        return cls(nums.modulus, nums.private_exponent, nums.prime1, nums.prime2, nums.exponent1, nums.exponent2,
                   nums.coefficient)

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation, accelerated with CRT when the primes are known.

        Args:
            message: The int-marshalled message.

        Returns:
            The transformed message.

        Raises:
            ValueError: If the message is out of range for the current key.
        """
        if not 0 <= message < self.mod:
            raise ValueError("Message representative must be in range [0, mod-1]")
        if not self.p or not self.q:
            return pow(message, self.expo, self.mod)
        m_1 = pow(message, self.exp1, self.p)
        m_2 = pow(message, self.exp2, self.q)
        h = ((m_1 - m_2) * self.coeff) % self.p
        return m_2 + self.q * h

    def c_rsa_bytes(self, message: bytes) -> bytes:
        return integer_to_bytes(self.c_rsa(bytes_to_integer(message)), self.bsize)


def enc_oaep(prim: RSAPrimitive, message: bytes, hashf: str, label: bytes = b"") -> bytes:
    """Encrypts the message according to the RSAES-OAEP algorithm.

    Args:
        prim: The public key primitive.
        message: Message to be encrypted.
        hashf: Hash function for both the label hash and MGF1.
        label: Optional label for the message.

    Returns:
        Padded and encrypted message.

    Raises:
        ValueError: If the message is too long for the key and hash function.
    """
    fun, _, hlen = HASH_TLL[hashf]
    if len(message) > prim.bsize - 2 * (hlen + 1):
        raise ValueError("Message too long for the specified hash function")
    lh = fun(label).digest()
    pad = b"\x00" * (prim.bsize - len(message) - 2 * (hlen + 1))
    db = lh + pad + b"\x01" + message
    seed = token_bytes(hlen)
    mdb = xorbytes(db, mgf1(seed, prim.bsize - hlen - 1, hashf))
    mseed = xorbytes(seed, mgf1(mdb, hlen, hashf))
    return prim.c_rsa_bytes(b"\x00" + mseed + mdb)


def dec_oaep(prim: RSAPrimitive, ciphertext: bytes, hashf: str, label: bytes = b"") -> bytes:
    """Decrypts the message according to the RSAES-OAEP algorithm.

    All padding checks run to completion before failing, so every failure looks the same.

    Raises:
        ValueError: If decryption fails.
    """
    fun, _, hlen = HASH_TLL[hashf]
    if len(ciphertext) != prim.bsize:
        raise ValueError("Message does not match expected length.")
    if prim.bsize < 2 * (hlen + 1):
        raise ValueError("Key too short for the specified hash function.")
    em = prim.c_rsa_bytes(ciphertext)
    lh = fun(label).digest()
    valid = em[0:1] == b"\x00"
    mseed = em[1:hlen + 1]
    mdb = em[hlen + 1:]
    seed = xorbytes(mseed, mgf1(mdb, hlen, hashf))
    db = xorbytes(mdb, mgf1(seed, prim.bsize - hlen - 1, hashf))
    if not compare_digest(db[0:hlen], lh):
        valid = False
    mrkr = None
    for by in range(hlen, len(db)):
        if db[by] == 1 and mrkr is None:
            mrkr = by
        if db[by] != 0 and mrkr is None:
            valid = False
    if mrkr is None or not valid:
        raise ValueError("Decryption error.")
    return db[mrkr + 1:]


def enc_pkcs1(prim: RSAPrimitive, message: bytes) -> bytes:
    """Encrypts the message according to the RSAES-PKCS1-v1_5 algorithm."""
    if len(message) > prim.bsize - 11:
        raise ValueError("Message too long for PKCS#1 v1.5 padding")
    ps = nonzero_bytes(prim.bsize - len(message) - 3)
    return prim.c_rsa_bytes(b"\x00\x02" + ps + b"\x00" + message)


def dec_pkcs1(prim: RSAPrimitive, ciphertext: bytes) -> bytes:
    """Decrypts the message according to the RSAES-PKCS1-v1_5 algorithm."""
    if len(ciphertext) != prim.bsize or prim.bsize < 11:
        raise ValueError("Decryption error.")
    em = prim.c_rsa_bytes(ciphertext)
    sep = em.find(b"\x00", 2)
    if em[0:2] != b"\x00\x02" or sep < 10:
        raise ValueError("Decryption error.")
    return em[sep + 1:]


def emsa_pkcs1(message: bytes, hashf: str, emlen: int) -> bytes:
    """EMSA-PKCS1-v1_5 encoding: 0x00 0x01 PS 0x00 DigestInfo.

    Raises:
        ValueError: If the DigestInfo does not fit in emlen.
    """
    fun, ident, _ = HASH_TLL[hashf]
    algid = rfc8017.DigestAlgorithm()
    algid["algorithm"] = ident
    algid["parameters"] = univ.Null("")
    payload = rfc8017.DigestInfo()
    payload["digestAlgorithm"] = algid
    payload["digest"] = fun(message).digest()
    encoded = encoder.encode(payload)
    if emlen < len(encoded) + 11:
        raise ValueError("Hash function too large for current key.")
    return b"\x00\x01" + b"\xff" * (emlen - len(encoded) - 3) + b"\x00" + encoded


def emsa_pss(message: bytes, hashf: str, embits: int) -> bytes:
    """EMSA-PSS encoding with MGF1 over the same hash and a salt as long as the digest."""
    fun, _, hlen = HASH_TLL[hashf]
    emlen = ceil(embits / 8)
    if emlen < 2 * hlen + 2:
        raise ValueError("Hash function too large for current key.")
    salt = token_bytes(hlen)
    h = fun(b"\x00" * 8 + fun(message).digest() + salt).digest()
    db = b"\x00" * (emlen - 2 * hlen - 2) + b"\x01" + salt
    mdb = bytearray(xorbytes(db, mgf1(h, emlen - hlen - 1, hashf)))
    mdb[0] &= 0xff >> (8 * emlen - embits)
    return bytes(mdb) + h + b"\xbc"


def emsa_pss_verify(message: bytes, em: bytes, hashf: str, embits: int) -> bool:
    """Checks an EMSA-PSS encoded message against message. Salt length is the digest length."""
    fun, _, hlen = HASH_TLL[hashf]
    emlen = ceil(embits / 8)
    if len(em) != emlen or emlen < 2 * hlen + 2 or em[-1] != 0xbc:
        return False
    zbits = 8 * emlen - embits
    mdb = em[:emlen - hlen - 1]
    h = em[emlen - hlen - 1:-1]
    if mdb[0] & (0xff << (8 - zbits)) & 0xff:
        return False
    db = bytearray(xorbytes(mdb, mgf1(h, emlen - hlen - 1, hashf)))
    db[0] &= 0xff >> zbits
    plen = emlen - 2 * hlen - 2
    if any(db[:plen]) or db[plen] != 1:
        return False
    salt = bytes(db[-hlen:])
    return compare_digest(fun(b"\x00" * 8 + fun(message).digest() + salt).digest(), h)


class NativeProvider(CryptoProvider):
    """CryptoProvider implementing RSA in Python and AES-GCM through pycryptodome."""
    name = "native"

    def rsa_encrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        self.check_hash(hash_name)
        prim = RSAPrimitive.for_key(key)
        try:
            if padding is Padding.OAEP:
                return enc_oaep(prim, data, hash_name)
            if padding is Padding.PKCS1V15:
                return enc_pkcs1(prim, data)
        except ValueError as exc:
            raise ProviderFailure(f"Encryption failed: {exc}") from exc
        raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for encryption")

    def rsa_decrypt(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        self.check_hash(hash_name)
        prim = RSAPrimitive.for_key(key)
        try:
            if padding is Padding.OAEP:
                return dec_oaep(prim, data, hash_name)
            if padding is Padding.PKCS1V15:
                return dec_pkcs1(prim, data)
        except ValueError as exc:
            raise ProviderFailure(f"Decryption failed: {exc}") from exc
        raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for encryption")

    def rsa_sign(self, key: RSAKey, data: bytes, padding: Padding, hash_name: str) -> bytes:
        self.check_hash(hash_name)
        prim = RSAPrimitive.for_key(key)
        try:
            if padding is Padding.PKCS1V15:
                em = emsa_pkcs1(data, hash_name, prim.bsize)
            elif padding is Padding.PSS:
                em = emsa_pss(data, hash_name, prim.mod.bit_length() - 1)
            else:
                raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for signatures")
            return integer_to_bytes(prim.c_rsa(bytes_to_integer(em)), prim.bsize)
        except UnsupportedAlgorithm:
            raise
        except ValueError as exc:
            raise ProviderFailure(f"Signing failed: {exc}") from exc

    def rsa_verify(self, key: RSAKey, data: bytes, signature: bytes, padding: Padding, hash_name: str) -> bool:
        self.check_hash(hash_name)
        if padding not in (Padding.PKCS1V15, Padding.PSS):
            raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for signatures")
        prim = RSAPrimitive.for_key(key)
        if len(signature) != prim.bsize:
            return False
        try:
            rec = prim.c_rsa(bytes_to_integer(signature))
        except ValueError:
            return False
        if padding is Padding.PKCS1V15:
            try:
                expected = emsa_pkcs1(data, hash_name, prim.bsize)
            except ValueError:
                return False
            return compare_digest(integer_to_bytes(rec, prim.bsize), expected)
        embits = prim.mod.bit_length() - 1
        if rec.bit_length() > embits:
            return False
        return emsa_pss_verify(data, integer_to_bytes(rec, ceil(embits / 8)), hash_name, embits)

    def aead_encrypt(self, key: bytes, nonce: bytes, data: bytes, aad: bytes) -> tuple[bytes, bytes]:
        try:
            cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=AEAD_TAG_SIZE)
        except ValueError as exc:
            raise ProviderFailure(f"Encryption failed: {exc}") from exc
        cipher.update(aad)
        return cipher.encrypt_and_digest(data)

    def aead_decrypt(self, key: bytes, nonce: bytes, data: bytes, tag: bytes, aad: bytes) -> bytes:
        if len(tag) != AEAD_TAG_SIZE:
            raise AuthenticationFailure(f"Decryption failed: tag is {len(tag)} bytes, expected {AEAD_TAG_SIZE}")
        try:
            cipher = AES.new(key, AES.MODE_GCM, nonce=nonce, mac_len=AEAD_TAG_SIZE)
        except ValueError as exc:
            raise ProviderFailure(f"Decryption failed: {exc}") from exc
        cipher.update(aad)
        try:
            return cipher.decrypt_and_verify(data, tag)
        except ValueError as exc:
            raise AuthenticationFailure(f"Decryption failed: {exc}") from exc

    def random_bytes(self, size: int) -> bytes:
        return token_bytes(size)

    def digest(self, data: bytes, hash_name: str) -> bytes:
        self.check_hash(hash_name)
        return HASH_TLL[hash_name][0](data).digest()


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to an integer in accordance to preset procedures.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int) -> bytes:
    """Converts an integer to a string, using a fixed-length byte representation.

    Args:
        msg: The integer to unmarshal.
        fixedlen: The target length of the byte string.

    Returns:
        The representative bytes. (AKA Octet String)
    """
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def nonzero_bytes(size: int) -> bytes:
    out = bytearray()
    while len(out) < size:
        out.extend(b for b in token_bytes(size - len(out)) if b)
    return bytes(out)


def xorbytes(a: bytes, b: bytes) -> bytes:
    """XOR bitwise for bytes.

    Requires two byte strings of equal length.
    """
    return bytes(x ^ y for x, y in zip(a, b, strict=True))


def mgf1(mgfseed: bytes, masklen: int, hashf: str) -> bytes:
    """The PKCS#1 v2.2 Mask Generation Function 1.

    Args:
        mgfseed: Seed for mask generation
        masklen: Intended length of mask
        hashf: Hash function name

    Returns:
        The mask in form of bytes of length masklen.

    Raises:
        ValueError: If mask too long for the combination of values.
    """
    fun, _, hlen = HASH_TLL[hashf]
    if masklen > 2**32 * hlen:
        raise ValueError("Mask too long for the specified hash function")
    t = b""
    for cnt in range(ceil(masklen / hlen)):
        t += fun(mgfseed + integer_to_bytes(cnt, 4)).digest()
    return t[:masklen]
