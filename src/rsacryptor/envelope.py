"""Hybrid envelope encryption: a random AES-GCM key wrapped under RSA-OAEP.

RSA alone can only encrypt messages shorter than its modulus. The envelope instead encrypts the payload with a fresh
AES key and wraps that key with RSA-OAEP (SHA-1, MGF1-SHA-1):

    wrapped_key (128 or 512 bytes) || ciphertext (len(plaintext) bytes) || tag (16 bytes)

The key's own DER SEQUENCE { modulus, publicExponent } is the additional authenticated data, so an envelope made for
one key is never accepted under another. The AAD length also selects the cipher strength: above 525 bytes (moduli
past roughly 4096 bits) AES-256 and a 512-byte slot, otherwise AES-128 and a 128-byte slot. Every symmetric key is
used exactly once, which is what allows the fixed all-zero 16-byte nonce.

Typical usage example:

    blob = seal(pubkey, b"attack at dawn", provider)
    assert open_envelope(privkey, blob, provider) == b"attack at dawn"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing

from rsacryptor import headers
from rsacryptor.algorithms import AEAD_TAG_SIZE
from rsacryptor.algorithms import Padding
from rsacryptor.errors import AuthenticationFailure
from rsacryptor.errors import InvalidKeyRole
from rsacryptor.errors import ProviderFailure
from rsacryptor.keys import RSAKey
from rsacryptor.providers import CryptoProvider

logger = logging.getLogger(__name__)

AAD_THRESHOLD = 525
NONCE = bytes(16)
WRAP_HASH = "sha1"


class EnvelopeParameters(typing.NamedTuple):
    key_size: int
    slot_size: int


AES128_SLOT128 = EnvelopeParameters(16, 128)
AES256_SLOT512 = EnvelopeParameters(32, 512)


def select_parameters(aad_length: int) -> EnvelopeParameters:
    """Picks the AES key size and wrapped-key slot size for an AAD of the given length."""
    if aad_length > AAD_THRESHOLD:
        return AES256_SLOT512
    return AES128_SLOT128


def seal(key: RSAKey, plaintext: bytes, provider: CryptoProvider) -> bytes:
    """Encrypts plaintext into an envelope for a public key.

    Args:
        key: The recipient's public key.
        plaintext: Data of any length.
        provider: The provider running the primitives.

    Returns:
        The envelope bytes.

    Raises:
        InvalidKeyRole: If the key is not public.
        ProviderFailure: If the key's RSA block size does not fill the envelope's wrapped-key slot, or the provider
            fails.
    """
    if not key.is_public:
        raise InvalidKeyRole("Envelope encryption requires a public key")
    aad = headers.strip_x509_header(key.der)
    params = select_parameters(len(aad))
    if key.size != params.slot_size:
        raise ProviderFailure(f"Encryption failed: a {key.bits}-bit key wraps into {key.size} bytes, "
                              f"the envelope slot for this key holds {params.slot_size}")
    logger.debug("Sealing %d bytes with AES-%d-GCM under a %d-bit key", len(plaintext), params.key_size * 8,
                 key.bits)
    sym_key = provider.random_bytes(params.key_size)
    wrapped = provider.rsa_encrypt(key, sym_key, Padding.OAEP, WRAP_HASH)
    if len(wrapped) != params.slot_size:
        raise ProviderFailure(f"Encryption failed: wrapped key is {len(wrapped)} bytes, "
                              f"expected {params.slot_size}")
    ciphertext, tag = provider.aead_encrypt(sym_key, NONCE, plaintext, aad)
    return wrapped + ciphertext + tag


def open_envelope(key: RSAKey, envelope: bytes, provider: CryptoProvider) -> bytes:
    """Decrypts an envelope with a private key.

    Args:
        key: The recipient's private key.
        envelope: The envelope bytes.
        provider: The provider running the primitives.

    Returns:
        The plaintext.

    Raises:
        InvalidKeyRole: If the key is not private.
        AuthenticationFailure: If the envelope is truncated, the key cannot be unwrapped or the tag does not verify.
    """
    if not key.is_private:
        raise InvalidKeyRole("Envelope decryption requires a private key")
    aad = headers.public_bytes_from_private(key.der)
    params = select_parameters(len(aad))
    if len(envelope) < params.slot_size + AEAD_TAG_SIZE:
        raise AuthenticationFailure(f"Decryption failed: envelope is {len(envelope)} bytes, "
                                    f"at least {params.slot_size + AEAD_TAG_SIZE} expected")
    wrapped = envelope[:params.slot_size]
    ciphertext = envelope[params.slot_size:len(envelope) - AEAD_TAG_SIZE]
    tag = envelope[len(envelope) - AEAD_TAG_SIZE:]
    logger.debug("Opening %d-byte envelope with AES-%d-GCM under a %d-bit key", len(envelope),
                 params.key_size * 8, key.bits)
    try:
        sym_key = provider.rsa_decrypt(key, wrapped, Padding.OAEP, WRAP_HASH)
    except ProviderFailure as exc:
        raise AuthenticationFailure(f"Decryption failed: couldn't unwrap the envelope key ({exc})") from exc
    if len(sym_key) != params.key_size:
        raise AuthenticationFailure(f"Decryption failed: unwrapped key is {len(sym_key)} bytes, "
                                    f"expected {params.key_size}")
    return provider.aead_decrypt(sym_key, NONCE, ciphertext, tag, aad)
