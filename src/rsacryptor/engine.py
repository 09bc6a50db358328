"""RSA encryption, decryption, signing and verification over typed payloads.

Each operation first checks the payload state, the key role and the padding, and only then reaches the provider, so
invalid input never costs a cryptographic call. Algorithm.GCM routes encryption through the hybrid envelope; the
digest algorithms encrypt directly with RSA, which limits the message to a single RSA block.

Typical usage example:

    sig = sign(create_plaintext(b"data"), privkey, Algorithm.SHA256)
    assert verify(create_plaintext(b"data"), pubkey, sig, Algorithm.SHA256)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import warnings

from rsacryptor import envelope
from rsacryptor import providers
from rsacryptor.algorithms import Algorithm
from rsacryptor.algorithms import ENCRYPTION_PADDINGS
from rsacryptor.algorithms import Padding
from rsacryptor.algorithms import SIGNATURE_PADDINGS
from rsacryptor.errors import InvalidKeyRole
from rsacryptor.errors import InvalidPayloadState
from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.keys import KeyRole
from rsacryptor.keys import RSAKey
from rsacryptor.payload import Payload
from rsacryptor.payload import PayloadState

logger = logging.getLogger(__name__)


def _require_state(payload: Payload, state: PayloadState, what: str = "Data") -> None:
    if payload.state is not state:
        raise InvalidPayloadState(f"{what} is {payload.state.value}, expected {state.value}")


def _require_role(key: RSAKey, role: KeyRole) -> None:
    if key.role is not role:
        raise InvalidKeyRole(f"Supplied key is not {role.value.lower()}")


def _algorithm(algorithm: Algorithm | str) -> Algorithm:
    try:
        return Algorithm(algorithm)
    except ValueError as exc:
        raise UnsupportedAlgorithm(f"Unknown algorithm {algorithm!r}") from exc


def _padding(padding: Padding | str, allowed: frozenset[Padding], operation: str) -> Padding:
    try:
        padding = Padding(padding)
    except ValueError as exc:
        raise UnsupportedAlgorithm(f"Unknown padding {padding!r}") from exc
    if padding not in allowed:
        raise UnsupportedAlgorithm(f"{padding.name} padding cannot be used for {operation}")
    return padding


def _encryption_mode(algorithm: Algorithm | str, padding: Padding | str) -> tuple[Algorithm, Padding]:
    algorithm = _algorithm(algorithm)
    padding = _padding(padding, ENCRYPTION_PADDINGS, "encryption")
    if algorithm.is_envelope and padding is not Padding.OAEP:
        raise UnsupportedAlgorithm("The GCM envelope always wraps its key with OAEP")
    if padding is Padding.PKCS1V15:
        warnings.warn("PKCS#1 v1.5 encryption padding is open to padding oracle attacks! Please use with care.",
                      RuntimeWarning)
    return algorithm, padding


def encrypt(payload: Payload,
            key: RSAKey,
            algorithm: Algorithm | str,
            padding: Padding | str = Padding.OAEP,
            provider: providers.CryptoProvider | str | None = None) -> Payload:
    """Encrypts a plaintext payload with a public key.

    Args:
        payload: The plaintext.
        key: The public key.
        algorithm: Algorithm.GCM for the hybrid envelope, otherwise the OAEP digest of direct RSA encryption.
        padding: Padding for direct RSA encryption, OAEP or PKCS1V15. The envelope only accepts OAEP.
        provider: Provider instance or name. Defaults to the configured provider.

    Returns:
        The encrypted payload.

    Raises:
        InvalidPayloadState: If the payload is not plaintext.
        InvalidKeyRole: If the key is not public.
        UnsupportedAlgorithm: If algorithm or padding are unknown or do not apply.
        ProviderFailure: If the provider fails, e.g. on a message too long for one RSA block.
    """
    _require_state(payload, PayloadState.PLAINTEXT)
    _require_role(key, KeyRole.PUBLIC)
    algorithm, padding = _encryption_mode(algorithm, padding)
    prov = providers.get_provider(provider)
    logger.debug("Encrypting %d bytes, %s/%s, %d-bit key, provider %s", len(payload.data), algorithm.value,
                 padding.value, key.bits, prov.name)
    if algorithm.is_envelope:
        data = envelope.seal(key, payload.data, prov)
    else:
        data = prov.rsa_encrypt(key, payload.data, padding, algorithm.hash_name)
    return Payload(data, PayloadState.ENCRYPTED)


def decrypt(payload: Payload,
            key: RSAKey,
            algorithm: Algorithm | str,
            padding: Padding | str = Padding.OAEP,
            provider: providers.CryptoProvider | str | None = None) -> Payload:
    """Decrypts an encrypted payload with a private key.

    Mirror of encrypt; algorithm and padding must match those used for encryption.

    Raises:
        InvalidPayloadState: If the payload is not encrypted.
        InvalidKeyRole: If the key is not private.
        UnsupportedAlgorithm: If algorithm or padding are unknown or do not apply.
        AuthenticationFailure: If an envelope does not authenticate.
        ProviderFailure: If direct RSA decryption fails.
    """
    _require_state(payload, PayloadState.ENCRYPTED)
    _require_role(key, KeyRole.PRIVATE)
    algorithm, padding = _encryption_mode(algorithm, padding)
    prov = providers.get_provider(provider)
    logger.debug("Decrypting %d bytes, %s/%s, %d-bit key, provider %s", len(payload.data), algorithm.value,
                 padding.value, key.bits, prov.name)
    if algorithm.is_envelope:
        data = envelope.open_envelope(key, payload.data, prov)
    else:
        data = prov.rsa_decrypt(key, payload.data, padding, algorithm.hash_name)
    return Payload(data, PayloadState.PLAINTEXT)


def sign(payload: Payload,
         key: RSAKey,
         algorithm: Algorithm | str,
         padding: Padding | str = Padding.PKCS1V15,
         provider: providers.CryptoProvider | str | None = None) -> Payload:
    """Signs a plaintext payload with a private key.

    Args:
        payload: The plaintext.
        key: The private key.
        algorithm: Digest of the signature. Algorithm.GCM signs with SHA-1.
        padding: PKCS1V15 or PSS.
        provider: Provider instance or name. Defaults to the configured provider.

    Returns:
        The signature as a signed payload.

    Raises:
        InvalidPayloadState: If the payload is not plaintext.
        InvalidKeyRole: If the key is not private.
        UnsupportedAlgorithm: If algorithm or padding are unknown or do not apply.
        ProviderFailure: If the key is too short for the digest.
    """
    _require_state(payload, PayloadState.PLAINTEXT)
    _require_role(key, KeyRole.PRIVATE)
    algorithm = _algorithm(algorithm)
    padding = _padding(padding, SIGNATURE_PADDINGS, "signatures")
    prov = providers.get_provider(provider)
    logger.debug("Signing %d bytes, %s/%s, %d-bit key, provider %s", len(payload.data), algorithm.hash_name,
                 padding.value, key.bits, prov.name)
    return Payload(prov.rsa_sign(key, payload.data, padding, algorithm.hash_name), PayloadState.SIGNED)


def verify(payload: Payload,
           key: RSAKey,
           signature: Payload,
           algorithm: Algorithm | str,
           padding: Padding | str = Padding.PKCS1V15,
           provider: providers.CryptoProvider | str | None = None) -> bool:
    """Verifies a signature over a plaintext payload.

    Returns:
        True if the signature matches, False otherwise. An invalid signature is not an error.

    Raises:
        InvalidPayloadState: If the payload is not plaintext or the signature is not signed data.
        InvalidKeyRole: If the key is not public.
        UnsupportedAlgorithm: If algorithm or padding are unknown or do not apply.
        ProviderFailure: If the provider cannot use the key, e.g. an exponent it rejects.
    """
    _require_state(payload, PayloadState.PLAINTEXT)
    _require_role(key, KeyRole.PUBLIC)
    _require_state(signature, PayloadState.SIGNED, "Supplied signature")
    algorithm = _algorithm(algorithm)
    padding = _padding(padding, SIGNATURE_PADDINGS, "signatures")
    prov = providers.get_provider(provider)
    result = prov.rsa_verify(key, payload.data, signature.data, padding, algorithm.hash_name)
    logger.debug("Signature over %d bytes, %s/%s, %s", len(payload.data), algorithm.hash_name, padding.value,
                 "verified" if result else "rejected")
    return result


def digest(payload: Payload,
           algorithm: Algorithm | str,
           provider: providers.CryptoProvider | str | None = None) -> bytes:
    """Digest of the payload data, in any state. Algorithm.GCM yields SHA-1."""
    algorithm = _algorithm(algorithm)
    return providers.get_provider(provider).digest(payload.data, algorithm.hash_name)
