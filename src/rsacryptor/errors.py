"""Exceptions raised by rsacryptor.

Every failure the package reports derives from RSACryptorError, and additionally from the builtin exception closest
in meaning, so callers already catching ValueError or RuntimeError keep working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSACryptorError(Exception):
    """Base class for all rsacryptor errors."""


class InvalidPayloadState(RSACryptorError, ValueError):
    """The operation is not legal for the payload's state (e.g. signing encrypted data)."""


class InvalidKeyRole(RSACryptorError, ValueError):
    """A public key was supplied where a private one is required, or the reverse."""


class MalformedKeyData(RSACryptorError, ValueError):
    """DER or PEM key material does not have the expected structure."""


class EncodingFailure(RSACryptorError, ValueError):
    """String or Base64 conversion failed."""


class UnsupportedAlgorithm(RSACryptorError, ValueError):
    """Algorithm, padding or provider selection does not apply to the requested operation."""


class ProviderFailure(RSACryptorError, RuntimeError):
    """The cryptographic provider reported an error.

    The provider's own message is kept verbatim in the exception text, and the original exception is chained.
    """


class AuthenticationFailure(RSACryptorError, RuntimeError):
    """Authenticated decryption failed: tag mismatch, bad key wrap or truncated envelope."""
