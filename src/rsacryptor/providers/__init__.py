"""Cryptographic provider registry.

Two interchangeable providers ship with the package: "openssl", backed by the cryptography package, and "native",
which carries out the RSA padding schemes in Python with AES-GCM from pycryptodome. The default is read from the
RSACRYPTOR_PROVIDER environment variable on first use and can be replaced with set_default_provider.

Typical usage example:

    set_default_provider("native")
    prov = get_provider()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import os

from rsacryptor.errors import UnsupportedAlgorithm
from rsacryptor.providers.base import CryptoProvider
from rsacryptor.providers.native import NativeProvider
from rsacryptor.providers.openssl import OpenSSLProvider

logger = logging.getLogger(__name__)

ENV_PROVIDER = "RSACRYPTOR_PROVIDER"
DEFAULT_PROVIDER = "openssl"

PROVIDERS: dict[str, type[CryptoProvider]] = {
    OpenSSLProvider.name: OpenSSLProvider,
    NativeProvider.name: NativeProvider,
}

_default: CryptoProvider | None = None


def create_provider(name: str) -> CryptoProvider:
    """Instantiates the provider registered under name.

    Raises:
        UnsupportedAlgorithm: If no such provider exists.
    """
    try:
        cls = PROVIDERS[name.strip().lower()]
    except KeyError as exc:
        raise UnsupportedAlgorithm(f"Unknown provider {name!r}, available: {', '.join(PROVIDERS)}") from exc
    return cls()


def get_provider(provider: CryptoProvider | str | None = None) -> CryptoProvider:
    """Resolves a provider argument.

    Args:
        provider: A provider instance (returned as is), a registry name, or None for the default provider.

    Returns:
        The provider to use.
    """
    global _default
    if isinstance(provider, CryptoProvider):
        return provider
    if provider is not None:
        return create_provider(provider)
    if _default is None:
        name = os.environ.get(ENV_PROVIDER, DEFAULT_PROVIDER)
        _default = create_provider(name)
        logger.debug("Default provider set to %s from environment", _default.name)
    return _default


def set_default_provider(provider: CryptoProvider | str | None) -> None:
    """Replaces the default provider. None restores the environment-driven default."""
    global _default
    _default = None if provider is None else get_provider(provider)


__all__ = [
    "CryptoProvider",
    "NativeProvider",
    "OpenSSLProvider",
    "PROVIDERS",
    "create_provider",
    "get_provider",
    "set_default_provider",
]
