"""Algorithm and padding selectors shared by the engine and the providers.

An Algorithm names the digest used for signatures and direct OAEP encryption; Algorithm.GCM instead selects the
hybrid envelope (RSA-OAEP-SHA1 key wrap + AES-GCM), and uses SHA-1 wherever a digest is asked of it.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum

HASH_NAMES = ("sha1", "sha224", "sha256", "sha384", "sha512")
AEAD_TAG_SIZE = 16


class Algorithm(enum.Enum):
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    GCM = "gcm"

    @property
    def hash_name(self) -> str:
        """Digest name as understood by the providers."""
        return "sha1" if self is Algorithm.GCM else self.value

    @property
    def is_envelope(self) -> bool:
        return self is Algorithm.GCM


class Padding(enum.Enum):
    PKCS1V15 = "pkcs1v15"
    OAEP = "oaep"
    PSS = "pss"


ENCRYPTION_PADDINGS = frozenset({Padding.OAEP, Padding.PKCS1V15})
SIGNATURE_PADDINGS = frozenset({Padding.PKCS1V15, Padding.PSS})
