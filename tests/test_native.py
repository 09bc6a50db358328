# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
import pytest

from rsacryptor import Padding
from rsacryptor import ProviderFailure
from rsacryptor.providers import native

standard_payload = "The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""


@pytest.fixture(scope="module", params=[1024, 2048, pytest.param(4096, marks=pytest.mark.slow)])
def keyset(request, make_keyset):
    return make_keyset(request.param)


@pytest.fixture(scope="module", params=native.HASH_TLL.keys())
def hashf(request) -> str:
    return request.param


@pytest.fixture(scope="module", params=[True, False])
def crt(request) -> bool:
    return request.param


@pytest.fixture
def prov():
    return native.NativeProvider()


def primitives(keyset, crt: bool = True) -> tuple[native.RSAPrimitive, native.RSAPrimitive]:
    pub = native.RSAPrimitive.for_key(keyset.pub)
    if crt:
        return pub, native.RSAPrimitive.for_key(keyset.priv)
    return pub, native.RSAPrimitive(keyset.priv.numbers.modulus, keyset.priv.numbers.private_exponent)


def capload(hashf: str, keysz: int) -> bytes:
    """Returns a capped payload in bytes."""
    hlen = native.HASH_TLL[hashf][2]
    max_len = keysz - 2 * (hlen + 1)
    if max_len <= 0:
        pytest.skip(f"Key size {keysz} is too small for {hashf}.")
    return standard_payload.encode("utf-8")[:max_len]


def pss_fits(hashf: str, keysz: int) -> None:
    if keysz < 2 * native.HASH_TLL[hashf][2] + 2:
        pytest.skip(f"Key size {keysz} is too small for PSS with {hashf}.")


def crypto_hash(hashf: str) -> hashes.HashAlgorithm:
    return getattr(hashes, hashf.upper())()


def test_encrypt_oaep(keyset, hashf):
    pub = primitives(keyset)[0]
    payload = capload(hashf, pub.bsize)
    ciphtext = native.enc_oaep(pub, payload, hashf)
    dec = keyset.crypto.decrypt(
        ciphtext, padding.OAEP(mgf=padding.MGF1(algorithm=crypto_hash(hashf)), algorithm=crypto_hash(hashf),
                               label=None))
    assert dec == payload


def test_decrypt_oaep(keyset, hashf, crt):
    priv = primitives(keyset, crt)[1]
    payload = capload(hashf, priv.bsize)
    ciphtext = keyset.crypto.public_key().encrypt(
        payload, padding.OAEP(mgf=padding.MGF1(algorithm=crypto_hash(hashf)), algorithm=crypto_hash(hashf),
                              label=None))
    assert native.dec_oaep(priv, ciphtext, hashf) == payload


def test_decrypt_oaep_fails(keyset, crt):
    pub, priv = primitives(keyset, crt)
    sha = "sha256"
    payload = capload(sha, priv.bsize)
    hshr = hashes.Hash(hashes.SHA256()).finalize()

    with pytest.raises(ValueError, match="Decryption error."):
        native.dec_oaep(priv, native.enc_oaep(pub, payload, sha, label=b"CORRECT_LABEL"), sha,
                        label=b"INCORRECT_LABEL")
    with pytest.raises(ValueError, match="Decryption error."):
        fake = b"\x01" + hshr + b"\x00\x01" + b"\x00" * (priv.bsize - len(hshr) - 3)
        native.dec_oaep(priv, pub.c_rsa_bytes(fake), sha)
    with pytest.raises(ValueError, match="Decryption error."):
        fake = b"\x00" + hshr + b"\x00\xAB\x01" + b"\x00" * (priv.bsize - len(hshr) - 4)
        native.dec_oaep(priv, pub.c_rsa_bytes(fake), sha)
    with pytest.raises(ValueError, match="Decryption error."):
        fake = b"\x00" + hshr + b"\x00" * (priv.bsize - len(hshr) - 1)
        native.dec_oaep(priv, pub.c_rsa_bytes(fake), sha)
    with pytest.raises(ValueError, match="Message does not match expected length."):
        native.dec_oaep(priv, b"A" * (priv.bsize - 1), sha)


def test_encrypt_oaep_validates(keyset, hashf):
    pub = primitives(keyset)[0]
    hlen = native.HASH_TLL[hashf][2]
    overflower = b"A" * max(pub.bsize - 2 * hlen - 1, 0)
    with pytest.raises(ValueError, match="Message too long for the specified hash function"):
        native.enc_oaep(pub, overflower + b"A", hashf)


def test_pkcs1_encrypt_decrypt(keyset, crt):
    pub, priv = primitives(keyset, crt)
    payload = standard_payload.encode("utf-8")
    assert native.dec_pkcs1(priv, native.enc_pkcs1(pub, payload)) == payload
    ciphtext = keyset.crypto.public_key().encrypt(payload, padding.PKCS1v15())
    assert native.dec_pkcs1(priv, ciphtext) == payload


def test_pkcs1_decrypt_fails(keyset):
    pub, priv = primitives(keyset)
    with pytest.raises(ValueError, match="Decryption error."):
        native.dec_pkcs1(priv, pub.c_rsa_bytes(b"\x00\x01" + b"\xff" * (priv.bsize - 2)))
    with pytest.raises(ValueError, match="Decryption error."):
        native.dec_pkcs1(priv, pub.c_rsa_bytes(b"\x00\x02\xff\xff\x00" + b"\xff" * (priv.bsize - 5)))
    with pytest.raises(ValueError, match="Message too long for PKCS#1 v1.5 padding"):
        native.enc_pkcs1(pub, b"A" * (pub.bsize - 10))


def test_sign(keyset, hashf, crt, prov, mocker):
    mocker.patch("rsacryptor.providers.native.RSAPrimitive.for_key", return_value=primitives(keyset, crt)[1])
    signature = prov.rsa_sign(keyset.priv, standard_payload.encode("utf-8"), Padding.PKCS1V15, hashf)
    keyset.crypto.public_key().verify(signature, standard_payload.encode("utf-8"), padding.PKCS1v15(),
                                      crypto_hash(hashf))


def test_sign_pss(keyset, hashf, prov):
    pss_fits(hashf, keyset.priv.size)
    signature = prov.rsa_sign(keyset.priv, standard_payload.encode("utf-8"), Padding.PSS, hashf)
    keyset.crypto.public_key().verify(signature, standard_payload.encode("utf-8"),
                                      padding.PSS(mgf=padding.MGF1(crypto_hash(hashf)),
                                                  salt_length=padding.PSS.DIGEST_LENGTH), crypto_hash(hashf))


def test_verify(keyset, hashf, prov):
    signature = keyset.crypto.sign(standard_payload.encode("utf-8"), padding.PKCS1v15(), crypto_hash(hashf))
    assert prov.rsa_verify(keyset.pub, standard_payload.encode("utf-8"), signature, Padding.PKCS1V15, hashf)


def test_verify_pss(keyset, hashf, prov):
    pss_fits(hashf, keyset.priv.size)
    signature = keyset.crypto.sign(standard_payload.encode("utf-8"),
                                   padding.PSS(mgf=padding.MGF1(crypto_hash(hashf)),
                                               salt_length=padding.PSS.DIGEST_LENGTH), crypto_hash(hashf))
    assert prov.rsa_verify(keyset.pub, standard_payload.encode("utf-8"), signature, Padding.PSS, hashf)
    assert not prov.rsa_verify(keyset.pub, b"NONSTANDARDPAYLOAD", signature, Padding.PSS, hashf)


def test_sign_validates(mocker, keyset, prov):
    fakeasn1 = b"A" * (keyset.priv.size - 10)
    mocker.patch("rsacryptor.providers.native.encoder.encode", return_value=fakeasn1)
    with pytest.raises(ProviderFailure, match="Hash function too large for current key."):
        prov.rsa_sign(keyset.priv, b"ABBA", Padding.PKCS1V15, "sha256")


def test_verify_mismatch_fails(keyset, prov):
    signature = prov.rsa_sign(keyset.priv, standard_payload.encode("utf-8"), Padding.PKCS1V15, "sha256")
    assert not prov.rsa_verify(keyset.pub, b"NONSTANDARDPAYLOAD", signature, Padding.PKCS1V15, "sha256")
    assert not prov.rsa_verify(keyset.pub, standard_payload.encode("utf-8"), signature[1:], Padding.PKCS1V15,
                               "sha256")


def test_verify_padding_fails(keyset, prov):
    priv = primitives(keyset)[1]
    msg = standard_payload.encode("utf-8")
    fake_signature = priv.c_rsa_bytes(b"\x00\x02" + (b"\xff" * (priv.bsize - 2)))
    assert not prov.rsa_verify(keyset.pub, msg, fake_signature, Padding.PKCS1V15, "sha256")
    fake_signature = priv.c_rsa_bytes(b"\x00\x01" + (b"\xff" * (priv.bsize - 2)))
    assert not prov.rsa_verify(keyset.pub, msg, fake_signature, Padding.PKCS1V15, "sha256")
    fake_signature = priv.c_rsa_bytes(b"\x00\x01\xff\xff\xff\x00" + (b"\xff" * (priv.bsize - 6)))
    assert not prov.rsa_verify(keyset.pub, msg, fake_signature, Padding.PKCS1V15, "sha256")
    assert not prov.rsa_verify(keyset.pub, msg, fake_signature, Padding.PSS, "sha256")


@pytest.mark.parametrize("flow", [-1, 1])
def test_overflow_underflow_c_rsa(keyset, flow):
    pub, priv = primitives(keyset)
    with pytest.raises(ValueError):
        priv.c_rsa(priv.mod * flow)
    with pytest.raises(ValueError):
        pub.c_rsa(pub.mod * flow)


def test_crt_matches_plain(keyset):
    pub, priv = primitives(keyset)
    plain = primitives(keyset, crt=False)[1]
    msg = native.bytes_to_integer(standard_payload.encode("utf-8"))
    assert priv.c_rsa(msg) == plain.c_rsa(msg)
    assert pub.c_rsa(priv.c_rsa(msg)) == msg


def test_mgf1_validates(hashf):
    hlen = native.HASH_TLL[hashf][2]
    seed = b"\x00" * hlen
    with pytest.raises(ValueError, match="Mask too long for the specified hash function"):
        native.mgf1(seed, 2**32 * (hlen + 1), hashf)


def test_nonzero_bytes():
    filler = native.nonzero_bytes(4096)
    assert len(filler) == 4096
    assert 0 not in filler


def test_xorbytes_lengths():
    assert native.xorbytes(b"\x0f\xf0", b"\xff\xff") == b"\xf0\x0f"
    with pytest.raises(ValueError):
        native.xorbytes(b"\x00", b"\x00\x00")
