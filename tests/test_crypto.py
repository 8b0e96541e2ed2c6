"""
Upload token cipher.

Run with: pytest tests/test_crypto.py -v
"""

import hashlib
import os

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from scratchcard.utils.crypto import (
    TokenConfigError,
    UploadTokenCipher,
    UploadTokenError,
)

VID = "6f1c2f4e-3a59-4b8e-9d1a-0c5e7b2a9f10"


@pytest.fixture
def cipher():
    return UploadTokenCipher("test-upload-secret")


def test_token_decrypts_to_same_id(cipher):
    token = cipher.encrypt(VID)
    assert cipher.decrypt(token) == VID


def test_token_is_three_hex_parts(cipher):
    nonce, tag, ciphertext = cipher.encrypt(VID).split(":")
    assert len(bytes.fromhex(nonce)) == 16
    assert len(bytes.fromhex(tag)) == 16
    assert len(bytes.fromhex(ciphertext)) == len(VID.encode("utf-8"))


def test_same_id_gives_different_tokens(cipher):
    assert cipher.encrypt(VID) != cipher.encrypt(VID)


def test_tampered_tag_is_rejected(cipher):
    nonce, tag, ciphertext = cipher.encrypt(VID).split(":")
    flipped = "%02x" % (int(tag[:2], 16) ^ 0x01) + tag[2:]
    with pytest.raises(UploadTokenError):
        cipher.decrypt(f"{nonce}:{flipped}:{ciphertext}")


def test_tampered_ciphertext_is_rejected(cipher):
    nonce, tag, ciphertext = cipher.encrypt(VID).split(":")
    flipped = "%02x" % (int(ciphertext[:2], 16) ^ 0x80) + ciphertext[2:]
    with pytest.raises(UploadTokenError):
        cipher.decrypt(f"{nonce}:{tag}:{flipped}")


def test_token_from_other_secret_is_rejected(cipher):
    other = UploadTokenCipher("another-secret")
    with pytest.raises(UploadTokenError):
        cipher.decrypt(other.encrypt(VID))


@pytest.mark.parametrize(
    "token",
    [
        "",
        "abc",
        "zz:yy:xx",
        "00:00:00:00",
        "0011:2233:4455",
        ":" * 2,
    ],
)
def test_malformed_tokens_are_rejected(cipher, token):
    with pytest.raises(UploadTokenError):
        cipher.decrypt(token)


def test_non_string_token_is_rejected(cipher):
    with pytest.raises(UploadTokenError):
        cipher.decrypt(None)


def test_two_part_token_is_accepted():
    """Tokens of the form nonce:ciphertext||tag with a 12-byte nonce."""
    secret = "test-upload-secret"
    nonce = os.urandom(12)
    sealed = AESGCM(hashlib.sha256(secret.encode()).digest()).encrypt(
        nonce, VID.encode(), None
    )
    token = f"{nonce.hex()}:{sealed.hex()}"
    assert UploadTokenCipher(secret).decrypt(token) == VID


def test_missing_secret_fails_fast():
    with pytest.raises(TokenConfigError):
        UploadTokenCipher("")
