"""
Upload tokens: the verification id encrypted with AES-256-GCM so the CNIC
upload link can be shared without exposing an enumerable id.

Token format (hex): ``nonce:tag:ciphertext``. The older two-part format
``nonce:ciphertext`` (tag appended to the ciphertext) is still accepted.
"""

from __future__ import annotations

import hashlib
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_BYTES = 16
LEGACY_NONCE_BYTES = 12
TAG_BYTES = 16

_HEX_RE = re.compile(r"(?:[0-9a-fA-F]{2})*")


class UploadTokenError(ValueError):
    """Token could not be parsed or did not authenticate."""


class TokenConfigError(RuntimeError):
    """No secret configured for upload tokens."""


def _unhex(part: str, allow_empty: bool = False) -> bytes:
    if not _HEX_RE.fullmatch(part) or (not part and not allow_empty):
        raise UploadTokenError("Invalid encrypted format")
    return bytes.fromhex(part)


class UploadTokenCipher:
    def __init__(self, secret_key: str | None):
        if not secret_key:
            raise TokenConfigError("UPLOAD_TOKEN_SECRET is not set")
        self._aead = AESGCM(hashlib.sha256(secret_key.encode("utf-8")).digest())

    def encrypt(self, plaintext_id: str) -> str:
        nonce = os.urandom(NONCE_BYTES)
        sealed = self._aead.encrypt(nonce, plaintext_id.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return f"{nonce.hex()}:{tag.hex()}:{ciphertext.hex()}"

    def decrypt(self, token: str) -> str:
        if not isinstance(token, str):
            raise UploadTokenError("Invalid encrypted format")
        parts = token.split(":")
        if len(parts) == 3:
            nonce, tag = _unhex(parts[0]), _unhex(parts[1])
            ciphertext = _unhex(parts[2], allow_empty=True)
            if len(nonce) != NONCE_BYTES or len(tag) != TAG_BYTES:
                raise UploadTokenError("Invalid encrypted format")
            sealed = ciphertext + tag
        elif len(parts) == 2:
            nonce, sealed = (_unhex(p) for p in parts)
            if len(nonce) != LEGACY_NONCE_BYTES or len(sealed) < TAG_BYTES:
                raise UploadTokenError("Invalid encrypted format")
        else:
            raise UploadTokenError("Invalid encrypted format")

        try:
            plaintext = self._aead.decrypt(nonce, sealed, None)
            return plaintext.decode("utf-8")
        except InvalidTag:
            raise UploadTokenError("Decryption failed: authentication tag mismatch")
        except UnicodeDecodeError:
            raise UploadTokenError("Decryption failed: payload is not text")
