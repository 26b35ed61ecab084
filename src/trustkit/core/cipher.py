from __future__ import annotations

import base64
import binascii
import os
import typing as t

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from trustkit.errors import ConfigurationError, CryptoError, VerificationError
from trustkit.utils.config import AES_KEY_LENGTHS

_IV_SIZE = 16


def b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def split_token(token: str) -> t.Tuple[str, str, str]:
    parts = token.split(".")
    if len(parts) != 3:
        raise VerificationError("token must have three dot-separated segments", {"segments": len(parts)})
    return parts[0], parts[1], parts[2]


class PayloadCipher:
    """AES-CBC encryption of the payload segment of a signed token.

    Header and signature segments are left untouched. The encrypted segment
    is ``base64url(iv || ciphertext)`` with a fresh IV per token.
    """

    def __init__(self, key: str) -> None:
        key_bytes = key.encode("utf-8")
        if len(key_bytes) not in AES_KEY_LENGTHS:
            raise ConfigurationError(
                "AES key must be 16, 24 or 32 bytes",
                {"length": len(key_bytes)},
            )
        self._algorithm = algorithms.AES(key_bytes)

    def encrypt_token(self, token: str) -> str:
        header, payload, signature = split_token(token)
        try:
            plaintext = b64url_decode(payload)
            iv = os.urandom(_IV_SIZE)
            padder = padding.PKCS7(algorithms.AES.block_size).padder()
            padded = padder.update(plaintext) + padder.finalize()
            encryptor = Cipher(self._algorithm, modes.CBC(iv)).encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except (binascii.Error, ValueError) as exc:
            raise CryptoError("error during payload encryption") from exc
        return f"{header}.{b64url_encode(iv + ciphertext)}.{signature}"

    def decrypt_token(self, token: str) -> str:
        header, payload, signature = split_token(token)
        try:
            blob = b64url_decode(payload)
            if len(blob) <= _IV_SIZE or (len(blob) - _IV_SIZE) % _IV_SIZE:
                raise ValueError("ciphertext is not a whole number of AES blocks")
            iv, ciphertext = blob[:_IV_SIZE], blob[_IV_SIZE:]
            decryptor = Cipher(self._algorithm, modes.CBC(iv)).decryptor()
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
        except (binascii.Error, ValueError) as exc:
            raise CryptoError("error during payload decryption") from exc
        return f"{header}.{b64url_encode(plaintext)}.{signature}"
