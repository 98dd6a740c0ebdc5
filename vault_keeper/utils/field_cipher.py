"""
AES-CBC encryption for individual sensitive fields.

Each value is padded with PKCS#7 to the AES block size, encrypted in CBC mode
and base64-encoded for storage in a text column. By default a fresh random IV
is generated per value and stored in front of the ciphertext. The legacy mode
reuses one fixed IV and stores no IV, which reads and writes data produced by
the previous server but leaks equality of identical secrets.
"""

import base64
import binascii
import secrets

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..exceptions import (
    DecodeError,
    EmptyInputError,
    InvalidKeySizeError,
    KeyTooShortError,
    PaddingError,
)

MIN_KEY_LENGTH = 16
VALID_KEY_SIZES = (16, 24, 32)
BLOCK_SIZE = 16
LEGACY_IV = b"1234567890123456"


def prepare_key(key: bytes) -> bytes:
    """
    Truncate a raw key to a usable AES key.

    The key is cut to the largest multiple of 8 bytes not exceeding its
    length, and the result must be an AES key size.

    Raises:
        KeyTooShortError: If the key is shorter than 16 bytes
        InvalidKeySizeError: If the truncated key is not 16, 24 or 32 bytes
    """
    if len(key) < MIN_KEY_LENGTH:
        raise KeyTooShortError(key_length=len(key))
    prepared = key[: len(key) - len(key) % 8]
    if len(prepared) not in VALID_KEY_SIZES:
        raise InvalidKeySizeError(
            f"Key of {len(key)} bytes truncates to {len(prepared)}, "
            f"expected one of {VALID_KEY_SIZES}",
            key_length=len(key),
        )
    return prepared


def _pad(data: bytes) -> bytes:
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    return padder.update(data) + padder.finalize()


def _unpad(data: bytes) -> bytes:
    unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
    try:
        return unpadder.update(data) + unpadder.finalize()
    except ValueError as e:
        raise PaddingError(cause=e)


def aes_encrypt(plaintext: str, key: bytes, legacy_fixed_iv: bool = False) -> str:
    """
    Encrypt a string and return base64 text.

    Args:
        plaintext: Non-empty value to encrypt
        key: Raw key, see prepare_key()
        legacy_fixed_iv: Use the fixed IV and omit it from the output

    Returns:
        base64(iv + ciphertext), or base64(ciphertext) in legacy mode
    """
    prepared = prepare_key(key)
    if not plaintext:
        raise EmptyInputError("Plaintext is empty")

    iv = LEGACY_IV if legacy_fixed_iv else secrets.token_bytes(BLOCK_SIZE)
    encryptor = Cipher(algorithms.AES(prepared), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(_pad(plaintext.encode("utf-8"))) + encryptor.finalize()

    payload = ciphertext if legacy_fixed_iv else iv + ciphertext
    return base64.b64encode(payload).decode("ascii")


def aes_decrypt(ciphertext: str, key: bytes, legacy_fixed_iv: bool = False) -> str:
    """
    Decrypt base64 text produced by aes_encrypt().

    Raises:
        KeyTooShortError, InvalidKeySizeError: On an unusable key
        EmptyInputError: On empty input or a payload that is not whole blocks
        DecodeError: On invalid base64 or non UTF-8 plaintext
        PaddingError: On malformed padding
    """
    prepared = prepare_key(key)
    if not ciphertext:
        raise EmptyInputError("Ciphertext is empty")

    try:
        payload = base64.b64decode(ciphertext, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(cause=e)

    if legacy_fixed_iv:
        iv, body = LEGACY_IV, payload
    else:
        iv, body = payload[:BLOCK_SIZE], payload[BLOCK_SIZE:]

    if not body or len(body) % BLOCK_SIZE:
        raise EmptyInputError(
            "Ciphertext is empty or not a whole number of blocks", payload_length=len(payload)
        )

    decryptor = Cipher(algorithms.AES(prepared), modes.CBC(iv)).decryptor()
    padded = decryptor.update(body) + decryptor.finalize()

    try:
        return _unpad(padded).decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("Decrypted value is not valid UTF-8", cause=e)


class FieldCipher:
    """
    Encrypts and decrypts single attribute values under one server key.

    Built once at startup and shared read-only by every request.
    """

    def __init__(self, key: bytes, legacy_fixed_iv: bool = False):
        self._key = prepare_key(key)
        self.legacy_fixed_iv = legacy_fixed_iv

    def encrypt(self, plaintext: str) -> str:
        return aes_encrypt(plaintext, self._key, self.legacy_fixed_iv)

    def decrypt(self, ciphertext: str) -> str:
        return aes_decrypt(ciphertext, self._key, self.legacy_fixed_iv)

    def encrypt_optional(self, value):
        """Encrypt a patch value; None and "" pass through unchanged."""
        if not value:
            return value
        return self.encrypt(value)

    def decrypt_optional(self, value):
        """Decrypt a stored value; a column emptied by a patch reads back as ""."""
        if not value:
            return value
        return self.decrypt(value)
