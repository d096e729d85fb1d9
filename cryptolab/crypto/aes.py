"""AES-256-GCM helpers (use library).

Envelope layout:

    nonce (12) || ciphertext || tag (16)
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cryptolab.common.errors import DecryptionFailed, InvalidInput

logger = logging.getLogger(__name__)

KEY_SIZE_BYTES = 32
NONCE_SIZE_BYTES = 12   # 96-bit GCM nonce
TAG_SIZE_BYTES = 16     # 128-bit tag, appended by AESGCM


def _cipher(key: bytes) -> AESGCM:
    if len(key) != KEY_SIZE_BYTES:
        raise InvalidInput("AES-256 key must be exactly 32 bytes")
    return AESGCM(key)


def aes_gcm_encrypt(key: bytes, plaintext: str) -> bytes:
    """
    AES-256-GCM encrypt under a fresh random nonce.

    :param key: 32-byte AES key
    :param plaintext: non-empty text, encoded as UTF-8
    :return: nonce || ciphertext || tag
    """
    if not plaintext:
        raise InvalidInput("Plaintext must not be empty")

    cipher = _cipher(key)
    nonce = os.urandom(NONCE_SIZE_BYTES)
    ct = cipher.encrypt(nonce, plaintext.encode("utf-8"), None)
    logger.debug("[AES] Encrypted %d-byte envelope", NONCE_SIZE_BYTES + len(ct))
    return nonce + ct


def aes_gcm_decrypt(key: bytes, envelope: bytes) -> str:
    """
    Verify and decrypt an envelope produced by aes_gcm_encrypt.

    :param key: 32-byte AES key
    :param envelope: nonce || ciphertext || tag
    :return: plaintext text
    """
    cipher = _cipher(key)
    if len(envelope) < NONCE_SIZE_BYTES + TAG_SIZE_BYTES:
        raise DecryptionFailed()

    nonce, rest = envelope[:NONCE_SIZE_BYTES], envelope[NONCE_SIZE_BYTES:]
    try:
        return cipher.decrypt(nonce, rest, None).decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        logger.debug("[AES] Envelope rejected")
        raise DecryptionFailed() from None
