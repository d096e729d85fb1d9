"""RSA-OAEP SHA-256 encrypt/decrypt, plus textbook RSA on small integers."""

import logging

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from cryptolab.common.errors import DecryptionFailed, InvalidInput
from cryptolab.crypto.modmath import mod_pow

logger = logging.getLogger(__name__)

_HASH_BYTES = 32    # SHA-256 digest size, used in the OAEP overhead


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def max_plaintext_bytes(public_key: rsa.RSAPublicKey) -> int:
    """Largest message OAEP-SHA256 can carry under this key."""
    return public_key.key_size // 8 - 2 * _HASH_BYTES - 2


def rsa_encrypt(public_key: rsa.RSAPublicKey, plaintext: str) -> bytes:
    """
    Encrypt text under the recipient's public key.

    :param public_key: recipient RSA public key
    :param plaintext: non-empty text, encoded as UTF-8
    :return: ciphertext bytes (key_size / 8 long)
    """
    if not plaintext:
        raise InvalidInput("Plaintext must not be empty")

    data = plaintext.encode("utf-8")
    limit = max_plaintext_bytes(public_key)
    if len(data) > limit:
        raise InvalidInput(f"Plaintext is {len(data)} bytes; this key carries at most {limit}")

    ct = public_key.encrypt(data, _oaep())
    logger.debug("[RSA] Encrypted %d bytes under %d-bit key", len(data), public_key.key_size)
    return ct


def rsa_decrypt(private_key: rsa.RSAPrivateKey, ciphertext: bytes) -> str:
    """
    Decrypt with our own private key.

    Any failure (wrong key, bad padding, wrong length) is a DecryptionFailed.
    """
    try:
        data = private_key.decrypt(ciphertext, _oaep())
        return data.decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        logger.debug("[RSA] Ciphertext rejected")
        raise DecryptionFailed() from None


# -------------------------
# Textbook RSA over small integers
# -------------------------

def encrypt_int(m: int, e: int, n: int) -> int:
    """c = m^e mod n, for 0 <= m < n."""
    if not 0 <= m < n:
        raise InvalidInput(f"Message must lie in [0, {n})")
    return mod_pow(m, e, n)


def decrypt_int(c: int, d: int, n: int) -> int:
    """m = c^d mod n, for 0 <= c < n."""
    if not 0 <= c < n:
        raise InvalidInput(f"Ciphertext must lie in [0, {n})")
    return mod_pow(c, d, n)
