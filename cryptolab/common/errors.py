"""
Error taxonomy shared by every engine.

Each error carries a stable `code` so a caller can branch on it without
importing the class:

    INVALID_INPUT, NO_MODULAR_INVERSE, DECRYPTION_FAILED, KEY_NOT_READY
"""


class CryptoLabError(Exception):
    code = "ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidInput(CryptoLabError):
    """Empty plaintext, malformed envelope, out-of-range integers."""
    code = "INVALID_INPUT"


class InvalidPrimes(InvalidInput):
    """Toy RSA primes are equal or not prime."""


class NoModularInverse(CryptoLabError):
    code = "NO_MODULAR_INVERSE"


class DecryptionFailed(CryptoLabError):
    """
    Authenticated or padded decryption did not verify.

    The message is always the same, whatever the cause (tag mismatch,
    wrong key, truncated envelope).
    """
    code = "DECRYPTION_FAILED"

    def __init__(self, message: str = "Decryption failed"):
        super().__init__(message)


class KeyNotReady(CryptoLabError):
    """An operation was attempted before its key material exists."""
    code = "KEY_NOT_READY"
