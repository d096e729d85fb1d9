"""Key generation: AES keys, RSA key pairs, small-integer RSA parameters."""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cryptography.hazmat.primitives.asymmetric import rsa

from cryptolab.common.errors import InvalidInput, InvalidPrimes
from cryptolab.common.protocol import (
    KeyPairInfo,
    PublicKeyInfo,
    SymmetricKeyInfo,
    ToyRSAParameters,
)
from cryptolab.common.utils import to_hex
from cryptolab.crypto.modmath import find_coprime_exponents, is_prime, mod_inverse

logger = logging.getLogger(__name__)

SYMMETRIC_KEY_BYTES = 32       # AES-256
RSA_PUBLIC_EXPONENT = 65537
DEFAULT_RSA_KEY_SIZE = 2048
MIN_RSA_KEY_SIZE = 1024

# Primes offered by the small-integer RSA walkthrough.
TOY_PRIMES = (11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97)


@dataclass(frozen=True)
class SymmetricKey:
    """Raw AES key. repr never shows the bytes."""
    material: bytes = field(repr=False)

    def __post_init__(self):
        if len(self.material) != SYMMETRIC_KEY_BYTES:
            raise InvalidInput(f"Symmetric key must be exactly {SYMMETRIC_KEY_BYTES} bytes")

    def hex(self) -> str:
        return to_hex(self.material)

    def info(self) -> SymmetricKeyInfo:
        return SymmetricKeyInfo(
            algorithm="AES-256-GCM",
            key_hex=self.hex(),
            key_bits=len(self.material) * 8,
        )


@dataclass(frozen=True)
class AsymmetricKeyPair:
    private_key: rsa.RSAPrivateKey = field(repr=False)
    public_key: rsa.RSAPublicKey

    @property
    def key_size(self) -> int:
        return self.public_key.key_size

    def public_info(self) -> PublicKeyInfo:
        numbers = self.public_key.public_numbers()
        return PublicKeyInfo(
            algorithm="RSA-OAEP-SHA256",
            modulus_hex=format(numbers.n, "x"),
            exponent=numbers.e,
            key_bits=self.key_size,
        )

    def info(self, party: str) -> KeyPairInfo:
        d = self.private_key.private_numbers().d
        return KeyPairInfo(
            party=party,
            public=self.public_info(),
            private_exponent_hex=format(d, "x"),
        )


def generate_symmetric_key() -> SymmetricKey:
    """32 bytes from the OS CSPRNG."""
    key = SymmetricKey(secrets.token_bytes(SYMMETRIC_KEY_BYTES))
    logger.info("[KEYS] Generated %d-bit symmetric key", SYMMETRIC_KEY_BYTES * 8)
    return key


def generate_asymmetric_key_pair(bits: int = DEFAULT_RSA_KEY_SIZE) -> AsymmetricKeyPair:
    """
    Generate an RSA key pair with the standard public exponent.

    :param bits: modulus size, at least MIN_RSA_KEY_SIZE
    """
    if bits < MIN_RSA_KEY_SIZE:
        raise InvalidInput(f"RSA key size must be at least {MIN_RSA_KEY_SIZE} bits")

    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=bits,
    )
    logger.info("[KEYS] Generated %d-bit RSA key pair", bits)
    return AsymmetricKeyPair(private_key=private_key, public_key=private_key.public_key())


def choose_toy_rsa_parameters(p: int, q: int, e: Optional[int] = None) -> ToyRSAParameters:
    """
    Build the walkthrough RSA parameters from two small distinct primes.

    When `e` is omitted the smallest exponent coprime with phi is used.
    """
    if p == q:
        raise InvalidPrimes("p and q must be distinct")
    for value in (p, q):
        if not is_prime(value):
            raise InvalidPrimes(f"{value} is not prime")

    n = p * q
    phi = (p - 1) * (q - 1)

    if e is None:
        e = next(find_coprime_exponents(phi, 1), None)
        if e is None:
            raise InvalidInput(f"No public exponent available for phi = {phi}")
    elif not 2 <= e < phi:
        raise InvalidInput(f"e must lie in [2, {phi})")

    d = mod_inverse(e, phi)
    logger.debug("[KEYS] Toy RSA parameters p=%d q=%d n=%d e=%d", p, q, n, e)
    return ToyRSAParameters(p=p, q=q, n=n, phi=phi, e=e, d=d)


def random_prime_pair() -> Tuple[int, int]:
    """Two distinct entries of TOY_PRIMES, picked with a CSPRNG."""
    p, q = secrets.choice(TOY_PRIMES), secrets.choice(TOY_PRIMES)
    while p == q:
        q = secrets.choice(TOY_PRIMES)
    return p, q
