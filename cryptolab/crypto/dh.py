"""Classic Diffie-Hellman over small public (p, g)."""

import os

from cryptolab.common.errors import InvalidInput
from cryptolab.crypto.modmath import mod_pow

# Public choices offered by the walkthrough.
DH_PRIMES = (23, 29, 47, 59, 83, 107)
DH_GENERATORS = (2, 3, 5)


def generate_private(p: int) -> int:
    """
    Generate a random private exponent in [2, p-2].

    :param p: prime modulus
    :return: private exponent
    """
    if p < 5:
        raise InvalidInput("Modulus too small for a private exponent")
    # 32 random bytes -> big int -> reduced to fit range
    return int.from_bytes(os.urandom(32), "big") % (p - 3) + 2


def derive_public_value(g: int, private_exp: int, p: int) -> int:
    """
    Compute public value A = g^a mod p.

    :param g: generator
    :param private_exp: private exponent a
    :param p: prime modulus
    :return: public value A
    """
    return mod_pow(g, private_exp, p)


def derive_shared_secret(other_public: int, own_private_exp: int, p: int) -> int:
    """
    Compute shared secret s = (other_public)^a mod p.

    :param other_public: other side's public value
    :param own_private_exp: our private exponent
    :param p: prime modulus
    :return: s as integer
    """
    return mod_pow(other_public, own_private_exp, p)
