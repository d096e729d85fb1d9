"""
Integer modular arithmetic used by the RSA and Diffie-Hellman walkthroughs.

Everything works on Python ints, so intermediate products such as n*n never
overflow, whatever the size of the toy primes.
"""

from typing import Iterator, Tuple

from cryptolab.common.errors import InvalidInput, NoModularInverse


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod modulus by square-and-multiply.

    :param base: any integer (reduced mod modulus first)
    :param exponent: non-negative exponent
    :param modulus: positive modulus
    :return: result in [0, modulus)
    """
    if modulus <= 0:
        raise InvalidInput("Modulus must be positive")
    if exponent < 0:
        raise InvalidInput("Exponent must be non-negative")

    result = 1 % modulus
    b = base % modulus
    e = exponent
    while e > 0:
        if e & 1:
            result = (result * b) % modulus
        b = (b * b) % modulus
        e >>= 1
    return result


def gcd(a: int, b: int) -> int:
    """Euclidean algorithm."""
    a, b = abs(a), abs(b)
    while b != 0:
        a, b = b, a % b
    return a


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Return (g, x, y) with a*x + b*y == g == gcd(a, b).
    """
    old_r, r = a, b
    old_x, x = 1, 0
    old_y, y = 0, 1
    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_x, x = x, old_x - quotient * x
        old_y, y = y, old_y - quotient * y
    return old_r, old_x, old_y


def mod_inverse(e: int, phi: int) -> int:
    """
    Find d with e*d == 1 (mod phi), 0 <= d < phi.

    Raises NoModularInverse when gcd(e, phi) != 1.
    """
    if phi <= 0:
        raise InvalidInput("Modulus must be positive")
    if phi == 1:
        return 0

    g, x, _ = extended_gcd(e % phi, phi)
    if g != 1:
        raise NoModularInverse(f"{e} has no inverse mod {phi} (gcd = {g})")
    return x % phi


def find_coprime_exponents(phi: int, limit: int) -> Iterator[int]:
    """
    Yield, in ascending order, the first `limit` integers e in [2, phi)
    with gcd(e, phi) == 1.
    """
    found = 0
    e = 2
    while e < phi and found < limit:
        if gcd(e, phi) == 1:
            found += 1
            yield e
        e += 1


def is_prime(n: int) -> bool:
    """Trial division; only meant for the small walkthrough primes."""
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0:
        return False
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True
