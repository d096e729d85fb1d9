import pytest

from cryptolab.common.errors import InvalidInput, InvalidPrimes, NoModularInverse
from cryptolab.crypto.keys import (
    RSA_PUBLIC_EXPONENT,
    SYMMETRIC_KEY_BYTES,
    TOY_PRIMES,
    SymmetricKey,
    choose_toy_rsa_parameters,
    generate_asymmetric_key_pair,
    generate_symmetric_key,
    random_prime_pair,
)


def test_symmetric_key_size_and_hex(key):
    assert len(key.material) == SYMMETRIC_KEY_BYTES
    assert key.hex() == key.hex().lower()
    assert len(key.hex()) == 64
    assert key.info().key_bits == 256


def test_symmetric_keys_are_fresh():
    assert generate_symmetric_key().material != generate_symmetric_key().material


def test_symmetric_key_repr_hides_material(key):
    assert key.hex() not in repr(key)


def test_symmetric_key_wrong_length():
    with pytest.raises(InvalidInput):
        SymmetricKey(b"\x00" * 16)


def test_asymmetric_key_pair(bob_pair):
    assert bob_pair.key_size == 1024
    info = bob_pair.public_info()
    assert info.exponent == RSA_PUBLIC_EXPONENT
    assert int(info.modulus_hex, 16) == bob_pair.public_key.public_numbers().n
    assert info.key_bits == 1024


def test_key_pair_info_shows_private_exponent_to_owner(bob_pair):
    info = bob_pair.info("bob")
    assert info.party == "bob"
    assert int(info.private_exponent_hex, 16) == bob_pair.private_key.private_numbers().d


def test_asymmetric_key_too_small():
    with pytest.raises(InvalidInput):
        generate_asymmetric_key_pair(512)


def test_toy_parameters_default_exponent():
    params = choose_toy_rsa_parameters(11, 13)
    assert (params.n, params.phi, params.e, params.d) == (143, 120, 7, 103)


def test_toy_parameters_chosen_exponent():
    params = choose_toy_rsa_parameters(61, 53, 17)
    assert params.n == 3233
    assert params.phi == 3120
    assert params.d == 2753


def test_toy_parameters_equal_primes():
    with pytest.raises(InvalidPrimes):
        choose_toy_rsa_parameters(13, 13)


def test_toy_parameters_not_prime():
    with pytest.raises(InvalidInput):
        choose_toy_rsa_parameters(15, 13)


def test_toy_parameters_exponent_shares_factor():
    with pytest.raises(NoModularInverse):
        choose_toy_rsa_parameters(11, 13, 4)


def test_toy_parameters_exponent_out_of_range():
    with pytest.raises(InvalidInput):
        choose_toy_rsa_parameters(11, 13, 121)


def test_toy_parameters_no_exponent_available():
    with pytest.raises(InvalidInput):
        choose_toy_rsa_parameters(2, 3)


def test_random_prime_pair():
    for _ in range(50):
        p, q = random_prime_pair()
        assert p != q
        assert p in TOY_PRIMES and q in TOY_PRIMES
