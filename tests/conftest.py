import pytest

from cryptolab.common.config import Settings
from cryptolab.crypto.keys import generate_asymmetric_key_pair, generate_symmetric_key


@pytest.fixture(scope="session")
def alice_pair():
    return generate_asymmetric_key_pair(1024)


@pytest.fixture(scope="session")
def bob_pair():
    return generate_asymmetric_key_pair(1024)


@pytest.fixture
def key():
    return generate_symmetric_key()


@pytest.fixture
def settings():
    return Settings(rsa_key_size=1024, coprime_limit=5, log_level="DEBUG")
