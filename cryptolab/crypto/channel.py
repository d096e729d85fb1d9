"""
One Channel interface, two variants.

Both chat demos send through a Channel, so the sender/receiver/eavesdropper
projection in cryptolab.session.view never needs to know which cipher is in
use.
"""

from abc import ABC, abstractmethod
from typing import Mapping

from cryptolab.common.errors import KeyNotReady
from cryptolab.crypto.aes import aes_gcm_decrypt, aes_gcm_encrypt
from cryptolab.crypto.keys import AsymmetricKeyPair, SymmetricKey
from cryptolab.crypto.rsa import rsa_decrypt, rsa_encrypt


class Channel(ABC):
    algorithm: str

    @abstractmethod
    def encrypt(self, plaintext: str, sender: str, recipient: str) -> bytes:
        ...

    @abstractmethod
    def decrypt(self, envelope: bytes, recipient: str) -> str:
        """Return the plaintext or raise DecryptionFailed."""


class AEADChannel(Channel):
    """Shared-key channel: both principals hold the same AES key."""

    algorithm = "AES-256-GCM"

    def __init__(self, key: SymmetricKey):
        self._key = key

    def encrypt(self, plaintext: str, sender: str, recipient: str) -> bytes:
        return aes_gcm_encrypt(self._key.material, plaintext)

    def decrypt(self, envelope: bytes, recipient: str) -> str:
        return aes_gcm_decrypt(self._key.material, envelope)


class AsymmetricChannel(Channel):
    """Encrypt to the recipient's public key; only the recipient can decrypt."""

    algorithm = "RSA-OAEP-SHA256"

    def __init__(self, keyring: Mapping[str, AsymmetricKeyPair]):
        self._keyring = keyring

    def _pair(self, party: str) -> AsymmetricKeyPair:
        pair = self._keyring.get(party)
        if pair is None:
            raise KeyNotReady(f"{party} has no key pair yet")
        return pair

    def encrypt(self, plaintext: str, sender: str, recipient: str) -> bytes:
        return rsa_encrypt(self._pair(recipient).public_key, plaintext)

    def decrypt(self, envelope: bytes, recipient: str) -> str:
        return rsa_decrypt(self._pair(recipient).private_key, envelope)
