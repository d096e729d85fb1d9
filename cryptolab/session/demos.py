"""
The four demo engines.

Each one owns a Session and exposes the commands a UI calls:
generate_keys / send / agree_key. Every command returns an Outcome.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from cryptolab.common.config import Settings, load_env
from cryptolab.common.errors import InvalidInput, KeyNotReady
from cryptolab.common.protocol import (
    DHChoices,
    DHConfig,
    DHEavesdropperView,
    DHExchange,
    EavesdropperKnowledge,
    Exchange,
    KeyPairInfo,
    Outcome,
    RSAEavesdropperView,
    RSAWalkthrough,
    SymmetricKeyInfo,
    ToyRSAConfig,
    ToyRSAParameters,
)
from cryptolab.common.utils import b64_decode
from cryptolab.crypto.aes import NONCE_SIZE_BYTES
from cryptolab.crypto.channel import AEADChannel, AsymmetricChannel, Channel
from cryptolab.crypto.dh import (
    DH_GENERATORS,
    DH_PRIMES,
    derive_public_value,
    derive_shared_secret,
    generate_private,
)
from cryptolab.crypto.keys import (
    RSA_PUBLIC_EXPONENT,
    choose_toy_rsa_parameters,
    generate_asymmetric_key_pair,
    generate_symmetric_key,
    random_prime_pair,
)
from cryptolab.crypto.modmath import find_coprime_exponents, is_prime
from cryptolab.crypto.rsa import decrypt_int, encrypt_int
from cryptolab.session.session import BOB, SYSTEM, Session
from cryptolab.session.view import observe

logger = logging.getLogger(__name__)


def _clean_plaintext(plaintext: str) -> str:
    text = (plaintext or "").strip()
    if not text:
        raise InvalidInput("Please enter a message")
    return text


# ------------------------ Chat demos ------------------------

class _ChatDemo(ABC):
    def __init__(self, session: Optional[Session] = None):
        self.session = session or Session()

    @abstractmethod
    def _channel(self, sender: str, recipient: str) -> Channel:
        """Build the channel for one direction, or raise KeyNotReady."""

    def send(self, principal: str, plaintext: str) -> Outcome:
        """Encrypt a message from `principal` to the peer; value is an Exchange."""
        return self.session.run(self._send, principal, plaintext)

    def _send(self, principal: str, plaintext: str) -> Exchange:
        recipient = self.session.peer_of(principal)
        channel = self._channel(principal, recipient)
        return observe(channel, principal, recipient, _clean_plaintext(plaintext), self.session.log)

    def receive(self, principal: str, ciphertext: str) -> Outcome:
        """Decrypt an arbitrary base64 envelope as `principal`; value is the plaintext."""
        return self.session.run(self._receive, principal, ciphertext)

    def _receive(self, principal: str, ciphertext: str) -> str:
        channel = self._channel(self.session.peer_of(principal), principal)
        envelope = b64_decode(ciphertext)
        plaintext = channel.decrypt(envelope, principal)
        self.session.log.append(
            actor=principal,
            action="Decrypted message",
            algorithm=channel.algorithm,
            details={"Ciphertext Size": len(envelope)},
        )
        return plaintext


class SymmetricChatDemo(_ChatDemo):
    """Both principals share one AES-256-GCM key; the eavesdropper never gets it."""

    def generate_keys(self) -> Outcome:
        return self.session.run(self._generate_keys)

    def _generate_keys(self) -> SymmetricKeyInfo:
        key = generate_symmetric_key()
        for party in self.session.parties.values():
            party.symmetric_key = key

        self.session.log.append(
            actor=SYSTEM,
            action="Shared key generated",
            algorithm="AES-256-GCM",
            details={
                "Key Size": len(key.material) * 8,
                "IV Size": NONCE_SIZE_BYTES * 8,
                "Key Type": "Symmetric",
            },
        )
        return key.info()

    def _channel(self, sender: str, recipient: str) -> Channel:
        key = self.session.party(sender).symmetric_key
        if key is None or self.session.party(recipient).symmetric_key is None:
            raise KeyNotReady("Shared key must be generated first")
        return AEADChannel(key)

    def eavesdropper_knowledge(self) -> Outcome:
        """Value is an EavesdropperKnowledge; the shared key is never part of it."""
        return self.session.run(self._eavesdropper_knowledge)

    def _eavesdropper_knowledge(self) -> EavesdropperKnowledge:
        return EavesdropperKnowledge(shared_key_known=False)


class AsymmetricChatDemo(_ChatDemo):
    """Each principal has an RSA pair; messages go out under the recipient's public key."""

    def __init__(self, session: Optional[Session] = None, settings: Optional[Settings] = None):
        super().__init__(session)
        self.settings = settings or load_env()

    def generate_keys(self, principal: str, bits: Optional[int] = None) -> Outcome:
        """Generate `principal`'s pair; value is a KeyPairInfo for that principal only."""
        return self.session.run(self._generate_keys, principal, bits)

    def _generate_keys(self, principal: str, bits: Optional[int]) -> KeyPairInfo:
        party = self.session.party(principal)
        size = bits or self.settings.rsa_key_size
        party.key_pair = generate_asymmetric_key_pair(size)

        self.session.log.append(
            actor=principal,
            action="Keys generated",
            algorithm=AsymmetricChannel.algorithm,
            details={"Key Size": size, "Public Exponent": RSA_PUBLIC_EXPONENT},
        )
        return party.key_pair.info(principal)

    def _channel(self, sender: str, recipient: str) -> Channel:
        if self.session.party(recipient).key_pair is None:
            raise KeyNotReady(f"{recipient}'s keys must be generated first")
        keyring = {
            pid: party.key_pair
            for pid, party in self.session.parties.items()
            if party.key_pair is not None
        }
        return AsymmetricChannel(keyring)

    def eavesdropper_knowledge(self) -> Outcome:
        """Value is an EavesdropperKnowledge with every published public key."""
        return self.session.run(self._eavesdropper_knowledge)

    def _eavesdropper_knowledge(self) -> EavesdropperKnowledge:
        return EavesdropperKnowledge(
            public_keys={
                pid: party.key_pair.public_info()
                for pid, party in self.session.parties.items()
                if party.key_pair is not None
            },
        )


# ------------------------ Small-integer RSA walkthrough ------------------------

class ToyRSADemo:
    """
    Textbook RSA with two small primes. The key owner (Bob by default)
    publishes (e, n); the other principal encrypts an integer to it.
    """

    def __init__(self, session: Optional[Session] = None, settings: Optional[Settings] = None):
        self.session = session or Session()
        self.settings = settings or load_env()

    def candidate_exponents(self, p: int, q: int) -> Outcome:
        """First few e coprime with phi, ascending; value is a list of ints."""
        return self.session.run(self._candidate_exponents, p, q)

    def _candidate_exponents(self, p: int, q: int) -> List[int]:
        if p <= 1 or q <= 1:
            raise InvalidInput("p and q must be greater than 1")
        phi = (p - 1) * (q - 1)
        return list(find_coprime_exponents(phi, self.settings.coprime_limit))

    def random_primes(self) -> Outcome:
        return self.session.run(random_prime_pair)

    def generate_keys(self, config: ToyRSAConfig, owner: str = BOB) -> Outcome:
        """Value is the ToyRSAParameters now owned by `owner`."""
        return self.session.run(self._generate_keys, config, owner)

    def _generate_keys(self, config: ToyRSAConfig, owner: str) -> ToyRSAParameters:
        party = self.session.party(owner)
        params = choose_toy_rsa_parameters(config.p, config.q, config.e)
        party.toy_rsa = params

        self.session.log.append(
            actor=owner,
            action="Keys generated",
            algorithm="RSA (textbook)",
            details={"p": params.p, "q": params.q, "n": params.n, "phi": params.phi, "e": params.e},
        )
        return params

    def send(self, principal: str, m: int) -> Outcome:
        """Encrypt integer `m` to the peer's (e, n); value is an RSAWalkthrough."""
        return self.session.run(self._send, principal, m)

    def _send(self, principal: str, m: int) -> RSAWalkthrough:
        recipient = self.session.peer_of(principal)
        params = self.session.party(recipient).toy_rsa
        if params is None:
            raise KeyNotReady(f"{recipient}'s RSA parameters must be chosen first")

        c = encrypt_int(m, params.e, params.n)
        decrypted = decrypt_int(c, params.d, params.n)

        self.session.log.append(
            actor=principal,
            action=f"Sent to {recipient}",
            algorithm="RSA (textbook)",
            details={"m": m, "c": c, "n": params.n, "e": params.e},
        )
        return RSAWalkthrough(
            params=params,
            m=m,
            c=c,
            decrypted=decrypted,
            eavesdropper=RSAEavesdropperView(n=params.n, e=params.e, c=c),
        )


# ------------------------ Diffie-Hellman walkthrough ------------------------

class DiffieHellmanDemo:
    def __init__(self, session: Optional[Session] = None):
        self.session = session or Session()

    def public_choices(self) -> Outcome:
        """Value is a DHChoices listing the offered moduli and generators."""
        return self.session.run(DHChoices, primes=DH_PRIMES, generators=DH_GENERATORS)

    def random_private_exponents(self, p: int) -> Outcome:
        """Value is (a, b), each drawn fresh from [2, p-2]."""
        return self.session.run(self._random_private_exponents, p)

    def _random_private_exponents(self, p: int) -> Tuple[int, int]:
        return generate_private(p), generate_private(p)

    def agree_key(self, config: DHConfig) -> Outcome:
        """Value is a DHExchange."""
        return self.session.run(self._agree_key, config)

    def _agree_key(self, config: DHConfig) -> DHExchange:
        p, g = config.p, config.g
        if not is_prime(p):
            raise InvalidInput(f"p = {p} is not prime")
        if not 1 < g < p:
            raise InvalidInput(f"g must lie in (1, {p})")
        if config.a is None or config.b is None:
            raise KeyNotReady("Both private exponents must be chosen first")
        if config.a < 0 or config.b < 0:
            raise InvalidInput("Private exponents must be non-negative")

        alice, bob = self.session.principals
        self.session.party(alice).dh_private = config.a
        self.session.party(bob).dh_private = config.b

        A = self._public_value(alice, g, p)
        B = self._public_value(bob, g, p)
        secret_from_a = self._shared_secret(alice, B, p)
        secret_from_b = self._shared_secret(bob, A, p)

        self.session.log.append(
            actor=SYSTEM,
            action="Key agreement",
            algorithm="Diffie-Hellman",
            details={"p": p, "g": g, "A": A, "B": B, "Match": str(secret_from_a == secret_from_b)},
        )
        logger.info("[DH] p=%d g=%d A=%d B=%d", p, g, A, B)

        return DHExchange(
            p=p,
            g=g,
            A=A,
            B=B,
            secret_from_a=secret_from_a,
            secret_from_b=secret_from_b,
            match=secret_from_a == secret_from_b,
            eavesdropper=DHEavesdropperView(p=p, g=g, A=A, B=B),
        )

    def _public_value(self, party_id: str, g: int, p: int) -> int:
        return derive_public_value(g, self._private(party_id), p)

    def _shared_secret(self, party_id: str, other_public: int, p: int) -> int:
        return derive_shared_secret(other_public, self._private(party_id), p)

    def _private(self, party_id: str) -> int:
        private_exp = self.session.party(party_id).dh_private
        if private_exp is None:
            raise KeyNotReady(f"{party_id} has no private exponent")
        return private_exp
