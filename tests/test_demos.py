import base64

import pytest

from cryptolab.common.protocol import DHConfig, Exchange, ToyRSAConfig
from cryptolab.crypto.dh import DH_GENERATORS, DH_PRIMES
from cryptolab.session.demos import (
    AsymmetricChatDemo,
    DiffieHellmanDemo,
    SymmetricChatDemo,
    ToyRSADemo,
    _ChatDemo,
)
from cryptolab.session.session import ALICE, BOB


# ------------------------ symmetric chat ------------------------

@pytest.fixture
def aes_demo():
    demo = SymmetricChatDemo()
    assert demo.generate_keys().ok
    return demo


def test_symmetric_send_requires_key():
    outcome = SymmetricChatDemo().send(ALICE, "hello")
    assert not outcome.ok
    assert outcome.error == "KEY_NOT_READY"


def test_symmetric_generate_keys_shares_one_key():
    demo = SymmetricChatDemo()
    info = demo.generate_keys().value
    assert info.key_bits == 256
    assert demo.session.party(ALICE).symmetric_key.hex() == info.key_hex
    assert demo.session.party(BOB).symmetric_key is demo.session.party(ALICE).symmetric_key


def test_symmetric_send_both_directions(aes_demo):
    for sender, recipient in [(ALICE, BOB), (BOB, ALICE)]:
        outcome = aes_demo.send(sender, "  Meet at noon  ")
        assert outcome.ok
        exchange = outcome.value
        assert isinstance(exchange, Exchange)
        assert exchange.message.sender_id == sender
        assert exchange.message.recipient_id == recipient
        assert exchange.sender.plaintext == "Meet at noon"
        assert exchange.receiver.plaintext == "Meet at noon"


def test_symmetric_send_empty(aes_demo):
    outcome = aes_demo.send(ALICE, "   ")
    assert outcome.error == "INVALID_INPUT"


def test_symmetric_unknown_principal(aes_demo):
    assert aes_demo.send("mallory", "hi").error == "INVALID_INPUT"


def test_symmetric_receive(aes_demo):
    ct = aes_demo.send(ALICE, "hello").value.message.ciphertext
    outcome = aes_demo.receive(BOB, ct)
    assert outcome.ok
    assert outcome.value == "hello"


def test_symmetric_receive_tampered(aes_demo):
    ct = aes_demo.send(ALICE, "hello").value.message.ciphertext
    raw = bytearray(base64.b64decode(ct))
    raw[-1] ^= 0x01
    outcome = aes_demo.receive(BOB, base64.b64encode(bytes(raw)).decode())
    assert outcome.error == "DECRYPTION_FAILED"


def test_symmetric_receive_malformed(aes_demo):
    assert aes_demo.receive(BOB, "not base64!!").error == "INVALID_INPUT"
    assert aes_demo.receive(BOB, base64.b64encode(b"short").decode()).error == "DECRYPTION_FAILED"


def test_symmetric_eavesdropper_never_sees_key(aes_demo):
    key = aes_demo.session.party(ALICE).symmetric_key
    exchange = aes_demo.send(ALICE, "top secret").value
    assert key.hex() not in exchange.eavesdropper.model_dump_json()
    assert "top secret" not in exchange.eavesdropper.model_dump_json()
    knowledge = aes_demo.eavesdropper_knowledge()
    assert knowledge.ok
    assert not knowledge.value.shared_key_known


def test_symmetric_log(aes_demo):
    aes_demo.send(ALICE, "one")
    aes_demo.send(BOB, "two")
    actions = [(e.actor, e.action) for e in aes_demo.session.log]
    assert actions == [
        ("system", "Shared key generated"),
        ("alice", "Sent to bob"),
        ("bob", "Sent to alice"),
    ]


# ------------------------ asymmetric chat ------------------------

@pytest.fixture
def rsa_demo(settings, alice_pair, bob_pair):
    demo = AsymmetricChatDemo(settings=settings)
    # reuse the session-wide pairs so the suite stays fast
    demo.session.party(ALICE).key_pair = alice_pair
    demo.session.party(BOB).key_pair = bob_pair
    return demo


def test_asymmetric_send_requires_recipient_keys(settings):
    demo = AsymmetricChatDemo(settings=settings)
    assert demo.send(ALICE, "hi").error == "KEY_NOT_READY"


def test_asymmetric_generate_keys(settings):
    demo = AsymmetricChatDemo(settings=settings)
    outcome = demo.generate_keys(BOB)
    assert outcome.ok
    assert outcome.value.party == BOB
    assert outcome.value.public.key_bits == 1024

    # Alice needs only Bob's public key to write to him
    assert demo.send(ALICE, "hi bob").value.receiver.plaintext == "hi bob"
    # ...but Bob cannot answer until Alice has a pair
    assert demo.send(BOB, "hi alice").error == "KEY_NOT_READY"

    knowledge = demo.eavesdropper_knowledge().value
    assert set(knowledge.public_keys) == {BOB}
    assert knowledge.public_keys[BOB] == outcome.value.public


def test_asymmetric_send(rsa_demo):
    exchange = rsa_demo.send(BOB, "Hello Alice").value
    assert exchange.receiver.decrypted
    assert exchange.receiver.plaintext == "Hello Alice"
    assert exchange.eavesdropper.size_bytes == 128
    assert exchange.log_entry.algorithm == "RSA-OAEP-SHA256"


def test_asymmetric_message_too_long(rsa_demo):
    assert rsa_demo.send(ALICE, "x" * 200).error == "INVALID_INPUT"


def test_asymmetric_wrong_recipient_cannot_read(rsa_demo):
    ct = rsa_demo.send(ALICE, "for bob").value.message.ciphertext
    assert rsa_demo.receive(BOB, ct).value == "for bob"
    assert rsa_demo.receive(ALICE, ct).error == "DECRYPTION_FAILED"


# ------------------------ toy RSA walkthrough ------------------------

def test_toy_rsa_candidates(settings):
    demo = ToyRSADemo(settings=settings)
    assert demo.candidate_exponents(11, 13).value == [7, 11, 13, 17, 19]


def test_toy_rsa_walkthrough(settings):
    demo = ToyRSADemo(settings=settings)
    params = demo.generate_keys(ToyRSAConfig(p=11, q=13, e=7)).value
    assert (params.n, params.phi, params.d) == (143, 120, 103)

    result = demo.send(ALICE, 4).value
    assert result.c == 82
    assert result.decrypted == 4
    assert result.eavesdropper.model_dump() == {"n": 143, "e": 7, "c": 82}


def test_toy_rsa_requires_parameters(settings):
    assert ToyRSADemo(settings=settings).send(ALICE, 4).error == "KEY_NOT_READY"


@pytest.mark.parametrize("config,error", [
    (ToyRSAConfig(p=13, q=13), "INVALID_INPUT"),
    (ToyRSAConfig(p=12, q=13), "INVALID_INPUT"),
    (ToyRSAConfig(p=11, q=13, e=4), "NO_MODULAR_INVERSE"),
])
def test_toy_rsa_bad_parameters(settings, config, error):
    assert ToyRSADemo(settings=settings).generate_keys(config).error == error


def test_toy_rsa_message_out_of_range(settings):
    demo = ToyRSADemo(settings=settings)
    demo.generate_keys(ToyRSAConfig(p=11, q=13))
    assert demo.send(ALICE, 143).error == "INVALID_INPUT"


def test_toy_rsa_random_primes(settings):
    p, q = ToyRSADemo(settings=settings).random_primes().value
    assert p != q


# ------------------------ Diffie-Hellman walkthrough ------------------------

def test_dh_walkthrough():
    exchange = DiffieHellmanDemo().agree_key(DHConfig(p=23, g=5, a=6, b=15)).value
    assert (exchange.A, exchange.B) == (8, 19)
    assert exchange.secret_from_a == exchange.secret_from_b == 2
    assert exchange.match
    assert exchange.eavesdropper.model_dump() == {"p": 23, "g": 5, "A": 8, "B": 19}


def test_dh_requires_private_exponents():
    assert DiffieHellmanDemo().agree_key(DHConfig(p=23, g=5, a=6)).error == "KEY_NOT_READY"


@pytest.mark.parametrize("config", [
    DHConfig(p=24, g=5, a=6, b=15),
    DHConfig(p=23, g=23, a=6, b=15),
    DHConfig(p=23, g=5, a=-1, b=15),
])
def test_dh_bad_config(config):
    assert DiffieHellmanDemo().agree_key(config).error == "INVALID_INPUT"


def test_dh_random_private_exponents():
    demo = DiffieHellmanDemo()
    a, b = demo.random_private_exponents(23).value
    assert 2 <= a <= 21 and 2 <= b <= 21
    assert demo.agree_key(DHConfig(p=23, g=5, a=a, b=b)).value.match


def test_dh_zero_exponent():
    exchange = DiffieHellmanDemo().agree_key(DHConfig(p=23, g=5, a=0, b=15)).value
    assert exchange.A == 1
    assert exchange.B == 19
    assert exchange.secret_from_a == exchange.secret_from_b == 1
    assert exchange.match


def test_dh_public_choices():
    demo = DiffieHellmanDemo()
    choices = demo.public_choices().value
    assert choices.primes == DH_PRIMES
    assert choices.generators == DH_GENERATORS
    for p in choices.primes:
        for g in choices.generators:
            assert demo.agree_key(DHConfig(p=p, g=g, a=3, b=4)).value.match


# ------------------------ shared chat base ------------------------

def test_chat_base_is_abstract():
    with pytest.raises(TypeError):
        _ChatDemo()

    class Incomplete(_ChatDemo):
        pass

    with pytest.raises(TypeError):
        Incomplete()
