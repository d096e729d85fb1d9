"""
Pydantic models for everything that crosses the command boundary.
Ciphertexts are base64 text, key material is lowercase hex (display only).
"""

from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, model_validator

from cryptolab.common.errors import CryptoLabError


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# -------------------------
# Key material (display)
# -------------------------

class SymmetricKeyInfo(_Frozen):
    algorithm: str
    key_hex: str        # lowercase hex
    key_bits: int


class PublicKeyInfo(_Frozen):
    algorithm: str
    modulus_hex: str    # n, lowercase hex
    exponent: int       # e
    key_bits: int


class KeyPairInfo(_Frozen):
    """Shown to the owning party only."""
    party: str
    public: PublicKeyInfo
    private_exponent_hex: str   # d, lowercase hex


class EavesdropperKnowledge(_Frozen):
    """Long-lived facts the eavesdropper has picked up off the wire."""
    public_keys: Dict[str, PublicKeyInfo] = {}
    shared_key_known: bool = False


# -------------------------
# Chat messages + three views
# -------------------------

class Message(_Frozen):
    sender_id: str
    recipient_id: str
    plaintext: str
    ciphertext: str     # base64(envelope)
    timestamp: int      # unix ms


class SenderView(_Frozen):
    plaintext: str
    ciphertext: str


class ReceiverView(_Frozen):
    ciphertext: str
    plaintext: Optional[str] = None   # None when decryption failed
    decrypted: bool


class EavesdropperView(_Frozen):
    route: str          # "alice -> bob"
    ciphertext: str
    size_bytes: int


class OperationLogEntry(_Frozen):
    timestamp: int
    actor: str
    action: str
    algorithm: str
    details: Dict[str, Union[int, str]] = {}


class Exchange(_Frozen):
    message: Message
    sender: SenderView
    receiver: ReceiverView
    eavesdropper: EavesdropperView
    log_entry: OperationLogEntry


# -------------------------
# Small-integer RSA walkthrough
# -------------------------

class ToyRSAConfig(_Frozen):
    p: int
    q: int
    e: Optional[int] = None     # first coprime candidate when omitted


class ToyRSAParameters(_Frozen):
    p: int
    q: int
    n: int
    phi: int
    e: int
    d: int

    @model_validator(mode="after")
    def _check_invariants(self) -> "ToyRSAParameters":
        if self.n != self.p * self.q:
            raise ValueError("n must equal p*q")
        if self.phi != (self.p - 1) * (self.q - 1):
            raise ValueError("phi must equal (p-1)(q-1)")
        if not 0 <= self.d < self.phi:
            raise ValueError("d must lie in [0, phi)")
        if (self.e * self.d) % self.phi != 1 % self.phi:
            raise ValueError("d must be the inverse of e mod phi")
        return self


class RSAEavesdropperView(_Frozen):
    n: int
    e: int
    c: int


class RSAWalkthrough(_Frozen):
    params: ToyRSAParameters
    m: int
    c: int              # m^e mod n
    decrypted: int      # c^d mod n
    eavesdropper: RSAEavesdropperView


# -------------------------
# Diffie-Hellman walkthrough
# -------------------------

class DHChoices(_Frozen):
    """Public (p, g) values the walkthrough offers."""
    primes: Tuple[int, ...]
    generators: Tuple[int, ...]


class DHConfig(_Frozen):
    p: int
    g: int
    a: Optional[int] = None     # Alice's private exponent
    b: Optional[int] = None     # Bob's private exponent


class DHEavesdropperView(_Frozen):
    p: int
    g: int
    A: int
    B: int


class DHExchange(_Frozen):
    p: int
    g: int
    A: int              # g^a mod p
    B: int              # g^b mod p
    secret_from_a: int  # B^a mod p
    secret_from_b: int  # A^b mod p
    match: bool
    eavesdropper: DHEavesdropperView


# -------------------------
# Command result
# -------------------------

class Outcome(BaseModel):
    """Result of one demo command: either a value or a typed error."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    value: Any = None
    error: Optional[str] = None     # one of the CryptoLabError codes
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, err: CryptoLabError) -> "Outcome":
        return cls(ok=False, error=err.code, message=err.message)
