"""Per-demo session state: who holds which keys, plus the operation log."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from cryptolab.common.errors import CryptoLabError, InvalidInput
from cryptolab.common.protocol import Outcome, ToyRSAParameters
from cryptolab.crypto.keys import AsymmetricKeyPair, SymmetricKey
from cryptolab.session.oplog import OperationLog

logger = logging.getLogger(__name__)

ALICE = "alice"
BOB = "bob"
EAVESDROPPER = "eve"    # never a key-holding party
SYSTEM = "system"


@dataclass
class PartyKeys:
    """Key material one principal owns."""
    symmetric_key: Optional[SymmetricKey] = None
    key_pair: Optional[AsymmetricKeyPair] = None
    toy_rsa: Optional[ToyRSAParameters] = None
    dh_private: Optional[int] = None


class Session:
    """
    State for one demo instance.

    Commands go through run(), which holds the session lock for the whole
    operation and turns CryptoLabError into a failed Outcome.
    """

    def __init__(self, principals: Tuple[str, str] = (ALICE, BOB)):
        if len(set(principals)) != 2 or EAVESDROPPER in principals:
            raise InvalidInput("A session needs two distinct principals other than the eavesdropper")
        self.principals = principals
        self.parties: Dict[str, PartyKeys] = {p: PartyKeys() for p in principals}
        self.log = OperationLog()
        self._lock = threading.Lock()

    def party(self, party_id: str) -> PartyKeys:
        try:
            return self.parties[party_id]
        except KeyError:
            raise InvalidInput(f"Unknown principal '{party_id}'") from None

    def peer_of(self, party_id: str) -> str:
        self.party(party_id)
        a, b = self.principals
        return b if party_id == a else a

    def run(self, command: Callable, *args, **kwargs) -> Outcome:
        with self._lock:
            try:
                return Outcome.success(command(*args, **kwargs))
            except CryptoLabError as err:
                logger.info("[SESSION] %s: %s", err.code, err.message)
                return Outcome.failure(err)
