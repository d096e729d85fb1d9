"""
Append-only operation log.

One entry per cryptographic operation (key generation, encryption,
decryption, key agreement). Entries are display data; no protocol code ever
reads them back.
"""

from typing import Dict, Iterator, Optional, Tuple, Union

from cryptolab.common.protocol import OperationLogEntry
from cryptolab.common.utils import now_ms


class OperationLog:
    """
    Handles one session's log.
    """

    def __init__(self):
        self._entries = []

    def append(
        self,
        actor: str,
        action: str,
        algorithm: str,
        details: Optional[Dict[str, Union[int, str]]] = None,
    ) -> OperationLogEntry:
        """
        Append a single entry and return it.
        """
        entry = OperationLogEntry(
            timestamp=now_ms(),
            actor=actor,
            action=action,
            algorithm=algorithm,
            details=dict(details or {}),
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> Tuple[OperationLogEntry, ...]:
        """Snapshot; mutating it cannot touch the log."""
        return tuple(self._entries)

    def for_actor(self, actor: str) -> Tuple[OperationLogEntry, ...]:
        return tuple(e for e in self._entries if e.actor == actor)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[OperationLogEntry]:
        return iter(self.entries)
