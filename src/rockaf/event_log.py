"""
Append-only in-memory event log.
The engine only produces entries; observers read snapshots.
"""

import threading
import time
from collections import deque
from typing import Any, Callable, List, NamedTuple, Optional


class LogEntry(NamedTuple):
    kind: str
    payload: Any
    timestamp: float
    sequence: int


class EventLog:
    """
    Thread-safe append-only log of (kind, payload, timestamp, sequence).

    Sequence numbers start at 1 and never restart, even when max_entries
    causes the oldest entries to be dropped.
    """

    def __init__(self, max_entries: Optional[int] = None,
                 clock: Callable[[], float] = time.time):
        self._entries = deque(maxlen=max_entries)
        self._sequence = 0
        self._clock = clock
        self._lock = threading.Lock()

    def append(self, kind: str, payload: Any = None) -> LogEntry:
        with self._lock:
            self._sequence += 1
            entry = LogEntry(kind, payload, self._clock(), self._sequence)
            self._entries.append(entry)
        return entry

    def entries(self) -> List[LogEntry]:
        with self._lock:
            return list(self._entries)

    def of_kind(self, kind: str) -> List[LogEntry]:
        return [e for e in self.entries() if e.kind == kind]

    @property
    def last_sequence(self) -> int:
        return self._sequence

    def __len__(self) -> int:
        return len(self._entries)
