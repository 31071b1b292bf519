"""
SetlistManager - ordered track rotation with a capped encore counter.
"""

import logging
import threading
from typing import List, Optional

from . import constants as C

logger = logging.getLogger(__name__)


class SetlistManager:
    """
    Tracks rotate round-robin. The modulo base is the list size at call
    time, so adding tracks mid-rotation shifts which track comes next.
    """

    def __init__(self, max_tracks: int = C.MAX_TRACKS):
        self.max_tracks = max(1, min(C.MAX_TRACKS, int(max_tracks)))
        self._tracks: List[str] = []
        self._cursor = 0
        self._current: Optional[str] = None
        self._encores = 0
        self._lock = threading.Lock()

    def add_track(self, name: Optional[str]) -> bool:
        if not name:
            return False
        with self._lock:
            if len(self._tracks) >= self.max_tracks:
                logger.debug("Track '%s' dropped - setlist full (%d)", name, self.max_tracks)
                return False
            self._tracks.append(name)
            return True

    def next_track(self) -> Optional[str]:
        with self._lock:
            if not self._tracks:
                return None
            self._current = self._tracks[self._cursor % len(self._tracks)]
            self._cursor += 1
            return self._current

    def current_track(self) -> Optional[str]:
        return self._current

    def request_encore(self) -> bool:
        """Returns True if an encore was granted."""
        with self._lock:
            if self._encores >= C.MAX_ENCORES:
                return False
            self._encores += 1
            return True

    @property
    def encore_count(self) -> int:
        return self._encores

    @property
    def track_count(self) -> int:
        return len(self._tracks)

    def tracks(self) -> List[str]:
        with self._lock:
            return list(self._tracks)
