"""
DrumKitModule - per-pad last-hit tracking on the drum module's own tick.
"""

import logging
import threading
from enum import IntEnum

import numpy as np

from . import constants as C

logger = logging.getLogger(__name__)


class Pad(IntEnum):
    KICK = 0
    SNARE = 1
    HIHAT_CLOSED = 2
    HIHAT_OPEN = 3
    HIHAT_PEDAL = 4
    TOM_HIGH = 5
    TOM_MID = 6
    TOM_LOW = 7
    TOM_FLOOR = 8
    CRASH = 9
    SPLASH = 10
    RIDE = 11


class DrumKitModule:
    """
    Twelve pads, each remembering the tick of its last hit.

    The module keeps its own tick counter, advanced once per engine tick.
    trigger() records the hit whenever the pad exists; its return value only
    says whether the velocity is playable (1-127).
    """

    def __init__(self):
        self._tick = 0
        self._last_hit = np.zeros(C.NUM_PADS, dtype=np.int64)
        self._lock = threading.Lock()

    @property
    def global_tick(self) -> int:
        return self._tick

    def advance_tick(self) -> int:
        with self._lock:
            self._tick += 1
            return self._tick

    def trigger(self, pad: int, velocity: int) -> bool:
        if not 0 <= pad < C.NUM_PADS:
            logger.debug("Ignoring trigger on unknown pad %s", pad)
            return False

        self._last_hit[pad] = self._tick
        return C.MIN_VELOCITY <= velocity <= C.MAX_VELOCITY

    def last_hit_tick(self, pad: int) -> int:
        if not 0 <= pad < C.NUM_PADS:
            return 0
        return int(self._last_hit[pad])

    def ticks_since_hit(self, pad: int) -> int:
        return self._tick - self.last_hit_tick(pad)

    def reset(self) -> None:
        """Clear hit history. The tick counter is never reset."""
        self._last_hit.fill(0)
