"""
Master tempo clock and sustain decay curve.
"""

import threading

from . import constants as C


class TempoClock:
    """
    Monotonic tick counter driven by a bounded BPM.

    BPM is clamped to [40, 300] at construction and never changes.
    tick() is safe to call from several threads.
    """

    def __init__(self, bpm: int = C.DEFAULT_BPM):
        self._bpm = int(max(C.MIN_BPM, min(C.MAX_BPM, bpm)))
        self._ticks = 0
        self._lock = threading.Lock()

    @property
    def bpm(self) -> int:
        return self._bpm

    @property
    def ticks(self) -> int:
        return self._ticks

    def tick(self) -> int:
        """Increment and return the new tick count."""
        with self._lock:
            self._ticks += 1
            return self._ticks

    def ms_per_beat(self) -> int:
        return C.MS_PER_MINUTE // self._bpm


class SustainCurve:
    """
    Hold-then-exponential decay over elapsed ticks.

    Params:
    - hold_ticks: ticks at full level before decay starts (>= 0)
    - decay_per_tick: fraction lost each tick after the hold (0-1)
    """

    def __init__(self, hold_ticks: int = C.DEFAULT_HOLD_TICKS,
                 decay_per_tick: float = C.DEFAULT_DECAY_PER_TICK):
        self.hold_ticks = max(0, int(hold_ticks))
        self.decay_per_tick = max(0.0, min(1.0, float(decay_per_tick)))

    def apply(self, value: float, ticks_since_hit: int) -> float:
        if ticks_since_hit < self.hold_ticks:
            return value
        decayed = value * (1.0 - self.decay_per_tick) ** (ticks_since_hit - self.hold_ticks)
        return max(0.0, decayed)
