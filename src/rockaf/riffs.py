"""
RiffEngine - capacity-bounded riff rotation with a named profile registry.

Slots are served round-robin. Once the slot list is full, new slots are
dropped; old slots are never evicted. The engine's "feel" tempo is clamped
to [60, 200] and is independent of the master TempoClock.
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from . import constants as C

logger = logging.getLogger(__name__)

# Thread-safe high-entropy default source
_system_random = random.SystemRandom()


def generate_pattern_id(rng: Optional[random.Random] = None) -> str:
    """
    Build a pattern id like 'HOOK-48213'.

    Args:
        rng: Random source (defaults to the OS entropy source)
    """
    rng = rng or _system_random
    prefix = rng.choice(C.PATTERN_PREFIXES)
    suffix = rng.randint(C.PATTERN_SUFFIX_MIN, C.PATTERN_SUFFIX_MAX)
    return f"{prefix}-{suffix}"


@dataclass(frozen=True)
class RiffSlot:
    """Immutable riff unit. Out-of-range values are clamped on construction."""
    slot_id: str
    gain: float = 1.0
    duration_ms: int = C.MIN_SLOT_DURATION_MS
    bars: int = C.MIN_SLOT_BARS

    def __post_init__(self):
        object.__setattr__(self, 'gain', max(0.0, min(1.0, float(self.gain))))
        object.__setattr__(self, 'duration_ms', max(C.MIN_SLOT_DURATION_MS, int(self.duration_ms)))
        object.__setattr__(self, 'bars', max(C.MIN_SLOT_BARS, int(self.bars)))


class RiffEngine:
    """Round-robin riff slots plus a registry of named riff profiles."""

    def __init__(self, max_slots: int = C.MAX_RIFF_SLOTS,
                 tempo: int = C.DEFAULT_RIFF_TEMPO,
                 rng: Optional[random.Random] = None):
        self.max_slots = max(1, min(C.MAX_RIFF_SLOTS, int(max_slots)))
        self._slots: List[RiffSlot] = []
        self._cursor = 0
        self._tempo = C.DEFAULT_RIFF_TEMPO
        self._rng = rng
        self._profiles: Dict[str, RiffSlot] = {}
        self._lock = threading.Lock()
        self.set_tempo(tempo)

    # Rotation

    def add_slot(self, slot: RiffSlot) -> bool:
        with self._lock:
            if len(self._slots) >= self.max_slots:
                logger.debug("Riff slot '%s' dropped - at capacity (%d)", slot.slot_id, self.max_slots)
                return False
            self._slots.append(slot)
            return True

    def new_slot(self, gain: float = 1.0, duration_ms: int = C.MIN_SLOT_DURATION_MS,
                 bars: int = C.MIN_SLOT_BARS) -> RiffSlot:
        """Create a slot with a freshly generated pattern id (not added)."""
        return RiffSlot(generate_pattern_id(self._rng), gain, duration_ms, bars)

    def next_slot(self) -> Optional[RiffSlot]:
        with self._lock:
            if not self._slots:
                return None
            slot = self._slots[self._cursor % len(self._slots)]
            self._cursor += 1
            return slot

    def get_active_slot_count(self) -> int:
        return len(self._slots)

    def slots(self) -> List[RiffSlot]:
        with self._lock:
            return list(self._slots)

    # Tempo

    def set_tempo(self, tempo: int) -> None:
        self._tempo = int(max(C.MIN_RIFF_TEMPO, min(C.MAX_RIFF_TEMPO, tempo)))

    def get_tempo(self) -> int:
        return self._tempo

    # Profile registry

    def register_profile(self, name: str, slot: RiffSlot) -> None:
        """Store a named slot; re-registering a name replaces it."""
        with self._lock:
            self._profiles[name] = slot

    def get_profile(self, name: str) -> Optional[RiffSlot]:
        with self._lock:
            return self._profiles.get(name)

    def list_profiles(self) -> List[str]:
        with self._lock:
            return list(self._profiles.keys())

    def add_profile_slot(self, name: str) -> bool:
        """Queue a registered profile into the rotation."""
        slot = self.get_profile(name)
        if slot is None:
            logger.debug("Riff profile '%s' not found", name)
            return False
        return self.add_slot(slot)
