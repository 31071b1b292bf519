"""
CrowdMeterService - bounded audience energy with peak latching.
"""

import logging
import time
from typing import Callable

from . import constants as C

logger = logging.getLogger(__name__)


class CrowdMeterService:
    """
    Energy gauge clamped to [0, 100].

    Reaching the peak threshold (85) stamps the wall-clock time. Later peaks
    overwrite the stamp; lower readings never clear it. Readers see plain
    attribute reads with no locking.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._energy = C.MIN_ENERGY
        self._peak_timestamp = 0.0

    def set_energy(self, level: int) -> int:
        level = int(max(C.MIN_ENERGY, min(C.MAX_ENERGY, level)))
        self._energy = level
        if level >= C.PEAK_THRESHOLD:
            self._peak_timestamp = self._clock()
            logger.debug("Crowd peak at energy %d", level)
        return level

    @property
    def energy(self) -> int:
        return self._energy

    @property
    def peak_timestamp(self) -> float:
        return self._peak_timestamp

    def has_peaked(self) -> bool:
        return self._peak_timestamp > 0.0
