"""
BassTuning - four-string bass open-string frequencies with a global offset.
"""

import numpy as np

# E1 A1 D2 G2
STANDARD_TUNING_HZ = (41.20, 55.00, 73.42, 98.00)
MIN_OFFSET = -12
MAX_OFFSET = 12


class BassTuning:
    """Equal-tempered tuning shift in semitones, clamped to one octave."""

    def __init__(self, offset: int = 0):
        self._base = np.array(STANDARD_TUNING_HZ, dtype=np.float64)
        self._offset = 0
        self.set_offset(offset)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def string_count(self) -> int:
        return self._base.shape[0]

    def set_offset(self, semitones: int) -> int:
        self._offset = int(max(MIN_OFFSET, min(MAX_OFFSET, semitones)))
        return self._offset

    def frequency(self, string_index: int) -> float:
        if not 0 <= string_index < self.string_count:
            return 0.0
        return float(self._base[string_index] * 2.0 ** (self._offset / 12.0))

    def frequencies(self) -> np.ndarray:
        return self._base * 2.0 ** (self._offset / 12.0)
