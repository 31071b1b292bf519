"""
FeedbackBuffer - fixed-capacity sample ring with independent cursors
Derived from the sequential audio ring: numpy storage, head/tail counters.

Cursors grow without bound and index storage modulo capacity. The writer
may lap the reader (old samples are overwritten). A reader that catches
up with the writer gets silence instead of stale data.
"""

import logging
import threading

import numpy as np

from . import constants as C

logger = logging.getLogger(__name__)


class FeedbackBuffer:
    """
    Single-writer / single-reader ring of float32 samples.

    write() claims its slot under a lock so concurrent writers never share
    a slot. read() enforces read_pos <= write_pos itself.
    """

    def __init__(self, capacity: int = C.FEEDBACK_BUFFER_SAMPLES):
        self.capacity = max(1, int(capacity))
        self._data = np.zeros(self.capacity, dtype=np.float32)
        self._write_pos = 0
        self._read_pos = 0
        self._write_lock = threading.Lock()
        self._read_lock = threading.Lock()

    @property
    def write_pos(self) -> int:
        return self._write_pos

    @property
    def read_pos(self) -> int:
        return self._read_pos

    def write(self, sample: float) -> None:
        with self._write_lock:
            self._data[self._write_pos % self.capacity] = sample
            self._write_pos += 1

    def write_many(self, samples) -> None:
        for sample in np.asarray(samples, dtype=np.float32).ravel():
            self.write(sample)

    def read(self) -> float:
        """Return the next sample, or 0.0 without advancing when starved."""
        with self._read_lock:
            if self._read_pos >= self._write_pos:
                return 0.0
            sample = float(self._data[self._read_pos % self.capacity])
            self._read_pos += 1
            return sample

    def read_many(self, count: int) -> np.ndarray:
        out = np.zeros(max(0, count), dtype=np.float32)
        for i in range(out.shape[0]):
            out[i] = self.read()
        return out

    def pending(self) -> int:
        """Samples written but not yet read."""
        return self._write_pos - self._read_pos

    def reset(self) -> None:
        with self._write_lock, self._read_lock:
            self._data.fill(0.0)
            self._write_pos = 0
            self._read_pos = 0
        logger.debug("Feedback buffer reset (%d samples)", self.capacity)

    def get_stats(self) -> dict:
        """Cursor stats for debugging"""
        return {
            'write_pos': self._write_pos,
            'read_pos': self._read_pos,
            'pending': self.pending(),
            'capacity': self.capacity,
        }
