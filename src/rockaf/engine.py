"""
PerformanceEngine - composition root for the live performance simulation

An external driver calls tick() once per beat (ms_per_beat() apart).
Each tick advances both clocks, decays the ringing drum level, rotates
riffs on bar boundaries, and feeds the crowd meter and feedback ring.
Components never reference each other; the engine moves values between
them.
"""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from . import constants as C
from .bass import BassTuning
from .config import PerformanceConfig
from .crowd import CrowdMeterService
from .drums import DrumKitModule
from .event_log import EventLog
from .feedback import FeedbackBuffer
from .mixer import MixerRouter
from .riffs import RiffEngine, RiffSlot
from .setlist import SetlistManager
from .tempo import SustainCurve, TempoClock

logger = logging.getLogger(__name__)

# Weights of the drum ring and the riff gain in the combined signal
RING_WEIGHT = 0.5
RIFF_WEIGHT = 0.5


class EngineState(Enum):
    IDLE = "IDLE"
    TICKING = "TICKING"
    STOPPED = "STOPPED"


@dataclass
class PerformanceMetrics:
    """Snapshot of engine state for observers"""
    state: EngineState
    tick: int
    bpm: int
    ms_per_beat: int
    energy: int
    peak_timestamp: float
    signal: float
    current_riff: Optional[str]
    active_slots: int
    route_count: int
    encore_count: int
    feedback_pending: int

    def __str__(self):
        if self.state == EngineState.IDLE:
            return f"State: {self.state.value}"
        return (
            f"State: {self.state.value}\n"
            f"Tick: {self.tick} @ {self.bpm} BPM ({self.ms_per_beat}ms/beat)\n"
            f"Crowd: {self.energy}/100 "
            f"({'peaked' if self.peak_timestamp else 'no peak yet'})\n"
            f"Signal: {self.signal:.3f}\n"
            f"Riff: {self.current_riff or '-'} ({self.active_slots} slots)\n"
            f"Routes: {self.route_count}  Encores: {self.encore_count}\n"
            f"Feedback backlog: {self.feedback_pending}"
        )


class PerformanceEngine:
    """
    Owns one of each component and advances them together.

    Idle until the first tick(), Ticking afterwards. stop() records the
    external Stopped state; later tick() calls do nothing.
    """

    def __init__(self, config: Optional[PerformanceConfig] = None,
                 event_log: Optional[EventLog] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time):
        self.config = config or PerformanceConfig()
        self.venue = self.config.venue()
        if event_log is None:
            event_log = EventLog(self.config.max_log_entries, clock=clock)
        self.event_log = event_log

        self.tempo = TempoClock(self.config.bpm)
        self.sustain = SustainCurve(self.config.hold_ticks, self.config.decay_per_tick)
        self.feedback = FeedbackBuffer(self.config.buffer_size)
        self.drums = DrumKitModule()
        self.riffs = RiffEngine(self.config.max_riff_slots, rng=rng)
        self.crowd = CrowdMeterService(clock=clock)
        self.mixer = MixerRouter(self.config.max_channels)
        self.setlist = SetlistManager(self.config.max_tracks)
        self.bass = BassTuning()

        self.state = EngineState.IDLE

        # Ringing drum level and the drum tick it started on
        self._ring_level = 0.0
        self._ring_start = 0

        self._current_riff: Optional[RiffSlot] = None
        self._bars_left = 0
        self._signal = 0.0

        logger.debug("PerformanceEngine initialized: %d BPM, venue %d/%d zones",
                     self.tempo.bpm, self.venue.capacity, self.venue.zones)

    # Tick sequence

    def tick(self) -> int:
        """Advance the performance by one beat and return the tick number."""
        if self.state == EngineState.STOPPED:
            return self.tempo.ticks

        if self.state == EngineState.IDLE:
            self.state = EngineState.TICKING
            self.event_log.append("start", {'bpm': self.tempo.bpm, 'venue': self.venue})
            logger.info("Performance started at %d BPM", self.tempo.bpm)

        tick = self.tempo.tick()
        drum_tick = self.drums.advance_tick()

        ring = self.sustain.apply(self._ring_level, drum_tick - self._ring_start)

        if (tick - 1) % self.config.beats_per_bar == 0:
            self._on_bar(tick)

        riff_gain = self._current_riff.gain if self._current_riff else 0.0
        self._signal = float(np.clip(RING_WEIGHT * ring + RIFF_WEIGHT * riff_gain, 0.0, 1.0))

        energy = self.crowd.set_energy(round(self._signal * 100))
        if energy >= C.PEAK_THRESHOLD:
            self.event_log.append("peak", {'tick': tick, 'energy': energy})
            logger.info("Crowd peak at tick %d (energy %d)", tick, energy)

        self.feedback.write(self._signal)

        self.event_log.append("tick", {
            'tick': tick,
            'energy': energy,
            'signal': self._signal,
            'riff': self._current_riff.slot_id if self._current_riff else None,
        })
        return tick

    def _on_bar(self, tick: int) -> None:
        self._bars_left -= 1
        if self._bars_left > 0 and self._current_riff is not None:
            return

        slot = self.riffs.next_slot()
        self._current_riff = slot
        self._bars_left = slot.bars if slot else 0
        if slot is not None:
            self.event_log.append("riff", {'tick': tick, 'slot': slot.slot_id, 'bars': slot.bars})

    def stop(self) -> None:
        self.state = EngineState.STOPPED
        logger.info("Performance stopped at tick %d", self.tempo.ticks)

    # Performer input

    def hit(self, pad: int, velocity: int) -> bool:
        """
        Hit a drum pad. The hit is always recorded on a valid pad; only a
        playable velocity starts the ringing level.
        """
        played = self.drums.trigger(pad, velocity)
        if played:
            self._ring_level = velocity / 127.0
            self._ring_start = self.drums.global_tick
        self.event_log.append("hit", {'pad': int(pad), 'velocity': velocity, 'played': played})
        return played

    def add_riff(self, slot: RiffSlot) -> bool:
        return self.riffs.add_slot(slot)

    def next_track(self) -> Optional[str]:
        track = self.setlist.next_track()
        if track is not None:
            self.event_log.append("track", {'track': track})
        return track

    def request_encore(self) -> bool:
        granted = self.setlist.request_encore()
        if granted:
            self.event_log.append("encore", {'count': self.setlist.encore_count})
        return granted

    def route(self, channel: int, destination: str) -> bool:
        bound = self.mixer.bind_channel(channel, destination)
        if bound:
            self.event_log.append("route", {'channel': channel, 'destination': destination})
        return bound

    def tune_bass(self, semitones: int) -> int:
        offset = self.bass.set_offset(semitones)
        self.event_log.append("tuning", {'offset': offset})
        return offset

    # Observers

    @property
    def signal(self) -> float:
        return self._signal

    @property
    def current_riff(self) -> Optional[RiffSlot]:
        return self._current_riff

    def metrics(self) -> PerformanceMetrics:
        return PerformanceMetrics(
            state=self.state,
            tick=self.tempo.ticks,
            bpm=self.tempo.bpm,
            ms_per_beat=self.tempo.ms_per_beat(),
            energy=self.crowd.energy,
            peak_timestamp=self.crowd.peak_timestamp,
            signal=self._signal,
            current_riff=self._current_riff.slot_id if self._current_riff else None,
            active_slots=self.riffs.get_active_slot_count(),
            route_count=self.mixer.route_count,
            encore_count=self.setlist.encore_count,
            feedback_pending=self.feedback.pending(),
        )
