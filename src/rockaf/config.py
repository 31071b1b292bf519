"""
Configuration for the performance engine.

Values come from defaults, an options mapping, or ROCKAF_* environment
variables. Everything is clamped to the fixed ceilings in constants.
"""

import logging
import math
import os
import sys
from dataclasses import dataclass, fields
from typing import Any, Mapping

from . import constants as C
from .errors import PerformanceError

logger = logging.getLogger(__name__)

# Recognized option names -> dataclass field
OPTION_ALIASES = {
    'bpm': 'bpm',
    'capacity': 'capacity',
    'zones': 'zones',
    'maxRiffSlots': 'max_riff_slots',
    'maxTracks': 'max_tracks',
    'maxChannels': 'max_channels',
    'maxLogEntries': 'max_log_entries',
}

ENV_VARS = {
    'ROCKAF_BPM': 'bpm',
    'ROCKAF_CAPACITY': 'capacity',
    'ROCKAF_ZONES': 'zones',
    'ROCKAF_MAX_RIFF_SLOTS': 'max_riff_slots',
    'ROCKAF_MAX_TRACKS': 'max_tracks',
    'ROCKAF_MAX_CHANNELS': 'max_channels',
    'ROCKAF_MAX_LOG_ENTRIES': 'max_log_entries',
}


def _to_float(name: str, value: Any) -> float:
    try:
        number = float(value)
    except OverflowError:
        # ints too large for a float
        number = math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        raise PerformanceError("config_invalid", f"{name}={value!r} is not a number")
    if math.isnan(number):
        raise PerformanceError("config_invalid", f"{name}={value!r} is not a number")
    return number


def _to_int(name: str, value: Any) -> int:
    """Coerce to int; infinities saturate and are clamped by the config."""
    number = _to_float(name, value)
    return int(max(-sys.maxsize, min(sys.maxsize, number)))


@dataclass(frozen=True)
class VenueDescriptor:
    """Venue size and layout the engine plays into."""
    capacity: int = C.DEFAULT_VENUE_CAPACITY
    zones: int = C.DEFAULT_VENUE_ZONES

    def __post_init__(self):
        object.__setattr__(self, 'capacity', max(0, int(self.capacity)))
        object.__setattr__(self, 'zones', max(1, int(self.zones)))

    def attendance_per_zone(self) -> int:
        return self.capacity // self.zones


@dataclass
class PerformanceConfig:
    """Engine configuration (tempo, venue, capacity ceilings, sustain shape)."""
    bpm: int = C.DEFAULT_BPM
    capacity: int = C.DEFAULT_VENUE_CAPACITY
    zones: int = C.DEFAULT_VENUE_ZONES
    max_riff_slots: int = C.MAX_RIFF_SLOTS
    max_tracks: int = C.MAX_TRACKS
    max_channels: int = C.MAX_CHANNELS
    buffer_size: int = C.FEEDBACK_BUFFER_SAMPLES
    hold_ticks: int = C.DEFAULT_HOLD_TICKS
    decay_per_tick: float = C.DEFAULT_DECAY_PER_TICK
    beats_per_bar: int = C.DEFAULT_BEATS_PER_BAR
    max_log_entries: int = C.DEFAULT_MAX_LOG_ENTRIES

    def __post_init__(self):
        # BPM is clamped by TempoClock itself
        self.capacity = max(0, self.capacity)
        self.zones = max(1, self.zones)
        self.max_riff_slots = max(1, min(C.MAX_RIFF_SLOTS, self.max_riff_slots))
        self.max_tracks = max(1, min(C.MAX_TRACKS, self.max_tracks))
        self.max_channels = max(1, min(C.MAX_CHANNELS, self.max_channels))
        self.buffer_size = max(1, min(C.FEEDBACK_BUFFER_SAMPLES, self.buffer_size))
        self.hold_ticks = max(0, self.hold_ticks)
        self.decay_per_tick = max(0.0, min(1.0, float(self.decay_per_tick)))
        self.beats_per_bar = max(1, self.beats_per_bar)
        self.max_log_entries = max(1, self.max_log_entries)

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "PerformanceConfig":
        """
        Build a config from an options mapping.

        Accepts the option names bpm, capacity, zones, maxRiffSlots,
        maxTracks, maxChannels and the snake_case field names. Unknown keys
        are ignored with a warning.
        """
        field_names = {f.name: f for f in fields(cls)}
        values = {}
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in field_names:
                logger.warning("Ignoring unknown config option '%s'", key)
                continue
            if name == 'decay_per_tick':
                values[name] = _to_float(key, value)
            else:
                values[name] = _to_int(key, value)
        return cls(**values)

    @classmethod
    def from_env(cls) -> "PerformanceConfig":
        """Build a config from ROCKAF_* environment variables."""
        values = {}
        for env_name, field_name in ENV_VARS.items():
            raw = os.environ.get(env_name)
            if raw is not None:
                values[field_name] = _to_int(env_name, raw)
        return cls(**values)

    def venue(self) -> VenueDescriptor:
        return VenueDescriptor(capacity=self.capacity, zones=self.zones)
