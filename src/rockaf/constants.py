"""
Fixed bounds for the performance simulation.
Config values are clamped against these ceilings.
"""

# Master clock
DEFAULT_BPM = 120
MIN_BPM = 40
MAX_BPM = 300
MS_PER_MINUTE = 60000

# Riff engine "feel" tempo (independent of the master clock)
MIN_RIFF_TEMPO = 60
MAX_RIFF_TEMPO = 200
DEFAULT_RIFF_TEMPO = 120

# Riff slots
MAX_RIFF_SLOTS = 256
MIN_SLOT_DURATION_MS = 100
MIN_SLOT_BARS = 1
PATTERN_PREFIXES = ("RIFF", "LICK", "HOOK", "CHUG", "SOLO", "JAM")
PATTERN_SUFFIX_MIN = 10000
PATTERN_SUFFIX_MAX = 99999

# Drum kit
NUM_PADS = 12
MIN_VELOCITY = 1
MAX_VELOCITY = 127

# Feedback ring
FEEDBACK_BUFFER_SAMPLES = 8192

# Crowd
MIN_ENERGY = 0
MAX_ENERGY = 100
PEAK_THRESHOLD = 85

# Setlist
MAX_TRACKS = 48
MAX_ENCORES = 3

# Mixer
MAX_CHANNELS = 64

# Venue
DEFAULT_VENUE_CAPACITY = 5000
DEFAULT_VENUE_ZONES = 4

# Sustain defaults (in ticks)
DEFAULT_HOLD_TICKS = 2
DEFAULT_DECAY_PER_TICK = 0.15
DEFAULT_BEATS_PER_BAR = 4

# Event log bound (oldest entries dropped beyond this)
DEFAULT_MAX_LOG_ENTRIES = 65536
