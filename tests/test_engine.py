"""
Test PerformanceEngine tick sequence
Clock alignment, riff rotation on bars, sustain decay, crowd and feedback.
"""

import itertools

import pytest

from rockaf.config import PerformanceConfig
from rockaf.drums import Pad
from rockaf.engine import EngineState, PerformanceEngine
from rockaf.event_log import EventLog
from rockaf.riffs import RiffSlot


def fake_clock():
    counter = itertools.count(1)
    return lambda: float(next(counter))


class TestPerformanceEngine:
    """Test engine composition"""

    def setup_method(self):
        self.engine = PerformanceEngine(clock=fake_clock())

    def test_idle_until_first_tick(self):
        """Test the engine starts on the first tick"""
        assert self.engine.state == EngineState.IDLE
        assert self.engine.tick() == 1
        assert self.engine.state == EngineState.TICKING
        assert len(self.engine.event_log.of_kind("start")) == 1

        self.engine.tick()
        assert len(self.engine.event_log.of_kind("start")) == 1

    def test_clocks_stay_aligned(self):
        """Test both clocks advance once per tick"""
        for _ in range(37):
            self.engine.tick()
        assert self.engine.tempo.ticks == 37
        assert self.engine.drums.global_tick == 37

    def test_riff_rotation_on_bar_boundaries(self):
        """Test riffs change on bar boundaries after their bar count"""
        a = RiffSlot("A", gain=0.4, bars=1)
        b = RiffSlot("B", gain=0.8, bars=2)
        self.engine.add_riff(a)
        self.engine.add_riff(b)

        playing = []
        for _ in range(16):
            self.engine.tick()
            playing.append(self.engine.current_riff.slot_id)

        assert playing == ["A"] * 4 + ["B"] * 8 + ["A"] * 4
        riff_events = [e.payload['slot'] for e in self.engine.event_log.of_kind("riff")]
        assert riff_events == ["A", "B", "A"]

    def test_signal_without_hits_follows_riff_gain(self):
        """Test signal is half the riff gain with no drums ringing"""
        self.engine.add_riff(RiffSlot("A", gain=0.4))
        self.engine.tick()
        assert self.engine.signal == pytest.approx(0.2)
        assert self.engine.crowd.energy == 20

    def test_no_riffs_is_silent(self):
        """Test an empty rotation gives silence"""
        for _ in range(6):
            self.engine.tick()
        assert self.engine.current_riff is None
        assert self.engine.signal == 0.0
        assert self.engine.crowd.energy == 0

    def test_hit_rings_then_decays(self):
        """Test a drum hit holds then decays"""
        self.engine.add_riff(RiffSlot("LOUD", gain=1.0))
        assert self.engine.hit(Pad.CRASH, 127)

        signals = []
        for _ in range(8):
            self.engine.tick()
            signals.append(self.engine.signal)

        # Held for two ticks, then decays toward the riff floor
        assert signals[0] == pytest.approx(1.0)
        assert signals[1] == pytest.approx(1.0)
        assert signals[2] == pytest.approx(0.5 * 0.85 + 0.5)
        assert all(b <= a for a, b in zip(signals, signals[1:]))
        assert all(s >= 0.5 for s in signals)

    def test_peak_logged_and_latched(self):
        """Test crowd peaks are logged and latched"""
        self.engine.add_riff(RiffSlot("LOUD", gain=1.0))
        self.engine.hit(Pad.KICK, 127)
        self.engine.tick()

        first_peak = self.engine.crowd.peak_timestamp
        assert first_peak != 0.0

        # Energy stays above 85 through tick 4 while the ring decays
        for _ in range(9):
            self.engine.tick()
        assert len(self.engine.event_log.of_kind("peak")) == 4
        peak = self.engine.crowd.peak_timestamp
        assert peak > first_peak

        # Signal settles at 0.5 once the ring has decayed
        for _ in range(50):
            self.engine.tick()
        assert self.engine.crowd.energy == 50
        assert self.engine.crowd.peak_timestamp == peak
        assert len(self.engine.event_log.of_kind("peak")) == 4

    def test_unplayable_hit_is_recorded_without_ringing(self):
        """Test an unplayable hit is recorded but silent"""
        for _ in range(3):
            self.engine.tick()
        assert not self.engine.hit(Pad.SNARE, 0)
        assert self.engine.drums.last_hit_tick(Pad.SNARE) == 3

        self.engine.tick()
        assert self.engine.signal == 0.0
        hit = self.engine.event_log.of_kind("hit")[-1]
        assert hit.payload == {'pad': int(Pad.SNARE), 'velocity': 0, 'played': False}

    def test_feedback_receives_signal_each_tick(self):
        """Test the signal is written to the feedback ring"""
        self.engine.add_riff(RiffSlot("A", gain=0.6))
        for _ in range(5):
            self.engine.tick()
        assert self.engine.feedback.pending() == 5
        assert self.engine.feedback.read() == pytest.approx(0.3)

    def test_stop_ends_ticking(self):
        """Test ticks after stop are ignored"""
        self.engine.tick()
        self.engine.tick()
        self.engine.stop()
        logged = len(self.engine.event_log)

        assert self.engine.tick() == 2
        assert self.engine.state == EngineState.STOPPED
        assert len(self.engine.event_log) == logged

    def test_deterministic_given_same_input(self):
        """Test identical input gives identical signals"""
        other = PerformanceEngine(clock=fake_clock())
        for engine in (self.engine, other):
            engine.add_riff(RiffSlot("A", gain=0.3, bars=2))
            engine.add_riff(RiffSlot("B", gain=0.9))
            engine.hit(Pad.SNARE, 90)

        signals = []
        for engine in (self.engine, other):
            run = []
            for _ in range(20):
                engine.tick()
                run.append(engine.signal)
            signals.append(run)
        assert signals[0] == signals[1]


class TestEngineCollaborators:
    """Test config wiring and delegated operations"""

    def test_config_wiring(self):
        """Test config values reach every component"""
        config = PerformanceConfig.from_options({
            'bpm': 500, 'capacity': 800, 'zones': 2,
            'maxRiffSlots': 1, 'maxTracks': 1, 'maxChannels': 1,
        })
        engine = PerformanceEngine(config)
        assert engine.tempo.bpm == 300
        assert engine.tempo.ms_per_beat() == 200
        assert engine.venue.attendance_per_zone() == 400

        assert engine.add_riff(RiffSlot("A"))
        assert not engine.add_riff(RiffSlot("B"))
        assert engine.setlist.add_track("Opener")
        assert not engine.setlist.add_track("Closer")
        assert engine.route(0, "main")
        assert not engine.route(1, "monitor")

    def test_setlist_and_encores_logged(self):
        """Test track and encore events are logged"""
        engine = PerformanceEngine()
        engine.setlist.add_track("Opener")
        engine.setlist.add_track("Closer")
        assert engine.next_track() == "Opener"
        for _ in range(4):
            engine.request_encore()

        log = engine.event_log
        assert [e.payload['track'] for e in log.of_kind("track")] == ["Opener"]
        assert len(log.of_kind("encore")) == 3
        assert engine.setlist.encore_count == 3

    def test_route_counts_bind_calls(self):
        """Test rebinding a channel counts as a route"""
        engine = PerformanceEngine()
        engine.route(1, "amp/a")
        engine.route(1, "amp/b")
        assert engine.mixer.route_count == 2
        assert engine.mixer.destination(1) == "amp/b"

    def test_tune_bass(self):
        """Test bass tuning is applied and logged"""
        engine = PerformanceEngine()
        assert engine.tune_bass(-2) == -2
        assert engine.bass.frequency(0) == pytest.approx(41.20 * 2 ** (-2 / 12))
        assert engine.event_log.of_kind("tuning")[-1].payload == {'offset': -2}

    def test_shared_event_log(self):
        """Test an injected event log is used"""
        log = EventLog()
        engine = PerformanceEngine(event_log=log)
        engine.tick()
        assert engine.event_log is log
        assert [e.kind for e in log.entries()] == ["start", "tick"]

    def test_default_log_is_bounded(self):
        """Test the engine log keeps only the newest configured entries"""
        engine = PerformanceEngine(PerformanceConfig.from_options({'maxLogEntries': 10}))
        for _ in range(100):
            engine.tick()

        entries = engine.event_log.entries()
        assert len(entries) == 10
        assert entries[-1].sequence == 101
        assert entries[-1].payload['tick'] == 100

    def test_metrics(self):
        """Test metrics snapshot and formatting"""
        engine = PerformanceEngine(PerformanceConfig(bpm=128))
        assert str(engine.metrics()) == "State: IDLE"

        engine.add_riff(RiffSlot("HOOK-12345", gain=1.0))
        engine.tick()
        metrics = engine.metrics()
        assert metrics.tick == 1
        assert metrics.ms_per_beat == 468
        assert metrics.current_riff == "HOOK-12345"
        assert metrics.energy == 50
        assert metrics.feedback_pending == 1
        assert "128 BPM" in str(metrics)
