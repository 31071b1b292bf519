"""
Test TempoClock and SustainCurve
Clamping, beat length, concurrent ticking, decay shape.
"""

import threading

import pytest

from rockaf.tempo import SustainCurve, TempoClock


class TestTempoClock:
    """Test master clock"""

    @pytest.mark.parametrize("bpm,expected", [
        (10, 40), (39, 40), (40, 40), (120, 120), (300, 300), (301, 300), (1000, 300),
    ])
    def test_bpm_clamped(self, bpm, expected):
        """Test BPM is clamped to 40-300"""
        assert TempoClock(bpm).bpm == expected

    @pytest.mark.parametrize("bpm", [40, 90, 120, 128, 140, 300, 7, 999])
    def test_ms_per_beat_integer_division(self, bpm):
        """Test beat length uses integer division"""
        clock = TempoClock(bpm)
        assert clock.ms_per_beat() == 60000 // clock.bpm

    def test_ms_per_beat_truncates(self):
        """Test beat length truncates"""
        # 60000 / 140 = 428.57...
        assert TempoClock(140).ms_per_beat() == 428

    def test_tick_increments_and_returns(self):
        """Test tick returns the new count"""
        clock = TempoClock()
        assert clock.ticks == 0
        assert clock.tick() == 1
        assert clock.tick() == 2
        assert clock.ticks == 2

    def test_concurrent_ticks_are_not_lost(self):
        """Test concurrent ticks are all counted"""
        clock = TempoClock()
        seen = []
        lock = threading.Lock()

        def worker():
            local = [clock.tick() for _ in range(1000)]
            with lock:
                seen.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert clock.ticks == 4000
        assert sorted(seen) == list(range(1, 4001))


class TestSustainCurve:
    """Test hold-then-decay"""

    def setup_method(self):
        self.curve = SustainCurve(hold_ticks=3, decay_per_tick=0.2)

    def test_full_sustain_during_hold(self):
        """Test the value holds during the hold ticks"""
        for t in range(3):
            assert self.curve.apply(0.8, t) == 0.8

    def test_decay_after_hold(self):
        """Test exponential decay after the hold"""
        assert self.curve.apply(1.0, 3) == pytest.approx(1.0)
        assert self.curve.apply(1.0, 4) == pytest.approx(0.8)
        assert self.curve.apply(1.0, 5) == pytest.approx(0.64)

    def test_monotonic_and_non_negative(self):
        """Test decay never rises or goes negative"""
        values = [self.curve.apply(1.0, t) for t in range(3, 200)]
        assert all(b <= a for a, b in zip(values, values[1:]))
        assert all(v >= 0.0 for v in values)

    def test_full_decay_drops_to_zero(self):
        """Test full decay silences after the hold"""
        curve = SustainCurve(hold_ticks=0, decay_per_tick=1.0)
        assert curve.apply(0.9, 0) == pytest.approx(0.9)
        assert curve.apply(0.9, 1) == 0.0

    def test_parameters_clamped(self):
        """Test curve parameters are clamped"""
        curve = SustainCurve(hold_ticks=-5, decay_per_tick=1.7)
        assert curve.hold_ticks == 0
        assert curve.decay_per_tick == 1.0
