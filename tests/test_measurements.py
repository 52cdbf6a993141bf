import numpy as np
import pytest

from quantumlab.model.measurements import MeasurementRecorder


def drive(recorder, times, intensity=0.5, mode="teleportation"):
    for t in times:
        recorder.sample(float(t), intensity, mode)


FRAMES = np.arange(1, 30001) * 0.02  # 600 simulated-time units


class TestMeasurementRecorder:
    def test_inactive_recorder_never_records(self, rng):
        rec = MeasurementRecorder(rng)
        drive(rec, FRAMES[:1000])
        assert len(rec) == 0

    def test_samples_once_per_cadence(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True, 0.0)
        drive(rec, FRAMES[:1999])  # up to t = 39.98
        stamps = [m.timestamp for m in rec.entries()]
        assert len(stamps) == 4
        assert stamps[0] == pytest.approx(0.02)
        assert all(b - a == pytest.approx(10.0, abs=0.05) for a, b in zip(stamps, stamps[1:]))

    def test_log_is_bounded_to_the_last_twenty(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True)
        drive(rec, FRAMES)
        entries = rec.entries()
        assert len(entries) == 20
        assert entries[-1].timestamp > 590.0

    def test_timestamps_strictly_ascending(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True)
        drive(rec, FRAMES)
        stamps = [m.timestamp for m in rec.entries()]
        assert all(a < b for a, b in zip(stamps, stamps[1:]))

    def test_repeated_timestamp_is_not_logged_twice(self, rng):
        rec = MeasurementRecorder(rng, cadence=0.01)
        rec.set_active(True)
        rec.sample(5.0, 0.5, "tunneling")
        rec.sample(5.0, 0.5, "tunneling")
        assert len(rec) == 1

    def test_value_is_scaled_by_field_intensity_and_tagged_with_mode(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True)
        drive(rec, FRAMES[:5000], intensity=0.3, mode="interference")
        assert all(0.0 <= m.value < 0.3 for m in rec.entries())
        assert {m.type for m in rec.entries()} == {"interference"}

    def test_deactivating_empties_the_log(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True)
        drive(rec, FRAMES[:2000])
        rec.set_active(False)
        assert len(rec) == 0
        drive(rec, FRAMES[2000:4000])
        assert len(rec) == 0

    def test_activation_mid_run_waits_for_next_boundary(self, rng):
        rec = MeasurementRecorder(rng)
        rec.set_active(True, time=13.0)
        assert rec.sample(14.0, 0.5, "superposition") is None
        assert rec.sample(20.0, 0.5, "superposition") is not None
