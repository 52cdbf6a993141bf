import math

import pytest

from quantumlab.config import BARRIER_HEIGHT, SimulationSettings
from quantumlab.model.modes import (
    INTERFERENCE_MESSAGE, SUPERPOSITION_MESSAGE, TELEPORT_SUCCESS_MESSAGE,
    ExperimentMode, ModeController, tunneling_probability,
)
from quantumlab.model.registry import ObjectRegistry, TeleportPhase


class RecordingDevice:
    def __init__(self):
        self.sounds = []
        self.haptics = 0

    def play_sound(self, kind):
        self.sounds.append(kind)

    def trigger_haptic(self):
        self.haptics += 1


class BrokenDevice:
    def play_sound(self, kind):
        raise RuntimeError("no audio device")

    def trigger_haptic(self):
        raise RuntimeError("no vibration motor")


@pytest.fixture
def settings():
    return SimulationSettings()


@pytest.fixture
def registry(rng):
    return ObjectRegistry(rng)


@pytest.fixture
def device():
    return RecordingDevice()


@pytest.fixture
def controller(registry, settings, device):
    return ModeController(registry, settings, device)


class TestTunnelingProbability:
    def test_value_at_fifty(self):
        assert tunneling_probability(50) == pytest.approx(math.exp(-5))
        assert tunneling_probability(50) == pytest.approx(0.0067, abs=1e-4)

    def test_monotonically_decreasing_over_slider_range(self):
        heights = range(int(BARRIER_HEIGHT.minimum), int(BARRIER_HEIGHT.maximum) + 1, 5)
        values = [tunneling_probability(h) for h in heights]
        assert all(a > b for a, b in zip(values, values[1:]))


class TestModeSwitching:
    def test_starts_in_teleportation(self, controller):
        assert controller.mode is ExperimentMode.TELEPORTATION

    def test_set_mode_accepts_enum_and_string(self, controller):
        controller.set_mode("interference")
        assert controller.mode is ExperimentMode.INTERFERENCE
        controller.set_mode(ExperimentMode.SUPERPOSITION)
        assert controller.mode is ExperimentMode.SUPERPOSITION

    def test_unknown_mode_raises(self, controller):
        with pytest.raises(ValueError):
            controller.set_mode("entropy")

    def test_mode_changed_emitted_once_per_change(self, controller):
        seen = []
        controller.mode_changed.connect(seen.append)
        controller.set_mode("tunneling")
        controller.set_mode("tunneling")
        assert seen == [ExperimentMode.TUNNELING]

    def test_labels(self):
        assert ExperimentMode.TUNNELING.label == "Tunneling"


class TestPointer:
    def test_tap_in_teleportation_mode_adds_free_object(self, controller, registry):
        before = len(registry)
        obj = controller.handle_pointer(300.0, 250.0)
        assert len(registry) == before + 1
        assert obj.position == (300.0, 250.0)
        assert obj.is_entangled is False

    @pytest.mark.parametrize("mode", ["interference", "tunneling", "superposition"])
    def test_tap_in_other_modes_is_ignored(self, controller, registry, mode):
        controller.set_mode(mode)
        assert controller.handle_pointer(300.0, 250.0) is None
        assert len(registry) == 2


class TestRunExperiment:
    def test_teleportation_starts_pending_teleport(self, controller, registry):
        assert controller.run_experiment() is None
        assert registry.teleport_phase is TeleportPhase.PENDING

    def test_teleport_commit_reports_success(self, controller, registry, device, settings):
        settings.update(audio_enabled=True)
        messages = []
        controller.feedback.connect(messages.append)
        controller.run_experiment()
        registry.commit_teleport()
        assert messages == [TELEPORT_SUCCESS_MESSAGE]
        assert device.sounds == ["teleport", "success"]
        assert device.haptics == 1

    def test_interference_enables_particles(self, controller, settings):
        settings.update(show_particles=False)
        controller.set_mode("interference")
        assert controller.run_experiment() == INTERFERENCE_MESSAGE
        assert settings.show_particles is True

    def test_tunneling_reports_percentage(self, controller, settings):
        controller.set_mode("tunneling")
        assert controller.run_experiment() == "Tunneling probability: 0.7%"
        settings.update(barrier_height=10)
        assert controller.run_experiment() == "Tunneling probability: 36.8%"

    def test_superposition_message(self, controller):
        controller.set_mode("superposition")
        assert controller.run_experiment() == SUPERPOSITION_MESSAGE
        assert controller.last_message == SUPERPOSITION_MESSAGE


class TestFeedbackDevice:
    def test_no_sound_when_audio_disabled(self, controller, device):
        controller.set_mode("tunneling")
        controller.run_experiment()
        assert device.sounds == []

    def test_click_and_success_sounds_when_enabled(self, controller, device, settings):
        settings.update(audio_enabled=True)
        controller.set_mode("superposition")
        controller.run_experiment()
        assert device.sounds == ["click", "success"]

    def test_failing_device_is_ignored(self, registry, settings):
        settings.update(audio_enabled=True)
        controller = ModeController(registry, settings, BrokenDevice())
        controller.set_mode("tunneling")
        assert controller.run_experiment().startswith("Tunneling probability")
        controller.set_mode("teleportation")
        controller.run_experiment()
        registry.commit_teleport()
        assert controller.last_message == TELEPORT_SUCCESS_MESSAGE
