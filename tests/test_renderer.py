import math

import pytest

from quantumlab.model.field import FieldGenerator, FieldState
from quantumlab.model.modes import ExperimentMode, tunneling_probability
from quantumlab.model.objects import QuantumObject, seeded_pair
from quantumlab.render.commands import Clear, FillRect, GradientRect, Polyline, RadialGlow, Rgba, Text
from quantumlab.render.renderer import (
    BARRIER_COLOR, ENTANGLED_COLOR, FREE_COLOR, SCREEN_X,
    double_slit_intensity, entanglement_link, render_frame, standing_wave_glyph,
)


@pytest.fixture
def field(rng):
    nodes = FieldGenerator(rng).initialize()
    return FieldState(nodes=nodes, intensity=0.5, show_particles=True, particle_count=20)


def links(frame):
    return [c for c in frame if isinstance(c, Polyline) and c.dash]


class TestFrameStructure:
    def test_frame_starts_with_clear(self, field):
        frame = render_frame(seeded_pair(), field, ExperimentMode.TELEPORTATION, 0.0)
        assert isinstance(frame[0], Clear)

    def test_rendering_twice_gives_identical_frames(self, field):
        objects = seeded_pair()
        for mode in ExperimentMode:
            a = render_frame(objects, field, mode, 12.34, barrier_height=35)
            b = render_frame(objects, field, mode, 12.34, barrier_height=35)
            assert a == b

    def test_rendering_does_not_mutate_objects(self, field):
        objects = seeded_pair()
        before = [vars(o).copy() for o in objects]
        render_frame(objects, field, ExperimentMode.SUPERPOSITION, 5.0)
        assert [vars(o) for o in objects] == before

    def test_field_glows_per_node_and_particle(self, field):
        frame = render_frame([], field, ExperimentMode.TELEPORTATION, 1.0)
        glows = [c for c in frame if isinstance(c, RadialGlow)]
        assert len(glows) == 300 + 20

    def test_particles_can_be_switched_off(self, field):
        state = FieldState(nodes=field.nodes, intensity=0.5, show_particles=False, particle_count=20)
        frame = render_frame([], state, ExperimentMode.TELEPORTATION, 1.0)
        assert len([c for c in frame if isinstance(c, RadialGlow)]) == 300

    def test_node_glow_alpha_follows_sampled_intensity(self, field):
        frame = render_frame([], field, ExperimentMode.TELEPORTATION, 7.0)
        node = field.nodes[0]
        expected = FieldGenerator.sample(node, 7.0, 0.5) * 0.1
        assert frame[1].inner.a == pytest.approx(expected)
        assert frame[1].rect == (node.x - 30, node.y - 30, 60, 60)


class TestEntanglementLinks:
    def test_seeded_pair_draws_one_link(self, field):
        frame = render_frame(seeded_pair(), field, ExperimentMode.TELEPORTATION, 0.0)
        assert len(links(frame)) == 1

    def test_one_directional_reference_draws_nothing(self, field):
        a, b = seeded_pair()
        b.entangled_with = None
        frame = render_frame([a, b], field, ExperimentMode.TELEPORTATION, 0.0)
        assert links(frame) == []

    def test_cleared_flag_draws_nothing(self, field):
        a, b = seeded_pair()
        a.is_entangled = False
        frame = render_frame([a, b], field, ExperimentMode.TELEPORTATION, 0.0)
        assert links(frame) == []

    def test_reference_to_missing_partner_draws_nothing(self, field):
        ghost = QuantumObject(id="lonely", x=10.0, y=10.0, is_entangled=True, entangled_with="gone")
        frame = render_frame([ghost], field, ExperimentMode.TELEPORTATION, 0.0)
        assert links(frame) == []

    def test_link_geometry(self):
        a, b = seeded_pair()
        link = entanglement_link(a, b, time=4.0)
        assert link.points[0] == (150.0, 200.0)
        assert link.points[-1] == (550.0, 300.0)
        steps = int(math.hypot(400, 100) // 20)
        assert len(link.points) == steps + 1
        t = 1 / steps
        assert link.points[1][1] == pytest.approx(200 + 100 * t + 20 * math.sin(t * math.pi * 3 + 0.4))
        assert link.dash == (10.0, 5.0)
        assert link.dash_offset == pytest.approx(2.0)
        assert link.color == ENTANGLED_COLOR

    def test_dash_offset_moves_with_time(self):
        a, b = seeded_pair()
        assert entanglement_link(a, b, 1.0).dash_offset != entanglement_link(a, b, 2.0).dash_offset


class TestGlyph:
    def test_two_curves_and_core(self):
        obj = QuantumObject(id="o", x=100.0, y=100.0, amplitude=50.0)
        vertical, horizontal, core = standing_wave_glyph(obj, 0.0)
        assert isinstance(vertical, Polyline) and isinstance(horizontal, Polyline)
        assert isinstance(core, RadialGlow)
        assert len(vertical.points) == len(horizontal.points) == 51
        assert vertical.points[0][1] == pytest.approx(50.0)
        assert horizontal.points[0][0] == pytest.approx(50.0)

    def test_curve_offsets(self):
        obj = QuantumObject(id="o", x=0.0, y=0.0, frequency=2.0, phase=0.3, amplitude=40.0)
        time = 1.7
        vertical, horizontal, _ = standing_wave_glyph(obj, time)
        i = -40.0
        assert vertical.points[0] == pytest.approx((i * math.sin(2.0 * time + 0.3) * math.cos(0.1 * i), i))
        assert horizontal.points[0] == pytest.approx(
            (i, i * math.sin(2.0 * time + 0.3 + math.pi / 2) * math.cos(0.1 * i)))

    def test_colour_follows_entanglement(self):
        free = QuantumObject(id="f", x=0.0, y=0.0)
        linked = QuantumObject(id="l", x=0.0, y=0.0, is_entangled=True)
        assert standing_wave_glyph(free, 0.0)[0].color == FREE_COLOR
        assert standing_wave_glyph(linked, 0.0)[2].inner == ENTANGLED_COLOR

    def test_teleporting_objects_are_dimmed(self):
        obj = QuantumObject(id="o", x=0.0, y=0.0)
        assert {c.opacity for c in standing_wave_glyph(obj, 0.0)} == {0.8}
        obj.is_teleporting = True
        assert {c.opacity for c in standing_wave_glyph(obj, 0.0)} == {0.3}


class TestOverlays:
    def test_teleportation_has_no_overlay(self, field):
        frame = render_frame([], field, ExperimentMode.TELEPORTATION, 0.0)
        assert not any(isinstance(c, (FillRect, GradientRect, Text)) for c in frame)

    def test_interference_draws_barrier_and_screen(self, field):
        frame = render_frame([], field, ExperimentMode.INTERFERENCE, 3.0)
        barrier = [c for c in frame if isinstance(c, FillRect) and c.color == BARRIER_COLOR]
        screen = [c for c in frame if isinstance(c, FillRect) and c.x == SCREEN_X]
        assert len(barrier) == 3
        assert len(screen) == 300
        assert sum(c.height for c in barrier) == pytest.approx(600 - 4 * 20)

    def test_screen_intensity_is_cos_squared_of_path_difference(self):
        import numpy as np
        ys = np.array([300.0, 0.0])
        values = double_slit_intensity(ys, time=2.0, field_intensity=0.5)
        # The midpoint between the slits has no path difference
        assert values[0] == pytest.approx(math.cos(0.2) ** 2)
        d1 = math.hypot(300, 200)
        d2 = math.hypot(300, 400)
        assert values[1] == pytest.approx(math.cos((d1 - d2) * 0.01 + 0.2) ** 2)

    def test_switching_interference_to_superposition_leaves_no_residue(self, field):
        objects = seeded_pair()
        render_frame(objects, field, ExperimentMode.INTERFERENCE, 5.0)
        frame = render_frame(objects, field, ExperimentMode.SUPERPOSITION, 5.02)
        assert not any(isinstance(c, FillRect) for c in frame)
        ghosts = [c for c in frame if isinstance(c, RadialGlow) and c.radius == 50.0]
        assert len(ghosts) == 3

    def test_superposition_ghosts_are_120_degrees_apart(self, field):
        frame = render_frame([], field, ExperimentMode.SUPERPOSITION, 0.0)
        ghosts = [c for c in frame if isinstance(c, RadialGlow) and c.radius == 50.0]
        angles = sorted(math.degrees(math.atan2(g.cy - 300, g.cx - 400)) % 360 for g in ghosts)
        assert angles == pytest.approx([0.0, 120.0, 240.0])

    def test_tunneling_readout_tracks_probability(self, field):
        frame = render_frame([], field, ExperimentMode.TUNNELING, 0.0, barrier_height=30)
        barrier = [c for c in frame if isinstance(c, GradientRect)]
        assert len(barrier) == 1
        assert barrier[0].height == pytest.approx(120.0)
        readout = [c for c in frame if isinstance(c, FillRect)][0]
        assert readout.color.a == pytest.approx(tunneling_probability(30))
        label = [c for c in frame if isinstance(c, Text)][0]
        assert label.text == f"{tunneling_probability(30) * 100:.2f}%"

    def test_only_active_overlay_is_drawn(self, field):
        frame = render_frame([], field, ExperimentMode.TUNNELING, 0.0)
        assert not any(isinstance(c, FillRect) and c.x == SCREEN_X for c in frame)
        assert not any(isinstance(c, RadialGlow) and c.radius == 50.0 for c in frame)


class TestColours:
    def test_hex_and_hsla(self):
        assert Rgba.from_hex("#ff0000") == Rgba(1.0, 0.0, 0.0, 1.0)
        red = Rgba.from_hsla(0, 1.0, 0.5, 0.5)
        assert (red.r, red.g, red.b, red.a) == pytest.approx((1.0, 0.0, 0.0, 0.5))

    def test_alpha_is_clamped(self):
        assert Rgba.from_hsla(195, 1.0, 0.65, 1.7).a == 1.0
        assert Rgba(0.1, 0.2, 0.3).with_alpha(-1).a == 0.0
