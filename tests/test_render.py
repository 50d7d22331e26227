"""Tests for per-panel rendering."""

import pytest

from energydrum.config import EffectConfig
from energydrum.core.layout import Panel
from energydrum.core.render import PanelFrame, attenuation, render_frame, render_panel
from energydrum.core.sources import LightSource, SourceList


def _source(x=0.0, y=0.0, colour=(255, 0, 0), energy=0, age=0.0, intensity=1.0):
    r, g, b = colour
    return LightSource(
        x=x, y=y, r=r, g=g, b=b,
        intensity=intensity, speed=1.0, energy=energy, diffusion_age=age,
    )


class TestAttenuation:
    cfg = EffectConfig()

    def test_low_energy_inverse_distance(self):
        assert attenuation(_source(), 0.0, self.cfg) == 1.0
        assert attenuation(_source(), 125.0, self.cfg) == pytest.approx(0.5)

    def test_high_energy_core(self):
        loud = _source(energy=60000)
        assert attenuation(loud, 0.0, self.cfg) == 1.0
        assert attenuation(loud, 100.0, self.cfg) == pytest.approx(0.25)

    def test_high_energy_core_grows_with_age(self):
        loud = _source(energy=60000, age=5.0)
        # d2 = 1.5 - 1.0; factor 1/2, then faded by 1 - 5/15
        assert attenuation(loud, 100.0, self.cfg) == pytest.approx(0.5 * (2.0 / 3.0))

    def test_threshold_is_inclusive(self):
        at = _source(energy=50000)
        below = _source(energy=49999)
        assert attenuation(at, 100.0, self.cfg) == pytest.approx(0.25)
        assert attenuation(below, 100.0, self.cfg) == pytest.approx(1.0 / 1.8)

    def test_age_fades_linearly(self):
        assert attenuation(_source(age=7.5), 0.0, self.cfg) == pytest.approx(0.5)

    def test_expired_source_keeps_floor(self):
        assert attenuation(_source(age=15.0), 0.0, self.cfg) == 0.05
        assert attenuation(_source(age=40.0), 0.0, self.cfg) == 0.05

    def test_distant_source_keeps_floor(self):
        assert attenuation(_source(), 1e6, self.cfg) == 0.05


class TestRenderPanel:
    panel = Panel(1, 0.0, 0.0)

    def test_no_sources_is_base_colour(self):
        assert render_panel(self.panel, []) == (0, 0, 0)
        assert render_panel(Panel(2, 512.0, -40.0), SourceList()) == (0, 0, 0)

    def test_single_source_at_panel(self):
        # factor 1.0 -> raw colour, then value + 10 with no hue shift
        source = _source(colour=(100, 0, 0))
        assert render_panel(self.panel, [source]) == (124, 0, 0)

    def test_output_is_clamped(self):
        source = _source(colour=(255, 0, 0))
        assert render_panel(self.panel, [source]) == (255, 0, 0)

    def test_overdriven_colour_clamped(self):
        source = _source(colour=(400, 380, 300))
        assert all(c <= 255 for c in render_panel(self.panel, [source]))

    def test_blend_order_matters(self):
        red = _source(colour=(255, 0, 0))
        blue = _source(colour=(0, 0, 255))
        assert render_panel(self.panel, [red, blue]) == (0, 0, 255)
        assert render_panel(self.panel, [blue, red]) == (255, 0, 0)

    def test_distance_shifts_hue(self):
        near = render_panel(self.panel, [_source(x=0.0, colour=(200, 0, 0))])
        far = render_panel(self.panel, [_source(x=600.0, colour=(200, 0, 0))])
        assert near[1] == 0
        assert far[1] > 0  # rotated 60 degrees towards yellow

    def test_deterministic_and_pure(self):
        sources = SourceList()
        sources.add(0.0, 0.0, (200, 50, 10), 0.7, 0.8, 0)
        sources.add(300.0, 40.0, (10, 90, 240), 1.0, 2.4, 60000)
        before = sources.snapshot()

        first = render_panel(Panel(3, 120.0, 10.0), sources)
        for _ in range(5):
            assert render_panel(Panel(3, 120.0, 10.0), sources) == first
        assert sources.snapshot() == before


class TestRenderFrame:
    def test_every_panel_rendered(self, strip):
        sources = [_source(x=100.0, colour=(0, 255, 0))]
        frames = render_frame(strip, sources)
        assert len(frames) == len(strip)
        assert [f.panel_id for f in frames] == [p.panel_id for p in strip]
        assert all(isinstance(f, PanelFrame) for f in frames)
        assert all(f.transition_time == 1 for f in frames)

    def test_empty_sources_render_dark(self, strip):
        frames = render_frame(strip, [])
        assert all(f.colour == (0, 0, 0) for f in frames)

    def test_nearest_panel_brightest(self, strip):
        frames = render_frame(strip, [_source(x=200.0, colour=(0, 200, 0))])
        brightness = [sum(f.colour) for f in frames]
        assert brightness.index(max(brightness)) == 2

    def test_to_dict(self):
        frame = PanelFrame(7, 1, 2, 3, 1)
        assert frame.to_dict() == {
            "panel_id": 7, "r": 1, "g": 2, "b": 3, "transition_time": 1,
        }
