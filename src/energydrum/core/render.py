"""
Per-panel rendering.

Each panel starts from the base colour and folds in every source in
ascending-intensity order. After each blend the hue is rotated by an
amount proportional to the panel's distance from that source, so
colours drift as light spreads across the layout.
"""

import math
from dataclasses import dataclass
from typing import Iterable

from energydrum.config import EffectConfig
from energydrum.core.colour import Colour, clamp_colour, rotate_hue
from energydrum.core.layout import Layout, Panel
from energydrum.core.sources import LightSource


@dataclass(frozen=True)
class PanelFrame:
    """Final colour for one panel in one frame."""
    panel_id: int
    r: int
    g: int
    b: int
    transition_time: int

    @property
    def colour(self) -> Colour:
        return self.r, self.g, self.b

    def to_dict(self) -> dict:
        return {
            "panel_id": self.panel_id,
            "r": self.r,
            "g": self.g,
            "b": self.b,
            "transition_time": self.transition_time,
        }


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def attenuation(source: LightSource, d: float, cfg: EffectConfig) -> float:
    """
    Blend weight of ``source`` at distance ``d``.

    High-energy sources have a bright core that shrinks as they age;
    quieter ones fall off with inverse distance. Both fade linearly with
    diffusion age and never drop below ``fraction_colour_to_keep``.
    """
    age = source.diffusion_age

    if source.energy >= cfg.energy_threshold:
        d2 = max(0.0, d * cfg.core_distance_scale - age * cfg.core_shrink_rate)
        factor = min(1.0, max(0.0, 1.0 / (d2 * 2.0 + 1.0)))
    else:
        factor = 1.0 / (d * cfg.falloff_distance_scale + 1.0)

    if age >= cfg.max_diffusion_age:
        factor = 0.0
    else:
        factor *= 1.0 - age / cfg.max_diffusion_age

    return max(factor, cfg.fraction_colour_to_keep)


def render_panel(
    panel: Panel,
    sources: Iterable[LightSource],
    config: EffectConfig | None = None,
) -> Colour:
    """
    Compute the displayed colour of one panel.

    Args:
        panel: Panel to render.
        sources: Active sources in ascending-intensity order.
        config: Effect configuration.

    Returns:
        (r, g, b) with each channel capped at 255.
    """
    cfg = config or EffectConfig()
    r, g, b = (float(c) for c in cfg.base_colour)

    for source in sources:
        d = distance(panel.x, panel.y, source.x, source.y)
        factor = attenuation(source, d, cfg)

        r = r * (1.0 - factor) + source.r * factor
        g = g * (1.0 - factor) + source.g * factor
        b = b * (1.0 - factor) + source.b * factor

        r, g, b = rotate_hue(
            (int(r), int(g), int(b)),
            int(d * cfg.hue_shift_per_unit),
            cfg.value_boost,
        )

    return clamp_colour((r, g, b))


def render_frame(
    layout: Layout,
    sources: Iterable[LightSource],
    config: EffectConfig | None = None,
) -> list[PanelFrame]:
    """Render every panel of ``layout``, in layout order."""
    cfg = config or EffectConfig()
    sources = list(sources)
    frames = []
    for panel in layout:
        r, g, b = render_panel(panel, sources, cfg)
        frames.append(PanelFrame(panel.panel_id, r, g, b, cfg.transition_time))
    return frames
