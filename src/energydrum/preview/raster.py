"""
Panel preview rasteriser.

Draws each panel of a frame as a filled disc at its centroid so a
frame log can be reviewed without the physical panels.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image, ImageDraw

from energydrum.config import ADJACENT_PANEL_DISTANCE
from energydrum.core.layout import Layout
from energydrum.core.render import PanelFrame
from energydrum.preview.glow import add_glow


@dataclass
class PreviewConfig:
    """Configuration for the preview rasteriser."""
    width: int = 640
    height: int = 480
    background: tuple[int, int, int] = (8, 8, 12)
    outline: tuple[int, int, int] = (40, 40, 48)
    margin: float = 0.1  # fraction of the image kept clear at each edge
    panel_size: float = 0.9  # disc diameter relative to the panel spacing
    glow: float = 0.35


class PanelPreview:
    """Rasterises panel frames onto a fixed-size RGB canvas."""

    def __init__(self, layout: Layout, config: PreviewConfig | None = None):
        self.layout = layout
        self.cfg = config or PreviewConfig()
        self._centres, self._radius = self._fit()

    def _fit(self) -> tuple[dict[int, tuple[float, float]], float]:
        """Map panel centroids into image space, preserving aspect."""
        cfg = self.cfg
        min_x, min_y, max_x, max_y = self.layout.bounds
        span_x = max(max_x - min_x, ADJACENT_PANEL_DISTANCE)
        span_y = max(max_y - min_y, ADJACENT_PANEL_DISTANCE)

        usable_w = cfg.width * (1.0 - 2 * cfg.margin)
        usable_h = cfg.height * (1.0 - 2 * cfg.margin)
        scale = min(usable_w / span_x, usable_h / span_y)

        off_x = (cfg.width - (max_x - min_x) * scale) / 2.0
        off_y = (cfg.height - (max_y - min_y) * scale) / 2.0

        centres = {
            # Panel space has y pointing up
            p.panel_id: (off_x + (p.x - min_x) * scale, cfg.height - (off_y + (p.y - min_y) * scale))
            for p in self.layout
        }
        radius = max(1.0, ADJACENT_PANEL_DISTANCE * scale * cfg.panel_size / 2.0)
        return centres, radius

    def render(self, frames: list[PanelFrame]) -> np.ndarray:
        """
        Draw one frame.

        Returns:
            (H, W, 3) uint8 RGB array.
        """
        cfg = self.cfg
        img = Image.new("RGB", (cfg.width, cfg.height), cfg.background)
        draw = ImageDraw.Draw(img)
        r = self._radius

        for panel in frames:
            centre = self._centres.get(panel.panel_id)
            if centre is None:
                continue
            cx, cy = centre
            draw.ellipse(
                [cx - r, cy - r, cx + r, cy + r],
                fill=(panel.r, panel.g, panel.b),
                outline=cfg.outline,
            )

        arr = np.asarray(img, dtype=np.uint8)
        return add_glow(arr, intensity=cfg.glow, radius=max(2, int(r / 2)))

    def render_all(self, frame_iter):
        """Yield a rendered image for every frame list."""
        for frames in frame_iter:
            yield self.render(frames)
