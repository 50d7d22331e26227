"""
Panel layout.

Panels are identified by an opaque integer id and positioned by their
centroid in panel-space units. A layout is fixed for the lifetime of
the effect.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable

from energydrum.config import ADJACENT_PANEL_DISTANCE


@dataclass(frozen=True)
class Panel:
    """A single light panel."""

    panel_id: int
    x: float
    y: float

    def __post_init__(self):
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(
                f"Panel {self.panel_id} has non-finite centroid ({self.x}, {self.y})"
            )


@dataclass(frozen=True)
class Layout:
    """Ordered, immutable sequence of panels."""

    panels: tuple[Panel, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "panels", tuple(self.panels))

    def __len__(self) -> int:
        return len(self.panels)

    def __iter__(self):
        return iter(self.panels)

    def __getitem__(self, index: int) -> Panel:
        return self.panels[index]

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) over all centroids."""
        if not self.panels:
            return 0.0, 0.0, 0.0, 0.0
        xs = [p.x for p in self.panels]
        ys = [p.y for p in self.panels]
        return min(xs), min(ys), max(xs), max(ys)

    @classmethod
    def from_points(cls, points: Iterable[tuple[float, float]], first_id: int = 1):
        """Build a layout from bare centroids, numbering panels sequentially."""
        return cls(
            tuple(Panel(first_id + i, float(x), float(y)) for i, (x, y) in enumerate(points))
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Layout":
        """
        Parse a layout description.

        Accepts the controller's ``positionData`` form
        (``{"panelId", "x", "y"}`` entries) or a plain ``panels`` list
        of ``{"id", "x", "y"}`` entries.
        """
        if "positionData" in data:
            entries = data["positionData"]
            id_key = "panelId"
        elif "panels" in data:
            entries = data["panels"]
            id_key = "id"
        else:
            raise ValueError("Layout needs a 'positionData' or 'panels' list")

        panels = []
        for entry in entries:
            try:
                panels.append(
                    Panel(int(entry[id_key]), float(entry["x"]), float(entry["y"]))
                )
            except (KeyError, TypeError) as e:
                raise ValueError(f"Malformed panel entry {entry!r}: {e}") from None

        ids = [p.panel_id for p in panels]
        if len(set(ids)) != len(ids):
            raise ValueError("Layout contains duplicate panel ids")
        return cls(tuple(panels))

    def to_dict(self) -> dict[str, Any]:
        return {
            "numPanels": len(self.panels),
            "positionData": [
                {"panelId": p.panel_id, "x": p.x, "y": p.y} for p in self.panels
            ],
        }


def strip_layout(n_panels: int, spacing: float = ADJACENT_PANEL_DISTANCE) -> Layout:
    """Panels in a straight horizontal line."""
    return Layout.from_points((i * spacing, 0.0) for i in range(n_panels))


def triangle_layout(n_panels: int, spacing: float = ADJACENT_PANEL_DISTANCE) -> Layout:
    """
    Triangular panels tiled edge to edge in rows.

    Centroids of triangles sharing an edge sit ``spacing`` apart.
    Alternate triangles in a row point up and down, so their centroids
    zig-zag between one third and two thirds of the row height.
    """
    per_row = max(1, math.ceil(math.sqrt(n_panels * 2)))
    step = spacing * math.sqrt(3) / 2.0
    row_height = spacing * 1.5

    points = []
    for i in range(n_panels):
        row, col = divmod(i, per_row)
        pointing_up = (row + col) % 2 == 0
        y = row * row_height + (spacing * 0.5 if pointing_up else spacing)
        points.append((round(col * step, 4), round(y, 4)))
    return Layout.from_points(points)


LAYOUTS = {
    "strip": strip_layout,
    "triangles": triangle_layout,
}
