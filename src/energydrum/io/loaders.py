"""
Palette and layout file loaders.

Palettes are JSON lists of ``[r, g, b]`` triples or ``#rrggbb``
strings, optionally wrapped in ``{"palette": [...]}``. Layouts use the
controller's ``positionData`` form or a plain ``panels`` list.
"""

import json
from pathlib import Path
from typing import Any, Union

from energydrum.core.layout import Layout
from energydrum.core.palette import Palette


def palette_from_data(data: Any) -> Palette:
    """Build a palette from decoded JSON."""
    if isinstance(data, dict):
        if "palette" not in data:
            raise ValueError("Palette object needs a 'palette' list")
        data = data["palette"]
    if not isinstance(data, list):
        raise ValueError(f"Palette must be a list, got {type(data).__name__}")

    colours = []
    for entry in data:
        if isinstance(entry, str):
            colours.append(Palette.from_hex([entry]).colours[0])
        elif isinstance(entry, dict):
            try:
                colours.append((entry["r"], entry["g"], entry["b"]))
            except KeyError:
                raise ValueError(f"Malformed palette entry {entry!r}") from None
        elif isinstance(entry, list):
            colours.append(tuple(entry))
        else:
            raise ValueError(f"Malformed palette entry {entry!r}")
    return Palette(tuple(colours))


def load_palette(path: Union[str, Path]) -> Palette:
    with open(path, "r", encoding="utf-8") as f:
        return palette_from_data(json.load(f))


def load_layout(path: Union[str, Path]) -> Layout:
    with open(path, "r", encoding="utf-8") as f:
        return Layout.from_dict(json.load(f))
