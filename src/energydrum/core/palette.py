"""
Palette interpolation.

A palette is an ordered, immutable list of base colours. Sources pick
their colour by a continuous position into it: interior positions are
linearly interpolated, positions outside the range clamp to the nearest
end colour.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

from energydrum.config import DEFAULT_COLOUR
from energydrum.core.colour import Colour


# Built-in palettes for when the host does not supply one.
NAMED_PALETTES = {
    "aurora": ["#00ff9c", "#00b3ff", "#7a00ff", "#ff00c8"],
    "fire": ["#ff0000", "#ff6a00", "#ffc300", "#fff4c2"],
    "ocean": ["#001f54", "#034078", "#1282a2", "#6fffe9"],
    "sunset": ["#2d00f7", "#8900f2", "#e500a4", "#ff5400", "#ffbd00"],
    "mono": ["#ffffff"],
}


def _parse_hex(value: str) -> Colour:
    text = value.strip().lstrip("#")
    if len(text) != 6:
        raise ValueError(f"Invalid hex colour: {value!r}")
    try:
        return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
    except ValueError:
        raise ValueError(f"Invalid hex colour: {value!r}") from None


def _check_colour(colour: Sequence[int]) -> Colour:
    if len(colour) != 3:
        raise ValueError(f"Colour must have 3 channels, got {colour!r}")
    channels = tuple(int(c) for c in colour)
    if any(c < 0 or c > 255 for c in channels):
        raise ValueError(f"Colour channels must be in [0, 255], got {colour!r}")
    return channels


@dataclass(frozen=True)
class Palette:
    """Ordered set of base colours."""

    colours: tuple[Colour, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "colours", tuple(_check_colour(c) for c in self.colours)
        )

    def __len__(self) -> int:
        return len(self.colours)

    def __iter__(self):
        return iter(self.colours)

    @classmethod
    def from_hex(cls, values: Iterable[str]) -> "Palette":
        """Build a palette from ``#rrggbb`` strings."""
        return cls(tuple(_parse_hex(v) for v in values))

    @classmethod
    def named(cls, name: str) -> "Palette":
        """Look up a built-in palette by name."""
        try:
            return cls.from_hex(NAMED_PALETTES[name])
        except KeyError:
            raise ValueError(
                f"Unknown palette {name!r}; choose from {sorted(NAMED_PALETTES)}"
            ) from None

    def colour_at(self, position: float) -> Colour:
        """
        Get a colour by interpolating linearly between palette entries.

        Args:
            position: Continuous index, nominally in [0, len - 1].

        Returns:
            Interpolated (r, g, b). Neutral grey for an empty palette.
        """
        n = len(self.colours)
        if n == 0:
            return DEFAULT_COLOUR
        if n == 1:
            return self.colours[0]

        idx = int(position)
        fraction = position - idx

        if position <= 0:
            return self.colours[0]
        if idx < n - 1:
            a = self.colours[idx]
            b = self.colours[idx + 1]
            return tuple(
                int((1.0 - fraction) * a[c] + fraction * b[c]) for c in range(3)
            )
        return self.colours[-1]
