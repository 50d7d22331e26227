"""
Light source list.

Sources are stationary emitters anchored on a panel centroid. The list
is bounded and always sorted by ascending intensity, so the renderer
blends the most intense sources last and they dominate the result.
"""

import math
from dataclasses import dataclass
from typing import Iterator, List

from energydrum.config import EffectConfig
from energydrum.core.colour import Colour


@dataclass
class LightSource:
    """A single decaying emitter."""
    x: float
    y: float
    r: int
    g: int
    b: int
    intensity: float
    speed: float  # diffusion age added per step
    energy: int  # audio energy at creation; picks the attenuation model
    diffusion_age: float = 0.0

    @property
    def colour(self) -> Colour:
        return self.r, self.g, self.b

    @property
    def position(self) -> tuple[float, float]:
        return self.x, self.y


class SourceList:
    """
    Bounded list of light sources ordered by ascending intensity.

    At most one source exists per exact (x, y). Adding at an occupied
    position re-triggers that source instead of inserting a new one.
    """

    def __init__(self, config: EffectConfig | None = None):
        self.cfg = config or EffectConfig()
        self._sources: List[LightSource] = []

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[LightSource]:
        return iter(self._sources)

    def __getitem__(self, index: int) -> LightSource:
        return self._sources[index]

    @property
    def capacity(self) -> int:
        return self.cfg.max_sources

    def clear(self):
        self._sources.clear()

    def find(self, x: float, y: float) -> LightSource | None:
        """Return the source at exactly (x, y), if any."""
        for source in self._sources:
            if source.x == x and source.y == y:
                return source
        return None

    def add(
        self,
        x: float,
        y: float,
        colour: Colour,
        intensity: float,
        speed: float,
        energy: int,
    ) -> LightSource:
        """
        Add a source, merging with any source already at (x, y).

        Args:
            x, y: Anchor position (a panel centroid).
            colour: Absolute RGB, already scaled by intensity.
            intensity: Blend ordering key.
            speed: Diffusion age increment per step.
            energy: Audio energy reading at spawn time.

        Returns:
            The new source, or the existing one if merged.
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Source position must be finite, got ({x}, {y})")

        existing = self.find(x, y)
        if existing is not None:
            # Re-trigger in place: colour, energy and list slot are kept.
            existing.diffusion_age = 0.0
            existing.intensity = intensity
            existing.speed = speed
            return existing

        if len(self._sources) >= self.capacity:
            self.remove(0)

        # Insert after the last source with intensity <= the new one.
        i = len(self._sources)
        while i > 0 and intensity < self._sources[i - 1].intensity:
            i -= 1

        r, g, b = colour
        source = LightSource(
            x=x,
            y=y,
            r=r,
            g=g,
            b=b,
            intensity=intensity,
            speed=speed,
            energy=energy,
        )
        self._sources.insert(i, source)
        return source

    def remove(self, index: int) -> LightSource:
        """Remove the source at ``index``, keeping the order of the rest."""
        return self._sources.pop(index)

    def diffuse(self) -> int:
        """
        Age every source by its speed and drop the expired ones.

        Expired sources are only dropped while more than
        ``min_simultaneous_colours`` sources exist, so the panels never
        go fully dark between events.

        Returns:
            Number of sources removed.
        """
        for source in self._sources:
            source.diffusion_age += source.speed

        if len(self._sources) <= self.cfg.min_simultaneous_colours:
            return 0

        before = len(self._sources)
        self._sources = [
            s for s in self._sources
            if s.diffusion_age <= self.cfg.max_diffusion_age
        ]
        return before - len(self._sources)

    def snapshot(self) -> list[LightSource]:
        """Copy of the current sources, in blend order."""
        return [LightSource(**vars(s)) for s in self._sources]
