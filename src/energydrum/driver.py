"""
Frame orchestration.

One call to ``FrameDriver.step`` advances the effect by one frame:
spawn a source on a beat or onset, render every panel, then age the
sources ready for the next frame.
"""

import random
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Protocol, Sequence

from energydrum.config import MAX_ENERGY, EffectConfig
from energydrum.core.colour import scale_colour
from energydrum.core.layout import Layout
from energydrum.core.palette import Palette
from energydrum.core.render import PanelFrame, render_frame
from energydrum.core.sources import LightSource, SourceList


@dataclass(frozen=True)
class AudioSignals:
    """Snapshot of the audio features for one frame."""
    fft_bins: Sequence[int]
    is_beat: bool = False
    is_onset: bool = False
    energy: int = 0
    tempo: float = 120.0

    def __post_init__(self):
        object.__setattr__(self, "fft_bins", tuple(self.fft_bins))
        object.__setattr__(self, "energy", min(max(int(self.energy), 0), MAX_ENERGY))

    @property
    def dominant_bin(self) -> int:
        """Index of the strongest bin; the lowest index wins ties."""
        best = 0
        best_index = 0
        for i, value in enumerate(self.fft_bins):
            if value > best:
                best = value
                best_index = i
        return best_index

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AudioSignals":
        return cls(
            fft_bins=data.get("fft_bins", ()),
            is_beat=bool(data.get("is_beat", False)),
            is_onset=bool(data.get("is_onset", False)),
            energy=int(data.get("energy", 0)),
            tempo=float(data.get("tempo", 120.0)),
        )


class FrameSink(Protocol):
    def write(self, frames: list[PanelFrame]) -> None: ...


class PanelRotation:
    """
    Chooses the panel new sources are anchored on.

    The same panel is reused for ``beat_count`` spawns, then a random
    panel is picked. A high-energy spawn makes the next spawn rotate.
    """

    def __init__(self, layout: Layout, rng: random.Random, config: EffectConfig):
        self.layout = layout
        self.rng = rng
        self.cfg = config
        self.current = 0
        self.count = 0

    def reset(self):
        self.current = 0
        self.count = 0

    def next_anchor(self, energy: int) -> tuple[float, float]:
        panel = self.layout[self.current]
        self.count += 1
        if energy >= self.cfg.energy_threshold:
            self.count = self.cfg.beat_count
        if self.count >= self.cfg.beat_count:
            n = len(self.layout)
            self.current = min(max(int(self.rng.random() * n - 1), 0), n - 1)
            self.count = 0
        return panel.x, panel.y


@dataclass
class DriverState:
    """Running averages carried between frames."""
    bin_index_sum: int = 0
    n_frames_since_beat: int = 0
    frame_index: int = 0
    last_frame_count: int = 0
    spawned: int = 0
    expired: int = 0


class FrameDriver:
    """
    Owns the simulation state and produces one frame per audio snapshot.

    Args:
        layout: Panels to render.
        palette: Base colours for new sources.
        config: Effect configuration.
        seed: Seed for the onset colour and panel rotation generator.
        sink: Optional frame sink receiving every rendered frame.
    """

    def __init__(
        self,
        layout: Layout,
        palette: Palette,
        config: EffectConfig | None = None,
        seed: int | None = 0,
        sink: FrameSink | None = None,
    ):
        if len(layout) == 0:
            raise ValueError("Layout must contain at least one panel")
        self.layout = layout
        self.palette = palette
        self.cfg = config or EffectConfig()
        self.seed = seed
        self.sink = sink

        self.rng = random.Random(seed)
        self.sources = SourceList(self.cfg)
        self.rotation = PanelRotation(layout, self.rng, self.cfg)
        self.state = DriverState()

    def reset(self):
        """Drop all sources and running averages and reseed."""
        self.rng.seed(self.seed)
        self.sources.clear()
        self.rotation.reset()
        self.state = DriverState()

    def describe(self) -> list[str]:
        """Human-readable summary of the palette and layout."""
        lines = [f"The palette has {len(self.palette)} colours:"]
        lines += [f"   {r} {g} {b}" for r, g, b in self.palette]
        lines.append(f"The layout has {len(self.layout)} panels:")
        lines += [
            f"   Id: {p.panel_id}   X, Y: {p.x:f}, {p.y:f}" for p in self.layout
        ]
        return lines

    def spawn(self, position: float, intensity: float, speed: float, energy: int) -> LightSource:
        """Anchor a new source on the current panel with a palette colour."""
        x, y = self.rotation.next_anchor(energy)
        colour = scale_colour(self.palette.colour_at(position), intensity)
        self.state.spawned += 1
        return self.sources.add(x, y, colour, intensity, speed, energy)

    def beat_position(self, mean_bin: int) -> int:
        """Map an averaged dominant bin onto the palette index range."""
        return mean_bin * len(self.palette) // (self.cfg.n_fft_bins // 4)

    def step(self, signals: AudioSignals) -> list[PanelFrame]:
        """
        Advance the effect by one frame.

        Args:
            signals: Audio features for this frame.

        Returns:
            One PanelFrame per panel, in layout order.
        """
        cfg = self.cfg
        if len(signals.fft_bins) != cfg.n_fft_bins:
            raise ValueError(
                f"Expected {cfg.n_fft_bins} FFT bins, got {len(signals.fft_bins)}"
            )

        state = self.state
        state.bin_index_sum += signals.dominant_bin
        state.n_frames_since_beat += 1

        if signals.is_beat:
            mean_bin = state.bin_index_sum // state.n_frames_since_beat
            state.bin_index_sum = 0
            state.n_frames_since_beat = 0
            speed = max(cfg.min_beat_speed, signals.tempo / cfg.tempo_speed_divisor)
            self.spawn(self.beat_position(mean_bin), cfg.beat_intensity, speed, signals.energy)
        elif signals.is_onset:
            position = self.rng.random() * (len(self.palette) - 1)
            self.spawn(position, cfg.onset_intensity, cfg.onset_speed, signals.energy)

        frames = render_frame(self.layout, self.sources, cfg)

        state.expired += self.sources.diffuse()
        state.frame_index += 1
        state.last_frame_count = len(frames)

        if self.sink is not None:
            self.sink.write(frames)
        return frames

    def run(
        self,
        signals: Iterable[AudioSignals],
        progress_callback: Callable[[int, int], None] | None = None,
        total: int | None = None,
    ) -> Iterator[list[PanelFrame]]:
        """Step over a sequence of snapshots, yielding each frame."""
        if total is None and hasattr(signals, "__len__"):
            total = len(signals)
        for i, snapshot in enumerate(signals):
            yield self.step(snapshot)
            if progress_callback and total:
                progress_callback(i + 1, total)
