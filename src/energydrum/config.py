"""
Effect configuration.

All tunables of the light-source simulation live on a single dataclass
so the driver, renderer and CLI agree on one set of values.
"""

from dataclasses import dataclass


MAX_SOURCES = 15
BASE_COLOUR = (0, 0, 0)
TRANSITION_TIME = 1
ENERGY_THRESHOLD = 50000
MAX_DIFFUSION_AGE = 15.0
MIN_SIMULTANEOUS_COLOURS = 2
N_FFT_BINS = 32
ADJACENT_PANEL_DISTANCE = 86.599995
BEAT_COUNT = 8
FRACTION_COLOUR_TO_KEEP = 0.05
DEFAULT_COLOUR = (128, 128, 128)
MAX_ENERGY = 65535


@dataclass
class EffectConfig:
    """Configuration for the energy drum effect."""

    # Source list
    max_sources: int = MAX_SOURCES
    min_simultaneous_colours: int = MIN_SIMULTANEOUS_COLOURS
    max_diffusion_age: float = MAX_DIFFUSION_AGE

    # Rendering
    base_colour: tuple[int, int, int] = BASE_COLOUR
    transition_time: int = TRANSITION_TIME
    fraction_colour_to_keep: float = FRACTION_COLOUR_TO_KEEP
    energy_threshold: int = ENERGY_THRESHOLD
    hue_shift_per_unit: float = 0.10
    value_boost: int = 10

    # Attenuation models
    core_distance_scale: float = 0.015  # high-energy sources
    core_shrink_rate: float = 0.2
    falloff_distance_scale: float = 0.008  # low-energy sources

    # Spawning
    n_fft_bins: int = N_FFT_BINS
    beat_count: int = BEAT_COUNT
    beat_intensity: float = 1.0
    min_beat_speed: float = 0.2
    tempo_speed_divisor: float = 50.0
    onset_intensity: float = 0.7
    onset_speed: float = 0.8
