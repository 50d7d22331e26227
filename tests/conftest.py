"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from energydrum.core.layout import Layout, strip_layout
from energydrum.core.palette import Palette

# Default sample rate for test audio
TEST_SR = 22050


@pytest.fixture
def sample_rate() -> int:
    """Default sample rate for tests."""
    return TEST_SR


@pytest.fixture
def click_track(sample_rate: int) -> tuple[np.ndarray, int]:
    """
    Generate a simple click track at 120 BPM.

    Returns:
        Tuple of (audio_signal, sample_rate).
    """
    duration = 4.0
    bpm = 120
    samples_per_beat = int(sample_rate * 60 / bpm)
    total_samples = int(sample_rate * duration)

    y = np.zeros(total_samples, dtype=np.float32)

    # Add clicks (short impulses) at each beat
    click_duration = int(sample_rate * 0.01)  # 10ms click
    for beat_start in range(0, total_samples, samples_per_beat):
        click_end = min(beat_start + click_duration, total_samples)
        # Exponential decay click
        click_samples = click_end - beat_start
        decay = np.exp(-np.linspace(0, 5, click_samples))
        y[beat_start:click_end] = 0.8 * decay

    return y, sample_rate


@pytest.fixture
def red_blue() -> Palette:
    return Palette(((255, 0, 0), (0, 0, 255)))


@pytest.fixture
def four_colours() -> Palette:
    return Palette(((255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255)))


@pytest.fixture
def strip() -> Layout:
    """Six panels in a line, 100 units apart."""
    return strip_layout(6, spacing=100.0)
