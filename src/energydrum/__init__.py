"""
energydrum: audio-reactive light sources for panel layouts.

Beats and onsets spawn stationary light sources on panels; every frame
their decaying, hue-shifted contribution is blended onto each panel.
"""

__version__ = "0.1.0"

from energydrum.config import EffectConfig
from energydrum.core.layout import Layout, Panel
from energydrum.core.palette import Palette
from energydrum.core.render import PanelFrame, render_panel
from energydrum.core.sources import LightSource, SourceList
from energydrum.driver import AudioSignals, FrameDriver

__all__ = [
    "AudioSignals",
    "EffectConfig",
    "FrameDriver",
    "Layout",
    "LightSource",
    "Panel",
    "PanelFrame",
    "Palette",
    "SourceList",
    "render_panel",
]
