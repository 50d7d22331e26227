from energydrum.core.layout import Layout, Panel
from energydrum.core.palette import Palette
from energydrum.core.render import PanelFrame, render_frame, render_panel
from energydrum.core.sources import LightSource, SourceList
