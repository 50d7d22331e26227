from energydrum.io.loaders import load_layout, load_palette
from energydrum.io.recorder import FrameRecorder, load_frame_log
