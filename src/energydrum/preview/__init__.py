from energydrum.preview.encoder import encode_video
from energydrum.preview.raster import PanelPreview, PreviewConfig
