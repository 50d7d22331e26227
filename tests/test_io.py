"""Tests for frame logs and palette/layout loaders."""

import json

import pytest

from energydrum.core.render import PanelFrame
from energydrum.io.loaders import load_layout, load_palette, palette_from_data
from energydrum.io.recorder import FrameRecorder, load_frame_log


class TestFrameRecorder:
    @pytest.fixture
    def recorder(self, strip):
        recorder = FrameRecorder(strip, fps=30)
        for i in range(3):
            recorder.write([PanelFrame(p.panel_id, i, 0, 0, 1) for p in strip])
        return recorder

    def test_metadata(self, recorder):
        meta = recorder.to_dict()["metadata"]
        assert meta["fps"] == 30
        assert meta["n_frames"] == 3
        assert meta["n_panels"] == 6
        assert "version" in meta

    def test_frame_structure(self, recorder):
        log = recorder.to_dict()
        assert len(log["frames"]) == 3
        entry = log["frames"][2][0]
        assert set(entry) == {"panel_id", "r", "g", "b", "transition_time"}
        assert entry["r"] == 2
        assert len(log["layout"]["positionData"]) == 6

    def test_export_and_load(self, recorder, tmp_path):
        path = recorder.export_json(tmp_path / "out" / "frames.json")
        assert path.exists()

        meta, frames = load_frame_log(path)
        assert meta["n_frames"] == 3
        assert frames == recorder.frames

    def test_without_layout(self):
        recorder = FrameRecorder()
        recorder.write([PanelFrame(1, 0, 0, 0, 1), PanelFrame(2, 0, 0, 0, 1)])
        assert recorder.metadata().n_panels == 2
        assert "layout" not in recorder.to_dict()


class TestLoaders:
    def test_palette_formats(self):
        palette = palette_from_data([[255, 0, 0], "#00ff00", {"r": 0, "g": 0, "b": 255}])
        assert palette.colours == ((255, 0, 0), (0, 255, 0), (0, 0, 255))

    def test_palette_wrapped(self):
        assert len(palette_from_data({"palette": ["#ffffff"]})) == 1

    def test_palette_malformed(self):
        with pytest.raises(ValueError):
            palette_from_data({"colours": []})
        with pytest.raises(ValueError):
            palette_from_data([7])
        with pytest.raises(ValueError):
            palette_from_data([[1, 2]])
        with pytest.raises(ValueError):
            palette_from_data("red")

    def test_load_files(self, tmp_path, strip):
        palette_path = tmp_path / "palette.json"
        palette_path.write_text(json.dumps(["#102030", "#405060"]))
        layout_path = tmp_path / "layout.json"
        layout_path.write_text(json.dumps(strip.to_dict()))

        assert load_palette(palette_path).colours[1] == (0x40, 0x50, 0x60)
        assert load_layout(layout_path) == strip
