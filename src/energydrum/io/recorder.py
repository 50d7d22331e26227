"""
Frame log recording.

Collects the frames produced by the driver and serializes them to a
JSON log that a controller bridge or a later preview pass can replay.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from energydrum.core.layout import Layout
from energydrum.core.render import PanelFrame


@dataclass
class FrameLogMetadata:
    """Header of the frame log."""

    fps: int
    n_frames: int
    n_panels: int
    version: str = "1.0"


class FrameRecorder:
    """
    Frame sink that keeps every frame in memory.

    Pass it as ``sink`` to ``FrameDriver`` and export once the run ends.
    """

    def __init__(self, layout: Layout | None = None, fps: int = 40):
        self.layout = layout
        self.fps = fps
        self.frames: list[list[PanelFrame]] = []

    def __len__(self) -> int:
        return len(self.frames)

    def write(self, frames: list[PanelFrame]) -> None:
        self.frames.append(list(frames))

    def clear(self):
        self.frames.clear()

    def metadata(self) -> FrameLogMetadata:
        n_panels = len(self.layout) if self.layout is not None else (
            len(self.frames[0]) if self.frames else 0
        )
        return FrameLogMetadata(
            fps=self.fps,
            n_frames=len(self.frames),
            n_panels=n_panels,
        )

    def to_dict(self) -> dict[str, Any]:
        meta = self.metadata()
        log: dict[str, Any] = {
            "metadata": {
                "version": meta.version,
                "fps": meta.fps,
                "n_frames": meta.n_frames,
                "n_panels": meta.n_panels,
            },
            "frames": [[p.to_dict() for p in frame] for frame in self.frames],
        }
        if self.layout is not None:
            log["layout"] = self.layout.to_dict()
        return log

    def export_json(self, output_path: Union[str, Path], indent: int | None = None) -> Path:
        """
        Write the frame log to a JSON file.

        Args:
            output_path: Destination path; parent directories are created.
            indent: JSON indentation (None for compact output).

        Returns:
            Path to the written file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=indent)
        return output_path


def load_frame_log(path: Union[str, Path]) -> tuple[dict[str, Any], list[list[PanelFrame]]]:
    """Read a frame log back into metadata and PanelFrame lists."""
    with open(path, "r", encoding="utf-8") as f:
        log = json.load(f)
    frames = [
        [PanelFrame(**entry) for entry in frame]
        for frame in log.get("frames", [])
    ]
    return log.get("metadata", {}), frames
