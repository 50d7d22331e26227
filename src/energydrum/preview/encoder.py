"""
FFmpeg preview encoder.

Pipes raw RGB preview frames to ffmpeg and optionally muxes the source
audio so the preview can be checked against the music.
"""

import subprocess
from pathlib import Path
from typing import Callable, Iterable

# Quality presets: (preset, crf)
QUALITY_PRESETS = {
    "high": ("slow", "18"),
    "medium": ("medium", "23"),
    "fast": ("ultrafast", "28"),
}


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "medium",
    audio_path: Path | None = None,
    duration: float | None = None,
) -> list[str]:
    """Assemble the ffmpeg argument list."""
    preset, crf = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["medium"])

    cmd = [
        "ffmpeg", "-y", "-loglevel", "error",
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
    ]
    if audio_path is not None:
        cmd += ["-i", str(audio_path)]

    cmd += ["-c:v", "libx264", "-preset", preset, "-crf", crf, "-pix_fmt", "yuv420p"]

    if audio_path is not None:
        cmd += ["-c:a", "aac", "-b:a", "192k", "-shortest"]
    if duration is not None:
        cmd += ["-t", str(duration)]

    cmd.append(str(output_path))
    return cmd


def encode_video(
    frame_iterator: Iterable,
    output_path: Path,
    width: int,
    height: int,
    fps: int = 40,
    quality: str = "medium",
    audio_path: Path | None = None,
    duration: float | None = None,
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Encode preview frames to MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width, height: Frame size in pixels.
        fps: Frames per second.
        quality: "high", "medium" or "fast".
        audio_path: Optional audio file to mux in.
        duration: Optional output duration limit in seconds.
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_command(output_path, width, height, fps, quality, audio_path, duration)
    proc = subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
    )

    frame_count = 0
    try:
        for frame in frame_iterator:
            proc.stdin.write(frame.tobytes())
            frame_count += 1
            if progress_callback and total_frames:
                progress_callback(frame_count, total_frames)
    except BrokenPipeError:
        # ffmpeg exited early; the return code below carries the error
        pass
    finally:
        if proc.stdin:
            proc.stdin.close()

    stderr = proc.stderr.read().decode("utf-8", errors="replace") if proc.stderr else ""
    proc.wait()

    if proc.returncode != 0:
        error_lines = [
            line for line in stderr.split("\n")
            if "error" in line.lower() or "invalid" in line.lower()
        ]
        error_msg = "\n".join(error_lines[-5:]) if error_lines else stderr[-500:]
        raise RuntimeError(f"ffmpeg exited with code {proc.returncode}: {error_msg}")

    return output_path
