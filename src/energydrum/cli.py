"""
CLI entry point for the energy drum effect.

Usage:
    energydrum <audio_file> [options]
    energydrum <signals.json> [options]
"""

import argparse
import json
import sys
import time
from pathlib import Path

from energydrum.config import EffectConfig
from energydrum.core.layout import LAYOUTS
from energydrum.core.palette import NAMED_PALETTES, Palette
from energydrum.driver import AudioSignals, FrameDriver
from energydrum.io.loaders import load_layout, load_palette
from energydrum.io.recorder import FrameRecorder


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def _parse_size(text: str) -> tuple[int, int]:
    try:
        w, h = text.lower().split("x")
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Size must look like 640x480, got {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="energydrum",
        description="Audio-reactive light source effect for panel layouts",
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input audio file (wav, mp3, flac) or a signals JSON from --dump-signals",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Frame log path (default: <input>_frames.json)",
    )

    # Palette
    palette = parser.add_mutually_exclusive_group()
    palette.add_argument(
        "--palette", type=str, default="aurora",
        choices=sorted(NAMED_PALETTES),
        help="Built-in palette (default: aurora)",
    )
    palette.add_argument("--palette-file", type=Path, default=None, help="JSON palette file")

    # Layout
    layout = parser.add_mutually_exclusive_group()
    layout.add_argument(
        "--layout", type=str, default="triangles",
        choices=sorted(LAYOUTS),
        help="Synthetic layout shape (default: triangles)",
    )
    layout.add_argument("--layout-file", type=Path, default=None, help="JSON layout file")
    parser.add_argument(
        "--panels", type=int, default=12,
        help="Panel count for synthetic layouts (default: 12)",
    )

    # Simulation
    parser.add_argument("-f", "--fps", type=int, default=40, help="Frames per second (default: 40)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--energy-threshold", type=int, default=EffectConfig.energy_threshold,
        help=f"Energy that switches sources to the shrinking-core model "
             f"(default: {EffectConfig.energy_threshold})",
    )
    parser.add_argument(
        "--max-duration", type=float, default=None,
        help="Limit output to N seconds",
    )
    parser.add_argument(
        "--dump-signals", type=Path, default=None,
        help="Also write the extracted audio signals to this JSON path",
    )

    # Preview
    parser.add_argument(
        "--preview", type=Path, default=None,
        help="Render an MP4 preview of the panels to this path",
    )
    parser.add_argument(
        "--preview-size", type=_parse_size, default=(640, 480),
        help="Preview size WxH (default: 640x480)",
    )
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=["high", "medium", "fast"],
        help="Preview encoding quality (default: medium)",
    )
    parser.add_argument("--verbose", action="store_true", help="Print palette and layout")

    return parser


def _load_signals(args) -> tuple[list[AudioSignals], int, float | None]:
    """Analyse the input audio, or read previously dumped signals."""
    if args.input.suffix.lower() == ".json":
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)
        meta = data.get("metadata", {})
        signals = [AudioSignals.from_dict(frame) for frame in data.get("frames", [])]
        fps = int(meta.get("fps", args.fps))
        print(f"Loaded {len(signals)} frames of signals from {args.input}")
        return signals, fps, None

    from energydrum.analysis import FeatureExtractor

    print(f"Analyzing audio: {args.input}")
    t0 = time.time()
    analysis = FeatureExtractor(target_fps=args.fps).extract_file(args.input)
    print(f"  BPM: {analysis.bpm:.1f}")
    print(f"  Duration: {analysis.duration:.1f}s")
    print(f"  Frames: {analysis.n_frames}")
    print(f"  Analysis took {time.time() - t0:.1f}s")

    if args.dump_signals is not None:
        args.dump_signals.parent.mkdir(parents=True, exist_ok=True)
        with open(args.dump_signals, "w", encoding="utf-8") as f:
            json.dump(analysis.to_dict(), f)
        print(f"  Signals: {args.dump_signals}")

    return analysis.signals, analysis.fps, analysis.duration


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        sys.exit(1)

    try:
        palette = load_palette(args.palette_file) if args.palette_file else Palette.named(args.palette)
        layout = load_layout(args.layout_file) if args.layout_file else LAYOUTS[args.layout](args.panels)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = args.output
    if output is None:
        output = args.input.with_name(f"{args.input.stem}_frames.json")

    # Step 1: Signals
    signals, fps, duration = _load_signals(args)

    if args.max_duration is not None:
        max_frames = int(args.max_duration * fps)
        if max_frames < len(signals):
            signals = signals[:max_frames]
            print(f"  Limiting to {args.max_duration}s ({max_frames} frames)")

    # Step 2: Simulate
    config = EffectConfig(energy_threshold=args.energy_threshold)
    recorder = FrameRecorder(layout=layout, fps=fps)
    driver = FrameDriver(layout, palette, config=config, seed=args.seed, sink=recorder)

    if args.verbose:
        for line in driver.describe():
            print(line)

    print(f"\nSimulating {len(signals)} frames on {len(layout)} panels @ {fps}fps")
    t1 = time.time()
    for _ in driver.run(signals, progress_callback=_progress_bar):
        pass

    recorder.export_json(output)
    print(f"  Spawned {driver.state.spawned} sources, {driver.state.expired} expired")
    print(f"  Frame log: {output}")

    # Step 3: Preview
    if args.preview is not None:
        from energydrum.preview import PanelPreview, PreviewConfig, encode_video

        width, height = args.preview_size
        preview = PanelPreview(layout, PreviewConfig(width=width, height=height))
        print(f"\nEncoding preview at {width}x{height}")
        encode_video(
            frame_iterator=preview.render_all(recorder.frames),
            output_path=args.preview,
            width=width,
            height=height,
            fps=fps,
            quality=args.quality,
            audio_path=None if duration is None else args.input,
            duration=args.max_duration or duration,
            total_frames=len(recorder),
            progress_callback=_progress_bar,
        )
        print(f"  Preview: {args.preview}")

    print(f"\nDone in {time.time() - t1:.1f}s")


if __name__ == "__main__":
    main()
