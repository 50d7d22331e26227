"""
Offline audio feature extraction.

Produces the per-frame signals the effect reacts to: a coarse
32-band spectrum, beat and onset flags, an energy reading and a local
tempo estimate, all aligned to the target frame rate.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import librosa
import numpy as np

from energydrum.config import MAX_ENERGY, N_FFT_BINS
from energydrum.driver import AudioSignals


@dataclass
class AudioAnalysis:
    """Frame-aligned signals for a whole audio clip."""

    fps: int
    bpm: float
    duration: float
    sample_rate: int
    hop_length: int
    signals: list[AudioSignals] = field(default_factory=list)

    @property
    def n_frames(self) -> int:
        return len(self.signals)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": {
                "fps": self.fps,
                "bpm": round(self.bpm, 4),
                "duration": round(self.duration, 4),
                "n_frames": self.n_frames,
            },
            "frames": [
                {
                    "fft_bins": list(s.fft_bins),
                    "is_beat": s.is_beat,
                    "is_onset": s.is_onset,
                    "energy": s.energy,
                    "tempo": round(s.tempo, 4),
                }
                for s in self.signals
            ],
        }


class FeatureExtractor:
    """
    Extracts effect driver signals from an audio signal.

    Frames are aligned to ``target_fps`` through the hop length.
    """

    def __init__(
        self,
        target_fps: int = 40,
        n_fft: int = 2048,
        n_bins: int = N_FFT_BINS,
        hpss_margin: tuple[float, float] = (1.0, 1.0),
    ):
        """
        Initialize the extractor.

        Args:
            target_fps: Frames per second of the produced signals.
            n_fft: STFT window size.
            n_bins: Number of spectrum bands per frame.
            hpss_margin: Harmonic-percussive separation margin used to
                clean up onset detection.
        """
        self.target_fps = target_fps or 40
        self.n_fft = n_fft
        self.n_bins = n_bins
        self.hpss_margin = hpss_margin

    def compute_hop_length(self, sr: int) -> int:
        """Hop length in samples for the target frame rate."""
        return int(sr / self.target_fps)

    def band_edges(self, n_freqs: int) -> np.ndarray:
        """
        Log-spaced STFT bin edges for the spectrum bands.

        Every band covers at least one STFT bin.
        """
        edges = np.geomspace(1, n_freqs, self.n_bins + 1)
        edges = np.floor(edges).astype(int)
        edges[0] = 0
        for i in range(1, len(edges)):
            if edges[i] <= edges[i - 1]:
                edges[i] = edges[i - 1] + 1
        return np.minimum(edges, n_freqs)

    def spectrum_bins(self, y: np.ndarray, hop_length: int) -> np.ndarray:
        """
        Coarse magnitude spectrum per frame.

        Returns:
            (n_frames, n_bins) uint8 array scaled to 0-255.
        """
        mag = np.abs(librosa.stft(y, n_fft=self.n_fft, hop_length=hop_length))
        edges = self.band_edges(mag.shape[0])

        bands = np.zeros((self.n_bins, mag.shape[1]), dtype=np.float32)
        for i in range(self.n_bins):
            lo, hi = edges[i], edges[i + 1]
            if hi > lo:
                bands[i] = mag[lo:hi].mean(axis=0)

        peak = bands.max()
        if peak > 0:
            bands = bands / peak
        return np.clip(bands.T * 255.0, 0, 255).astype(np.uint8)

    def energy_levels(self, y: np.ndarray, hop_length: int) -> np.ndarray:
        """RMS energy scaled so the loudest frame reads MAX_ENERGY."""
        rms = librosa.feature.rms(y=y, hop_length=hop_length)[0]
        peak = rms.max() if len(rms) else 0.0
        if peak > 0:
            rms = rms / peak
        return np.clip(rms * MAX_ENERGY, 0, MAX_ENERGY).astype(np.int64)

    def detect_events(
        self,
        y: np.ndarray,
        sr: int,
        hop_length: int,
    ) -> tuple[float, np.ndarray, np.ndarray]:
        """
        Beat and onset detection.

        Beats are tracked on the full signal; onsets on the percussive
        component, which gives cleaner transients.

        Returns:
            (bpm, beat_frames, onset_frames)
        """
        tempo, beat_frames = librosa.beat.beat_track(y=y, sr=sr, hop_length=hop_length)
        # Handle both scalar tempo and array tempo (librosa version differences)
        if isinstance(tempo, np.ndarray):
            bpm = float(tempo[0]) if len(tempo) > 0 else 120.0
        else:
            bpm = float(tempo)

        _, percussive = librosa.effects.hpss(y, margin=self.hpss_margin)
        onset_env = librosa.onset.onset_strength(y=percussive, sr=sr, hop_length=hop_length)
        onset_frames = librosa.onset.onset_detect(
            onset_envelope=onset_env,
            sr=sr,
            hop_length=hop_length,
        )
        return bpm, np.asarray(beat_frames, dtype=int), np.asarray(onset_frames, dtype=int)

    def tempo_curve(
        self,
        beat_frames: np.ndarray,
        n_frames: int,
        bpm: float,
    ) -> np.ndarray:
        """
        Local tempo per frame from beat-to-beat spacing.

        Falls back to the global BPM when fewer than two beats exist.
        """
        if len(beat_frames) < 2:
            return np.full(n_frames, bpm, dtype=float)

        intervals = np.diff(beat_frames).astype(float) / self.target_fps
        intervals = np.clip(intervals, 1e-3, None)
        local_bpm = 60.0 / intervals
        midpoints = beat_frames[:-1] + np.diff(beat_frames) / 2.0
        return np.interp(np.arange(n_frames), midpoints, local_bpm)

    def extract(self, y: np.ndarray, sr: int) -> AudioAnalysis:
        """
        Extract frame-aligned signals from an audio time series.

        Args:
            y: Mono audio signal.
            sr: Sample rate.

        Returns:
            AudioAnalysis with one AudioSignals per frame.
        """
        hop_length = self.compute_hop_length(sr)

        bins = self.spectrum_bins(y, hop_length)
        energy = self.energy_levels(y, hop_length)
        bpm, beat_frames, onset_frames = self.detect_events(y, sr, hop_length)

        n_frames = min(len(bins), len(energy))
        is_beat = np.zeros(n_frames, dtype=bool)
        is_beat[beat_frames[beat_frames < n_frames]] = True
        is_onset = np.zeros(n_frames, dtype=bool)
        is_onset[onset_frames[onset_frames < n_frames]] = True
        tempo = self.tempo_curve(beat_frames, n_frames, bpm)

        signals = [
            AudioSignals(
                fft_bins=tuple(int(v) for v in bins[i]),
                is_beat=bool(is_beat[i]),
                is_onset=bool(is_onset[i]),
                energy=int(energy[i]),
                tempo=float(tempo[i]),
            )
            for i in range(n_frames)
        ]

        return AudioAnalysis(
            fps=self.target_fps,
            bpm=bpm,
            duration=librosa.get_duration(y=y, sr=sr),
            sample_rate=sr,
            hop_length=hop_length,
            signals=signals,
        )

    def extract_file(
        self,
        audio_path: Union[str, Path],
        sr: int | None = 22050,
    ) -> AudioAnalysis:
        """
        Load an audio file and extract its signals.

        Args:
            audio_path: Path to audio file (wav, mp3, flac).
            sr: Target sample rate (default 22050 for efficiency).
        """
        y, sr_out = librosa.load(audio_path, sr=sr, mono=True)
        return self.extract(y, sr_out)
