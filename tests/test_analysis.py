"""Tests for the audio feature extractor."""

import numpy as np
import pytest

from energydrum.analysis import AudioAnalysis, FeatureExtractor
from energydrum.config import MAX_ENERGY, N_FFT_BINS
from energydrum.driver import AudioSignals


class TestFeatureExtractor:
    @pytest.fixture
    def analysis(self, click_track):
        y, sr = click_track
        return FeatureExtractor(target_fps=40).extract(y, sr)

    def test_returns_analysis(self, analysis):
        assert isinstance(analysis, AudioAnalysis)
        assert all(isinstance(s, AudioSignals) for s in analysis.signals)

    def test_frame_rate(self, analysis):
        # 4 seconds at 40 fps, give or take the edge frame
        assert abs(analysis.n_frames - 160) <= 2
        assert analysis.duration == pytest.approx(4.0, abs=0.01)

    def test_hop_length(self, sample_rate):
        extractor = FeatureExtractor(target_fps=40)
        assert extractor.compute_hop_length(sample_rate) == sample_rate // 40

    def test_default_fps_if_none(self):
        assert FeatureExtractor(target_fps=None).target_fps == 40

    def test_bins_in_range(self, analysis):
        for s in analysis.signals:
            assert len(s.fft_bins) == N_FFT_BINS
            assert all(0 <= v <= 255 for v in s.fft_bins)
        assert max(max(s.fft_bins) for s in analysis.signals) == 255

    def test_energy_in_range(self, analysis):
        energies = [s.energy for s in analysis.signals]
        assert min(energies) >= 0
        assert max(energies) <= MAX_ENERGY
        assert max(energies) > 0.9 * MAX_ENERGY

    def test_clicks_detected(self, analysis):
        assert any(s.is_onset for s in analysis.signals)
        assert analysis.bpm > 0

    def test_tempo_positive(self, analysis):
        assert all(s.tempo > 0 for s in analysis.signals)

    def test_to_dict(self, analysis):
        data = analysis.to_dict()
        assert data["metadata"]["n_frames"] == analysis.n_frames
        assert data["metadata"]["fps"] == 40
        rebuilt = AudioSignals.from_dict(data["frames"][0])
        assert rebuilt.fft_bins == analysis.signals[0].fft_bins


class TestHelpers:
    def test_band_edges_monotonic(self):
        edges = FeatureExtractor().band_edges(1025)
        assert len(edges) == N_FFT_BINS + 1
        assert edges[0] == 0
        assert edges[-1] == 1025
        assert np.all(np.diff(edges) >= 1)

    def test_tempo_curve_fallback(self):
        curve = FeatureExtractor().tempo_curve(np.array([10]), 50, 97.0)
        assert curve.shape == (50,)
        assert np.all(curve == 97.0)

    def test_tempo_curve_from_beats(self):
        extractor = FeatureExtractor(target_fps=40)
        # Beats every 20 frames at 40 fps = 0.5s = 120 BPM
        curve = extractor.tempo_curve(np.array([0, 20, 40, 60]), 80, 100.0)
        np.testing.assert_allclose(curve, 120.0)

    def test_silence(self, sample_rate):
        y = np.zeros(sample_rate, dtype=np.float32)
        analysis = FeatureExtractor().extract(y, sample_rate)
        assert all(s.energy == 0 for s in analysis.signals)
        assert all(max(s.fft_bins) == 0 for s in analysis.signals)
