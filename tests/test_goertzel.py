import math

import numpy as np
import pytest

from morse_studio.analysis import extract_magnitudes, goertzel_magnitude
from morse_studio.buffers import SampleBuffer

from conftest import sine


def reference_goertzel(samples, target_frequency, sample_rate):
    n = len(samples)
    k = round(n * target_frequency / sample_rate)
    coeff = 2 * math.cos(2 * math.pi * k / n)
    s1 = s2 = 0.0
    for x in samples:
        s0 = x + coeff * s1 - s2
        s2 = s1
        s1 = s0
    return math.sqrt(max(s1 * s1 + s2 * s2 - coeff * s1 * s2, 0.0)) / n


def test_matches_plain_recurrence():
    rng = np.random.default_rng(7)
    samples = rng.normal(size=441)
    assert goertzel_magnitude(samples, 700, 44100) == pytest.approx(
        reference_goertzel(samples, 700, 44100), rel=1e-7
    )


def test_on_bin_tone_beats_tone_a_decade_away():
    sr, n = 44100, 441
    on = goertzel_magnitude(sine(700, sr, n), 700, sr)
    off = goertzel_magnitude(sine(7000, sr, n), 700, sr)
    assert on == pytest.approx(0.5, rel=1e-3)
    assert on > 10 * off


def test_empty_window():
    assert goertzel_magnitude(np.array([]), 700, 8000) == 0.0


def test_windows_drop_partial_tail():
    buffer = SampleBuffer(sine(700, 8000, 1000), 8000)
    series = extract_magnitudes(buffer, 700, window_ms=10)
    assert series.window_size == 80
    assert len(series) == 12
    assert np.all(series.values >= 0)
    assert series.values == pytest.approx(np.full(12, 0.5), rel=1e-3)


def test_buffer_shorter_than_one_window():
    series = extract_magnitudes(SampleBuffer(np.ones(50), 8000), 700, window_ms=10)
    assert len(series) == 0
    assert series.max == 0.0


def test_empty_buffer():
    assert len(extract_magnitudes(SampleBuffer(np.zeros(0), 8000), 700)) == 0


def test_single_sample_windows():
    series = extract_magnitudes(SampleBuffer(np.array([0.5, -0.5, 0.25]), 100), 10, window_ms=10)
    assert series.window_size == 1
    assert len(series) == 3
    assert np.all(series.values >= 0)


def test_stereo_is_averaged_before_analysis():
    tone = sine(700, 8000, 800)
    same = extract_magnitudes(SampleBuffer(np.stack([tone, tone]), 8000), 700)
    mono = extract_magnitudes(SampleBuffer(tone, 8000), 700)
    np.testing.assert_allclose(same.values, mono.values, rtol=1e-5)

    cancelled = extract_magnitudes(SampleBuffer(np.stack([tone, -tone]), 8000), 700)
    assert cancelled.max == pytest.approx(0.0, abs=1e-9)
