"""
Single-frequency energy extraction.

Each non-overlapping window of the (mono) signal is reduced to one magnitude
at the target frequency with the Goertzel recurrence

    s0 = x[i] + c*s1 - s2;  s2 = s1;  s1 = s0      with c = 2*cos(2*pi*k/N)

which is an all-pole IIR filter, so every window is run through
scipy.signal.lfilter in one vectorized call.
"""

from dataclasses import dataclass

import numpy as np
from scipy import signal

from ..buffers import SampleBuffer

DEFAULT_WINDOW_MS = 10


@dataclass
class MagnitudeSeries:
    """Per-window tone magnitude, in time order."""
    values: np.ndarray
    window_ms: float
    sample_rate: int
    window_size: int

    @property
    def max(self) -> float:
        return float(self.values.max()) if len(self.values) else 0.0

    @property
    def window_duration(self) -> float:
        """Seconds covered by one window."""
        return self.window_ms / 1000

    def __len__(self):
        return len(self.values)


def _coefficient(window_size: int, target_frequency: float, sample_rate: int) -> float:
    k = round(window_size * target_frequency / sample_rate)
    w = 2 * np.pi * k / window_size
    return 2 * np.cos(w)


def _goertzel_frames(frames: np.ndarray, coeff: float) -> np.ndarray:
    """Goertzel magnitude for each row of a (num_windows, window_size) array."""
    window_size = frames.shape[1]
    states = signal.lfilter([1.0], [1.0, -coeff, 1.0], frames, axis=1)
    s1 = states[:, -1]
    s2 = states[:, -2] if window_size > 1 else np.zeros_like(s1)
    power = s1 * s1 + s2 * s2 - coeff * s1 * s2
    # Rounding can push a zero power slightly negative
    return np.sqrt(np.maximum(power, 0.0)) / window_size


def goertzel_magnitude(samples: np.ndarray, target_frequency: float, sample_rate: int) -> float:
    """
    Magnitude of one window at the target frequency.

    A full-scale sine exactly on the bin gives roughly amplitude / 2.
    """
    samples = np.asarray(samples, dtype=np.float64)
    if len(samples) == 0:
        return 0.0
    coeff = _coefficient(len(samples), target_frequency, sample_rate)
    return float(_goertzel_frames(samples[np.newaxis, :], coeff)[0])


def extract_magnitudes(
    buffer: SampleBuffer,
    target_frequency: float,
    window_ms: float = DEFAULT_WINDOW_MS
) -> MagnitudeSeries:
    """
    Compute the magnitude series of a buffer.

    Multi-channel buffers are down-mixed first. The trailing partial window
    is dropped; a buffer shorter than one window gives an empty series.

    Args:
        buffer: Decoded audio
        target_frequency: Tone to track in Hz
        window_ms: Window length in milliseconds
    """
    mono = buffer.to_mono().astype(np.float64)
    window_size = int(np.floor(buffer.sample_rate * window_ms / 1000))

    if window_size < 1:
        return MagnitudeSeries(np.zeros(0), window_ms, buffer.sample_rate, 0)

    num_windows = len(mono) // window_size
    if num_windows == 0:
        return MagnitudeSeries(np.zeros(0), window_ms, buffer.sample_rate, window_size)

    frames = mono[:num_windows * window_size].reshape(num_windows, window_size)
    coeff = _coefficient(window_size, target_frequency, buffer.sample_rate)

    return MagnitudeSeries(
        values=_goertzel_frames(frames, coeff),
        window_ms=window_ms,
        sample_rate=buffer.sample_rate,
        window_size=window_size
    )
