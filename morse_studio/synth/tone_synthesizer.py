"""
Tone synthesizer.

Renders a tone schedule into samples for export, or into a list of
independently timed voices for a real-time renderer.

Usage:
    from morse_studio.synth import synthesize, to_pcm16

    buffer = synthesize("... --- ...", wpm=20, sample_rate=44100)
    pcm = to_pcm16(buffer)
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..buffers import SampleBuffer
from .schedule import Schedule, build_schedule
from .timing import compute_timings, validate_wpm

DEFAULT_FREQUENCY = 700.0
DEFAULT_AMPLITUDE = 0.5
DEFAULT_RAMP = 0.005        # 5 ms attack / decay, prevents key clicks
DEFAULT_LEAD_IN = 0.05      # live playback starts this far after "now"
PCM16_MAX = 32767


def _ramp_envelope(length: int, ramp_samples: int) -> np.ndarray:
    """Linear 0->1 rise and 1->0 fall of ramp_samples at each edge."""
    if ramp_samples <= 0 or length <= 0:
        return np.ones(length)
    pos = np.arange(length, dtype=np.float64)
    rise = pos / ramp_samples
    fall = (length - pos) / ramp_samples
    return np.minimum(1.0, np.minimum(rise, fall))


def render_schedule(
    schedule: Schedule,
    sample_rate: int = 44100,
    frequency: float = DEFAULT_FREQUENCY,
    amplitude: float = DEFAULT_AMPLITUDE,
    ramp_duration: float = DEFAULT_RAMP
) -> SampleBuffer:
    """
    Render a schedule into a mono sample buffer.

    Args:
        schedule: Tone events and total duration
        sample_rate: Output sample rate
        frequency: Tone frequency in Hz
        amplitude: Peak amplitude (0-1)
        ramp_duration: Attack/decay time in seconds

    Returns:
        SampleBuffer of ceil(total_duration * sample_rate) float samples
    """
    num_samples = int(math.ceil(schedule.total_duration * sample_rate))
    samples = np.zeros(num_samples, dtype=np.float64)
    ramp_samples = int(ramp_duration * sample_rate)

    for event in schedule.events:
        start = int(math.floor(event.start * sample_rate))
        end = min(int(math.floor(event.end * sample_rate)), num_samples)
        if end <= start:
            continue

        # Phase follows absolute time so every tone shares one oscillator
        t = np.arange(start, end) / sample_rate
        tone = np.sin(2 * np.pi * frequency * t) * amplitude
        samples[start:end] = tone * _ramp_envelope(end - start, ramp_samples)

    return SampleBuffer(samples=samples.astype(np.float32), sample_rate=sample_rate)


def to_pcm16(buffer: SampleBuffer) -> np.ndarray:
    """Clamp to [-1, 1] and quantize to signed 16-bit PCM."""
    clipped = np.clip(buffer.samples.astype(np.float64), -1.0, 1.0)
    return np.floor(clipped * PCM16_MAX).astype(np.int16)


def synthesize(
    morse: str,
    wpm: float,
    sample_rate: int = 44100,
    frequency: float = DEFAULT_FREQUENCY,
    amplitude: float = DEFAULT_AMPLITUDE,
    ramp_duration: float = DEFAULT_RAMP
) -> SampleBuffer:
    """Validate wpm, build the schedule and render it."""
    timing = compute_timings(validate_wpm(wpm))
    schedule = build_schedule(morse, timing)
    return render_schedule(schedule, sample_rate, frequency, amplitude, ramp_duration)


@dataclass(frozen=True)
class Voice:
    """One independently timed oscillator for live playback (absolute times)."""
    start: float
    duration: float
    frequency: float
    gain: float
    ramp: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    @property
    def effective_ramp(self) -> float:
        """Ramp time, capped at half the duration."""
        return max(min(self.ramp, self.duration / 2), 0.0)

    def envelope(self) -> List[Tuple[float, float]]:
        """(time, level) breakpoints: silent, ramp up, hold, ramp down."""
        ramp = self.effective_ramp
        return [
            (self.start, 0.0),
            (self.start + ramp, 1.0),
            (self.end - ramp, 1.0),
            (self.end, 0.0),
        ]

    def level_at(self, t: np.ndarray) -> np.ndarray:
        """Envelope level at absolute times t (zero outside the voice)."""
        t = np.asarray(t, dtype=np.float64)
        ramp = self.effective_ramp
        if ramp <= 0:
            level = np.ones_like(t)
        else:
            level = np.minimum(1.0, np.minimum((t - self.start) / ramp,
                                               (self.end - t) / ramp))
        inside = (t >= self.start) & (t < self.end)
        return np.where(inside, np.clip(level, 0.0, 1.0), 0.0)


def plan_voices(
    schedule: Schedule,
    frequency: float = DEFAULT_FREQUENCY,
    gain: float = DEFAULT_AMPLITUDE,
    ramp: float = DEFAULT_RAMP,
    now: float = 0.0,
    lead_in: float = DEFAULT_LEAD_IN
) -> List[Voice]:
    """
    Map schedule events onto voices for a renderer whose clock reads `now`.
    """
    origin = now + lead_in
    return [
        Voice(
            start=origin + event.start,
            duration=event.duration,
            frequency=frequency,
            gain=gain,
            ramp=ramp
        )
        for event in schedule.events
    ]
