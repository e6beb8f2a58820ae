import numpy as np
import pytest

from morse_studio.buffers import SampleBuffer
from morse_studio.playback.session import VoiceSink


class FakeSink(VoiceSink):
    """Voice sink with a scripted clock: each now() call advances it by `step`."""

    def __init__(self, step: float = 0.0):
        self.time = 0.0
        self.step = step
        self.started = {}
        self.released = []
        self.closed = False
        self._next = 0

    def now(self) -> float:
        t = self.time
        self.time += self.step
        return t

    def start_voice(self, voice):
        handle = self._next
        self._next += 1
        self.started[handle] = voice
        return handle

    def release_voice(self, handle):
        self.released.append(handle)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_sink():
    return FakeSink()


def sine(frequency, sample_rate, num_samples, amplitude=1.0):
    t = np.arange(num_samples) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


@pytest.fixture
def silent_buffer():
    return SampleBuffer(np.zeros(8000), 8000)
