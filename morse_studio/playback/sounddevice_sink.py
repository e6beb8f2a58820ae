"""
Real-time voice renderer on a sounddevice output stream.

Requires: pip install sounddevice (and the PortAudio library)
"""

import itertools
import logging
import threading
from typing import Dict, Hashable, Optional

import numpy as np

from ..synth.tone_synthesizer import Voice
from .session import VoiceSink

logger = logging.getLogger(__name__)


class SounddeviceSink(VoiceSink):
    """
    Mixes active voices into a mono output stream block by block.

    The sink's clock is the number of frames rendered so far.
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        blocksize: int = 256,
        device: Optional[int] = None
    ):
        import sounddevice as sd
        self.sd = sd

        self.sample_rate = sample_rate
        self._frames_rendered = 0
        self._voices: Dict[Hashable, Voice] = {}
        self._handles = itertools.count()
        self._lock = threading.Lock()

        self._stream = sd.OutputStream(
            samplerate=sample_rate,
            channels=1,
            dtype='float32',
            blocksize=blocksize,
            device=device,
            callback=self._callback
        )
        self._stream.start()

    def list_devices(self):
        """Available audio devices."""
        return self.sd.query_devices()

    def now(self) -> float:
        with self._lock:
            return self._frames_rendered / self.sample_rate

    def start_voice(self, voice: Voice) -> Hashable:
        with self._lock:
            handle = next(self._handles)
            self._voices[handle] = voice
        return handle

    def release_voice(self, handle: Hashable):
        with self._lock:
            self._voices.pop(handle, None)

    def close(self):
        with self._lock:
            self._voices.clear()
        self._stream.stop()
        self._stream.close()

    def _callback(self, outdata, frames, time_info, status):
        if status:
            logger.warning("Output stream status: %s", status)

        with self._lock:
            first = self._frames_rendered
            self._frames_rendered += frames
            voices = list(self._voices.values())

        t = (first + np.arange(frames)) / self.sample_rate
        mix = np.zeros(frames)
        block_start, block_end = t[0], t[-1]

        for voice in voices:
            if voice.end <= block_start or voice.start > block_end:
                continue
            mix += np.sin(2 * np.pi * voice.frequency * t) * voice.gain * voice.level_at(t)

        outdata[:, 0] = np.clip(mix, -1.0, 1.0)
