"""
Audio file loading for the decoder.

WAV files are read with the standard library wave module; anything else
(MP3, OGG, FLAC, ...) goes through pydub, which needs ffmpeg.

AudioLoader runs the blocking read in a worker thread and ignores any load
that finishes after a newer one has started.

Usage:
    context = AnalysisContext()
    loader = AudioLoader(context)
    buffer = await loader.load('recording.mp3')   # None if superseded
"""

import asyncio
import logging
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from ..buffers import SampleBuffer
from ..errors import AudioLoadError
from .goertzel import MagnitudeSeries

logger = logging.getLogger(__name__)

_PCM_DTYPES = {1: 'u1', 2: '<i2', 4: '<i4'}


def _deinterleave(pcm: np.ndarray, channels: int, sample_width: int) -> np.ndarray:
    """Interleaved integer PCM -> float32 array shaped (channels, n)."""
    if sample_width == 1:
        # 8-bit WAV is unsigned
        audio = (pcm.astype(np.float32) - 128.0) / 128.0
    else:
        audio = pcm.astype(np.float32) / float(2 ** (8 * sample_width - 1))
    frames = len(audio) // channels
    return audio[:frames * channels].reshape(frames, channels).T


def _to_buffer(audio: np.ndarray, sample_rate: int) -> SampleBuffer:
    if audio.shape[0] == 1:
        audio = audio[0]
    return SampleBuffer(samples=audio, sample_rate=sample_rate)


def read_wav(path: Path) -> SampleBuffer:
    """Read an integer PCM WAV file."""
    with wave.open(str(path), 'rb') as wf:
        channels = wf.getnchannels()
        sample_width = wf.getsampwidth()
        sample_rate = wf.getframerate()
        frames = wf.readframes(wf.getnframes())

    if sample_width not in _PCM_DTYPES:
        raise AudioLoadError(f"Unsupported WAV sample width: {sample_width * 8} bits")

    pcm = np.frombuffer(frames, dtype=_PCM_DTYPES[sample_width])
    return _to_buffer(_deinterleave(pcm, channels, sample_width), sample_rate)


def read_compressed(path: Path) -> SampleBuffer:
    """Decode any ffmpeg-supported file through pydub."""
    from pydub import AudioSegment

    segment = AudioSegment.from_file(str(path))
    sample_width = segment.sample_width
    if sample_width not in _PCM_DTYPES:
        segment = segment.set_sample_width(2)
        sample_width = 2

    pcm = np.frombuffer(segment.raw_data, dtype=_PCM_DTYPES[sample_width])
    audio = _deinterleave(pcm, segment.channels, sample_width)
    return _to_buffer(audio, segment.frame_rate)


def load_audio(path) -> SampleBuffer:
    """
    Load an audio file into a SampleBuffer, keeping all channels.

    Raises:
        AudioLoadError: file missing or undecodable
    """
    path = Path(path)
    if not path.exists():
        raise AudioLoadError(f"Audio file not found: {path}")

    try:
        if path.suffix.lower() == '.wav':
            buffer = read_wav(path)
        else:
            buffer = read_compressed(path)
    except AudioLoadError:
        raise
    except Exception as e:
        raise AudioLoadError(f"Could not decode audio {path.name}: {e}") from e

    logger.info(
        "Loaded %s: %d channel(s), %d Hz, %.2fs",
        path.name, buffer.num_channels, buffer.sample_rate, buffer.duration
    )
    return buffer


@dataclass
class AnalysisContext:
    """State of the analysis view, owned and passed around by the caller."""
    buffer: Optional[SampleBuffer] = None
    file_name: Optional[str] = None
    magnitudes: Optional[MagnitudeSeries] = None

    def clear(self):
        self.buffer = None
        self.file_name = None
        self.magnitudes = None

    @property
    def ready(self) -> bool:
        return self.buffer is not None


class AudioLoader:
    """
    Loads files into an AnalysisContext; only the most recent load wins.
    """

    def __init__(self, context: AnalysisContext, reader=load_audio):
        self.context = context
        self._reader = reader
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self, path) -> Optional[SampleBuffer]:
        """
        Load a file, replacing the context's buffer.

        Returns:
            The buffer, or None when a newer load started meanwhile

        Raises:
            AudioLoadError: the file could not be decoded (context left cleared)
        """
        self._generation += 1
        generation = self._generation
        self.context.clear()

        try:
            buffer = await asyncio.to_thread(self._reader, path)
        except AudioLoadError:
            if generation == self._generation:
                self.context.clear()
                raise
            return None

        if generation != self._generation:
            logger.debug("Discarding superseded load of %s", path)
            return None

        self.context.buffer = buffer
        self.context.file_name = Path(path).name
        return buffer
