"""
PCM export.

16-bit mono PCM is fed block by block into an encoder, and the encoder's
flush() output finishes the file. WAV is written with the standard library;
MP3 goes through pydub (which needs ffmpeg on the PATH).

Usage:
    pcm = to_pcm16(synthesize(morse, wpm=20))
    data = export_pcm(pcm, create_encoder('mp3', sample_rate=44100))
"""

import io
import logging
import wave
from abc import ABC, abstractmethod
from typing import List

import numpy as np

logger = logging.getLogger(__name__)

MP3_FRAME_SAMPLES = 1152


class PcmEncoder(ABC):
    """Incremental encoder for signed 16-bit mono PCM."""

    def __init__(self, sample_rate: int):
        self.sample_rate = sample_rate

    @property
    @abstractmethod
    def format_name(self) -> str:
        pass

    @property
    @abstractmethod
    def media_type(self) -> str:
        pass

    @abstractmethod
    def encode_block(self, block: np.ndarray) -> bytes:
        """Consume one block of samples, returning any bytes ready so far."""
        pass

    @abstractmethod
    def flush(self) -> bytes:
        """Finish the stream and return the remaining bytes."""
        pass


class WavEncoder(PcmEncoder):
    """RIFF/WAV container. The header needs the final length, so all bytes come out at flush."""

    def __init__(self, sample_rate: int):
        super().__init__(sample_rate)
        self._frames: List[bytes] = []

    @property
    def format_name(self) -> str:
        return 'wav'

    @property
    def media_type(self) -> str:
        return 'audio/wav'

    def encode_block(self, block: np.ndarray) -> bytes:
        self._frames.append(np.asarray(block, dtype='<i2').tobytes())
        return b''

    def flush(self) -> bytes:
        out = io.BytesIO()
        with wave.open(out, 'wb') as wav_file:
            wav_file.setnchannels(1)
            wav_file.setsampwidth(2)  # 16-bit
            wav_file.setframerate(self.sample_rate)
            wav_file.writeframes(b''.join(self._frames))
        self._frames = []
        return out.getvalue()


class Mp3Encoder(PcmEncoder):
    """
    MP3 via pydub/ffmpeg.

    Not incremental: encode_block() only accumulates PCM and returns b'';
    ffmpeg runs once in flush(), which returns the whole MP3 file.
    """

    def __init__(self, sample_rate: int, bitrate_kbps: int = 128):
        super().__init__(sample_rate)
        self.bitrate_kbps = bitrate_kbps
        self._frames: List[bytes] = []

    @property
    def format_name(self) -> str:
        return 'mp3'

    @property
    def media_type(self) -> str:
        return 'audio/mpeg'

    def encode_block(self, block: np.ndarray) -> bytes:
        self._frames.append(np.asarray(block, dtype='<i2').tobytes())
        return b''

    def flush(self) -> bytes:
        from pydub import AudioSegment

        segment = AudioSegment(
            data=b''.join(self._frames),
            sample_width=2,
            frame_rate=self.sample_rate,
            channels=1
        )
        self._frames = []
        out = io.BytesIO()
        segment.export(out, format='mp3', bitrate=f'{self.bitrate_kbps}k')
        return out.getvalue()


def create_encoder(fmt: str, sample_rate: int = 44100, **kwargs) -> PcmEncoder:
    """Create an encoder by format name ('wav' or 'mp3')."""
    encoders = {
        'wav': WavEncoder,
        'mp3': Mp3Encoder,
    }

    fmt = fmt.lower()
    if fmt not in encoders:
        raise ValueError(f"Unknown format: {fmt}. Options: {list(encoders.keys())}")

    return encoders[fmt](sample_rate=sample_rate, **kwargs)


def export_pcm(pcm: np.ndarray, encoder: PcmEncoder, block_size: int = MP3_FRAME_SAMPLES) -> bytes:
    """
    Feed PCM into an encoder block by block and return the complete file.

    Args:
        pcm: Signed 16-bit mono samples
        encoder: Target encoder
        block_size: Samples per encode_block() call
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")

    chunks = []
    for i in range(0, len(pcm), block_size):
        data = encoder.encode_block(pcm[i:i + block_size])
        if data:
            chunks.append(data)

    tail = encoder.flush()
    if tail:
        chunks.append(tail)

    output = b''.join(chunks)
    logger.debug("Encoded %d samples to %d bytes of %s", len(pcm), len(output), encoder.format_name)
    return output
