import io
import shutil
import wave

import numpy as np
import pytest

from morse_studio.synth import synthesize, to_pcm16
from morse_studio.synth.export import PcmEncoder, WavEncoder, create_encoder, export_pcm


class RecordingEncoder(PcmEncoder):
    def __init__(self, sample_rate=8000):
        super().__init__(sample_rate)
        self.blocks = []
        self.flushes = 0

    @property
    def format_name(self):
        return 'raw'

    @property
    def media_type(self):
        return 'application/octet-stream'

    def encode_block(self, block):
        self.blocks.append(len(block))
        return np.asarray(block, dtype='<i2').tobytes()

    def flush(self):
        self.flushes += 1
        return b'END'


def test_export_feeds_fixed_blocks_then_flushes_once():
    pcm = np.arange(2500, dtype=np.int16)
    encoder = RecordingEncoder()
    data = export_pcm(pcm, encoder, block_size=1152)
    assert encoder.blocks == [1152, 1152, 196]
    assert encoder.flushes == 1
    assert data.endswith(b'END')
    assert len(data) == 2500 * 2 + 3


def test_wav_export_is_readable():
    pcm = to_pcm16(synthesize("... --- ...", wpm=20, sample_rate=8000))
    data = export_pcm(pcm, WavEncoder(8000))

    with wave.open(io.BytesIO(data), 'rb') as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == 8000
        frames = np.frombuffer(wf.readframes(wf.getnframes()), dtype='<i2')

    np.testing.assert_array_equal(frames, pcm)


def test_create_encoder():
    assert create_encoder('WAV', sample_rate=22050).sample_rate == 22050
    assert create_encoder('mp3').media_type == 'audio/mpeg'
    with pytest.raises(ValueError):
        create_encoder('ogg')


def test_export_rejects_bad_block_size():
    with pytest.raises(ValueError):
        export_pcm(np.zeros(10, dtype=np.int16), WavEncoder(8000), block_size=0)


@pytest.mark.skipif(shutil.which('ffmpeg') is None, reason="ffmpeg not installed")
def test_mp3_export_produces_data():
    pytest.importorskip('pydub')
    pcm = to_pcm16(synthesize("-.-.", wpm=20, sample_rate=44100))
    data = export_pcm(pcm, create_encoder('mp3', sample_rate=44100))
    assert len(data) > 0


def test_mp3_blocks_are_buffered_until_flush():
    encoder = create_encoder('mp3', sample_rate=8000)
    assert encoder.encode_block(np.zeros(1152, dtype=np.int16)) == b''
    assert encoder.encode_block(np.ones(10, dtype=np.int16)) == b''
