import numpy as np
import pytest

from morse_studio.analysis import AnalysisContext
from morse_studio.buffers import SampleBuffer
from morse_studio.codec import text_to_morse
from morse_studio.config import DecoderConfig
from morse_studio.errors import InvalidWPMError, IssueKind
from morse_studio.pipeline import MorseAudioDecoder, decode_audio
from morse_studio.synth import synthesize

SR = 8000


def render(text, wpm=20, frequency=700):
    morse = text_to_morse(text).morse
    return morse, synthesize(morse, wpm=wpm, sample_rate=SR, frequency=frequency)


@pytest.mark.parametrize("text", ["SOS SOS", "CQ DE W1AW", "PARIS"])
def test_synthesized_audio_round_trips(text):
    morse, buffer = render(text)
    result = decode_audio(buffer, wpm=20, target_frequency=700)
    assert result.morse == morse
    assert result.text == text
    assert result.issues == []
    assert not result.degenerate


def test_leading_and_trailing_silence_is_ignored():
    morse, buffer = render("TEST")
    padded = np.concatenate([np.zeros(SR // 2), buffer.samples, np.zeros(SR)])
    result = decode_audio(SampleBuffer(padded, SR))
    assert result.morse == morse
    assert result.text == "TEST"


def test_stereo_recording_is_downmixed():
    _, buffer = render("EE")
    stereo = SampleBuffer(np.stack([buffer.samples, buffer.samples * 0.5]), SR)
    assert decode_audio(stereo).text == "EE"


def test_other_frequency_still_found_when_targeted():
    _, buffer = render("K", frequency=1000)
    assert decode_audio(buffer, target_frequency=1000).text == "K"


@pytest.mark.parametrize("samples", [np.zeros(0), np.zeros(40), np.zeros(SR)])
def test_degenerate_audio_never_raises(samples):
    result = decode_audio(SampleBuffer(samples, SR))
    assert result.morse == ''
    assert result.text == ''
    assert result.runs == []
    assert result.degenerate
    assert result.issues[0].kind == IssueKind.DEGENERATE_AUDIO


def test_analyze_stores_magnitudes_in_context():
    _, buffer = render("E")
    context = AnalysisContext(buffer=buffer, file_name='e.wav')
    decoder = MorseAudioDecoder()

    result = decoder.analyze(context)
    assert result.text == "E"
    assert context.magnitudes is result.magnitudes
    assert len(context.magnitudes) > 0


def test_analyze_without_buffer():
    assert MorseAudioDecoder().analyze(AnalysisContext()) is None


def test_decoder_rejects_bad_settings():
    with pytest.raises(InvalidWPMError):
        MorseAudioDecoder(DecoderConfig(wpm=0))
    with pytest.raises(ValueError):
        MorseAudioDecoder(DecoderConfig(threshold=1.5))
