"""
Morse Studio

Text <-> Morse translation, tone synthesis and tone-detection decoding.

Components:
- codec: code table and text <-> Morse translation
- synth: PARIS timing, tone schedules, sample rendering and export
- analysis: Goertzel magnitudes, thresholding, run classification
- pipeline: end-to-end audio decoder
- playback: cancellable live playback

Usage:
    from morse_studio import text_to_morse, synthesize, decode_audio

    morse = text_to_morse("CQ DE W1AW").morse
    buffer = synthesize(morse, wpm=20)
    result = decode_audio(buffer, wpm=20, target_frequency=700)
    print(result.text)
"""

from .buffers import SampleBuffer
from .errors import (
    IssueKind,
    CodecIssue,
    MorseStudioError,
    InvalidWPMError,
    InvalidMorseSyntaxError,
    PlaybackBusyError,
    AudioLoadError,
    ConfigError,
)
from .codec import text_to_morse, morse_to_text, EncodeResult, DecodeResult
from .synth import (
    TimingSet,
    compute_timings,
    validate_wpm,
    ToneEvent,
    Schedule,
    build_schedule,
    render_schedule,
    synthesize,
    to_pcm16,
    plan_voices,
    export_pcm,
    create_encoder,
)
from .analysis import MagnitudeSeries, Run, extract_magnitudes, threshold_runs, classify_runs
from .pipeline import MorseAudioDecoder, AudioDecodeResult, decode_audio
from .config import StudioConfig, load_config

__version__ = '1.0.0'

__all__ = [
    # Data
    'SampleBuffer',

    # Errors
    'IssueKind',
    'CodecIssue',
    'MorseStudioError',
    'InvalidWPMError',
    'InvalidMorseSyntaxError',
    'PlaybackBusyError',
    'AudioLoadError',
    'ConfigError',

    # Codec
    'text_to_morse',
    'morse_to_text',
    'EncodeResult',
    'DecodeResult',

    # Synthesis
    'TimingSet',
    'compute_timings',
    'validate_wpm',
    'ToneEvent',
    'Schedule',
    'build_schedule',
    'render_schedule',
    'synthesize',
    'to_pcm16',
    'plan_voices',
    'export_pcm',
    'create_encoder',

    # Analysis
    'MagnitudeSeries',
    'Run',
    'extract_magnitudes',
    'threshold_runs',
    'classify_runs',
    'MorseAudioDecoder',
    'AudioDecodeResult',
    'decode_audio',

    # Config
    'StudioConfig',
    'load_config',
]
