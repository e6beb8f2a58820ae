"""
Morse Audio Decoder Pipeline

Ties together:
1. Magnitude extraction (Goertzel at the target tone)
2. Thresholding into on/off runs
3. Run classification into dots, dashes and gaps
4. Morse -> text translation

Usage:
    from morse_studio.pipeline import MorseAudioDecoder

    decoder = MorseAudioDecoder(DecoderConfig(wpm=18, target_frequency=650))
    result = decoder.decode(buffer)
    print(result.morse, result.text)
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..analysis.audio_loader import AnalysisContext
from ..analysis.classifier import classify_runs
from ..analysis.goertzel import MagnitudeSeries, extract_magnitudes
from ..analysis.segmenter import Run, threshold_runs
from ..buffers import SampleBuffer
from ..codec.text_codec import morse_to_text
from ..config import DecoderConfig
from ..errors import CodecIssue, IssueKind
from ..synth.timing import compute_timings, validate_wpm

logger = logging.getLogger(__name__)


@dataclass
class AudioDecodeResult:
    """Everything the analysis produced, for display and for the chart."""
    morse: str
    text: str
    magnitudes: MagnitudeSeries
    threshold: float                      # Absolute magnitude threshold
    threshold_fraction: float
    runs: List[Run] = field(default_factory=list)
    issues: List[CodecIssue] = field(default_factory=list)

    @property
    def degenerate(self) -> bool:
        return any(issue.kind == IssueKind.DEGENERATE_AUDIO for issue in self.issues)


class MorseAudioDecoder:
    """
    Decodes a fully loaded audio buffer into Morse and text.

    The decoder keeps no state between calls; decode() may be called with
    any number of buffers.
    """

    def __init__(self, config: Optional[DecoderConfig] = None):
        self.config = config or DecoderConfig()
        validate_wpm(self.config.wpm)
        if not 0 <= self.config.threshold <= 1:
            raise ValueError(f"threshold must be between 0 and 1, got {self.config.threshold}")

    def decode(self, buffer: SampleBuffer) -> AudioDecodeResult:
        """
        Run all four stages on a buffer.

        Empty, too-short and silent buffers yield empty morse and text with a
        DEGENERATE_AUDIO issue instead of raising.
        """
        cfg = self.config
        magnitudes = extract_magnitudes(buffer, cfg.target_frequency, cfg.window_ms)
        threshold, runs = threshold_runs(magnitudes.values, cfg.threshold, magnitudes.window_duration)

        if not runs:
            logger.info("No tone energy at %.0f Hz (%d windows)", cfg.target_frequency, len(magnitudes))
            return AudioDecodeResult(
                morse='',
                text='',
                magnitudes=magnitudes,
                threshold=threshold,
                threshold_fraction=cfg.threshold,
                issues=[CodecIssue(IssueKind.DEGENERATE_AUDIO)]
            )

        morse = classify_runs(runs, compute_timings(cfg.wpm))
        decoded = morse_to_text(morse) if morse else None

        logger.debug(
            "Decoded %d windows into %d runs: %r", len(magnitudes), len(runs), morse
        )

        return AudioDecodeResult(
            morse=morse,
            text=decoded.text if decoded else '',
            magnitudes=magnitudes,
            threshold=threshold,
            threshold_fraction=cfg.threshold,
            runs=runs,
            issues=list(decoded.issues) if decoded else []
        )

    def analyze(self, context: AnalysisContext) -> Optional[AudioDecodeResult]:
        """Decode the context's loaded buffer and remember its magnitudes."""
        if context.buffer is None:
            return None
        result = self.decode(context.buffer)
        context.magnitudes = result.magnitudes
        return result


def decode_audio(
    buffer: SampleBuffer,
    wpm: float = 20,
    target_frequency: float = 700,
    threshold_fraction: float = 0.5,
    window_ms: float = 10
) -> AudioDecodeResult:
    """Convenience wrapper around MorseAudioDecoder.decode()."""
    decoder = MorseAudioDecoder(DecoderConfig(
        wpm=wpm,
        target_frequency=target_frequency,
        threshold=threshold_fraction,
        window_ms=window_ms
    ))
    return decoder.decode(buffer)
