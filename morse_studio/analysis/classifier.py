"""
Run classification: durations to dots, dashes and gaps.

Every decision is a midpoint between two nominal durations, with no
hysteresis. The two OFF thresholds are independent of each other, so a wpm
estimate far from the sender's speed can misplace letter and word breaks.
"""

from dataclasses import dataclass
from typing import Iterable

from ..synth.timing import TimingSet
from .segmenter import Run


@dataclass(frozen=True)
class ClassifierThresholds:
    dot_dash: float       # ON shorter than this is a dot
    letter_gap: float     # OFF at least this long separates letters
    word_gap: float       # OFF at least this long separates words

    @classmethod
    def from_timing(cls, timing: TimingSet) -> 'ClassifierThresholds':
        return cls(
            dot_dash=(timing.dot + timing.dash) / 2,
            letter_gap=(timing.symbol_gap + timing.letter_gap) / 2,
            word_gap=(timing.letter_gap + timing.word_gap) / 2,
        )


def classify_runs(runs: Iterable[Run], timing: TimingSet) -> str:
    """Turn on/off runs into a Morse string."""
    thresholds = ClassifierThresholds.from_timing(timing)
    runs = list(runs)

    # Silence before the first tone and after the last one is not a gap
    while runs and not runs[0].is_on:
        runs.pop(0)
    while runs and not runs[-1].is_on:
        runs.pop()

    parts = []
    for run in runs:
        if run.is_on:
            parts.append('.' if run.duration < thresholds.dot_dash else '-')
        elif run.duration >= thresholds.word_gap:
            parts.append(' / ')
        elif run.duration >= thresholds.letter_gap:
            parts.append(' ')
        # Shorter gaps sit between elements of one letter

    return ''.join(parts)
