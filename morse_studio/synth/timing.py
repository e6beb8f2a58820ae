"""
Element timing from words-per-minute (PARIS standard: one dot = 1200/wpm ms).
"""

import math
import numbers
from dataclasses import dataclass

from ..errors import InvalidWPMError


@dataclass(frozen=True)
class TimingSet:
    """Element and gap durations in seconds."""
    dot: float
    dash: float          # 3 dots
    symbol_gap: float    # 1 dot, between elements of a letter
    letter_gap: float    # 3 dots, between letters
    word_gap: float      # 7 dots, between words


def validate_wpm(wpm: float) -> float:
    """Reject wpm values the timing model cannot use."""
    if isinstance(wpm, bool) or not isinstance(wpm, numbers.Real):
        raise InvalidWPMError(f"wpm must be a number, got {wpm!r}")
    if not math.isfinite(wpm) or wpm <= 0:
        raise InvalidWPMError(f"wpm must be greater than zero, got {wpm}")
    return wpm


def compute_timings(wpm: float) -> TimingSet:
    """
    Compute element durations for a speed.

    wpm must already be validated (see validate_wpm).
    """
    dot_ms = 1200 / wpm
    return TimingSet(
        dot=dot_ms / 1000,
        dash=dot_ms * 3 / 1000,
        symbol_gap=dot_ms / 1000,
        letter_gap=dot_ms * 3 / 1000,
        word_gap=dot_ms * 7 / 1000,
    )
