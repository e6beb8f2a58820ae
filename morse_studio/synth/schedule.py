"""
Tone schedule builder.

Turns a Morse string into ordered (start, duration) tone events. Gaps are
appended after every element and letter and corrected afterwards, so the
builder never needs to look ahead:

    - after each element:   t += duration + symbol_gap
    - after each letter:    t -= symbol_gap; t += letter_gap
    - on '/':               t += word_gap - letter_gap
    - after the last token: t -= letter_gap
"""

import re
from dataclasses import dataclass, field
from typing import List

from ..codec.code_table import WORD_SEPARATOR
from ..codec.text_codec import find_invalid_morse_chars
from ..errors import InvalidMorseSyntaxError
from .timing import TimingSet

# Letters are runs of elements; a separator is a token even without spaces
_TOKEN = re.compile(r'[.\-]+|/')


@dataclass(frozen=True)
class ToneEvent:
    """One keyed tone, in seconds from the start of the transmission."""
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass
class Schedule:
    events: List[ToneEvent] = field(default_factory=list)
    total_duration: float = 0.0

    def __len__(self):
        return len(self.events)

    def __iter__(self):
        return iter(self.events)


def build_schedule(morse: str, timing: TimingSet) -> Schedule:
    """
    Build the tone schedule for a Morse string.

    Args:
        morse: Space separated letter codes, '/' between words (spaces around '/' optional)
        timing: Element durations (see compute_timings)

    Returns:
        Schedule whose total_duration ends at the last tone (never negative)

    Raises:
        InvalidMorseSyntaxError: morse holds characters other than '.', '-', '/' and whitespace
    """
    invalid = find_invalid_morse_chars(morse)
    if invalid:
        raise InvalidMorseSyntaxError(invalid)

    durations = {'.': timing.dot, '-': timing.dash}
    events = []
    t = 0.0

    for token in _TOKEN.findall(morse):
        if token == WORD_SEPARATOR:
            t += timing.word_gap - timing.letter_gap
            continue

        for element in token:
            duration = durations[element]
            events.append(ToneEvent(start=t, duration=duration))
            t += duration + timing.symbol_gap

        t -= timing.symbol_gap
        t += timing.letter_gap

    t -= timing.letter_gap

    return Schedule(events=events, total_duration=max(t, 0.0))
