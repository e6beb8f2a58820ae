import math

import pytest

from morse_studio.errors import InvalidWPMError
from morse_studio.synth import compute_timings, validate_wpm


def test_paris_dot_length():
    timing = compute_timings(20)
    assert timing.dot == pytest.approx(0.06)
    assert timing.word_gap == pytest.approx(0.42)


@pytest.mark.parametrize("wpm", [0.5, 5, 13, 20, 37.5, 60, 200])
def test_ratios_hold_for_any_speed(wpm):
    t = compute_timings(wpm)
    assert t.dot > 0
    assert t.dash == pytest.approx(3 * t.dot)
    assert t.symbol_gap == pytest.approx(t.dot)
    assert t.letter_gap == pytest.approx(3 * t.dot)
    assert t.word_gap == pytest.approx(7 * t.dot)


@pytest.mark.parametrize("wpm", [0, -5, math.nan, math.inf, "20", None, True])
def test_validate_wpm_rejects(wpm):
    with pytest.raises(InvalidWPMError):
        validate_wpm(wpm)


def test_validate_wpm_accepts_positive_numbers():
    assert validate_wpm(20) == 20
    assert validate_wpm(7.5) == 7.5
