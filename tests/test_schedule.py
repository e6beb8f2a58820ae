import pytest

from morse_studio.codec import text_to_morse
from morse_studio.errors import InvalidMorseSyntaxError
from morse_studio.synth import build_schedule, compute_timings

TIMING = compute_timings(20)
DOT = TIMING.dot


def test_empty_morse_has_no_events_and_zero_duration():
    schedule = build_schedule("", TIMING)
    assert schedule.events == []
    assert schedule.total_duration == 0.0


def test_single_dot():
    schedule = build_schedule(".", TIMING)
    assert len(schedule) == 1
    assert schedule.events[0].start == 0.0
    assert schedule.events[0].duration == pytest.approx(DOT)
    assert schedule.total_duration == pytest.approx(DOT)


def test_symbol_and_letter_gaps():
    events = build_schedule("... ---", TIMING).events
    starts = [e.start / DOT for e in events]
    # dots at 0, 2, 4; letter gap of 3 after the dot ending at 5
    assert starts == pytest.approx([0, 2, 4, 8, 12, 16])
    assert [e.duration / DOT for e in events] == pytest.approx([1, 1, 1, 3, 3, 3])


def test_word_gap_is_seven_dots():
    schedule = build_schedule(". / .", TIMING)
    assert schedule.events[1].start == pytest.approx(8 * DOT)
    assert schedule.total_duration == pytest.approx(9 * DOT)


def test_repeated_spaces_are_ignored():
    a = build_schedule(". -", TIMING)
    b = build_schedule(".   -", TIMING)
    assert [e.start for e in a.events] == pytest.approx([e.start for e in b.events])
    assert a.total_duration == pytest.approx(b.total_duration)


def test_separator_only_never_negative():
    assert build_schedule("/", TIMING).total_duration >= 0
    assert build_schedule("   ", TIMING).total_duration == 0.0


@pytest.mark.parametrize("text", ["E", "SOS", "SOS SOS", "CQ DE W1AW", "PARIS PARIS 73"])
def test_total_duration_ends_at_last_tone(text):
    schedule = build_schedule(text_to_morse(text).morse, compute_timings(25))
    assert schedule.total_duration >= 0
    assert schedule.total_duration == pytest.approx(schedule.events[-1].end)


def test_events_are_ordered_and_disjoint():
    events = build_schedule(text_to_morse("HELLO WORLD").morse, TIMING).events
    for prev, nxt in zip(events, events[1:]):
        assert nxt.start >= prev.end


def test_paris_is_fifty_units_with_trailing_word_gap():
    # PARIS plus one word gap is the 50-unit reference word
    schedule = build_schedule(text_to_morse("PARIS").morse, TIMING)
    assert (schedule.total_duration + TIMING.word_gap) / DOT == pytest.approx(50)


def test_invalid_element_raises():
    with pytest.raises(InvalidMorseSyntaxError) as exc:
        build_schedule("... .x.", TIMING)
    assert exc.value.invalid_chars == ['x']


@pytest.mark.parametrize("compact, spaced", [
    ("... // ...", "... / / ..."),
    ("... /---", "... / ---"),
    ("./.", ". / ."),
])
def test_separator_needs_no_surrounding_spaces(compact, spaced):
    a = build_schedule(compact, TIMING)
    b = build_schedule(spaced, TIMING)
    assert [e.start for e in a.events] == pytest.approx([e.start for e in b.events])
    assert [e.duration for e in a.events] == pytest.approx([e.duration for e in b.events])
    assert a.total_duration == pytest.approx(b.total_duration)
