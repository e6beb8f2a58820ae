"""
Cancellable live playback.

A PlaybackSession starts one voice per tone on a VoiceSink and then waits,
checking a stop flag every poll interval. Whichever comes first, the end of
the schedule or a stop request, tears the session down: every voice is
released exactly once and the session resolves exactly once.

PlaybackController owns at most one unresolved session at a time.

Usage:
    controller = PlaybackController(SounddeviceSink())
    session = controller.play("... --- ...", wpm=20)
    ...
    controller.stop()
    session.wait()
"""

import logging
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Hashable, List, Optional

from ..codec.text_codec import find_invalid_morse_chars
from ..config import TranslatorConfig
from ..errors import InvalidMorseSyntaxError, PlaybackBusyError
from ..synth.schedule import build_schedule
from ..synth.timing import compute_timings, validate_wpm
from ..synth.tone_synthesizer import Voice, plan_voices

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05   # Stop flag check period
TAIL_PADDING = 0.1     # Extra time after the last tone before completing


class VoiceSink(ABC):
    """Real-time renderer that sounds voices against its own clock."""

    @abstractmethod
    def now(self) -> float:
        """Current renderer time in seconds."""
        pass

    @abstractmethod
    def start_voice(self, voice: Voice) -> Hashable:
        """Schedule a voice; returns a handle for release_voice()."""
        pass

    @abstractmethod
    def release_voice(self, handle: Hashable):
        """Silence a voice (pending or sounding) and free it."""
        pass

    def close(self):
        pass


class PlaybackState(Enum):
    IDLE = 0
    PLAYING = 1


class PlaybackOutcome(Enum):
    COMPLETED = 0
    CANCELLED = 1


class PlaybackSession:
    """One play request: its voices, stop flag and single resolution."""

    def __init__(
        self,
        voices: List[Voice],
        sink: VoiceSink,
        end_time: float,
        poll_interval: float = POLL_INTERVAL,
        on_resolve: Optional[Callable[['PlaybackSession', PlaybackOutcome], None]] = None
    ):
        self.voices = voices
        self.sink = sink
        self.end_time = end_time
        self.poll_interval = poll_interval
        self._on_resolve = on_resolve

        self._handles: List[Hashable] = []
        self._stop = threading.Event()
        self._done = threading.Event()
        self._started = False
        self.outcome: Optional[PlaybackOutcome] = None

    @property
    def resolved(self) -> bool:
        return self._done.is_set()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def start(self):
        if self._started:
            raise RuntimeError("Session already started")
        self._started = True
        for voice in self.voices:
            self._handles.append(self.sink.start_voice(voice))

    def request_stop(self):
        """Ask the session to stop at its next check."""
        self._stop.set()

    def run(self) -> PlaybackOutcome:
        """Block until the schedule ends or a stop is requested."""
        if not self._started:
            self.start()

        while True:
            if self._stop.wait(self.poll_interval):
                return self._teardown(PlaybackOutcome.CANCELLED)
            if self.sink.now() >= self.end_time:
                return self._teardown(PlaybackOutcome.COMPLETED)

    def wait(self, timeout: Optional[float] = None) -> Optional[PlaybackOutcome]:
        self._done.wait(timeout)
        return self.outcome

    def _teardown(self, outcome: PlaybackOutcome) -> PlaybackOutcome:
        if self.outcome is not None:
            return self.outcome

        handles, self._handles = self._handles, []
        for handle in handles:
            self.sink.release_voice(handle)

        self.outcome = outcome
        logger.debug("Playback %s, released %d voices", outcome.name.lower(), len(handles))
        if self._on_resolve is not None:
            self._on_resolve(self, outcome)
        self._done.set()
        return outcome


class PlaybackController:
    """
    Plays Morse strings on a sink, one session at a time.
    """

    def __init__(
        self,
        sink: VoiceSink,
        config: Optional[TranslatorConfig] = None,
        poll_interval: float = POLL_INTERVAL
    ):
        self.sink = sink
        self.config = config or TranslatorConfig()
        self.poll_interval = poll_interval
        self._session: Optional[PlaybackSession] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    @property
    def state(self) -> PlaybackState:
        if self._session is not None and not self._session.resolved:
            return PlaybackState.PLAYING
        return PlaybackState.IDLE

    def play(self, morse: str, wpm: Optional[float] = None, background: bool = True) -> PlaybackSession:
        """
        Start playing a Morse string.

        Args:
            morse: Morse string ('.', '-', '/', whitespace)
            wpm: Speed (default: config.wpm)
            background: Run the session on a worker thread; otherwise block

        Raises:
            PlaybackBusyError: a session is still playing
            InvalidMorseSyntaxError: morse holds other characters
        """
        if self.state == PlaybackState.PLAYING:
            raise PlaybackBusyError("Playback already in progress")

        invalid = find_invalid_morse_chars(morse)
        if invalid:
            raise InvalidMorseSyntaxError(invalid)

        cfg = self.config
        timing = compute_timings(validate_wpm(wpm if wpm is not None else cfg.wpm))
        schedule = build_schedule(morse.strip(), timing)

        now = self.sink.now()
        voices = plan_voices(
            schedule,
            frequency=cfg.tone_frequency,
            gain=cfg.gain,
            ramp=cfg.ramp,
            now=now,
            lead_in=cfg.lead_in
        )
        end_time = now + cfg.lead_in + schedule.total_duration + TAIL_PADDING

        session = PlaybackSession(
            voices, self.sink, end_time,
            poll_interval=self.poll_interval,
            on_resolve=self._on_resolved
        )
        self._session = session
        session.start()
        logger.info("Playing %d tones (%.2fs)", len(voices), schedule.total_duration)

        if background:
            self._thread = threading.Thread(target=session.run, name="morse-playback", daemon=True)
            self._thread.start()
        else:
            session.run()
        return session

    def stop(self):
        """Request the active session to stop; no-op when idle."""
        if self._session is not None and not self._session.resolved:
            self._session.request_stop()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def close(self):
        self.stop()
        self.join()
        self.sink.close()

    def _on_resolved(self, session: PlaybackSession, outcome: PlaybackOutcome):
        logger.info("Playback %s", outcome.name.lower())
