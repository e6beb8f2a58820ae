"""
Error taxonomy.

Codec-level problems are reported as CodecIssue values that travel alongside
a result. Exceptions are kept for mistakes made at the caller boundary
(bad wpm, malformed Morse handed to the schedule builder, a second playback
session, unreadable audio files, broken config files).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class IssueKind(Enum):
    """Kinds of non-fatal problems attached to codec and decoder results."""
    UNSUPPORTED_CHARACTER = "unsupported_character"   # text -> morse
    UNKNOWN_CODE = "unknown_code"                     # morse -> text, per token
    INVALID_MORSE_SYNTAX = "invalid_morse_syntax"     # chars outside . - / whitespace
    DEGENERATE_AUDIO = "degenerate_audio"             # empty / silent / too short


_LABELS = {
    IssueKind.UNSUPPORTED_CHARACTER: "UNSUPPORTED",
    IssueKind.UNKNOWN_CODE: "UNKNOWN CODES",
    IssueKind.INVALID_MORSE_SYNTAX: "INVALID CHARS",
    IssueKind.DEGENERATE_AUDIO: "NO SIGNAL",
}


@dataclass
class CodecIssue:
    """A problem found while translating, with the distinct offending values."""
    kind: IssueKind
    values: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        label = _LABELS[self.kind]
        if not self.values:
            return label
        return f"{label}: " + ", ".join(f'"{v}"' for v in self.values)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "values": list(self.values), "message": self.message}

    def __str__(self):
        return self.message


class MorseStudioError(Exception):
    """Base class for all morse_studio exceptions."""


class InvalidWPMError(MorseStudioError, ValueError):
    """Words-per-minute must be a finite number greater than zero."""


class InvalidMorseSyntaxError(MorseStudioError, ValueError):
    """Morse string contains characters other than '.', '-', '/' and whitespace."""

    def __init__(self, invalid_chars: List[str]):
        self.invalid_chars = list(invalid_chars)
        super().__init__(CodecIssue(IssueKind.INVALID_MORSE_SYNTAX, self.invalid_chars).message)


class PlaybackBusyError(MorseStudioError, RuntimeError):
    """A playback session is already active."""


class AudioLoadError(MorseStudioError, IOError):
    """An audio file could not be read or decoded."""


class ConfigError(MorseStudioError, ValueError):
    """Configuration file is malformed or contains unknown keys."""
