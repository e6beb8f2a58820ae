"""
Text <-> Morse translation.

Neither direction raises on bad input. Problems come back as CodecIssue
entries on the result so the caller can decide whether to warn or to
suppress dependent output.

Usage:
    from morse_studio.codec import text_to_morse, morse_to_text

    text_to_morse("SOS SOS").morse    # '... --- ... / ... --- ...'
    morse_to_text("... --- ...").text # 'SOS'
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from ..errors import CodecIssue, IssueKind
from .code_table import CHAR_TO_CODE, CODE_TO_CHAR

UNKNOWN_PLACEHOLDER = '?'

_WORD_SPLIT = re.compile(r'\s*/\s*')
_MORSE_ALLOWED = re.compile(r'[.\-\s/]')


@dataclass
class EncodeResult:
    """Result of text -> Morse translation."""
    morse: str                                            # Empty when unsupported chars present
    unsupported: List[str] = field(default_factory=list)  # Distinct, first-seen, uppercased
    issues: List[CodecIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


@dataclass
class DecodeResult:
    """Result of Morse -> text translation."""
    text: str
    unknown_codes: List[str] = field(default_factory=list)
    invalid_chars: List[str] = field(default_factory=list)
    issues: List[CodecIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def _distinct(items) -> List[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def validate_text(text: str) -> Tuple[str, List[str]]:
    """
    Uppercase text and collect characters missing from the code table.

    Returns:
        (uppercased text, distinct unsupported characters in first-seen order)
    """
    upper = text.upper()
    return upper, _distinct(ch for ch in upper if ch not in CHAR_TO_CODE)


def text_to_morse(text: str) -> EncodeResult:
    """
    Encode text as a Morse string.

    Letters are joined with single spaces and a space in the input becomes
    the '/' word separator. If any character is unsupported the Morse output
    is left empty and an UNSUPPORTED_CHARACTER issue lists the culprits.
    """
    upper, unsupported = validate_text(text)
    if unsupported:
        return EncodeResult(
            morse='',
            unsupported=unsupported,
            issues=[CodecIssue(IssueKind.UNSUPPORTED_CHARACTER, unsupported)]
        )
    return EncodeResult(morse=' '.join(CHAR_TO_CODE[ch] for ch in upper))


def find_invalid_morse_chars(morse: str) -> List[str]:
    """Distinct characters that are not '.', '-', '/' or whitespace."""
    return _distinct(ch for ch in morse if not _MORSE_ALLOWED.match(ch))


def is_valid_morse(morse: str) -> bool:
    return not find_invalid_morse_chars(morse)


def morse_to_text(morse: str) -> DecodeResult:
    """
    Decode a Morse string into text on a best-effort basis.

    Args:
        morse: Space separated letter codes with '/' between words

    Returns:
        DecodeResult. Syntax errors short-circuit with empty text; unknown
        letter codes become '?' and are listed once each.
    """
    invalid = find_invalid_morse_chars(morse)
    if invalid:
        return DecodeResult(
            text='',
            invalid_chars=invalid,
            issues=[CodecIssue(IssueKind.INVALID_MORSE_SYNTAX, invalid)]
        )

    trimmed = morse.strip()
    if not trimmed:
        return DecodeResult(text='')

    result = []
    unknown = []

    for word in _WORD_SPLIT.split(trimmed):
        if not word.strip():
            result.append(' ')
            continue

        for code in word.split():
            char = CODE_TO_CHAR.get(code)
            if char is None:
                if code not in unknown:
                    unknown.append(code)
                char = UNKNOWN_PLACEHOLDER
            result.append(char)
        result.append(' ')

    # Every group appended a separator; drop the last one
    if result and result[-1] == ' ':
        result.pop()

    issues = [CodecIssue(IssueKind.UNKNOWN_CODE, unknown)] if unknown else []
    return DecodeResult(text=''.join(result), unknown_codes=unknown, issues=issues)
