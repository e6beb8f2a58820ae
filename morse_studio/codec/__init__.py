"""
Morse code table and text codec.
"""

from .code_table import CHAR_TO_CODE, CODE_TO_CHAR, WORD_SEPARATOR
from .text_codec import (
    EncodeResult,
    DecodeResult,
    UNKNOWN_PLACEHOLDER,
    validate_text,
    text_to_morse,
    morse_to_text,
    find_invalid_morse_chars,
    is_valid_morse,
)

__all__ = [
    'CHAR_TO_CODE',
    'CODE_TO_CHAR',
    'WORD_SEPARATOR',
    'EncodeResult',
    'DecodeResult',
    'UNKNOWN_PLACEHOLDER',
    'validate_text',
    'text_to_morse',
    'morse_to_text',
    'find_invalid_morse_chars',
    'is_valid_morse',
]
