"""
International Morse code table for letters, digits and the word separator.
"""

from types import MappingProxyType

WORD_SEPARATOR = '/'

CHAR_TO_CODE = MappingProxyType({
    'A': '.-', 'B': '-...', 'C': '-.-.', 'D': '-..', 'E': '.', 'F': '..-.',
    'G': '--.', 'H': '....', 'I': '..', 'J': '.---', 'K': '-.-', 'L': '.-..',
    'M': '--', 'N': '-.', 'O': '---', 'P': '.--.', 'Q': '--.-', 'R': '.-.',
    'S': '...', 'T': '-', 'U': '..-', 'V': '...-', 'W': '.--', 'X': '-..-',
    'Y': '-.--', 'Z': '--..',
    '0': '-----', '1': '.----', '2': '..---', '3': '...--', '4': '....-',
    '5': '.....', '6': '-....', '7': '--...', '8': '---..', '9': '----.',
    ' ': WORD_SEPARATOR,
})

# Reverse lookup; the word separator is handled by the decoder itself
CODE_TO_CHAR = MappingProxyType({
    code: char for char, code in CHAR_TO_CODE.items() if char != ' '
})
