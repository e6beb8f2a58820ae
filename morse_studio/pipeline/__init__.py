from .morse_decoder import MorseAudioDecoder, AudioDecodeResult, decode_audio

__all__ = [
    'MorseAudioDecoder',
    'AudioDecodeResult',
    'decode_audio',
]
