"""
Live playback: cancellable sessions over a real-time voice renderer.

SounddeviceSink is imported from morse_studio.playback.sounddevice_sink so
that importing this package does not require PortAudio.
"""

from .session import (
    VoiceSink,
    PlaybackState,
    PlaybackOutcome,
    PlaybackSession,
    PlaybackController,
)

__all__ = [
    'VoiceSink',
    'PlaybackState',
    'PlaybackOutcome',
    'PlaybackSession',
    'PlaybackController',
]
