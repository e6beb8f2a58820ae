"""
Timing, scheduling and tone synthesis.
"""

from .timing import TimingSet, compute_timings, validate_wpm
from .schedule import ToneEvent, Schedule, build_schedule
from .tone_synthesizer import (
    Voice,
    render_schedule,
    synthesize,
    to_pcm16,
    plan_voices,
    DEFAULT_FREQUENCY,
    DEFAULT_AMPLITUDE,
    DEFAULT_RAMP,
    DEFAULT_LEAD_IN,
)
from .export import PcmEncoder, WavEncoder, Mp3Encoder, create_encoder, export_pcm

__all__ = [
    # Timing
    'TimingSet',
    'compute_timings',
    'validate_wpm',

    # Schedule
    'ToneEvent',
    'Schedule',
    'build_schedule',

    # Synthesis
    'Voice',
    'render_schedule',
    'synthesize',
    'to_pcm16',
    'plan_voices',
    'DEFAULT_FREQUENCY',
    'DEFAULT_AMPLITUDE',
    'DEFAULT_RAMP',
    'DEFAULT_LEAD_IN',

    # Export
    'PcmEncoder',
    'WavEncoder',
    'Mp3Encoder',
    'create_encoder',
    'export_pcm',
]
