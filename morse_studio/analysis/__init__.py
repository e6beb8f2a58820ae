"""
Audio analysis: tone magnitude extraction, thresholding and run classification.
"""

from .goertzel import MagnitudeSeries, goertzel_magnitude, extract_magnitudes, DEFAULT_WINDOW_MS
from .segmenter import Run, classify_windows, run_length_encode, threshold_runs
from .classifier import ClassifierThresholds, classify_runs
from .audio_loader import AnalysisContext, AudioLoader, load_audio
from .visualization import BarChart, build_bar_chart, render_bar_chart

__all__ = [
    # Magnitudes
    'MagnitudeSeries',
    'goertzel_magnitude',
    'extract_magnitudes',
    'DEFAULT_WINDOW_MS',

    # Runs
    'Run',
    'classify_windows',
    'run_length_encode',
    'threshold_runs',
    'ClassifierThresholds',
    'classify_runs',

    # Loading
    'AnalysisContext',
    'AudioLoader',
    'load_audio',

    # Display
    'BarChart',
    'build_bar_chart',
    'render_bar_chart',
]
