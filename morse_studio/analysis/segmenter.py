"""
Threshold a magnitude series into on/off runs.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Run:
    """A maximal stretch of windows on the same side of the threshold."""
    is_on: bool
    start_index: int
    length: int          # In windows
    duration: float      # In seconds


def classify_windows(values: Sequence[float], threshold: float) -> np.ndarray:
    """Boolean on/off flag per window (on when magnitude >= threshold)."""
    return np.asarray(values) >= threshold


def run_length_encode(flags: Sequence[bool], window_duration: float) -> List[Run]:
    """Collapse per-window flags into runs; the final run is always closed."""
    flags = list(flags)
    if not flags:
        return []

    runs = []
    current = bool(flags[0])
    run_start = 0

    # One step past the end acts as a boundary that closes the last run
    for i in range(1, len(flags) + 1):
        on = bool(flags[i]) if i < len(flags) else not current
        if on != current:
            length = i - run_start
            runs.append(Run(
                is_on=current,
                start_index=run_start,
                length=length,
                duration=length * window_duration
            ))
            current = on
            run_start = i

    return runs


def threshold_runs(
    values: Sequence[float],
    threshold_fraction: float,
    window_duration: float
) -> Tuple[float, List[Run]]:
    """
    Threshold magnitudes relative to their maximum and run-length encode them.

    Args:
        values: Magnitude per window
        threshold_fraction: Fraction of the peak magnitude (0-1)
        window_duration: Seconds per window

    Returns:
        (absolute threshold, runs). An empty or all-zero series gives (0.0, []).
    """
    values = np.asarray(values, dtype=np.float64)
    if len(values) == 0:
        return 0.0, []

    max_mag = float(values.max())
    if max_mag == 0:
        return 0.0, []

    threshold = max_mag * threshold_fraction
    return threshold, run_length_encode(classify_windows(values, threshold), window_duration)
