"""
Bar chart of the magnitude series.

build_bar_chart() produces the plot model (normalized bar heights, on/off
flag per bar, threshold reference line); render_bar_chart() draws it with
matplotlib.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .goertzel import MagnitudeSeries

ON_COLOR = '#c9a227'       # brass
OFF_COLOR = '#6b5a2a'      # dim brass
BACKGROUND = '#1a1a1a'
THRESHOLD_COLOR = '#a04030'


@dataclass
class BarChart:
    heights: np.ndarray        # magnitude / max, in [0, 1]
    is_on: np.ndarray          # magnitude >= threshold
    threshold_line: float      # threshold fraction, same scale as heights
    window_ms: float

    def __len__(self):
        return len(self.heights)

    @property
    def colors(self):
        return [ON_COLOR if on else OFF_COLOR for on in self.is_on]


def build_bar_chart(series: MagnitudeSeries, threshold_fraction: float) -> BarChart:
    """Normalize a magnitude series for display. A silent series gives no bars."""
    max_mag = series.max
    if max_mag == 0:
        empty = np.zeros(0)
        return BarChart(empty, empty.astype(bool), threshold_fraction, series.window_ms)

    values = np.asarray(series.values, dtype=np.float64)
    return BarChart(
        heights=values / max_mag,
        is_on=values >= max_mag * threshold_fraction,
        threshold_line=threshold_fraction,
        window_ms=series.window_ms
    )


def render_bar_chart(chart: BarChart, output_path, title: str = "Tone magnitude") -> Path:
    """Save the chart as an image (format from the file extension)."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    output_path = Path(output_path)
    times = np.arange(len(chart)) * chart.window_ms / 1000

    fig, ax = plt.subplots(figsize=(12, 3))
    fig.patch.set_facecolor(BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    if len(chart):
        ax.bar(times, chart.heights, width=chart.window_ms / 1000,
               align='edge', color=chart.colors)
    ax.axhline(chart.threshold_line, color=THRESHOLD_COLOR, linestyle='--', linewidth=1)

    ax.set_ylim(0, 1.05)
    ax.set_xlabel("Time (s)", color=ON_COLOR)
    ax.set_ylabel("Magnitude", color=ON_COLOR)
    ax.set_title(title, color=ON_COLOR)
    ax.tick_params(colors=ON_COLOR)

    plt.tight_layout()
    fig.savefig(output_path, dpi=100, facecolor=fig.get_facecolor())
    plt.close(fig)
    return output_path
