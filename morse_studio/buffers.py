"""
Sampled audio container shared by the synthesizer and the decoder.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class SampleBuffer:
    """
    Fixed-rate audio samples.

    samples is float32 in [-1, 1], shaped (n,) for mono or (channels, n)
    for multi-channel audio.
    """
    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        self.samples = np.asarray(self.samples, dtype=np.float32)
        if self.samples.ndim not in (1, 2):
            raise ValueError(f"samples must be 1-D or 2-D, got shape {self.samples.shape}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")

    @property
    def num_channels(self) -> int:
        return 1 if self.samples.ndim == 1 else self.samples.shape[0]

    @property
    def num_samples(self) -> int:
        return self.samples.shape[-1]

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.num_samples / self.sample_rate

    def to_mono(self) -> np.ndarray:
        """Down-mix to one channel by averaging each sample across channels."""
        if self.samples.ndim == 1:
            return self.samples
        if self.samples.shape[0] == 0:
            return np.zeros(self.num_samples, dtype=np.float32)
        return self.samples.mean(axis=0).astype(np.float32)

    def __len__(self):
        return self.num_samples
