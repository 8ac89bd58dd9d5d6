from __future__ import annotations

import logging

import numpy as np

from .dsp import hann_window, next_pow2

logger = logging.getLogger(__name__)


class Workspace:
    """Scratch buffers for one detector, sized for the last frame length seen."""

    def __init__(self) -> None:
        self.size = 0
        self.frame_length = 0
        self.real = np.zeros(0, dtype=np.float64)
        self.imag = np.zeros(0, dtype=np.float64)
        self.window = np.zeros(0, dtype=np.float64)

    def ensure_capacity(self, n: int) -> None:
        if n == self.frame_length and self.size != 0:
            return

        # at least 2N so the circular correlation never wraps into the lags we read
        self.size = next_pow2(n * 2)
        self.real = np.zeros(self.size, dtype=np.float64)
        self.imag = np.zeros(self.size, dtype=np.float64)
        self.window = hann_window(n)
        self.frame_length = n
        logger.debug("workspace resized: frame=%d fft=%d", n, self.size)

    def clear(self) -> None:
        self.real.fill(0.0)
        self.imag.fill(0.0)
