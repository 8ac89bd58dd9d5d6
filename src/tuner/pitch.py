"""
Monophonic pitch detection by FFT autocorrelation.

Pipeline per frame: silence gate, Hann window with 2x zero padding, forward
FFT, power spectrum, inverse FFT (Wiener-Khinchin), then a lag search bounded
by the configured frequency range. The search skips the falling slope after
lag 0 before taking the maximum and refines the winning lag with a parabola.

Every inconclusive frame yields None; no reason is reported.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

import numpy as np

from .config import DetectorConfig
from .dsp import freq_to_midi, rms
from .fft import transform
from .workspace import Workspace

MIN_FRAME_LENGTH = 32


def first_valley(acf: np.ndarray, min_lag: int, max_lag: int) -> int:
    """First lag >= min_lag where acf stops strictly decreasing (capped at max_lag)."""
    falling = acf[min_lag:max_lag] > acf[min_lag + 1 : max_lag + 1]
    stops = np.flatnonzero(~falling)
    if stops.size == 0:
        return max_lag
    return min_lag + int(stops[0])


def find_peak(acf: np.ndarray, start: int, stop: int) -> Tuple[int, float]:
    """Lag of the largest value in acf[start:stop + 1]; (-1, -inf) if the range is empty."""
    if stop < start:
        return -1, -math.inf
    region = acf[start : stop + 1]
    idx = int(np.argmax(region))
    return start + idx, float(region[idx])


def parabolic_shift(y1: float, y2: float, y3: float) -> float:
    """Vertex offset of the parabola through (-1, y1), (0, y2), (1, y3), or 0 if unusable."""
    a = (y1 + y3 - 2.0 * y2) * 0.5
    b = (y3 - y1) * 0.5
    if a == 0:
        return 0.0
    shift = -b / (2.0 * a)
    if -1.0 < shift < 1.0:
        return shift
    return 0.0


class PitchDetector:
    freq_to_midi = staticmethod(freq_to_midi)

    def __init__(self, config: Optional[DetectorConfig] = None):
        self.config = config or DetectorConfig()
        self.workspace = Workspace()

    def detect(self, frame: np.ndarray, sample_rate: float) -> Optional[float]:
        x = np.asarray(frame, dtype=np.float64)
        if x.ndim > 1:
            x = x[:, 0]
        n = x.size
        if n < MIN_FRAME_LENGTH:
            return None
        if not (math.isfinite(sample_rate) and sample_rate > 0):
            return None

        mean = float(np.mean(x))
        centered = x - mean
        if rms(centered) < self.config.rms_threshold:
            return None

        acf = self._autocorrelate(centered)
        acf0 = acf[0]
        if not acf0 > 0:
            return None

        min_lag = max(1, math.floor(sample_rate / self.config.max_freq))
        max_lag = min(n - 1, math.floor(sample_rate / self.config.min_freq))
        if max_lag <= min_lag:
            return None

        norm = acf[: max_lag + 1] / acf0
        start = first_valley(norm, min_lag, max_lag)
        best_lag, best_val = find_peak(norm, start, max_lag)
        if best_lag <= 0 or best_val < self.config.peak_threshold:
            return None

        lag = float(best_lag)
        if 1 < best_lag < max_lag:
            lag += parabolic_shift(norm[best_lag - 1], norm[best_lag], norm[best_lag + 1])

        freq = sample_rate / lag
        if not math.isfinite(freq) or freq <= 0:
            return None
        return float(freq)

    def _autocorrelate(self, centered: np.ndarray) -> np.ndarray:
        n = centered.size
        ws = self.workspace
        ws.ensure_capacity(n)
        ws.clear()
        ws.real[:n] = centered * ws.window

        transform(ws.real, ws.imag, inverse=False)
        np.square(ws.real, out=ws.real)
        ws.real += ws.imag * ws.imag
        ws.imag.fill(0.0)
        transform(ws.real, ws.imag, inverse=True)
        return ws.real
