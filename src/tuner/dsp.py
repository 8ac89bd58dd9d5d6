import math

import numpy as np


def rms(frame: np.ndarray) -> float:
    if frame.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(frame.astype(np.float64) ** 2)))


def next_pow2(x: int) -> int:
    p = 1
    while p < x:
        p <<= 1
    return p


def hann_window(n: int) -> np.ndarray:
    if n == 1:
        return np.ones(1, dtype=np.float64)
    i = np.arange(n, dtype=np.float64)
    return 0.5 - 0.5 * np.cos(2.0 * np.pi * i / (n - 1))


def freq_to_midi(frequency: float) -> float:
    if frequency == 0:
        return float("-inf")
    if not frequency > 0:
        return float("nan")
    return 12.0 * math.log2(frequency / 440.0) + 69.0


def midi_to_freq(midi: float) -> float:
    return 440.0 * (2.0 ** ((midi - 69.0) / 12.0))
