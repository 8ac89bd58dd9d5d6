import numpy as np
import pytest


def make_sine(freq, sample_rate, n, amp=0.5, phase=0.0):
    t = np.arange(n) / sample_rate
    return (amp * np.sin(2.0 * np.pi * freq * t + phase)).astype(np.float32)


@pytest.fixture
def sine():
    return make_sine
