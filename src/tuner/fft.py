"""
In-place radix-2 complex FFT.

The real and imaginary parts live in two separate 1-D arrays so that the
detector can reuse the same scratch buffers on every frame. Both arrays must
be C-contiguous and share a power-of-two length; this is a precondition, not
something callers are expected to recover from.
"""

from functools import lru_cache

import numpy as np


@lru_cache(maxsize=16)
def _bit_reversed_indices(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n, dtype=np.intp)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    rev.setflags(write=False)
    return rev


def transform(real: np.ndarray, imag: np.ndarray, inverse: bool = False) -> None:
    """
    Iterative Cooley-Tukey transform of (real, imag), overwriting both.

    Args:
        real: Real parts, length M (must be a power of two, not checked)
        imag: Imaginary parts, same length as real
        inverse: Run the inverse transform, scaling every output by 1/M
    """
    n = real.shape[0]

    perm = _bit_reversed_indices(n)
    real[:] = real[perm]
    imag[:] = imag[perm]

    sign = 1.0 if inverse else -1.0
    length = 2
    while length <= n:
        half = length >> 1
        angle = sign * 2.0 * np.pi / length
        k = np.arange(half, dtype=np.float64)
        w_re = np.cos(angle * k)
        w_im = np.sin(angle * k)

        # rows are independent butterfly groups of the current stage
        re = real.reshape(-1, length)
        im = imag.reshape(-1, length)
        u_re = re[:, :half].copy()
        u_im = im[:, :half].copy()
        v_re = re[:, half:] * w_re - im[:, half:] * w_im
        v_im = re[:, half:] * w_im + im[:, half:] * w_re

        re[:, :half] = u_re + v_re
        im[:, :half] = u_im + v_im
        re[:, half:] = u_re - v_re
        im[:, half:] = u_im - v_im
        length <<= 1

    if inverse:
        real *= 1.0 / n
        imag *= 1.0 / n
