# renderer/tone_mapping.py
import math

import numpy as np
from numba import njit


@njit
def gamma2_kernel(accumulated, scale, output):
    """
    Averages, gamma-2 corrects and quantizes an (H, W, 3) accumulation buffer
    into `output`, an (H, W, 3) uint8 array of the same shape.
    """
    height, width, channels = accumulated.shape
    for y in range(height):
        for x in range(width):
            for c in range(channels):
                v = math.sqrt(accumulated[y, x, c] * scale) * 255.999
                output[y, x, c] = int(min(255.0, max(0.0, v)))


def gamma2_tone_mapping(accumulated: np.ndarray, samples_per_pixel: int) -> np.ndarray:
    """
    Converts per-pixel sample sums to display-ready 8-bit RGB.

    mean = sum / samples_per_pixel, then sqrt (gamma 2), then scaled by
    255.999, clamped to [0, 255] and truncated.
    """
    if samples_per_pixel < 1:
        raise ValueError(f"samples_per_pixel must be >= 1, got {samples_per_pixel}")
    accumulated = np.ascontiguousarray(accumulated, dtype=np.float64)
    if accumulated.ndim != 3 or accumulated.shape[2] != 3:
        raise ValueError(f"expected an (H, W, 3) buffer, got shape {accumulated.shape}")
    output = np.zeros(accumulated.shape, dtype=np.uint8)
    gamma2_kernel(accumulated, 1.0 / samples_per_pixel, output)
    return output
