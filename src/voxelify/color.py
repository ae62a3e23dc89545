"""
Vertex Color Conversion

Pixel channels are stored as 8-bit sRGB. The vertex buffer carries float
colors in [0, 1]; by default each channel is simply divided by 255, which
keeps the output identical to the pixel values.

glTF viewers interpret COLOR_0 as linear, so an optional sRGB to Linear
conversion is provided for callers who want physically correct shading.
"""

import numpy as np
from numba import njit, prange


RGB_MAX_VALUE = 255.0


@njit(cache=True)
def _srgb_to_linear_component(c: float) -> float:
    """
    Convert a single sRGB component to Linear.

    Piecewise sRGB transfer function: linear below 0.04045, gamma 2.4 above.
    """
    if c <= 0.04045:
        return c / 12.92
    else:
        return ((c + 0.055) / 1.055) ** 2.4


@njit(cache=True, parallel=True)
def srgb_to_linear(colors: np.ndarray) -> np.ndarray:
    """
    Convert 8-bit sRGB colors to Linear color space.

    Args:
        colors: Array of shape (N, 3) or (N, 4) with uint8 sRGB values

    Returns:
        Array of shape (N, 3) with float32 Linear values [0, 1]
    """
    n = colors.shape[0]
    result = np.empty((n, 3), dtype=np.float32)

    for i in prange(n):
        for c in range(3):
            result[i, c] = _srgb_to_linear_component(colors[i, c] / 255.0)

    return result


def normalize_colors(colors: np.ndarray, linear: bool = False) -> np.ndarray:
    """
    Turn 8-bit RGB(A) pixel colors into float vertex colors.

    Args:
        colors: Array of shape (N, 3) or (N, 4), uint8
        linear: If True, apply the sRGB to Linear transfer function

    Returns:
        Array of shape (N, 3), float32 in [0, 1]
    """
    colors = np.ascontiguousarray(colors, dtype=np.uint8)
    if linear:
        return srgb_to_linear(colors)
    return colors[:, :3].astype(np.float32) / np.float32(RGB_MAX_VALUE)
