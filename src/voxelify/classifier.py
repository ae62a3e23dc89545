"""
Pixel Classification

Decides whether a pixel becomes a voxel. Two conventions are supported:

- ``alpha``: a pixel is empty when its alpha channel is exactly zero
- ``black``: a pixel is empty when its RGB channels are all zero

The solid mask produced here is the single source of truth for both the
main scan and every neighbour lookup done by the face culler.
"""

from enum import Enum
from typing import Sequence, Union
import numpy as np


ALPHA_CHANNEL_INDEX = 3


class EmptyPixelPolicy(Enum):
    """Convention used to tell empty pixels from solid ones."""
    ALPHA = "alpha"
    BLACK = "black"


def as_rgba(pixels: np.ndarray) -> np.ndarray:
    """
    Normalize a pixel grid to an (H, W, 4) uint8 array.

    RGB input is treated as fully opaque.

    Args:
        pixels: Array of shape (H, W, 3) or (H, W, 4)

    Returns:
        Array of shape (H, W, 4), dtype uint8
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError("Pixel grid must have shape (H, W, 3) or (H, W, 4)")

    if pixels.shape[2] == 3:
        alpha = np.full((*pixels.shape[:2], 1), 255, dtype=np.uint8)
        return np.concatenate([pixels.astype(np.uint8), alpha], axis=-1)
    return pixels.astype(np.uint8, copy=False)


class PixelClassifier:
    """Classifies pixels as solid or empty under one policy."""

    def __init__(self, policy: Union[str, EmptyPixelPolicy] = EmptyPixelPolicy.ALPHA):
        if isinstance(policy, str):
            policy = EmptyPixelPolicy(policy)
        self.policy = policy

    def is_empty(self, pixel: Sequence[int]) -> bool:
        """
        Classify a single pixel.

        Args:
            pixel: RGB or RGBA channel values (0-255)

        Returns:
            True if the pixel produces no voxel
        """
        if self.policy is EmptyPixelPolicy.ALPHA:
            if len(pixel) <= ALPHA_CHANNEL_INDEX:
                return False
            return int(pixel[ALPHA_CHANNEL_INDEX]) == 0
        return int(pixel[0]) == 0 and int(pixel[1]) == 0 and int(pixel[2]) == 0

    def is_solid(self, pixel: Sequence[int]) -> bool:
        return not self.is_empty(pixel)

    def solid_mask(self, pixels: np.ndarray) -> np.ndarray:
        """
        Classify a whole pixel grid at once.

        Args:
            pixels: Array of shape (H, W, 3) or (H, W, 4)

        Returns:
            Boolean array of shape (H, W), True where a voxel exists
        """
        rgba = as_rgba(pixels)
        if self.policy is EmptyPixelPolicy.ALPHA:
            return rgba[:, :, ALPHA_CHANNEL_INDEX] != 0
        return np.any(rgba[:, :, :3] != 0, axis=2)

    def __repr__(self) -> str:
        return f"PixelClassifier(policy={self.policy.value!r})"
