"""
Image Ingestion Module

This module handles:
- Loading images with Pillow and normalizing them to RGBA
- Accepting in-memory RGB/RGBA arrays
- Horizontal and vertical mirroring before mesh generation
"""

from pathlib import Path
from typing import Optional, Tuple, Union
import logging
import numpy as np
from PIL import Image

from .classifier import as_rgba


logger = logging.getLogger(__name__)


class ImageLoader:
    """
    Pixel image loader.

    Images are kept as (H, W, 4) uint8 arrays; row 0 is the top of the
    image and maps to y=0 in the mesh.
    """

    def __init__(self):
        self._color_image: Optional[np.ndarray] = None

    def load(self, image_path: Union[str, Path]) -> "ImageLoader":
        """
        Load an image file.

        Args:
            image_path: Path to the image (PNG recommended)

        Returns:
            self for method chaining
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        with Image.open(image_path) as img:
            if img.mode != "RGBA":
                img = img.convert("RGBA")
            self._color_image = np.array(img, dtype=np.uint8)

        logger.debug("Loaded %s (%dx%d)", image_path, self.width, self.height)
        return self

    def load_from_array(self, rgba_array: np.ndarray) -> "ImageLoader":
        """
        Load from a numpy array instead of a file.

        Args:
            rgba_array: Image array of shape (H, W, 4) or (H, W, 3)

        Returns:
            self for method chaining
        """
        self._color_image = as_rgba(rgba_array).copy()
        return self

    def flip(self, horizontal: bool = False, vertical: bool = False) -> "ImageLoader":
        """
        Mirror the image in place.

        Vertical mirroring is applied first, then horizontal.

        Args:
            horizontal: Mirror left-right
            vertical: Mirror top-bottom

        Returns:
            self for method chaining
        """
        image = self.color_image
        if vertical:
            image = image[::-1, :]
        if horizontal:
            image = image[:, ::-1]
        self._color_image = np.ascontiguousarray(image)
        return self

    @property
    def color_image(self) -> np.ndarray:
        """Get the RGBA color image array."""
        if self._color_image is None:
            raise RuntimeError("No image loaded")
        return self._color_image

    @property
    def size(self) -> Tuple[int, int]:
        """Get image size as (width, height)."""
        image = self.color_image
        return image.shape[1], image.shape[0]

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]


def flip_pixels(
    pixels: np.ndarray,
    horizontal: bool = False,
    vertical: bool = False
) -> np.ndarray:
    """Return a mirrored copy of a pixel grid; the input is not modified."""
    return ImageLoader().load_from_array(pixels).flip(horizontal, vertical).color_image
