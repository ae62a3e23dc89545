"""
Voxel Faces and Face Culling

Each solid pixel becomes a unit column of height ``h``. A flat image has no
neighbours above or below, so the top and bottom caps are always visible.
The four lateral faces are culled with a 2D four-neighbour test:

- a face on the image boundary is always visible
- otherwise it is visible iff the adjacent pixel on that side is empty

Axes follow the pixel grid: +X is the column index, +Y the row index
(downwards in the image), +Z the extrusion height.
"""

from enum import IntEnum
from typing import List
import numpy as np
from numba import njit


class Face(IntEnum):
    """Faces of a voxel column, in emission order."""
    UP = 0       # +Z
    DOWN = 1     # -Z
    LEFT = 2     # -X
    RIGHT = 3    # +X
    FORWARD = 4  # -Y
    BACK = 5     # +Y


# Outward normal for each face
FACE_NORMALS = np.array([
    [0, 0, 1],   # UP
    [0, 0, -1],  # DOWN
    [-1, 0, 0],  # LEFT
    [1, 0, 0],   # RIGHT
    [0, -1, 0],  # FORWARD
    [0, 1, 0],   # BACK
], dtype=np.float32)

# Quad corners per face as (dx, dy, z fraction of height).
# Triangles are corners (0, 1, 2) and (2, 1, 3), both counter-clockwise
# when seen from outside.
FACE_CORNERS = np.array([
    [[0, 0, 1], [1, 0, 1], [0, 1, 1], [1, 1, 1]],  # UP
    [[0, 0, 0], [0, 1, 0], [1, 0, 0], [1, 1, 0]],  # DOWN
    [[0, 0, 0], [0, 0, 1], [0, 1, 0], [0, 1, 1]],  # LEFT
    [[1, 0, 0], [1, 1, 0], [1, 0, 1], [1, 1, 1]],  # RIGHT
    [[0, 0, 0], [1, 0, 0], [0, 0, 1], [1, 0, 1]],  # FORWARD
    [[0, 1, 0], [0, 1, 1], [1, 1, 0], [1, 1, 1]],  # BACK
], dtype=np.float32)

# Corner order for the two triangles of a quad
QUAD_TRIANGLES = np.array([0, 1, 2, 2, 1, 3], dtype=np.uint32)

FACE_COUNT = len(Face)


@njit(cache=True)
def _pixel_faces(solid: np.ndarray, x: int, y: int) -> np.ndarray:
    """Visibility flags for the six faces of pixel (x, y)."""
    height, width = solid.shape
    faces = np.zeros(6, dtype=np.bool_)
    if not solid[y, x]:
        return faces

    faces[0] = True  # UP
    faces[1] = True  # DOWN

    # X axis; a 1-pixel-wide image is on both boundaries at once
    faces[2] = x == 0 or not solid[y, x - 1]          # LEFT
    faces[3] = x == width - 1 or not solid[y, x + 1]  # RIGHT

    # Y axis
    faces[4] = y == 0 or not solid[y - 1, x]           # FORWARD
    faces[5] = y == height - 1 or not solid[y + 1, x]  # BACK

    return faces


@njit(cache=True)
def _face_visibility(solid: np.ndarray) -> np.ndarray:
    height, width = solid.shape
    visible = np.zeros((height, width, 6), dtype=np.bool_)
    for y in range(height):
        for x in range(width):
            visible[y, x, :] = _pixel_faces(solid, x, y)
    return visible


def _as_mask(solid: np.ndarray) -> np.ndarray:
    solid = np.ascontiguousarray(solid, dtype=np.bool_)
    if solid.ndim != 2:
        raise ValueError("Solid mask must have shape (H, W)")
    return solid


def face_visibility(solid: np.ndarray) -> np.ndarray:
    """
    Compute visible faces for every pixel of a grid.

    Args:
        solid: Boolean mask of shape (H, W) from PixelClassifier.solid_mask

    Returns:
        Boolean array of shape (H, W, 6) indexed by Face
    """
    return _face_visibility(_as_mask(solid))


def cull_faces(solid: np.ndarray, x: int, y: int) -> List[Face]:
    """
    Return the visible faces of a single pixel.

    Args:
        solid: Boolean mask of shape (H, W)
        x: Column index
        y: Row index

    Returns:
        Visible faces in emission order (empty for an empty pixel)
    """
    solid = _as_mask(solid)
    height, width = solid.shape
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside {width}x{height} image")

    flags = _pixel_faces(solid, x, y)
    return [face for face in Face if flags[face]]
