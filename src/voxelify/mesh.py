"""
Voxel Mesh Generation

Turns a pixel grid into the vertex sequence of a culled voxel mesh:

1. Classification: PixelClassifier builds the solid mask
2. Face Culling: four-neighbour test on the mask (see faces.py)
3. Emit Geometry: 6 vertices (2 triangles) per visible face

Faces are emitted in row-major pixel order (y outer, x inner) and in Face
enum order within a pixel, so the same image always yields the same bytes.

An indexed layout (4 vertices per face plus an index list) is available as
an alternative; the default layout is non-indexed.
"""

from typing import NamedTuple, Optional, Sequence, Union
import logging
import math
import numpy as np

from .buffer import VERTEX_DTYPE
from .classifier import EmptyPixelPolicy, PixelClassifier, as_rgba
from .color import normalize_colors
from .faces import (
    FACE_CORNERS,
    FACE_NORMALS,
    QUAD_TRIANGLES,
    Face,
    face_visibility,
)


logger = logging.getLogger(__name__)

DEFAULT_HEIGHT = 2.0
VERTICES_PER_FACE = len(QUAD_TRIANGLES)  # 6
VERTICES_PER_QUAD = 4


class MeshData(NamedTuple):
    """Container for generated geometry."""
    vertices: np.ndarray             # (N,) VERTEX_DTYPE records
    indices: Optional[np.ndarray]    # (M,) uint16/uint32, None when non-indexed

    @property
    def face_count(self) -> int:
        if self.indices is not None:
            return len(self.vertices) // VERTICES_PER_QUAD
        return len(self.vertices) // VERTICES_PER_FACE

    @property
    def triangle_count(self) -> int:
        if self.indices is not None:
            return len(self.indices) // 3
        return len(self.vertices) // 3


def validate_height(height: float) -> float:
    height = float(height)
    if not math.isnan(height) and height <= 0:
        raise ValueError(f"Height must be positive, got {height}")
    return height


def _emit(
    xs: np.ndarray,
    ys: np.ndarray,
    faces: np.ndarray,
    colors: np.ndarray,
    height: float,
    corner_order: np.ndarray
) -> np.ndarray:
    """
    Build vertex records for a batch of faces.

    Args:
        xs, ys: Pixel coordinates of each face, shape (F,)
        faces: Face index of each face, shape (F,)
        colors: Float RGB color of each face, shape (F, 3)
        height: Extrusion height
        corner_order: Corner indices to emit per face

    Returns:
        Structured array of F * len(corner_order) vertices
    """
    per_face = len(corner_order)
    corners = FACE_CORNERS[faces][:, corner_order]  # (F, K, 3)

    positions = np.empty_like(corners)
    positions[:, :, 0] = corners[:, :, 0] + xs[:, None]
    positions[:, :, 1] = corners[:, :, 1] + ys[:, None]
    positions[:, :, 2] = corners[:, :, 2] * np.float32(height)

    vertices = np.empty(len(faces) * per_face, dtype=VERTEX_DTYPE)
    vertices["position"] = positions.reshape(-1, 3)
    vertices["normal"] = np.repeat(FACE_NORMALS[faces], per_face, axis=0)
    vertices["color"] = np.repeat(colors, per_face, axis=0)
    return vertices


def face_vertices(
    x: int,
    y: int,
    color: Sequence[int],
    height: float,
    face: Union[Face, int]
) -> np.ndarray:
    """
    Create the two triangles for one face of a voxel.

    Args:
        x: Pixel column
        y: Pixel row
        color: 8-bit RGB(A) pixel color
        height: Extrusion height
        face: Which face to emit

    Returns:
        Structured array of 6 vertices
    """
    rgb = normalize_colors(np.asarray([color[:3]], dtype=np.uint8))
    return _emit(
        np.array([x], dtype=np.float32),
        np.array([y], dtype=np.float32),
        np.array([int(face)]),
        rgb,
        validate_height(height),
        QUAD_TRIANGLES,
    )


def quad_indices(quad_count: int) -> np.ndarray:
    """
    Generate triangle indices for quads stored as 4 consecutive vertices.

    Quad ``i`` uses vertices ``4i .. 4i+3`` and contributes the triangles
    (0, 1, 2) and (2, 1, 3) relative to its base.

    Args:
        quad_count: Number of quads

    Returns:
        Index array of length 6 * quad_count; uint16 when every index fits,
        uint32 otherwise
    """
    bases = np.arange(quad_count, dtype=np.uint64) * VERTICES_PER_QUAD
    indices = (bases[:, None] + QUAD_TRIANGLES[None, :]).reshape(-1)

    if quad_count * VERTICES_PER_QUAD <= 65536:
        return indices.astype(np.uint16)
    return indices.astype(np.uint32)


class MeshBuilder:
    """
    Builds a culled voxel mesh from a pixel grid.

    One unit column is generated per solid pixel, extruded from z=0 to
    z=height. Only faces exposed to an empty neighbour or the image edge
    are emitted.
    """

    def __init__(
        self,
        height: float = DEFAULT_HEIGHT,
        classifier: Optional[PixelClassifier] = None,
        indexed: bool = False,
        linear_colors: bool = False
    ):
        """
        Initialize the builder.

        Args:
            height: Extrusion height in pixel units
            classifier: Empty/solid pixel convention (alpha by default)
            indexed: If True, emit 4 vertices per face plus an index list
            linear_colors: If True, convert sRGB pixel colors to Linear
        """
        self.height = validate_height(height)
        self.classifier = classifier or PixelClassifier()
        self.indexed = indexed
        self.linear_colors = linear_colors

    def build(self, pixels: np.ndarray) -> MeshData:
        """
        Generate the mesh for a pixel grid.

        Args:
            pixels: Array of shape (H, W, 3) or (H, W, 4), uint8

        Returns:
            MeshData with the vertex records (and indices in indexed mode)
        """
        rgba = as_rgba(pixels)
        solid = self.classifier.solid_mask(rgba)
        visible = face_visibility(solid)

        # nonzero walks (y, x, face) in C order: row-major, then face order
        ys, xs, faces = np.nonzero(visible)
        colors = normalize_colors(rgba[ys, xs], linear=self.linear_colors)

        corner_order = (
            np.arange(VERTICES_PER_QUAD) if self.indexed else QUAD_TRIANGLES
        )
        vertices = _emit(
            xs.astype(np.float32),
            ys.astype(np.float32),
            faces,
            colors,
            self.height,
            corner_order,
        )
        indices = quad_indices(len(faces)) if self.indexed else None

        if len(faces) == 0:
            logger.warning("Image has no solid pixels, mesh is empty")
        logger.debug(
            "Built mesh: %d solid pixels, %d faces, %d vertices",
            int(solid.sum()), len(faces), len(vertices)
        )

        return MeshData(vertices=vertices, indices=indices)


def image_to_vertices(
    pixels: np.ndarray,
    height: float = DEFAULT_HEIGHT,
    policy: Union[str, EmptyPixelPolicy] = EmptyPixelPolicy.ALPHA
) -> np.ndarray:
    """
    Convert an image to the non-indexed vertex list of its voxel mesh.

    Args:
        pixels: Array of shape (H, W, 3) or (H, W, 4), uint8
        height: Extrusion height
        policy: Empty pixel convention

    Returns:
        Structured array of vertices, 6 per visible face
    """
    builder = MeshBuilder(height=height, classifier=PixelClassifier(policy))
    return builder.build(pixels).vertices
