"""
Vertex Buffer Layout, Packing and Bounds

Every vertex is a 36-byte record of nine little-endian float32 values:

    position (x, y, z) | normal (x, y, z) | color (r, g, b)

The layout is spelled out with an explicit structured dtype so the bytes
never depend on the host's native byte order or struct padding.
"""

from typing import NamedTuple, Tuple
import logging
import numpy as np


logger = logging.getLogger(__name__)

PADDING = 4

VERTEX_DTYPE = np.dtype([
    ("position", "<f4", (3,)),
    ("normal", "<f4", (3,)),
    ("color", "<f4", (3,)),
])

VERTEX_STRIDE = VERTEX_DTYPE.itemsize  # 36 bytes
POSITION_OFFSET = VERTEX_DTYPE.fields["position"][1]  # 0
NORMAL_OFFSET = VERTEX_DTYPE.fields["normal"][1]  # 12
COLOR_OFFSET = VERTEX_DTYPE.fields["color"][1]  # 24


class Bounds(NamedTuple):
    """Axis-aligned bounding box of vertex positions."""
    min: Tuple[float, float, float]
    max: Tuple[float, float, float]


def empty_vertices(count: int = 0) -> np.ndarray:
    """Allocate a zeroed vertex buffer."""
    return np.zeros(count, dtype=VERTEX_DTYPE)


def align_to_four(number: int) -> int:
    """Round a byte count up to the next multiple of four."""
    return (number + PADDING - 1) & ~(PADDING - 1)


def pad_to_four(data: bytes, fill: bytes = b"\x00") -> bytes:
    """Append ``fill`` bytes until the length is a multiple of four."""
    padding = align_to_four(len(data)) - len(data)
    return data + fill * padding


def vertex_buffer_length(vertices: np.ndarray) -> int:
    """Unpadded byte length of a vertex sequence."""
    return len(vertices) * VERTEX_STRIDE


def pack_vertices(vertices: np.ndarray) -> bytes:
    """
    Serialize vertices to their binary layout, zero padded to 4 bytes.

    Args:
        vertices: Structured array with fields position, normal, color

    Returns:
        Packed little-endian bytes
    """
    records = np.ascontiguousarray(vertices, dtype=VERTEX_DTYPE)
    return pad_to_four(records.tobytes())


def unpack_vertices(data: bytes, count: int) -> np.ndarray:
    """
    Read ``count`` vertex records back from packed bytes.

    Trailing padding is ignored.

    Args:
        data: Bytes produced by pack_vertices (or a GLB BIN chunk)
        count: Number of vertex records to read

    Returns:
        Structured array with dtype VERTEX_DTYPE
    """
    needed = count * VERTEX_STRIDE
    if len(data) < needed:
        raise ValueError(
            f"Buffer holds {len(data)} bytes, {needed} needed for {count} vertices"
        )
    return np.frombuffer(data, dtype=VERTEX_DTYPE, count=count).copy()


def bounding_coords(vertices: np.ndarray) -> Bounds:
    """
    Calculate the bounding box of vertex positions.

    An empty vertex sequence has no extent, so it yields the degenerate
    box at the origin instead of infinite bounds.

    Args:
        vertices: Structured array with a ``position`` field

    Returns:
        Bounds with per-axis min and max
    """
    if len(vertices) == 0:
        logger.debug("No vertices, using degenerate bounds at origin")
        return Bounds(min=(0.0, 0.0, 0.0), max=(0.0, 0.0, 0.0))

    positions = vertices["position"]
    return Bounds(
        min=tuple(positions.min(axis=0).tolist()),
        max=tuple(positions.max(axis=0).tolist()),
    )
