"""
voxelify
========

Turns a 2D pixel image into a 3D voxel mesh and writes it as binary glTF.

Every solid pixel becomes a unit column extruded to a configurable height.
Faces hidden by a solid neighbour are culled, so the mesh only contains the
outer surface.

Key Features:
- Configurable empty-pixel convention (alpha or pure black)
- Deterministic, row-major vertex order (byte-identical output)
- Interleaved float32 position/normal/color vertex buffer
- glTF 2.0 binary (.glb) output, optional indexed quads

Example Usage:
    from voxelify import VoxelGenerator, VoxelifyConfig

    generator = VoxelGenerator(VoxelifyConfig(height=2.0))
    generator.load_image("sprite.png")
    generator.export_glb("output.glb")
"""

__version__ = "0.1.0"

from .buffer import VERTEX_DTYPE, Bounds, bounding_coords, pack_vertices, unpack_vertices
from .classifier import EmptyPixelPolicy, PixelClassifier
from .config import VoxelifyConfig
from .errors import (
    ExportNotImplementedError,
    SerializationError,
    SizeError,
    VoxelifyError,
)
from .exporters import GLTFExporter, build_gltf, create_glb
from .faces import Face, cull_faces
from .generator import VoxelGenerator, image_to_glb
from .mesh import MeshBuilder, MeshData, image_to_vertices, quad_indices

__all__ = [
    "VERTEX_DTYPE",
    "Bounds",
    "bounding_coords",
    "pack_vertices",
    "unpack_vertices",
    "EmptyPixelPolicy",
    "PixelClassifier",
    "VoxelifyConfig",
    "ExportNotImplementedError",
    "SerializationError",
    "SizeError",
    "VoxelifyError",
    "GLTFExporter",
    "build_gltf",
    "create_glb",
    "Face",
    "cull_faces",
    "VoxelGenerator",
    "image_to_glb",
    "MeshBuilder",
    "MeshData",
    "image_to_vertices",
    "quad_indices",
]
