"""
Export modules for 3D container formats.

Supported formats:
- glTF 2.0 binary (.glb) - single self-contained file
- glTF 2.0 separate files (.gltf + .bin) - recognized, not implemented
"""

from .gltf_exporter import (
    GLTFDocument,
    GLTFExporter,
    build_gltf,
    build_payload,
    container_length,
    create_glb,
)

__all__ = [
    "GLTFDocument",
    "GLTFExporter",
    "build_gltf",
    "build_payload",
    "container_length",
    "create_glb",
]
