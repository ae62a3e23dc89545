"""
Main VoxelGenerator Class

This is the primary interface for the image to voxel pipeline.
It orchestrates:
1. Image loading (and optional mirroring)
2. Pixel classification and face culling
3. Mesh generation
4. Buffer packing and GLB assembly

Example Usage:
    generator = VoxelGenerator(VoxelifyConfig(height=2.0))
    generator.load_image("sprite.png")
    generator.export_glb("output.glb")
"""

from pathlib import Path
from typing import Union, Optional
import logging
import numpy as np

from .classifier import PixelClassifier
from .config import VoxelifyConfig
from .exporters import GLTFExporter
from .ingestion import ImageLoader
from .mesh import MeshBuilder, MeshData


logger = logging.getLogger(__name__)


class VoxelGenerator:
    """
    High-level interface for image voxelization.

    Attributes:
        config: Pipeline settings
        mesh: The current mesh data
    """

    def __init__(self, config: Optional[VoxelifyConfig] = None):
        """
        Initialize the VoxelGenerator.

        Args:
            config: Pipeline settings (defaults to VoxelifyConfig())
        """
        self.config = (config or VoxelifyConfig()).validate()
        self._image_loader: Optional[ImageLoader] = None
        self._mesh: Optional[MeshData] = None

    def _loaded(self, loader: ImageLoader) -> "VoxelGenerator":
        loader.flip(
            horizontal=self.config.flip_horizontal,
            vertical=self.config.flip_vertical
        )
        self._image_loader = loader
        self._mesh = None
        return self

    def load_image(self, image_path: Union[str, Path]) -> "VoxelGenerator":
        """
        Load an image for voxelization.

        Args:
            image_path: Path to the image (PNG recommended)

        Returns:
            self for method chaining
        """
        return self._loaded(ImageLoader().load(image_path))

    def load_array(self, pixels: np.ndarray) -> "VoxelGenerator":
        """
        Load image data from a numpy array.

        Args:
            pixels: Image array of shape (H, W, 4) or (H, W, 3)

        Returns:
            self for method chaining
        """
        return self._loaded(ImageLoader().load_from_array(pixels))

    def generate_mesh(self) -> "VoxelGenerator":
        """
        Generate the culled voxel mesh.

        Returns:
            self for method chaining
        """
        if self._image_loader is None:
            raise RuntimeError("No image loaded. Call load_image() first.")

        builder = MeshBuilder(
            height=self.config.height,
            classifier=PixelClassifier(self.config.empty_pixel),
            indexed=self.config.indexed,
            linear_colors=self.config.linear_colors
        )
        self._mesh = builder.build(self._image_loader.color_image)

        return self

    def to_glb(self) -> bytes:
        """Build the binary glTF container in memory."""
        if self._mesh is None:
            self.generate_mesh()
        return GLTFExporter(uri=self.config.uri).to_glb(self._mesh)

    def export(self, output_path: Union[str, Path], fmt: str = "glb"):
        """
        Export to a file.

        Args:
            output_path: Output file path
            fmt: "glb" (the separate-files "gltf" variant is not implemented)
        """
        if self._mesh is None:
            self.generate_mesh()
        GLTFExporter(uri=self.config.uri).export(self._mesh, output_path, fmt)

    def export_glb(self, output_path: Union[str, Path]):
        """Export to glTF 2.0 binary format (.glb)."""
        self.export(output_path, "glb")

    @property
    def mesh(self) -> Optional[MeshData]:
        """Get the current mesh data."""
        return self._mesh

    @property
    def vertex_count(self) -> int:
        if self._mesh is None:
            return 0
        return len(self._mesh.vertices)

    @property
    def face_count(self) -> int:
        if self._mesh is None:
            return 0
        return self._mesh.face_count

    @property
    def triangle_count(self) -> int:
        if self._mesh is None:
            return 0
        return self._mesh.triangle_count

    def get_mesh_stats(self) -> dict:
        """
        Get mesh statistics.

        Returns:
            Dictionary with mesh statistics
        """
        if self._mesh is None:
            return {"error": "No mesh"}

        width, height = self._image_loader.size
        solid = PixelClassifier(self.config.empty_pixel).solid_mask(
            self._image_loader.color_image
        )
        return {
            "image_size": (width, height),
            "solid_pixels": int(solid.sum()),
            "faces": self.face_count,
            "vertices": self.vertex_count,
            "triangles": self.triangle_count,
            "indexed": self._mesh.indices is not None,
        }


def image_to_glb(pixels: np.ndarray, config: Optional[VoxelifyConfig] = None) -> bytes:
    """
    Run the whole pipeline on an in-memory image.

    Args:
        pixels: Image array of shape (H, W, 4) or (H, W, 3); not modified
        config: Pipeline settings

    Returns:
        GLB container bytes
    """
    return VoxelGenerator(config).load_array(pixels).to_glb()
