"""
Pipeline Configuration

All knobs of an export live in one dataclass so the pipeline stays a pure
function of (pixels, config).
"""

from dataclasses import dataclass
from typing import Optional, Union

from .classifier import EmptyPixelPolicy
from .mesh import DEFAULT_HEIGHT, validate_height


@dataclass
class VoxelifyConfig:
    """
    Settings for converting one image.

    Attributes:
        height: Extrusion height of every voxel column, in pixel units
        empty_pixel: Which pixels produce no voxel
        flip_horizontal: Mirror the image left-right before meshing
        flip_vertical: Mirror the image top-bottom before meshing
        uri: External location of the binary buffer (not embedded if set)
        indexed: Emit 4 vertices per face plus an index buffer
        linear_colors: Convert sRGB pixel colors to Linear vertex colors
    """
    height: float = DEFAULT_HEIGHT
    empty_pixel: Union[str, EmptyPixelPolicy] = EmptyPixelPolicy.ALPHA
    flip_horizontal: bool = False
    flip_vertical: bool = False
    uri: Optional[str] = None
    indexed: bool = False
    linear_colors: bool = False

    def __post_init__(self):
        if isinstance(self.empty_pixel, str):
            self.empty_pixel = EmptyPixelPolicy(self.empty_pixel)

    def validate(self) -> "VoxelifyConfig":
        """Raise ValueError for settings the pipeline cannot use."""
        self.height = validate_height(self.height)
        if self.uri is not None and not self.uri:
            raise ValueError("uri must be a non-empty string")
        return self

    @classmethod
    def from_args(cls, args) -> "VoxelifyConfig":
        """Build a config from parsed command-line arguments."""
        return cls(
            height=args.z_height,
            empty_pixel=args.empty_pixel,
            flip_horizontal=args.horizontal_flip,
            flip_vertical=args.vertical_flip,
            uri=args.uri,
            indexed=args.indexed,
            linear_colors=args.linear_colors,
        ).validate()
