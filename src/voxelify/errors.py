"""
Exceptions raised by the voxelify export pipeline.

Both export failures are terminal: generation is deterministic, so running
the same input again fails the same way.
"""

from typing import Optional


class VoxelifyError(Exception):
    """Base class for all voxelify errors."""


class SerializationError(VoxelifyError):
    """The glTF document could not be encoded as JSON."""

    def __init__(self, message: str = "Failed to serialize glTF"):
        super().__init__(message)


class SizeError(VoxelifyError):
    """The binary container would not fit the 32-bit GLB length field."""

    def __init__(self, length: Optional[int] = None):
        self.length = length
        if length is None:
            message = "File size exceeds binary glTF limit"
        else:
            message = f"File size exceeds binary glTF limit ({length} bytes)"
        super().__init__(message)


class ExportNotImplementedError(VoxelifyError, NotImplementedError):
    """Requested export variant exists in the interface but is not built yet."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"{fmt.upper()} output is not implemented yet")
