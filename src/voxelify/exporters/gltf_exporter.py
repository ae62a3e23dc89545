"""
glTF 2.0 Exporter (.glb binary format)

Builds the glTF JSON document for a voxel mesh and frames it, together with
the packed vertex buffer, as a binary glTF container.

glTF Structure:
- JSON chunk describing the scene graph
    buffer -> bufferView -> accessors -> mesh -> node -> scene
- BIN chunk holding the interleaved vertex records
    position (float32 vec3) | normal (float32 vec3) | color (float32 vec3)

Entities live in flat lists and reference each other by index, built bottom
up so that every index exists before a parent refers to it.
"""

from pathlib import Path
from typing import Union, Optional, Dict, Any, List
import json
import logging
import struct
import numpy as np

from ..buffer import (
    COLOR_OFFSET,
    NORMAL_OFFSET,
    POSITION_OFFSET,
    VERTEX_STRIDE,
    align_to_four,
    bounding_coords,
    pack_vertices,
    pad_to_four,
    vertex_buffer_length,
)
from ..errors import ExportNotImplementedError, SerializationError, SizeError
from ..mesh import MeshData


logger = logging.getLogger(__name__)

# glTF constants
GLTF_VERSION = "2.0"
GENERATOR = "voxelify"

# GLB framing
GLB_MAGIC = 0x46546C67        # "glTF"
GLB_VERSION = 2
JSON_CHUNK_TYPE = 0x4E4F534A  # "JSON"
BIN_CHUNK_TYPE = 0x004E4942   # "BIN\0"
GLB_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
MAX_GLB_LENGTH = 0xFFFFFFFF

# Component types
UNSIGNED_SHORT = 5123
UNSIGNED_INT = 5125
FLOAT = 5126

# Buffer view targets
ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963

# Primitive modes
TRIANGLES = 4

NORMAL_MIN = [-1.0, -1.0, -1.0]
NORMAL_MAX = [1.0, 1.0, 1.0]


class GLTFDocument:
    """
    Index-referenced glTF scene description.

    Each ``push_*`` method appends one entity and returns its index.
    """

    def __init__(self):
        self.buffers: List[Dict[str, Any]] = []
        self.buffer_views: List[Dict[str, Any]] = []
        self.accessors: List[Dict[str, Any]] = []
        self.meshes: List[Dict[str, Any]] = []
        self.nodes: List[Dict[str, Any]] = []
        self.scenes: List[Dict[str, Any]] = []
        self.scene: Optional[int] = None

    @staticmethod
    def _push(items: List[Dict[str, Any]], item: Dict[str, Any]) -> int:
        items.append(item)
        return len(items) - 1

    def push_buffer(self, byte_length: int, uri: Optional[str] = None) -> int:
        buffer = {"byteLength": byte_length}
        if uri is not None:
            buffer["uri"] = uri
        return self._push(self.buffers, buffer)

    def push_buffer_view(
        self,
        buffer: int,
        byte_length: int,
        byte_offset: int = 0,
        byte_stride: Optional[int] = None,
        target: Optional[int] = None
    ) -> int:
        view = {"buffer": buffer, "byteLength": byte_length}
        if byte_offset:
            view["byteOffset"] = byte_offset
        if byte_stride is not None:
            view["byteStride"] = byte_stride
        if target is not None:
            view["target"] = target
        return self._push(self.buffer_views, view)

    def push_accessor(
        self,
        buffer_view: int,
        byte_offset: int,
        count: int,
        component_type: int,
        type_: str,
        min_: Optional[List[float]] = None,
        max_: Optional[List[float]] = None
    ) -> int:
        accessor = {
            "bufferView": buffer_view,
            "byteOffset": byte_offset,
            "componentType": component_type,
            "count": count,
            "type": type_,
        }
        if min_ is not None:
            accessor["min"] = list(min_)
        if max_ is not None:
            accessor["max"] = list(max_)
        return self._push(self.accessors, accessor)

    def push_mesh(self, primitives: List[Dict[str, Any]]) -> int:
        return self._push(self.meshes, {"primitives": primitives})

    def push_node(self, mesh: int) -> int:
        return self._push(self.nodes, {"mesh": mesh})

    def push_scene(self, nodes: List[int]) -> int:
        return self._push(self.scenes, {"nodes": list(nodes)})

    @property
    def external_uri(self) -> Optional[str]:
        if not self.buffers:
            return None
        return self.buffers[0].get("uri")

    def to_dict(self) -> Dict[str, Any]:
        gltf: Dict[str, Any] = {
            "asset": {
                "version": GLTF_VERSION,
                "generator": GENERATOR
            },
        }
        if self.scene is not None:
            gltf["scene"] = self.scene

        for key, items in (
            ("scenes", self.scenes),
            ("nodes", self.nodes),
            ("meshes", self.meshes),
            ("accessors", self.accessors),
            ("bufferViews", self.buffer_views),
            ("buffers", self.buffers),
        ):
            if items:
                gltf[key] = items

        return gltf

    def to_json(self) -> bytes:
        """
        Serialize to compact UTF-8 JSON.

        Raises:
            SerializationError: if the document holds values JSON cannot
                represent (NaN or infinite bounds, foreign objects)
        """
        try:
            text = json.dumps(
                self.to_dict(), separators=(",", ":"), allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize glTF: {e}") from e
        return text.encode("utf-8")


def build_gltf(
    vertices: np.ndarray,
    uri: Optional[str] = None,
    indices: Optional[np.ndarray] = None
) -> GLTFDocument:
    """
    Build the glTF document for a vertex buffer.

    Args:
        vertices: Structured vertex records (see buffer.VERTEX_DTYPE)
        uri: Optional external location of the binary buffer
        indices: Optional triangle indices (uint16 or uint32)

    Returns:
        GLTFDocument referencing one buffer, one mesh, one node, one scene

    An empty vertex sequence still yields the full scene graph, with
    zero-length buffer and bufferView and accessors of count 0. Strict
    validators reject those (the schema minimum is 1) but loaders accept
    the empty primitive.
    """
    doc = GLTFDocument()

    vertex_length = vertex_buffer_length(vertices)
    byte_length = vertex_length
    if indices is not None:
        byte_length = align_to_four(vertex_length) + indices.nbytes

    buffer = doc.push_buffer(byte_length, uri)

    vertex_view = doc.push_buffer_view(
        buffer,
        vertex_length,
        byte_stride=VERTEX_STRIDE,
        target=ARRAY_BUFFER
    )

    count = len(vertices)
    bounds = bounding_coords(vertices)

    positions = doc.push_accessor(
        vertex_view, POSITION_OFFSET, count, FLOAT, "VEC3",
        min_=list(bounds.min), max_=list(bounds.max)
    )
    # Normals are axis unit vectors by construction
    normals = doc.push_accessor(
        vertex_view, NORMAL_OFFSET, count, FLOAT, "VEC3",
        min_=NORMAL_MIN, max_=NORMAL_MAX
    )
    colors = doc.push_accessor(
        vertex_view, COLOR_OFFSET, count, FLOAT, "VEC3"
    )

    primitive: Dict[str, Any] = {
        "attributes": {
            "POSITION": positions,
            "NORMAL": normals,
            "COLOR_0": colors
        },
        "mode": TRIANGLES
    }

    if indices is not None:
        if indices.dtype == np.uint16:
            index_type = UNSIGNED_SHORT
        else:
            index_type = UNSIGNED_INT
        index_view = doc.push_buffer_view(
            buffer,
            indices.nbytes,
            byte_offset=align_to_four(vertex_length),
            target=ELEMENT_ARRAY_BUFFER
        )
        primitive["indices"] = doc.push_accessor(
            index_view, 0, len(indices), index_type, "SCALAR"
        )

    mesh = doc.push_mesh([primitive])
    node = doc.push_node(mesh)
    doc.scene = doc.push_scene([node])

    return doc


def build_payload(vertices: np.ndarray, indices: Optional[np.ndarray] = None) -> bytes:
    """Pack vertices (and indices) into the padded binary buffer."""
    payload = pack_vertices(vertices)
    if indices is not None:
        index_type = "<u2" if indices.dtype == np.uint16 else "<u4"
        payload = pad_to_four(payload + indices.astype(index_type).tobytes())
    return payload


def container_length(json_length: int, payload_length: int = 0, has_bin: bool = True) -> int:
    """
    Total GLB length for chunk contents of the given sizes.

    Raises:
        SizeError: if the total does not fit the 32-bit length field
    """
    total = GLB_HEADER_SIZE + CHUNK_HEADER_SIZE + align_to_four(json_length)
    if has_bin:
        total += CHUNK_HEADER_SIZE + align_to_four(payload_length)
    if total > MAX_GLB_LENGTH:
        raise SizeError(total)
    return total


def create_glb(doc: GLTFDocument, payload: bytes) -> bytes:
    """
    Assemble a binary glTF container.

    Layout:
        header: magic, version, total length (uint32 LE each)
        JSON chunk: length, type, JSON padded with spaces
        BIN chunk: length, type, payload padded with zeros

    The BIN chunk is left out when the buffer points to an external URI.

    Args:
        doc: glTF document
        payload: Packed buffer bytes

    Returns:
        Complete GLB bytes

    Raises:
        SerializationError: if the document cannot be encoded
        SizeError: if the container exceeds the format's length limit
    """
    json_bytes = pad_to_four(doc.to_json(), b" ")
    embed = doc.external_uri is None
    total_length = container_length(len(json_bytes), len(payload), has_bin=embed)

    parts = [
        struct.pack("<III", GLB_MAGIC, GLB_VERSION, total_length),
        struct.pack("<II", len(json_bytes), JSON_CHUNK_TYPE),
        json_bytes,
    ]
    if embed:
        bin_bytes = pad_to_four(payload)
        parts.append(struct.pack("<II", len(bin_bytes), BIN_CHUNK_TYPE))
        parts.append(bin_bytes)

    glb = b"".join(parts)
    logger.debug(
        "Assembled GLB: %d bytes (json %d, bin %d)",
        len(glb), len(json_bytes), len(payload) if embed else 0
    )
    return glb


class GLTFExporter:
    """
    Export voxel meshes to glTF 2.0.

    Only the binary container (.glb) is supported; the separate-files
    variant (.gltf + .bin) reports ExportNotImplementedError.
    """

    FORMATS = ("glb", "gltf")

    def __init__(self, uri: Optional[str] = None):
        """
        Initialize the exporter.

        Args:
            uri: Optional external location for the binary buffer
        """
        self.uri = uri

    def to_glb(self, mesh: MeshData) -> bytes:
        """Build the GLB bytes for a mesh."""
        doc = build_gltf(mesh.vertices, self.uri, mesh.indices)
        return create_glb(doc, build_payload(mesh.vertices, mesh.indices))

    def export(
        self,
        mesh: MeshData,
        output_path: Union[str, Path],
        fmt: str = "glb"
    ):
        """
        Export mesh to a file.

        The container is fully built before the file is opened, so a failed
        export leaves nothing behind.

        Args:
            mesh: MeshData from MeshBuilder
            output_path: Output file path
            fmt: "glb" or "gltf"
        """
        if fmt not in self.FORMATS:
            raise ValueError(f"Unknown format: {fmt}")
        if fmt == "gltf":
            raise ExportNotImplementedError(fmt)

        glb = self.to_glb(mesh)
        output_path = Path(output_path)
        if self.uri is not None:
            logger.warning(
                "Buffer references %s; the payload is not embedded and must be "
                "supplied separately",
                self.uri
            )
        with open(output_path, "wb") as f:
            f.write(glb)
        logger.info("Exported %s (%d bytes)", output_path, len(glb))
