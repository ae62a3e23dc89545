"""
Unit tests for pixel classification, face culling and mesh generation.
"""

import sys
from pathlib import Path
import numpy as np
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxelify.classifier import EmptyPixelPolicy, PixelClassifier
from voxelify.faces import FACE_NORMALS, Face, cull_faces, face_visibility
from voxelify.mesh import (
    MeshBuilder,
    face_vertices,
    image_to_vertices,
    quad_indices,
)


def opaque(height: int, width: int, color=(200, 100, 50)) -> np.ndarray:
    """Create a fully opaque RGBA image."""
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[:, :, :3] = color
    rgba[:, :, 3] = 255
    return rgba


def face_count(vertices: np.ndarray) -> int:
    return len(vertices) // 6


class TestPixelClassifier(unittest.TestCase):
    """Tests for the empty/solid pixel conventions."""

    def test_alpha_policy(self):
        """Test that only fully transparent pixels are empty under the alpha policy."""
        classifier = PixelClassifier(EmptyPixelPolicy.ALPHA)
        assert classifier.is_empty((255, 255, 255, 0))
        assert not classifier.is_empty((0, 0, 0, 1))
        assert not classifier.is_empty((0, 0, 0))

    def test_black_policy(self):
        """Test that pure black is empty under the black policy, whatever the alpha."""
        classifier = PixelClassifier("black")
        assert classifier.policy is EmptyPixelPolicy.BLACK
        assert classifier.is_empty((0, 0, 0, 255))
        assert not classifier.is_empty((0, 0, 1, 0))

    def test_mask_matches_single_pixel(self):
        """The grid mask and the per-pixel test must agree everywhere."""
        rng = np.random.default_rng(7)
        rgba = rng.integers(0, 2, size=(6, 5, 4), dtype=np.uint8) * 255

        for policy in EmptyPixelPolicy:
            classifier = PixelClassifier(policy)
            mask = classifier.solid_mask(rgba)
            for y in range(rgba.shape[0]):
                for x in range(rgba.shape[1]):
                    assert mask[y, x] == classifier.is_solid(rgba[y, x])

    def test_rgb_input_is_opaque(self):
        """Test that RGB input counts as opaque."""
        rgb = np.zeros((2, 2, 3), dtype=np.uint8)
        assert PixelClassifier("alpha").solid_mask(rgb).all()
        assert not PixelClassifier("black").solid_mask(rgb).any()

    def test_bad_shape(self):
        """Test rejection of images without a channel axis."""
        with self.assertRaises(ValueError):
            PixelClassifier().solid_mask(np.zeros((4, 4), dtype=np.uint8))


class TestFaceCuller(unittest.TestCase):
    """Tests for the four-neighbour face culling rule."""

    def test_single_pixel(self):
        """Test that an isolated pixel keeps all six faces."""
        solid = np.ones((1, 1), dtype=bool)
        assert cull_faces(solid, 0, 0) == list(Face)

    def test_shared_edge_culled(self):
        """Test that adjacent solid pixels drop the face between them."""
        solid = np.ones((1, 2), dtype=bool)
        left = cull_faces(solid, 0, 0)
        right = cull_faces(solid, 1, 0)

        assert Face.RIGHT not in left
        assert Face.LEFT not in right
        assert left == [Face.UP, Face.DOWN, Face.LEFT, Face.FORWARD, Face.BACK]
        assert right == [Face.UP, Face.DOWN, Face.RIGHT, Face.FORWARD, Face.BACK]

    def test_boundary_pixel_checks_inner_neighbour(self):
        """An edge pixel still culls the face towards a solid neighbour."""
        solid = np.array([[True, True, False]])
        faces = cull_faces(solid, 0, 0)
        assert Face.LEFT in faces
        assert Face.RIGHT not in faces

        faces = cull_faces(solid, 1, 0)
        assert Face.LEFT not in faces
        assert Face.RIGHT in faces

    def test_one_pixel_wide_column(self):
        """Test that a 1-pixel-wide column keeps both side faces."""
        solid = np.ones((3, 1), dtype=bool)
        for y in range(3):
            faces = cull_faces(solid, 0, y)
            assert Face.LEFT in faces
            assert Face.RIGHT in faces

        assert Face.FORWARD not in cull_faces(solid, 0, 1)
        assert Face.BACK not in cull_faces(solid, 0, 1)

    def test_empty_pixel_has_no_faces(self):
        """Test that empty pixels emit nothing."""
        solid = np.zeros((2, 2), dtype=bool)
        assert cull_faces(solid, 1, 1) == []

    def test_out_of_range(self):
        """Test coordinates outside the image."""
        with self.assertRaises(IndexError):
            cull_faces(np.ones((2, 2), dtype=bool), 2, 0)

    def test_visibility_grid(self):
        """Test the per-pixel visibility grid of a solid block."""
        solid = np.ones((3, 3), dtype=bool)
        visible = face_visibility(solid)
        assert visible.shape == (3, 3, 6)
        # Centre pixel only shows its caps
        assert visible[1, 1].tolist() == [True, True, False, False, False, False]


class TestMeshBuilder(unittest.TestCase):
    """Tests for vertex generation."""

    def test_single_pixel(self):
        """Test the bounds of a single extruded pixel."""
        vertices = image_to_vertices(opaque(1, 1), height=2.0)

        assert len(vertices) == 36
        positions = vertices["position"]
        assert positions.min(axis=0).tolist() == [0.0, 0.0, 0.0]
        assert positions.max(axis=0).tolist() == [1.0, 1.0, 2.0]

    def test_two_pixels_share_edge(self):
        """Test face count of two touching pixels."""
        vertices = image_to_vertices(opaque(1, 2))
        assert face_count(vertices) == 2 * 6 - 2

    def test_full_block(self):
        """Test face count of a solid 3x3 block."""
        # 9 top + 9 bottom + 12 perimeter sides
        vertices = image_to_vertices(opaque(3, 3))
        assert face_count(vertices) == 30

    def test_ring(self):
        """Test that a hole exposes inner side faces."""
        rgba = opaque(3, 3)
        rgba[1, 1, 3] = 0
        vertices = image_to_vertices(rgba)
        # 8 top + 8 bottom + 12 outer + 4 inner sides
        assert face_count(vertices) == 32

    def test_one_pixel_wide_image(self):
        """Test face count of a 1-pixel-wide image."""
        # 3 top + 3 bottom + 6 left/right + front + back
        vertices = image_to_vertices(opaque(3, 1))
        assert face_count(vertices) == 14

    def test_transparent_image(self):
        """Test that a transparent image yields an empty mesh."""
        rgba = np.zeros((4, 5, 4), dtype=np.uint8)
        mesh = MeshBuilder().build(rgba)
        assert len(mesh.vertices) == 0
        assert mesh.indices is None

    def test_zero_size_image(self):
        """Test a 0x0 image."""
        mesh = MeshBuilder().build(np.zeros((0, 0, 4), dtype=np.uint8))
        assert len(mesh.vertices) == 0

    def test_black_policy_mesh(self):
        """Test mesh generation with black as the empty colour."""
        rgba = opaque(1, 2, color=(0, 0, 0))
        rgba[0, 1, :3] = 10
        builder = MeshBuilder(classifier=PixelClassifier("black"))
        vertices = builder.build(rgba).vertices
        assert face_count(vertices) == 6
        assert vertices["position"][:, 0].min() == 1.0

    def test_normals_are_canonical(self):
        """Test that every face carries one axis-aligned unit normal."""
        rgba = opaque(4, 4)
        rgba[1:3, 2, 3] = 0
        vertices = MeshBuilder(height=3.5).build(rgba).vertices

        normals = vertices["normal"].reshape(-1, 6, 3)
        for face_normals in normals:
            assert np.all(face_normals == face_normals[0])
            assert any(np.array_equal(face_normals[0], n) for n in FACE_NORMALS)
            assert np.abs(face_normals[0]).sum() == 1.0

    def test_winding_follows_normal(self):
        """Test counter-clockwise winding against the face normal."""
        rgba = opaque(3, 4)
        rgba[1, 1, 3] = 0
        for height in (0.25, 1.0, 7.0):
            vertices = MeshBuilder(height=height).build(rgba).vertices
            triangles = vertices["position"].reshape(-1, 3, 3).astype(np.float64)
            normals = vertices["normal"].reshape(-1, 3, 3)[:, 0]

            cross = np.cross(
                triangles[:, 1] - triangles[:, 0],
                triangles[:, 2] - triangles[:, 0]
            )
            lengths = np.linalg.norm(cross, axis=1)
            assert np.all(lengths > 0)
            assert np.allclose(cross / lengths[:, None], normals)

    def test_every_face_for_single_pixel_winding(self):
        """Test winding of each face direction."""
        for face in Face:
            verts = face_vertices(5, 7, (1, 2, 3), 2.0, face)
            p = verts["position"].astype(np.float64)
            for tri in (p[:3], p[3:]):
                cross = np.cross(tri[1] - tri[0], tri[2] - tri[0])
                assert np.dot(cross, FACE_NORMALS[face]) > 0

    def test_face_geometry(self):
        """Test corner placement for cap and side faces."""
        up = face_vertices(2, 3, (0, 0, 0), 4.0, Face.UP)["position"]
        assert np.all(up[:, 2] == 4.0)
        down = face_vertices(2, 3, (0, 0, 0), 4.0, Face.DOWN)["position"]
        assert np.all(down[:, 2] == 0.0)
        right = face_vertices(2, 3, (0, 0, 0), 4.0, Face.RIGHT)["position"]
        assert np.all(right[:, 0] == 3.0)
        assert set(right[:, 2].tolist()) == {0.0, 4.0}
        assert set(right[:, 1].tolist()) == {3.0, 4.0}

    def test_flat_color(self):
        """Test that colour channels are divided by 255."""
        verts = face_vertices(0, 0, (255, 0, 51, 255), 1.0, Face.LEFT)
        expected = np.array([1.0, 0.0, np.float32(51) / np.float32(255)], dtype=np.float32)
        assert np.all(verts["color"] == expected)

    def test_row_major_order(self):
        """Test that pixels are emitted row by row."""
        rgba = opaque(2, 2)
        rgba[0, 0, :3] = (10, 20, 30)
        rgba[1, 1, :3] = (40, 50, 60)
        vertices = image_to_vertices(rgba)

        # Each pixel of a 2x2 block shows 4 faces
        first = vertices[:24]
        last = vertices[-24:]
        assert np.all(first["position"][:, 0] <= 1.0)
        assert np.all(first["position"][:, 1] <= 1.0)
        assert np.allclose(first["color"][0] * 255, [10, 20, 30])
        assert np.allclose(last["color"][0] * 255, [40, 50, 60])

    def test_deterministic(self):
        """Test that identical input gives identical vertices."""
        rgba = np.random.default_rng(3).integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
        a = image_to_vertices(rgba, 1.5)
        b = image_to_vertices(rgba, 1.5)
        assert a.tobytes() == b.tobytes()

    def test_invalid_height(self):
        """Test rejection of non-positive heights."""
        with self.assertRaises(ValueError):
            MeshBuilder(height=0.0)
        with self.assertRaises(ValueError):
            MeshBuilder(height=-1.0)

    def test_linear_colors(self):
        """Test sRGB to linear colour conversion."""
        rgba = opaque(1, 1, color=(255, 0, 128))
        vertices = MeshBuilder(linear_colors=True).build(rgba).vertices
        color = vertices["color"][0]
        assert np.isclose(color[0], 1.0, atol=1e-6)
        assert color[1] == 0.0
        assert 0.2 < color[2] < 0.23


class TestIndexedMode(unittest.TestCase):
    """Tests for the 4-vertices-per-quad layout."""

    def test_quad_indices(self):
        """Test the two-triangle pattern per quad."""
        indices = quad_indices(2)
        assert indices.tolist() == [0, 1, 2, 2, 1, 3, 4, 5, 6, 6, 5, 7]
        assert indices.dtype == np.uint16

    def test_large_quad_count_uses_uint32(self):
        """Test the switch to 32-bit indices."""
        assert quad_indices(16384).dtype == np.uint16
        indices = quad_indices(16385)
        assert indices.dtype == np.uint32
        assert indices[-1] == 16385 * 4 - 1

    def test_empty(self):
        """Test indices for zero quads."""
        assert len(quad_indices(0)) == 0

    def test_indexed_matches_non_indexed(self):
        """Test that expanding indexed vertices reproduces the plain layout."""
        rgba = opaque(3, 2)
        rgba[0, 1, 3] = 0

        plain = MeshBuilder(height=2.0).build(rgba)
        indexed = MeshBuilder(height=2.0, indexed=True).build(rgba)

        assert len(indexed.vertices) == plain.face_count * 4
        assert indexed.face_count == plain.face_count
        assert indexed.triangle_count == plain.triangle_count

        expanded = indexed.vertices[indexed.indices]
        assert expanded.tobytes() == plain.vertices.tobytes()

    def test_default_is_not_indexed(self):
        """Test that meshes are not indexed by default."""
        mesh = MeshBuilder().build(opaque(1, 1))
        assert mesh.indices is None
        assert len(mesh.vertices) == 36


if __name__ == "__main__":
    unittest.main(verbosity=2)
