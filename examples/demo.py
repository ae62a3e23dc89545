#!/usr/bin/env python3
"""
voxelify Demo Script

This script demonstrates the full pipeline by:
1. Creating synthetic test sprites (no external images needed)
2. Converting them to voxel meshes with different settings
3. Exporting .glb files and printing statistics

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import numpy as np
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from voxelify import VoxelGenerator, VoxelifyConfig


def create_test_sprite_circle(size: int = 32) -> np.ndarray:
    """Create a simple circular test sprite on a transparent background."""
    rgba = np.zeros((size, size, 4), dtype=np.uint8)

    center = size // 2
    radius = size // 2 - 2

    ys, xs = np.mgrid[0:size, 0:size]
    inside = (xs - center) ** 2 + (ys - center) ** 2 < radius ** 2
    rgba[inside] = [100, 150, 200, 255]

    return rgba


def create_test_sprite_logo(size: int = 32) -> np.ndarray:
    """Create an opaque RGB sprite where black marks empty pixels."""
    rgb = np.zeros((size, size, 3), dtype=np.uint8)

    margin = 4
    for y in range(margin, size - margin):
        for x in range(margin, size - margin):
            if (x // 4 + y // 4) % 2 == 0:
                rgb[y, x] = [int(255 * x / size), int(255 * y / size), 128]

    return rgb


def run_demo():
    """Run the demonstration."""
    print("=" * 60)
    print("voxelify - Demo")
    print("=" * 60)

    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    runs = [
        ("circle", create_test_sprite_circle(32), VoxelifyConfig(height=2.0)),
        ("circle_indexed", create_test_sprite_circle(32), VoxelifyConfig(indexed=True)),
        ("logo", create_test_sprite_logo(32), VoxelifyConfig(height=0.5, empty_pixel="black")),
    ]

    total_start = time.time()

    for name, pixels, config in runs:
        print(f"\n--- Processing: {name} ---")
        print(f"Input size: {pixels.shape[1]}x{pixels.shape[0]} pixels")

        generator = VoxelGenerator(config)
        generator.load_array(pixels).generate_mesh()

        stats = generator.get_mesh_stats()
        print(f"Solid pixels: {stats['solid_pixels']}")
        print(f"Faces: {stats['faces']}")
        print(f"Vertices: {stats['vertices']}")
        print(f"Triangles: {stats['triangles']}")

        output_path = output_dir / f"{name}.glb"
        generator.export_glb(output_path)
        print(f"Exported: {output_path} ({output_path.stat().st_size} bytes)")

    print(f"\nCompleted in {time.time() - total_start:.2f}s")


if __name__ == "__main__":
    run_demo()
