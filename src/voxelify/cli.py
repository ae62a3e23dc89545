"""
Command-Line Interface for voxelify

Usage:
    voxelify input.png -o output.glb
    voxelify input.png -o output.glb --z-height 4 --vertical-flip
    voxelify input.png -o output.glb --empty-pixel black

"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
import time

from . import __version__
from .classifier import EmptyPixelPolicy
from .config import VoxelifyConfig
from .errors import ExportNotImplementedError, SizeError, VoxelifyError
from .generator import VoxelGenerator
from .logging_config import setup_logging
from .mesh import DEFAULT_HEIGHT


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_IMPLEMENTED = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="voxelify",
        description="Convert a pixel image into a voxel mesh in binary glTF format",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  voxelify sprite.png -o model.glb
      One voxel column of height 2 per opaque pixel

  voxelify sprite.png -o model.glb -z 0.5 -V
      Thin slab, image mirrored top-bottom

  voxelify logo.jpg -o model.glb --empty-pixel black
      No alpha channel: treat pure black as empty

Empty pixel conventions:
  alpha  - alpha channel equals zero (default)
  black  - red, green and blue all equal zero
        """
    )

    parser.add_argument(
        "input",
        help="Input image file (PNG recommended)"
    )

    parser.add_argument(
        "-o", "--output",
        help="Output file path (default: input path with .glb suffix)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=["glb", "gltf"],
        default="glb",
        help="Output format (default: glb; gltf is not implemented yet)"
    )

    parser.add_argument(
        "-V", "--vertical-flip",
        action="store_true",
        help="Mirror the image top-bottom before meshing"
    )

    parser.add_argument(
        "-H", "--horizontal-flip",
        action="store_true",
        help="Mirror the image left-right before meshing"
    )

    parser.add_argument(
        "-z", "--z-height",
        type=float,
        default=DEFAULT_HEIGHT,
        help=f"Voxel column height (default: {DEFAULT_HEIGHT})"
    )

    parser.add_argument(
        "-u", "--uri",
        help="Reference the binary buffer at this URI instead of embedding it"
    )

    parser.add_argument(
        "--empty-pixel",
        choices=[policy.value for policy in EmptyPixelPolicy],
        default=EmptyPixelPolicy.ALPHA.value,
        help="Which pixels produce no voxel (default: alpha)"
    )

    parser.add_argument(
        "--indexed",
        action="store_true",
        help="Emit 4 vertices per face with an index buffer"
    )

    parser.add_argument(
        "--linear-colors",
        action="store_true",
        help="Convert sRGB pixel colors to Linear vertex colors"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with debug logging"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print mesh statistics"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def process_single(args) -> int:
    """Convert a single image file."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return EXIT_ERROR

    output_path = Path(args.output) if args.output else input_path.with_suffix(".glb")

    start_time = time.time()

    try:
        config = VoxelifyConfig.from_args(args)
        generator = VoxelGenerator(config)

        if args.verbose:
            print(f"Loading: {input_path}")
        generator.load_image(input_path)

        if args.verbose:
            print("Generating mesh...")
        generator.generate_mesh()

        if args.stats or args.verbose:
            stats = generator.get_mesh_stats()
            print("\nMesh Statistics:")
            print(f"  Image size: {stats['image_size'][0]}x{stats['image_size'][1]}")
            print(f"  Solid pixels: {stats['solid_pixels']}")
            print(f"  Faces: {stats['faces']}")
            print(f"  Vertices: {stats['vertices']}")
            print(f"  Triangles: {stats['triangles']}")

        generator.export(output_path, args.format)
        if args.verbose:
            print(f"Exported: {output_path}")

        elapsed = time.time() - start_time
        if args.verbose:
            print(f"\nCompleted in {elapsed:.2f}s")

        return EXIT_OK

    except ExportNotImplementedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_NOT_IMPLEMENTED

    except SizeError as e:
        print(f"Error: model too large: {e}", file=sys.stderr)
        return EXIT_ERROR

    except (VoxelifyError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG)

    return process_single(args)


if __name__ == "__main__":
    sys.exit(main())
