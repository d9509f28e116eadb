#!/usr/bin/env python3
"""Render the four-sphere demo scene (or a scene loaded from JSON).

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --output OUTPUT     Output file path (default: out.ppm)
    --scene FILE        JSON scene description (default: the demo scene)
    --cpu               Force the CPU backend
    --preview           Show the finished frame in a Matplotlib window
    --quiet             Suppress progress output

A scene file looks like:

    {
      "surfaces": [
        {"type": "sphere", "center": [-3, 0, -16], "radius": 2,
         "material": {"refractive_index": 1.0, "albedo": [0.6, 0.3, 0.1, 0.0],
                      "diffuse_color": [0.4, 0.4, 0.3], "specular_exponent": 50}}
      ],
      "lights": [{"position": [-20, 20, 20], "intensity": 1.5}]
    }

Example:
    python examples/render_spheres.py --width 640 --height 480 --output spheres.ppm
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the four-sphere demo scene with the SDF ray marcher.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.ppm",
        help="Output file path (default: out.ppm)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene description (default: the demo scene)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the finished frame in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_spheres(
    width: int = 1024,
    height: int = 768,
    output_path: str = "out.ppm",
    scene_path: str | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as a PPM file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path (PPM).
        scene_path: Optional JSON scene description.
        preview: If True, show the frame after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from sdf_tracer.camera.pinhole import PinholeCamera
    from sdf_tracer.core.renderer import render
    from sdf_tracer.scene.default_scene import create_default_scene
    from sdf_tracer.scene.manager import SceneManager

    if scene_path is None:
        scene = create_default_scene()
        if not quiet:
            print(f"Using demo scene ({width}x{height})...")
    else:
        scene = SceneManager()
        with open(scene_path, encoding="utf-8") as f:
            scene.from_dict(json.load(f))
        if not quiet:
            print(f"Loaded scene from {scene_path} ({width}x{height})...")

    if not quiet:
        print(
            f"  {scene.get_surface_count()} surface(s), "
            f"{scene.get_light_count()} light(s)"
        )

    start_time = time.time()
    output_file = render(
        scene.surfaces,
        scene.lights,
        output_path,
        camera=PinholeCamera(width=width, height=height),
    )

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from sdf_tracer.core.integrator import get_image_numpy
        from sdf_tracer.preview.display import show_preview

        show_preview(get_image_numpy())

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            output_path=args.output,
            scene_path=args.scene,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
