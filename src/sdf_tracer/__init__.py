"""Taichi-based ray marcher for signed-distance-field scenes.

This package renders still images of scenes built from implicit surfaces,
finding intersections by ray marching and shading hits with a Whitted-style
model (diffuse, specular, reflection and refraction with Fresnel terms).

Subpackages:
    core: Ray helpers, the ray marcher, light transport and the frame driver
    geometry: Surface variants and their signed distance functions
    materials: The four-weight albedo material model and presets
    scene: Surface and light storage, the scene distance query, scene setup
    camera: Fixed pinhole camera and primary ray generation
    preview: Framebuffer normalization, PPM export and on-screen preview
"""

__version__ = "0.1.0"
