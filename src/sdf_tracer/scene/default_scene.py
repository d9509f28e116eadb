"""The classic four-sphere demo scene.

The scene consists of:
- An ivory sphere on the left
- A glass sphere in front, slightly below the center line
- A large red rubber sphere behind it
- A mirror sphere up and to the right
- Three point lights, two of them behind and above the camera

Together with the checkerboard ground patch it exercises every term of the
shader: diffuse, specular, shadows, reflection and refraction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from sdf_tracer.scene.default_scene import create_default_scene
    >>> scene = create_default_scene()
    >>> scene.get_surface_count(), scene.get_light_count()
    (4, 3)
"""

from sdf_tracer.geometry.sphere import SphereSurface
from sdf_tracer.materials.presets import GLASS, IVORY, MIRROR, RED_RUBBER
from sdf_tracer.scene.lights import Light
from sdf_tracer.scene.manager import SceneManager

DEFAULT_SURFACES = (
    SphereSurface(center=(-3.0, 0.0, -16.0), radius=2.0, material=IVORY),
    SphereSurface(center=(-1.0, -1.5, -12.0), radius=2.0, material=GLASS),
    SphereSurface(center=(1.5, -0.5, -18.0), radius=3.0, material=RED_RUBBER),
    SphereSurface(center=(7.0, 5.0, -18.0), radius=4.0, material=MIRROR),
)

DEFAULT_LIGHTS = (
    Light(position=(-20.0, 20.0, 20.0), intensity=1.5),
    Light(position=(30.0, 50.0, -25.0), intensity=1.8),
    Light(position=(30.0, 20.0, 30.0), intensity=1.7),
)


def create_default_scene() -> SceneManager:
    """Create the demo scene and upload it to the scene fields.

    Returns:
        A SceneManager holding the four spheres and three lights.
    """
    scene = SceneManager()
    scene.load(DEFAULT_SURFACES, DEFAULT_LIGHTS)
    return scene
