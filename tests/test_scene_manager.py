"""Tests for the SceneManager, materials, lights and the demo scene.

Tests cover:
- Material and light validation
- Adding surfaces and lights through the manager
- Loading and clearing scenes
- Dictionary (JSON) round trip and unknown surface types
- The four-sphere demo scene
"""

import json

import pytest


class TestMaterial:
    """Tests for the Material value type."""

    def test_defaults(self):
        """The default material is purely diffuse and black."""
        from sdf_tracer.materials import Material

        material = Material()
        assert material.refractive_index == 1.0
        assert material.albedo == (1.0, 0.0, 0.0, 0.0)
        assert material.diffuse_color == (0.0, 0.0, 0.0)
        assert material.specular_exponent == 0.0

    def test_invalid_refractive_index(self):
        """Indices below 1 are rejected."""
        from sdf_tracer.materials import Material

        with pytest.raises(ValueError, match="Index of refraction"):
            Material(refractive_index=0.5)

    def test_invalid_albedo(self):
        """Albedo needs four non-negative weights."""
        from sdf_tracer.materials import Material

        with pytest.raises(ValueError, match="4 weights"):
            Material(albedo=(1.0, 0.0, 0.0))
        with pytest.raises(ValueError, match="negative"):
            Material(albedo=(1.0, -0.1, 0.0, 0.0))

    def test_invalid_color_and_exponent(self):
        """Colors need three components and exponents must be non-negative."""
        from sdf_tracer.materials import Material

        with pytest.raises(ValueError, match="3 components"):
            Material(diffuse_color=(1.0, 1.0))
        with pytest.raises(ValueError, match="negative"):
            Material(specular_exponent=-1.0)

    def test_weights_may_exceed_one(self):
        """Weights above one are allowed (the mirror uses a specular weight of 10)."""
        from sdf_tracer.materials import MIRROR

        assert MIRROR.albedo[1] == 10.0

    def test_dict_round_trip(self):
        """Materials survive to_dict() / from_dict()."""
        from sdf_tracer.materials import GLASS, Material

        assert Material.from_dict(GLASS.to_dict()) == GLASS

    def test_presets(self):
        """The four demo presets are registered by name."""
        from sdf_tracer.materials import GLASS, IVORY, MIRROR, PRESETS, RED_RUBBER

        assert PRESETS["ivory"] == IVORY
        assert PRESETS["glass"] == GLASS
        assert PRESETS["red_rubber"] == RED_RUBBER
        assert PRESETS["mirror"] == MIRROR
        assert GLASS.refractive_index == 1.5


class TestLight:
    """Tests for the Light value type and storage."""

    def test_negative_intensity(self):
        """Negative intensities are rejected."""
        from sdf_tracer.scene.lights import Light

        with pytest.raises(ValueError, match="negative"):
            Light(position=(0.0, 0.0, 0.0), intensity=-1.0)

    def test_add_and_clear(self):
        """Lights are numbered in order and cleared together."""
        from sdf_tracer.scene.lights import Light, add_light, clear_lights, get_light_count

        assert add_light(Light((0.0, 1.0, 0.0), 1.0)) == 0
        assert add_light(Light((0.0, 2.0, 0.0), 2.0)) == 1
        assert get_light_count() == 2
        clear_lights()
        assert get_light_count() == 0

    def test_capacity_overflow(self):
        """Adding past MAX_LIGHTS raises RuntimeError."""
        from sdf_tracer.scene import lights
        from sdf_tracer.scene.lights import MAX_LIGHTS, Light, add_light

        lights.num_lights[None] = MAX_LIGHTS
        with pytest.raises(RuntimeError, match="Maximum number of lights"):
            add_light(Light((0.0, 0.0, 0.0), 1.0))


class TestSceneManager:
    """Tests for the SceneManager."""

    def test_empty_scene(self):
        """A new manager starts with an empty scene."""
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.get_surface_count() == 0
        assert scene.get_light_count() == 0

    def test_add_surface_and_light(self):
        """Surfaces and lights reach the scene fields."""
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import get_surface_count
        from sdf_tracer.scene.lights import Light, get_light_count
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        assert scene.add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0)) == 0
        assert scene.add_light(Light((0.0, 10.0, 0.0), 1.0)) == 0
        assert get_surface_count() == 1
        assert get_light_count() == 1

    def test_new_manager_clears_fields(self):
        """Creating a manager clears the global scene."""
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import get_surface_count
        from sdf_tracer.scene.manager import SceneManager

        SceneManager().add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        SceneManager()
        assert get_surface_count() == 0

    def test_load_replaces_scene(self):
        """load() replaces any previous surfaces and lights."""
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.lights import Light
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        scene.load([SphereSurface((1.0, 0.0, -5.0), 1.0)], [Light((0.0, 5.0, 0.0), 1.0)])
        assert scene.get_surface_count() == 1
        assert scene.surfaces[0].center == (1.0, 0.0, -5.0)
        assert scene.get_light_count() == 1

    def test_load_accepts_empty_lists(self):
        """Empty surface and light lists are legal."""
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.load([], [])
        assert scene.get_surface_count() == 0

    def test_load_rejects_none(self):
        """None lists raise ValueError."""
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Surface list"):
            scene.load(None, [])
        with pytest.raises(ValueError, match="Light list"):
            scene.load([], None)

    def test_clear(self):
        """clear() empties both the manager and the fields."""
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import get_surface_count
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        scene.clear()
        assert scene.get_surface_count() == 0
        assert get_surface_count() == 0

    def test_capacity(self):
        """The manager reports the field capacities."""
        from sdf_tracer.scene.manager import SceneManager

        assert SceneManager.get_max_surfaces() == 1024
        assert SceneManager.get_max_lights() == 64


class TestSceneConfig:
    """Tests for dictionary scene configuration."""

    def test_dict_round_trip(self):
        """to_dict() output rebuilds the same scene, also through JSON."""
        from sdf_tracer.scene.default_scene import create_default_scene
        from sdf_tracer.scene.manager import SceneManager

        original = create_default_scene()
        data = json.loads(json.dumps(original.to_dict()))

        rebuilt = SceneManager()
        rebuilt.from_dict(data)
        assert rebuilt.surfaces == original.surfaces
        assert rebuilt.lights == original.lights

    def test_from_dict_missing_keys(self):
        """Missing keys load as empty lists and material defaults."""
        from sdf_tracer.materials import Material
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        scene.from_dict({"surfaces": [{"type": "sphere", "center": [0, 0, -5], "radius": 1}]})
        assert scene.get_surface_count() == 1
        assert scene.get_light_count() == 0
        assert scene.surfaces[0].material == Material()

    def test_unknown_surface_type(self):
        """Unknown surface types raise ValueError."""
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="Unknown surface type"):
            scene.from_dict({"surfaces": [{"type": "torus"}]})

    def test_invalid_values_are_rejected(self):
        """Values are validated when loading from a dictionary."""
        from sdf_tracer.scene.manager import SceneManager

        scene = SceneManager()
        with pytest.raises(ValueError, match="radius"):
            scene.from_dict({"surfaces": [{"type": "sphere", "center": [0, 0, 0], "radius": -2}]})


class TestDefaultScene:
    """Tests for the four-sphere demo scene."""

    def test_contents(self):
        """The demo scene has four spheres and three lights."""
        from sdf_tracer.materials import GLASS, IVORY, MIRROR, RED_RUBBER
        from sdf_tracer.scene.default_scene import create_default_scene

        scene = create_default_scene()
        assert scene.get_surface_count() == 4
        assert scene.get_light_count() == 3
        assert [s.material for s in scene.surfaces] == [IVORY, GLASS, RED_RUBBER, MIRROR]
        assert scene.surfaces[0].center == (-3.0, 0.0, -16.0)
        assert scene.lights[1].position == (30.0, 50.0, -25.0)
        assert scene.lights[1].intensity == 1.8

    def test_repr(self):
        """The manager repr shows the scene size."""
        from sdf_tracer.scene.default_scene import create_default_scene

        assert repr(create_default_scene()) == "SceneManager(surfaces=4, lights=3)"
