"""Unit tests for the ray marcher and the ground plane.

Tests cover:
- Marched hit distance and normal for a single sphere
- Material copied into the hit record
- Checkerboard tile parity
- Ground patch window and the default ground material
- Escaping rays
- Degenerate normal diagnostics
"""

import math

import pytest
import taichi as ti


def _vec(v):
    return (float(v[0]), float(v[1]), float(v[2]))


def _normalized(x, y, z):
    length = math.sqrt(x * x + y * y + z * z)
    return (x / length, y / length, z / length)


class TestMarchSphere:
    """Tests for marching toward spheres."""

    def test_hit_distance_matches_sdf(self):
        """A ray aimed at the center stops at |origin - center| - radius."""
        from sdf_tracer.core.constants import EPSILON
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        result = probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        distance = math.dist(result.point, (0.0, 0.0, 0.0))
        assert abs(distance - 4.0) < EPSILON
        assert result.normal == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)

    def test_oblique_hit_normal(self):
        """The normal is the unit vector from the center to the hit point."""
        from sdf_tracer.core.constants import EPSILON
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import add_surface

        center = (-3.0, 0.0, -16.0)
        add_surface(SphereSurface(center, 2.0))
        result = probe_march((0.0, 0.0, 0.0), _normalized(-2.5, 0.5, -14.0))

        assert result is not None
        offset = [p - c for p, c in zip(result.point, center)]
        length = math.sqrt(sum(o * o for o in offset))
        assert abs(length - 2.0) < EPSILON
        expected = tuple(o / length for o in offset)
        assert result.normal == pytest.approx(expected, abs=1e-5)

    def test_hit_carries_material(self):
        """The hit record holds a copy of the surface material."""
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.materials import GLASS
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0, GLASS))
        result = probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        assert result.refractive_index == pytest.approx(1.5)
        assert result.albedo == pytest.approx(GLASS.albedo)
        assert result.diffuse_color == pytest.approx(GLASS.diffuse_color)
        assert result.specular_exponent == pytest.approx(125.0)

    def test_nearer_sphere_wins(self):
        """With two spheres on the ray, the nearer one is hit."""
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.materials import IVORY, RED_RUBBER
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, 0.0, -20.0), 3.0, RED_RUBBER))
        add_surface(SphereSurface((0.0, 0.0, -8.0), 1.0, IVORY))
        result = probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        assert result.point[2] == pytest.approx(-7.0, abs=1e-3)
        assert result.diffuse_color == pytest.approx(IVORY.diffuse_color)

    def test_escaping_ray_misses(self):
        """A ray that passes every surface and the ground reports no hit."""
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        assert probe_march((0.0, 0.0, 0.0), (0.0, 1.0, 0.0)) is None

    def test_empty_scene_misses(self):
        """With no surfaces a ray that avoids the ground hits nothing."""
        from sdf_tracer.core.marcher import probe_march

        assert probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0)) is None


class TestCheckerColor:
    """Tests for the checkerboard tile colors."""

    def test_tile_parity(self):
        """Even cell parity gives the light tile, odd gives the dark tile."""
        from sdf_tracer.core.marcher import DARK_TILE, LIGHT_TILE, checker_color

        colors = ti.Vector.field(3, dtype=ti.f32, shape=4)

        @ti.kernel
        def test_kernel():
            colors[0] = checker_color(0.0, -15.0)
            colors[1] = checker_color(2.0, -15.0)
            colors[2] = checker_color(0.0, -17.0)
            colors[3] = checker_color(-2.0, -15.0)

        test_kernel()
        # floor(1000) + floor(-7.5) = 992 (even)
        assert _vec(colors[0]) == pytest.approx(LIGHT_TILE)
        # floor(1001) + floor(-7.5) = 993 (odd)
        assert _vec(colors[1]) == pytest.approx(DARK_TILE)
        # floor(1000) + floor(-8.5) = 991 (odd)
        assert _vec(colors[2]) == pytest.approx(DARK_TILE)
        # floor(999) + floor(-7.5) = 991 (odd)
        assert _vec(colors[3]) == pytest.approx(DARK_TILE)


class TestGroundPlane:
    """Tests for the ground plane fallback."""

    def test_ground_hit_light_tile(self):
        """A ray down to (0, -4, -15) lands on a light tile."""
        from sdf_tracer.core.marcher import LIGHT_TILE, probe_march

        result = probe_march((0.0, 0.0, 0.0), _normalized(0.0, -4.0, -15.0))

        assert result is not None
        assert result.point == pytest.approx((0.0, -4.0, -15.0), abs=1e-4)
        assert result.normal == pytest.approx((0.0, 1.0, 0.0))
        assert result.diffuse_color == pytest.approx(LIGHT_TILE)

    def test_ground_hit_dark_tile(self):
        """A ray down to (3, -4, -15) lands on a dark tile."""
        from sdf_tracer.core.marcher import DARK_TILE, probe_march

        result = probe_march((0.0, 0.0, 0.0), _normalized(3.0, -4.0, -15.0))

        assert result is not None
        assert result.diffuse_color == pytest.approx(DARK_TILE)

    def test_ground_uses_default_material(self):
        """The ground is purely diffuse with an index of 1."""
        from sdf_tracer.core.marcher import probe_march

        result = probe_march((0.0, 0.0, 0.0), _normalized(0.0, -4.0, -15.0))

        assert result is not None
        assert result.refractive_index == pytest.approx(1.0)
        assert result.albedo == pytest.approx((1.0, 0.0, 0.0, 0.0))
        assert result.specular_exponent == pytest.approx(0.0)

    def test_ground_outside_window(self):
        """Plane hits outside |x| < 10, -30 < z < -10 are misses."""
        from sdf_tracer.core.marcher import probe_march

        # Lands at z = -5, in front of the patch
        assert probe_march((0.0, 0.0, 0.0), _normalized(0.0, -4.0, -5.0)) is None
        # Lands at z = -40, behind the patch
        assert probe_march((0.0, 0.0, 0.0), _normalized(0.0, -4.0, -40.0)) is None
        # Lands at x = 12, beside the patch
        assert probe_march((0.0, 0.0, 0.0), _normalized(12.0, -4.0, -15.0)) is None

    def test_parallel_ray_misses_ground(self):
        """A ray parallel to the plane never reaches it."""
        from sdf_tracer.core.marcher import probe_march

        assert probe_march((0.0, -2.0, 0.0), (0.0, 0.0, -1.0)) is None

    def test_sphere_in_front_of_ground(self):
        """A sphere in front of the patch hides it."""
        from sdf_tracer.core.marcher import probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.materials import RED_RUBBER
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, -2.0, -7.5), 1.0, RED_RUBBER))
        result = probe_march((0.0, 0.0, 0.0), _normalized(0.0, -4.0, -15.0))

        assert result is not None
        assert result.diffuse_color == pytest.approx(RED_RUBBER.diffuse_color)


class TestDegenerateNormals:
    """Tests for the degenerate normal diagnostic."""

    def test_counter_starts_at_zero(self):
        """The counter is zero after a reset and after ordinary hits."""
        from sdf_tracer.core.marcher import get_degenerate_normal_count, probe_march
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import add_surface

        add_surface(SphereSurface((0.0, 0.0, -5.0), 1.0))
        probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert get_degenerate_normal_count() == 0

    def test_hit_near_center_is_counted(self):
        """A hit within EPSILON of a tiny sphere's center has no normal."""
        from sdf_tracer.core.marcher import (
            get_degenerate_normal_count,
            probe_march,
            reset_degenerate_normal_count,
        )
        from sdf_tracer.geometry import SphereSurface
        from sdf_tracer.scene.intersection import add_surface

        # The ray passes 6e-4 from the center; the march converges about
        # 6.3e-4 from it, inside the normal's EPSILON tolerance.
        add_surface(SphereSurface((0.0006, 0.0, -2.0), 0.0002))
        result = probe_march((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert result is not None
        assert result.normal == (0.0, 0.0, 0.0)
        assert get_degenerate_normal_count() == 1

        reset_degenerate_normal_count()
        assert get_degenerate_normal_count() == 0
