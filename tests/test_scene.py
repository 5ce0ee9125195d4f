"""Tests for the scene nearest-hit query."""

import pytest
from spheretrace.vec3 import Vec3, Point3, Color
from spheretrace.ray import Ray
from spheretrace.shapes import Sphere
from spheretrace.lights import PointLight
from spheretrace.materials import Material
from spheretrace.scene import Scene


WHITE = Material(Color(1, 1, 1))
LIGHT = PointLight(Point3(0, -100, 0), 1.0)


class TestSceneCreation:
    """Test Scene construction."""

    def test_empty_scene(self):
        scene = Scene([], LIGHT)
        assert len(scene) == 0
        assert scene.light is LIGHT

    def test_spheres_are_frozen_tuple(self):
        spheres = [Sphere(Point3(0, 0, 10), 1.0, WHITE)]
        scene = Scene(spheres, LIGHT)
        spheres.append(Sphere(Point3(0, 0, 20), 1.0, WHITE))
        assert len(scene) == 1
        assert isinstance(scene.spheres, tuple)

    def test_rejects_non_spheres(self):
        with pytest.raises(TypeError):
            Scene(["not a sphere"], LIGHT)

    def test_indexing_and_iteration(self):
        a = Sphere(Point3(0, 0, 10), 1.0, WHITE)
        b = Sphere(Point3(0, 0, 20), 1.0, WHITE)
        scene = Scene([a, b], LIGHT)
        assert scene[0] is a
        assert scene[1] is b
        assert list(scene) == [a, b]

    def test_with_spheres_returns_new_scene(self):
        a = Sphere(Point3(0, 0, 10), 1.0, WHITE)
        b = Sphere(Point3(0, 0, 20), 1.0, WHITE)
        scene = Scene([a], LIGHT)
        extended = scene.with_spheres([b])
        assert len(scene) == 1
        assert len(extended) == 2
        assert extended.light is LIGHT


class TestNearestHit:
    """Test Scene.nearest_hit."""

    def test_empty_scene_no_hit(self):
        scene = Scene([], LIGHT)
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    def test_miss_returns_none(self):
        scene = Scene([Sphere(Point3(50, 50, 10), 1.0, WHITE)], LIGHT)
        assert scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1))) is None

    def test_single_hit(self):
        scene = Scene([Sphere(Point3(0, 0, 10), 1.0, WHITE)], LIGHT)
        hit = scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit is not None
        assert hit.index == 0
        assert abs(hit.distance - 9.0) < 1e-9

    @pytest.mark.parametrize("reverse", [False, True])
    def test_closest_wins_regardless_of_order(self, reverse):
        near = Sphere(Point3(0, 0, 10), 2.0, WHITE)
        far = Sphere(Point3(0, 0, 13), 4.0, WHITE)  # overlaps near
        spheres = [far, near] if reverse else [near, far]
        scene = Scene(spheres, LIGHT)

        hit = scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))

        assert hit is not None
        assert scene[hit.index] is near
        assert abs(hit.distance - 8.0) < 1e-9

    def test_tie_keeps_first(self):
        a = Sphere(Point3(0, 0, 10), 1.0, WHITE)
        b = Sphere(Point3(0, 0, 10), 1.0, Material(Color(0, 1, 0)))
        scene = Scene([a, b], LIGHT)
        hit = scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.index == 0

    def test_ignores_spheres_behind(self):
        behind = Sphere(Point3(0, 0, -10), 1.0, WHITE)
        ahead = Sphere(Point3(0, 0, 30), 1.0, WHITE)
        scene = Scene([behind, ahead], LIGHT)
        hit = scene.nearest_hit(Ray(Point3(0, 0, 0), Vec3(0, 0, 1)))
        assert hit.index == 1
