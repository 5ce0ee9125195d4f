"""Tests for Renderer class."""

import pytest
import time
import numpy as np

from spheretrace.vec3 import Vec3, Point3, Color
from spheretrace.camera import OrthoCamera
from spheretrace.shapes import Sphere
from spheretrace.lights import PointLight
from spheretrace.materials import Material, Reflective
from spheretrace.scene import Scene
from spheretrace.framebuffer import Framebuffer
from spheretrace.renderer import Renderer, RenderSettings
from spheretrace.scenes import single_sphere_scene, occluded_sphere_scene, random_scene

BACKGROUND = (20, 20, 20)
CENTER_X, CENTER_Y, RADIUS = 125, 75, 20


def disk_distance2(x, y):
    return (x - CENTER_X) ** 2 + (y - CENTER_Y) ** 2


def facing_cosine(xs, ys):
    """Cosine between the visible sphere normal and the light direction."""
    light = np.array([125.0, -100.0, 100.0])
    dx, dy = xs - CENTER_X, ys - CENTER_Y
    dz = -np.sqrt(np.clip(RADIUS ** 2 - dx ** 2 - dy ** 2, 0.0, None))
    hit = np.stack([xs, ys, 100.0 + dz], axis=-1).astype(np.float64)
    normal = np.stack([dx, dy, dz], axis=-1) / RADIUS
    to_light = light - hit
    to_light /= np.linalg.norm(to_light, axis=-1, keepdims=True)
    return (normal * to_light).sum(axis=-1)


@pytest.fixture(scope="module")
def single_image():
    return Renderer(RenderSettings(width=256, height=256)).render(single_sphere_scene()).to_array()


@pytest.fixture(scope="module")
def occluded_image():
    return Renderer(RenderSettings(width=256, height=256)).render(occluded_sphere_scene()).to_array()


class TestRenderSettings:
    """Test RenderSettings configuration."""

    def test_default_values(self):
        settings = RenderSettings()
        assert settings.width == 256
        assert settings.height == 256
        assert settings.background_color == Color(20, 20, 20)
        assert settings.shadow_bias == 1e-3
        assert settings.max_recursion_depth == 5
        assert settings.apply_albedo is False
        assert settings.num_threads == 1

    def test_auto_thread_detection(self):
        settings = RenderSettings(num_threads=0)
        import os
        assert settings.num_threads == (os.cpu_count() or 4)

    @pytest.mark.parametrize("kwargs", [
        {"width": 0},
        {"height": -1},
        {"shadow_bias": -0.1},
        {"max_recursion_depth": -1},
        {"tile_size": 0},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            RenderSettings(**kwargs)


class TestRendererBasic:
    """Test basic renderer functionality."""

    def test_render_produces_framebuffer(self):
        renderer = Renderer(RenderSettings(width=10, height=8))
        fb = renderer.render(Scene([], PointLight(Point3(0, 0, 0), 1.0)))
        assert isinstance(fb, Framebuffer)
        assert fb.to_array().shape == (8, 10, 3)

    def test_empty_scene_is_all_background(self):
        renderer = Renderer(RenderSettings(width=10, height=10))
        image = renderer.render(Scene([], PointLight(Point3(0, 0, 0), 1.0))).to_array()
        assert (image == 20).all()

    def test_custom_background(self):
        settings = RenderSettings(width=4, height=4, background_color=Color(1, 2, 3))
        image = Renderer(settings).render(Scene([], PointLight(Point3(0, 0, 0), 1.0))).to_array()
        assert tuple(image[0, 0]) == (1, 2, 3)

    def test_renders_into_given_framebuffer(self):
        fb = Framebuffer(6, 6)
        result = Renderer(RenderSettings(width=6, height=6)).render(
            Scene([], PointLight(Point3(0, 0, 0), 1.0)), framebuffer=fb
        )
        assert result is fb
        assert fb.get_pixel(5, 5) == BACKGROUND

    def test_framebuffer_size_mismatch(self):
        with pytest.raises(ValueError):
            Renderer(RenderSettings(width=6, height=6)).render(
                Scene([], PointLight(Point3(0, 0, 0), 1.0)), framebuffer=Framebuffer(5, 6)
            )

    def test_camera_behind_sphere_sees_nothing(self):
        sphere = Sphere(Point3(5, 5, 10), 3.0, Material(Color(1, 1, 1)))
        scene = Scene([sphere], PointLight(Point3(5, -20, 10), 10.0))
        image = Renderer(RenderSettings(width=10, height=10)).render(scene, OrthoCamera(z=20)).to_array()
        assert (image == 20).all()

    def test_bright_colors_clamp(self):
        sphere = Sphere(Point3(5, 5, 10), 4.0, Material(Color(1000, 1000, 1000)))
        scene = Scene([sphere], PointLight(Point3(5, 5, -100), 10.0))
        image = Renderer(RenderSettings(width=10, height=10)).render(scene).to_array()
        assert tuple(image[5, 5]) == (255, 255, 255)

    def test_progress_callback(self):
        progress = []
        renderer = Renderer(RenderSettings(width=4, height=10, tile_size=3))
        renderer.set_progress_callback(progress.append)
        renderer.render(Scene([], PointLight(Point3(0, 0, 0), 1.0)))
        assert len(progress) == 4
        assert progress[-1] == 1.0

    def test_threaded_progress_is_ordered(self):
        progress = []
        active = [0]
        overlaps = []

        def callback(fraction):
            active[0] += 1
            overlaps.append(active[0] > 1)
            time.sleep(0.001)
            progress.append(fraction)
            active[0] -= 1

        renderer = Renderer(RenderSettings(width=8, height=40, tile_size=1, num_threads=4))
        renderer.set_progress_callback(callback)
        renderer.render(random_scene(seed=2, count=3))

        assert len(progress) == 40
        assert not any(overlaps)
        assert progress == sorted(progress)
        assert progress[-1] == 1.0


class TestRenderHdr:
    """Test unclamped output."""

    def test_shape_and_background(self):
        renderer = Renderer(RenderSettings(width=6, height=4))
        image = renderer.render_hdr(Scene([], PointLight(Point3(0, 0, 0), 1.0)))
        assert image.shape == (4, 6, 3)
        assert image.dtype == np.float64
        assert (image == 20.0).all()

    def test_values_not_clamped(self):
        sphere = Sphere(Point3(5, 5, 10), 4.0, Material(Color(1000, 1000, 1000)))
        scene = Scene([sphere], PointLight(Point3(5, 5, -100), 10.0))
        image = Renderer(RenderSettings(width=10, height=10)).render_hdr(scene)
        assert image[5, 5, 0] > 255

    def test_hdr_matches_ldr(self):
        renderer = Renderer(RenderSettings(width=256, height=256))
        scene = single_sphere_scene()
        hdr = renderer.render_hdr(scene)
        ldr = renderer.render(scene).to_array()
        assert (np.clip(hdr, 0, 255).astype(np.uint8) == ldr).all()


class TestSingleSphereScenario:
    """One white sphere lit from negative Y on a 256x256 image."""

    def test_outside_disk_is_background(self, single_image):
        ys, xs = np.mgrid[0:256, 0:256]
        outside = disk_distance2(xs, ys) > RADIUS ** 2
        assert (single_image[outside] == BACKGROUND).all()

    def test_facing_pixels_brighter_than_background(self, single_image):
        ys, xs = np.mgrid[0:256, 0:256]
        inside = disk_distance2(xs, ys) < RADIUS ** 2
        cosine = facing_cosine(xs, ys)
        facing = inside & (cosine > 0.05)
        assert facing.sum() > 100
        assert (single_image[facing] > BACKGROUND[0]).all()

    def test_turned_away_pixels_are_black(self, single_image):
        ys, xs = np.mgrid[0:256, 0:256]
        inside = disk_distance2(xs, ys) < RADIUS ** 2
        away = inside & (facing_cosine(xs, ys) < -0.01)
        assert away.sum() > 100
        assert (single_image[away] == 0).all()

    def test_lit_hemisphere_is_bright(self, single_image):
        # Rows above the center face the light
        for x, y in [(125, 60), (120, 58), (130, 70)]:
            assert single_image[y, x].min() > BACKGROUND[0]

    def test_lit_peak_saturates(self, single_image):
        assert tuple(single_image[60, 125]) == (255, 255, 255)

    def test_far_side_is_dark(self, single_image):
        assert tuple(single_image[92, 125]) == (0, 0, 0)


class TestOccludedScenario:
    """A larger sphere between the white sphere and the light."""

    def test_lit_hemisphere_now_in_shadow(self, single_image, occluded_image):
        for x, y in [(125, 60), (120, 58), (130, 70)]:
            assert single_image[y, x].min() > 0
            assert tuple(occluded_image[y, x]) == (0, 0, 0)

    def test_whole_first_disk_is_shadowed(self, occluded_image):
        ys, xs = np.mgrid[0:256, 0:256]
        inside = disk_distance2(xs, ys) < RADIUS ** 2
        assert (occluded_image[inside] == 0).all()

    def test_far_background_unchanged(self, single_image, occluded_image):
        assert tuple(occluded_image[200, 200]) == BACKGROUND
        assert (occluded_image[200:, :] == single_image[200:, :]).all()


class TestParallelRendering:
    """Output must not depend on the worker count."""

    def test_threads_match_sequential(self):
        scene = random_scene(seed=3, count=6)
        sequential = Renderer(RenderSettings(width=64, height=64, num_threads=1)).render(scene)
        parallel = Renderer(RenderSettings(width=64, height=64, num_threads=4, tile_size=5)).render(scene)
        assert (sequential.to_array() == parallel.to_array()).all()

    def test_reflective_scene_renders(self):
        mirror = Sphere(Point3(20, 20, 50), 15.0, Material(Color(60, 60, 60), surface=Reflective(0.5)))
        other = Sphere(Point3(45, 20, 50), 8.0, Material(Color(90, 10, 10)))
        scene = Scene([mirror, other], PointLight(Point3(30, -50, 20), 20.0))
        image = Renderer(RenderSettings(width=64, height=40, num_threads=2)).render(scene).to_array()
        assert image.shape == (40, 64, 3)
        assert tuple(image[0, 63]) == BACKGROUND
