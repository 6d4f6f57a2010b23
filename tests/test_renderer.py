"""Tests for progressive accumulation and frame rendering."""

import numpy as np
import pytest

from pathtracer.config import SCENE_SETTINGS
from pathtracer.core.vector import Vector3
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.world import World
from pathtracer.materials.material import Material
from pathtracer.renderer.display import to_surface_array
from pathtracer.renderer.raytracer import Renderer


def random_estimate(rng, height, width):
    return rng.uniform(0.0, 4.0, size=(height, width, 3)).astype(np.float32)


class TestAccumulation:

    def test_first_frame_replaces_stale_contents(self):
        renderer = Renderer(5, 4)
        renderer.accumulation_buffer[...] = 123.0
        estimate = random_estimate(np.random.default_rng(1), 4, 5)

        result = renderer.accumulate(estimate)

        np.testing.assert_array_equal(result, estimate)
        assert renderer.frames_since_movement == 1

    def test_repeated_frames_at_zero_equal_single_estimate(self):
        renderer = Renderer(5, 4)
        rng = np.random.default_rng(2)
        for _ in range(3):
            estimate = random_estimate(rng, 4, 5)
            renderer.reset_accumulation()
            np.testing.assert_array_equal(renderer.accumulate(estimate), estimate)

    @pytest.mark.parametrize("n", [1, 2, 7, 30])
    def test_running_average_equals_mean(self, n):
        renderer = Renderer(3, 2)
        rng = np.random.default_rng(n)
        estimates = [random_estimate(rng, 2, 3) for _ in range(n)]

        for estimate in estimates:
            renderer.accumulate(estimate)

        expected = np.mean(np.stack(estimates).astype(np.float64), axis=0)
        np.testing.assert_allclose(renderer.accumulation_buffer, expected, rtol=1e-5, atol=1e-6)
        assert renderer.frames_since_movement == n

    def test_reset_restarts_average(self):
        renderer = Renderer(3, 2)
        renderer.accumulate(np.full((2, 3, 3), 10.0, dtype=np.float32))
        renderer.accumulate(np.full((2, 3, 3), 20.0, dtype=np.float32))

        renderer.reset_accumulation()
        assert renderer.frames_since_movement == 0
        renderer.accumulate(np.full((2, 3, 3), 1.0, dtype=np.float32))
        renderer.accumulate(np.full((2, 3, 3), 3.0, dtype=np.float32))

        np.testing.assert_allclose(renderer.accumulation_buffer, 2.0)

    def test_shape_mismatch_rejected(self):
        renderer = Renderer(3, 2)
        with pytest.raises(ValueError):
            renderer.accumulate(np.zeros((3, 2, 3), dtype=np.float32))

    def test_invalid_settings_rejected(self):
        with pytest.raises(ValueError):
            Renderer(3, 2, samples_per_bounce=0)
        with pytest.raises(ValueError):
            Renderer(-1, 2)


class TestRenderFrame:

    def test_empty_world_renders_background(self, reference_camera):
        renderer = Renderer(8, 6)
        frame = renderer.render_frame(reference_camera, World())

        assert frame.shape == (6, 8, 3)
        assert frame.dtype == np.float32
        np.testing.assert_allclose(frame, np.broadcast_to(SCENE_SETTINGS['background_color'], frame.shape),
                                   rtol=1e-6)
        assert renderer.frames_since_movement == 1

    def test_reference_scene_frames_are_finite_and_non_negative(self, reference_world,
                                                               reference_camera):
        renderer = Renderer(16, 12, bounces=3)
        for expected_frames in range(1, 4):
            frame = renderer.render_frame(reference_camera, reference_world)
            assert renderer.frames_since_movement == expected_frames
            assert np.all(np.isfinite(frame))
            assert np.all(frame >= 0.0)

    def test_lit_scene_receives_light(self, reference_world, reference_camera):
        reference_world.add(Sphere(Vector3(0, 3, -1), 0.5, Material((0, 0, 0), (5, 5, 5))))
        renderer = Renderer(16, 12, bounces=3)
        frame = renderer.render_frame(reference_camera, reference_world)
        assert frame.max() > SCENE_SETTINGS['background_color'][0]

    def test_scene_change_resets_history(self, reference_world, reference_camera):
        renderer = Renderer(8, 6, bounces=2)
        renderer.render_frame(reference_camera, reference_world)
        renderer.render_frame(reference_camera, reference_world)
        assert renderer.frames_since_movement == 2

        reference_world.add(Sphere(Vector3(2, 1, 0), 0.5, Material((0.5, 0.5, 0.5))))
        renderer.render_frame(reference_camera, reference_world)
        assert renderer.frames_since_movement == 1

    def test_zero_area_frame_is_a_no_op(self, reference_world, reference_camera):
        renderer = Renderer(0, 0)
        frame = renderer.render_frame(reference_camera, reference_world)
        assert frame.size == 0
        assert renderer.frames_since_movement == 0

    def test_pixels_map_to_camera_rays(self, reference_camera):
        # A light up and to the right of the view lands in the upper right of
        # the buffer, whose row 0 is the bottom of the image.
        width, height = 32, 24
        aspect = width / height
        camera = reference_camera
        center = camera.position + camera.forward * 4 + camera.up * 2 + camera.right * 2
        light = Sphere(center, 1.0, Material((0, 0, 0), (5, 5, 5)))
        renderer = Renderer(width, height, bounces=1)

        frame = renderer.render_frame(camera, World([light]))

        rows, cols = np.nonzero(frame[..., 0] > 1.0)
        assert len(rows) > 0
        assert rows.min() >= height // 2
        assert cols.min() >= width // 2

        local = center - camera.position
        depth = local.dot(camera.forward)
        u = (local.dot(camera.right) / depth / aspect + 1) / 2
        v = (local.dot(camera.up) / depth + 1) / 2
        assert frame[round(v * height), round(u * width), 0] > 1.0

        # Every lit pixel has a sample within one pixel of it that reaches the light
        offsets = np.linspace(-1.0, 1.0, 9)
        for y, x in zip(rows, cols):
            assert any(
                light.hit(camera.get_ray(((x + dx) / width, (y + dy) / height), aspect))
                for dx in offsets for dy in offsets
            )

    def test_resize_reallocates_and_resets(self, reference_world, reference_camera):
        renderer = Renderer(8, 6, bounces=2)
        renderer.render_frame(reference_camera, reference_world)

        renderer.resize(4, 3)

        assert renderer.accumulation_buffer.shape == (3, 4, 3)
        assert not renderer.accumulation_buffer.any()
        assert renderer.frames_since_movement == 0


def test_to_surface_array_layout():
    frame = np.zeros((2, 3, 3), dtype=np.float32)
    frame[0, :, 0] = 1.0    # bottom row red
    frame[1, :, 2] = 2.0    # top row over-bright blue
    frame[1, 2, 1] = -1.0

    surface = to_surface_array(frame)

    assert surface.shape == (3, 2, 3)
    assert surface.dtype == np.uint8
    # pygame columns are x, rows y growing downwards
    assert surface[0, 1].tolist() == [255, 0, 0]
    assert surface[0, 0].tolist() == [0, 0, 255]
    assert surface[2, 0].tolist() == [0, 0, 255]
