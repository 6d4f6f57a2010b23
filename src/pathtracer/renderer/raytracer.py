# renderer/raytracer.py
import logging
import numpy as np
from typing import Optional
from pathtracer.config import RENDER_SETTINGS, SCENE_SETTINGS
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from .kernels import accumulate_frame, estimate_frame, trace_ray

logger = logging.getLogger(__name__)

def make_environment(day: bool, settings: Optional[dict] = None):
    """Build the background description the kernels expect."""
    settings = SCENE_SETTINGS if settings is None else settings
    return (
        bool(day),
        np.array(settings['background_color'], dtype=np.float32),
        np.array(settings['sky_horizon_color'], dtype=np.float32),
        np.array(settings['sky_zenith_color'], dtype=np.float32),
    )

class Renderer:
    """
    Progressive renderer: owns the per-pixel accumulation buffer and the
    count of frames accumulated since the last reset.

    Buffers are ``(height, width, 3)`` float32 arrays in linear RGB, row 0 at
    the bottom of the image.
    """
    def __init__(self, width: int, height: int,
                 samples_per_bounce: int = RENDER_SETTINGS['samples_per_bounce'],
                 bounces: int = RENDER_SETTINGS['bounces'],
                 day: bool = RENDER_SETTINGS['day'],
                 scene_settings: Optional[dict] = None):
        if samples_per_bounce < 1:
            raise ValueError(f"samples_per_bounce must be at least 1, got {samples_per_bounce}")
        if bounces < 0:
            raise ValueError(f"bounces must not be negative, got {bounces}")

        scene_settings = SCENE_SETTINGS if scene_settings is None else scene_settings
        self.samples_per_bounce = samples_per_bounce
        self.max_depth = bounces
        self.environment = make_environment(day, scene_settings)
        self.epsilon = np.float32(scene_settings['surface_epsilon'])

        self.scene_arrays = None
        self.scene_version = None

        self.width = 0
        self.height = 0
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        """Reallocate the buffers for a new surface size and start over."""
        if width < 0 or height < 0:
            raise ValueError(f"invalid surface size {width}x{height}")
        self.width = width
        self.height = height
        self.accumulation_buffer = np.zeros((height, width, 3), dtype=np.float32)
        self.estimate_buffer = np.zeros((height, width, 3), dtype=np.float32)
        self.frames_since_movement = 0
        logger.info("Render resolution set to %dx%d", width, height)

    def reset_accumulation(self) -> None:
        """Drop the accumulated history when the scene or camera changes."""
        self.accumulation_buffer.fill(0)
        self.frames_since_movement = 0

    def update_scene_data(self, world) -> None:
        """Repack the world's objects for the kernels; the history is discarded."""
        self.scene_arrays = world.to_arrays()
        self.scene_version = world.version
        self.reset_accumulation()
        logger.debug("Scene data updated: %d objects (version %d)", len(world), world.version)

    def render_frame(self, camera, world) -> np.ndarray:
        """
        Trace one noisy estimate per pixel and fold it into the running mean.
        Returns the accumulation buffer itself.
        """
        if self.scene_version != world.version:
            self.update_scene_data(world)

        if self.width == 0 or self.height == 0:
            return self.accumulation_buffer

        position, right, up, forward = camera.basis_arrays()
        estimate_frame(self.estimate_buffer, position, right, up, forward,
                       self.scene_arrays, self.environment,
                       self.max_depth, self.samples_per_bounce, self.epsilon)
        return self.accumulate(self.estimate_buffer)

    def accumulate(self, estimate: np.ndarray) -> np.ndarray:
        """
        Blend a per-pixel estimate into the accumulator with weight
        1 / (frames_since_movement + 1), then count the frame.
        """
        if estimate.shape != self.accumulation_buffer.shape:
            raise ValueError(f"estimate shape {estimate.shape} does not match "
                             f"accumulator shape {self.accumulation_buffer.shape}")
        accumulate_frame(self.accumulation_buffer, estimate.astype(np.float32, copy=False),
                         self.frames_since_movement)
        self.frames_since_movement += 1
        return self.accumulation_buffer

def trace(ray: Ray, world, depth: int,
          samples_per_bounce: int = RENDER_SETTINGS['samples_per_bounce'],
          day: bool = RENDER_SETTINGS['day'],
          scene_settings: Optional[dict] = None) -> Vector3:
    """Estimate the radiance arriving along a single ray."""
    scene_settings = SCENE_SETTINGS if scene_settings is None else scene_settings
    origin = ray.origin.to_array(np.float32)
    direction = ray.direction.to_array(np.float32)
    color = trace_ray(origin[0], origin[1], origin[2],
                      direction[0], direction[1], direction[2],
                      world.to_arrays(), make_environment(day, scene_settings),
                      depth, samples_per_bounce,
                      np.float32(scene_settings['surface_epsilon']))
    return Vector3.from_iterable(color)
