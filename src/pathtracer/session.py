# session.py
"""
Interactive session state: the camera, the world and the renderer, plus the
platform-neutral input events the host loop feeds in.

All mutation happens in ``handle_event`` and ``update``, which the host calls
before ``render`` every frame; the render kernels only read the snapshot.
"""
import logging
from typing import Mapping, Optional, Tuple
import numpy as np
from pathtracer.camera.camera import Camera
from pathtracer.config import CAMERA_SETTINGS, RENDER_SETTINGS, SCENE_SETTINGS
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import HitRecord
from pathtracer.geometry.sphere import Sphere
from pathtracer.geometry.world import World, create_default_world
from pathtracer.materials.presets import LightPresets
from pathtracer.renderer.raytracer import Renderer

logger = logging.getLogger(__name__)

LEFT_BUTTON = 1

# Held-key actions understood by Session.update
MOVE_ACTIONS = ('forward', 'back', 'left', 'right', 'up', 'down')
TURN_ACTIONS = ('yaw_left', 'yaw_right', 'pitch_up', 'pitch_down')

class ResizeEvent:
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

class ClickEvent:
    """Pointer click in window pixels, y growing downwards."""
    def __init__(self, x: int, y: int, button: int = LEFT_BUTTON):
        self.x = x
        self.y = y
        self.button = button

class CloseEvent:
    pass

class Session:
    def __init__(self, width: int, height: int, world: Optional[World] = None,
                 camera: Optional[Camera] = None,
                 render_settings: Optional[dict] = None, camera_settings: Optional[dict] = None,
                 scene_settings: Optional[dict] = None):
        render_settings = RENDER_SETTINGS if render_settings is None else render_settings
        self.camera_settings = CAMERA_SETTINGS if camera_settings is None else camera_settings
        self.scene_settings = SCENE_SETTINGS if scene_settings is None else scene_settings

        self.world = create_default_world() if world is None else world
        if camera is None:
            camera = Camera(Vector3.from_iterable(self.camera_settings['position']),
                            yaw=self.camera_settings['yaw'],
                            pitch=self.camera_settings['pitch'])
        self.camera = camera
        self.renderer = Renderer(width, height,
                                 samples_per_bounce=render_settings['samples_per_bounce'],
                                 bounces=render_settings['bounces'],
                                 day=render_settings['day'],
                                 scene_settings=self.scene_settings)
        self.renderer.update_scene_data(self.world)
        self.running = True

    @property
    def frames_since_movement(self) -> int:
        return self.renderer.frames_since_movement

    @property
    def size(self) -> Tuple[int, int]:
        return self.renderer.width, self.renderer.height

    def handle_event(self, event) -> None:
        if isinstance(event, CloseEvent):
            self.running = False
        elif isinstance(event, ResizeEvent):
            if (event.width, event.height) != self.size:
                self.renderer.resize(event.width, event.height)
        elif isinstance(event, ClickEvent):
            if event.button == LEFT_BUTTON:
                self.add_light_at(event.x, event.y)

    def pick(self, x: float, y: float) -> Optional[Tuple[HitRecord, int]]:
        """Closest object under a window pixel, or None."""
        width, height = self.size
        if width == 0 or height == 0:
            return None
        uv = Camera.get_uv(x + 0.5, height - y - 0.5, width, height)
        ray = self.camera.get_ray(uv, width / height)
        return self.world.closest_hit(ray)

    def add_light_at(self, x: float, y: float) -> Optional[int]:
        """
        Place an emissive sphere resting on whatever surface lies under the
        pointer. Returns the new object's index, or None on a miss.
        """
        picked = self.pick(x, y)
        if picked is None:
            return None

        hit, index = picked
        radius = self.scene_settings['light_radius']
        center = hit.position + hit.normal * radius
        material = LightPresets.from_color(self.scene_settings['light_emit_color'])
        new_index = self.world.add(Sphere(center, radius, material))
        self.renderer.update_scene_data(self.world)
        logger.info("Added light %d at %r on object %d", new_index, center, index)
        return new_index

    def update(self, dt: float, held: Mapping[str, bool]) -> bool:
        """
        Apply held movement keys for ``dt`` seconds. Returns True if the
        camera moved, in which case the accumulation restarts.
        """
        moved = False

        turn = self.camera_settings['rotation_speed'] * dt
        d_yaw = (held.get('yaw_right', False) - held.get('yaw_left', False)) * turn
        d_pitch = (held.get('pitch_up', False) - held.get('pitch_down', False)) * turn
        if d_yaw or d_pitch:
            self.camera.rotate(d_yaw, d_pitch)
            moved = True

        forward = self.camera.forward
        right = self.camera.right
        world_up = Vector3(0, 1, 0)
        directions = dict(zip(MOVE_ACTIONS, (forward, -forward, -right, right, world_up, -world_up)))
        move_dir = Vector3(0, 0, 0)
        for action in MOVE_ACTIONS:
            if held.get(action):
                move_dir = move_dir + directions[action]

        if move_dir.length() > 0 and dt > 0:
            self.camera.move(move_dir.normalize() * (self.camera_settings['move_speed'] * dt))
            moved = True

        if moved:
            self.renderer.reset_accumulation()
        return moved

    def render(self) -> np.ndarray:
        return self.renderer.render_frame(self.camera, self.world)
