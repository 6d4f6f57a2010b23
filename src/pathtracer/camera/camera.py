# camera/camera.py
import math
from typing import Tuple
import numpy as np
from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray

MAX_PITCH = math.radians(89)

class Camera:
    """
    Pinhole camera with an orthonormal right/up/forward basis derived from
    yaw and pitch. The image plane sits at unit distance along ``forward``
    and spans [-aspect, aspect] x [-1, 1].
    """
    def __init__(self, position: Vector3, yaw: float = 0.0, pitch: float = 0.0):
        self.position = position
        self.yaw = yaw
        self.pitch = pitch
        self.update_camera()

    def update_camera(self):
        """Updates the camera's basis vectors."""
        global_up = Vector3(0, 1, 0)

        self.forward = Vector3(
            math.sin(self.yaw) * math.cos(self.pitch),
            math.sin(self.pitch),
            -math.cos(self.yaw) * math.cos(self.pitch)
        ).normalize()

        self.right = self.forward.cross(global_up).normalize()
        self.up = self.right.cross(self.forward).normalize()

    @staticmethod
    def get_uv(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
        """Map a pixel coordinate to the normalized image plane."""
        return x / width, y / height

    def get_ray(self, uv: Tuple[float, float], aspect: float) -> Ray:
        """Generates the ray through ``uv`` for an image of the given aspect ratio."""
        u, v = uv
        direction = (self.right * ((u * 2.0 - 1.0) * aspect)
                     + self.up * (v * 2.0 - 1.0)
                     + self.forward)
        return Ray(self.position, direction.normalize())

    def move(self, offset: Vector3):
        self.position = self.position + offset

    def rotate(self, d_yaw: float, d_pitch: float):
        self.yaw += d_yaw
        # Clamp pitch to prevent camera flip
        self.pitch = max(min(self.pitch + d_pitch, MAX_PITCH), -MAX_PITCH)
        self.update_camera()

    def basis_arrays(self):
        """Position and basis as float32 arrays for the kernels."""
        return (self.position.to_array(np.float32), self.right.to_array(np.float32),
                self.up.to_array(np.float32), self.forward.to_array(np.float32))

    def __repr__(self) -> str:
        return f"Camera(position={self.position!r}, yaw={self.yaw}, pitch={self.pitch})"
