# geometry/sphere.py
import math
from typing import Optional
from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import Hittable, HitRecord, SPHERE

class Sphere(Hittable):
    """
    Represents a sphere defined by its center, radius, and material.
    """
    kind = SPHERE

    def __init__(self, center: Vector3, radius: float, material):
        if radius <= 0:
            raise ValueError(f"sphere radius must be positive, got {radius}")
        super().__init__(material)
        self.center = center
        self.radius = float(radius)

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        oc = ray.origin - self.center
        a = ray.direction.dot(ray.direction)
        half_b = oc.dot(ray.direction)
        c = oc.dot(oc) - self.radius * self.radius
        discriminant = half_b * half_b - a * c

        if discriminant < 0:
            return None

        # Only the near root counts; an origin inside the sphere sees nothing.
        root = (-half_b - math.sqrt(discriminant)) / a
        if root <= 0:
            return None

        position = ray.at(root)
        normal = (position - self.center) / self.radius
        return HitRecord(position, normal, root, self.material)

    def shape_data(self):
        return self.center, self.radius

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius})"
