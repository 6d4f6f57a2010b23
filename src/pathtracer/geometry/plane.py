# geometry/plane.py
from typing import Optional
from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray
from pathtracer.geometry.hittable import Hittable, HitRecord, PLANE

class Plane(Hittable):
    """
    One-sided infinite plane ``{p : normal . p + distance_along_normal = 0}``.

    It is only visible from the side its normal points to.
    """
    kind = PLANE

    def __init__(self, normal: Vector3, distance_along_normal: float, material):
        length = normal.length()
        if length == 0:
            raise ValueError("plane normal must not be the zero vector")
        super().__init__(material)
        # Scale both terms so the surface stays where the caller put it
        self.normal = normal / length
        self.distance_along_normal = float(distance_along_normal) / length

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        vd = self.normal.dot(ray.direction)
        # vd == 0 would make the plane double sided
        if vd >= 0:
            return None

        vo = -(self.normal.dot(ray.origin) + self.distance_along_normal)
        distance = vo / vd
        if distance <= 0:
            return None

        return HitRecord(ray.at(distance), self.normal, distance, self.material)

    def shape_data(self):
        return self.normal, self.distance_along_normal

    def __repr__(self) -> str:
        return f"Plane(normal={self.normal!r}, distance_along_normal={self.distance_along_normal})"
