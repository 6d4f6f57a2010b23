# geometry/hittable.py
from typing import Optional
from pathtracer.core.vector import Vector3
from pathtracer.core.ray import Ray

# Kind tags shared with the compiled kernels (see renderer/kernels.py).
SPHERE = 0
PLANE = 1

class HitRecord:
    """
    Records details of a ray-object intersection.
    """
    __slots__ = ("position", "normal", "distance", "material")

    def __init__(self, position: Vector3, normal: Vector3, distance: float, material):
        self.position = position    # Intersection point
        self.normal = normal        # Unit normal on the side the ray came from
        self.distance = distance    # Ray parameter at intersection, always > 0
        self.material = material

    def __repr__(self) -> str:
        return (f"HitRecord(position={self.position!r}, normal={self.normal!r}, "
                f"distance={self.distance})")

class Hittable:
    """
    Base class for the closed set of object kinds a World can hold.

    Only Sphere and Plane derive from it; each carries a ``kind`` tag that the
    kernels dispatch on and packs its shape into one vector and one scalar.
    """
    kind: int = -1

    def __init__(self, material):
        self.material = material

    def hit(self, ray: Ray) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def shape_data(self):
        """Return the (vector, scalar) pair describing this object's surface."""
        raise NotImplementedError("shape_data() must be implemented by subclasses.")
