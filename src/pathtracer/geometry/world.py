# src/geometry/world.py
import logging
from typing import List, Optional, Tuple
import numpy as np
from pathtracer.core.ray import Ray
from pathtracer.core.vector import Vector3
from pathtracer.geometry.hittable import Hittable, HitRecord
from pathtracer.geometry.plane import Plane
from pathtracer.geometry.sphere import Sphere
from pathtracer.materials.presets import ColorPresets, LightPresets, MetalPresets

logger = logging.getLogger(__name__)

class World:
    """
    An append-only list of objects. Besides storing the objects we keep their
    flattened array form for the compiled kernels, rebuilt whenever the list grows.
    """
    def __init__(self, objects: Optional[List[Hittable]] = None):
        self.objects: List[Hittable] = []
        self.version = 0
        self._arrays = None
        for obj in objects or ():
            self.add(obj)

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def add(self, obj: Hittable) -> int:
        """Append an object and return its index."""
        if not isinstance(obj, (Sphere, Plane)):
            raise TypeError(f"unsupported object kind: {type(obj).__name__}")
        self.objects.append(obj)
        self.version += 1
        self._arrays = None
        return len(self.objects) - 1

    def closest_hit(self, ray: Ray) -> Optional[Tuple[HitRecord, int]]:
        """
        Intersect every object and return the nearest hit with its index.
        Exact ties keep the first object in list order.
        """
        closest = None
        for index, obj in enumerate(self.objects):
            rec = obj.hit(ray)
            if rec is None:
                continue
            if closest is None or rec.distance < closest[0].distance:
                closest = (rec, index)
        return closest

    def to_arrays(self):
        """
        Flatten the objects into the tuple of arrays the kernels consume:
        (kinds, vectors, scalars, diffuse, emit, reflectiveness).
        """
        if self._arrays is None:
            n = len(self.objects)
            kinds = np.zeros(n, dtype=np.int32)
            vectors = np.zeros((n, 3), dtype=np.float32)
            scalars = np.zeros(n, dtype=np.float32)
            diffuse = np.zeros((n, 3), dtype=np.float32)
            emit = np.zeros((n, 3), dtype=np.float32)
            reflectiveness = np.zeros(n, dtype=np.float32)

            for i, obj in enumerate(self.objects):
                vector, scalar = obj.shape_data()
                kinds[i] = obj.kind
                vectors[i] = vector.to_array()
                scalars[i] = scalar
                diffuse[i] = obj.material.diffuse_color.to_array()
                emit[i] = obj.material.emit_color.to_array()
                reflectiveness[i] = obj.material.reflectiveness

            self._arrays = (kinds, vectors, scalars, diffuse, emit, reflectiveness)
        return self._arrays

def create_default_world() -> World:
    world = World()

    # Ground plane (y = 0), visible from above only
    world.add(Plane(Vector3(0, 1, 0), 0.0, ColorPresets.matte(ColorPresets.GRASS)))

    world.add(Sphere(Vector3(0, 1, 0), 1.0, ColorPresets.matte(ColorPresets.RED)))
    world.add(Sphere(Vector3(2.5, 1, 1), 1.0, MetalPresets.mirror()))

    # Main light source
    world.add(Sphere(Vector3(-2, 3, -1), 0.5, LightPresets.warm_light(6.0)))

    logger.info("Created default world with %d objects", len(world))
    return world
