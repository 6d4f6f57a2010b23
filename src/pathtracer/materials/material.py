# materials/material.py
from typing import Union
from pathtracer.core.vector import Vector3

ColorLike = Union[Vector3, tuple]

class Material:
    """
    Surface description shared by every object kind.

    The outgoing radiance at a hit is ``emit_color + diffuse_color * incoming``.
    ``reflectiveness`` blends each sampled bounce direction between a random
    direction in the reflection hemisphere (0.0) and the mirror direction (1.0).

    Materials are immutable once created so that they can be shared between
    objects and copied into hit records without aliasing surprises.
    """
    __slots__ = ("diffuse_color", "emit_color", "reflectiveness")

    def __init__(self, diffuse_color: ColorLike, emit_color: ColorLike = (0.0, 0.0, 0.0),
                 reflectiveness: float = 0.0):
        reflectiveness = float(reflectiveness)
        if not 0.0 <= reflectiveness <= 1.0:
            raise ValueError(f"reflectiveness must be within [0, 1], got {reflectiveness}")
        object.__setattr__(self, "diffuse_color", _as_color(diffuse_color))
        object.__setattr__(self, "emit_color", _as_color(emit_color))
        object.__setattr__(self, "reflectiveness", reflectiveness)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def is_emissive(self) -> bool:
        return any(c > 0.0 for c in self.emit_color)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Material):
            return NotImplemented
        return (self.diffuse_color == other.diffuse_color
                and self.emit_color == other.emit_color
                and self.reflectiveness == other.reflectiveness)

    def __hash__(self) -> int:
        return hash((tuple(self.diffuse_color), tuple(self.emit_color), self.reflectiveness))

    def __repr__(self) -> str:
        return (f"Material(diffuse_color={self.diffuse_color!r}, "
                f"emit_color={self.emit_color!r}, reflectiveness={self.reflectiveness})")

def _as_color(value: ColorLike) -> Vector3:
    if isinstance(value, Vector3):
        return Vector3(value.x, value.y, value.z)
    return Vector3.from_iterable(value)
