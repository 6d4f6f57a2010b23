# materials/presets.py
from pathtracer.core.vector import Vector3
from pathtracer.materials.material import Material

class ColorPresets:
    """Common color presets for materials."""

    RED = Vector3(0.8, 0.3, 0.2)
    GRASS = Vector3(0.2, 0.8, 0.3)
    BLACK = Vector3(0.0, 0.0, 0.0)

    @staticmethod
    def matte(color: Vector3) -> Material:
        """Create a purely diffuse material with the given color."""
        return Material(color)

class MetalPresets:
    """Reflective materials; the diffuse color tints every bounce."""

    @staticmethod
    def mirror() -> Material:
        return Material(Vector3(0.95, 0.95, 0.95), reflectiveness=1.0)

class LightPresets:
    """Emissive materials with different colors and intensities."""

    @staticmethod
    def warm_light(intensity: float = 1.0) -> Material:
        return Material(ColorPresets.BLACK, Vector3(1.0, 0.95, 0.9) * intensity)

    @staticmethod
    def from_color(color, intensity: float = 1.0) -> Material:
        return Material(ColorPresets.BLACK, Vector3.from_iterable(color) * intensity)
