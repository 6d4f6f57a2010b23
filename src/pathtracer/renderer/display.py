# renderer/display.py
import numpy as np

def to_surface_array(frame: np.ndarray) -> np.ndarray:
    """
    Convert a linear (height, width, 3) radiance buffer, row 0 at the bottom,
    into the (width, height, 3) uint8 layout pygame.surfarray expects, row 0
    at the top. Values are clipped to [0, 1] and not gamma corrected.
    """
    flipped = frame[::-1]
    output = (np.clip(flipped, 0.0, 1.0) * 255).astype(np.uint8)
    return np.ascontiguousarray(output.transpose(1, 0, 2))
