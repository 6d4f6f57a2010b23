"""
Configuration settings for the path tracer
"""
import logging
import math
import os

# Rendering settings
RENDER_SETTINGS = {
    'width': 640,
    'height': 480,
    'samples_per_bounce': 2,  # camera rays per pixel and secondary rays per hit
    'bounces': 5,             # recursion depth of the integrator
    'day': False,             # sky gradient instead of the constant background
}

# Camera settings
CAMERA_SETTINGS = {
    'position': (0.0, 1.0, -3.0),
    'yaw': math.pi,           # yaw 0 looks toward -z, pi toward +z
    'pitch': 0.0,
    'move_speed': 3.0,        # world units per second
    'rotation_speed': math.radians(60),
}

# Scene settings
SCENE_SETTINGS = {
    'background_color': (0.1, 0.1, 0.1),
    'sky_horizon_color': (1.0, 1.0, 1.0),
    'sky_zenith_color': (0.5, 0.7, 1.0),
    'surface_epsilon': 0.001,
    'light_radius': 0.25,
    'light_emit_color': (4.0, 3.8, 3.6),
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL = os.environ.get("PATHTRACER_LOG_LEVEL", "INFO")

def setup_logging(level: str = None) -> logging.Logger:
    """
    Install a console handler on the package logger.

    Args:
        level: Log level name, defaults to LOG_LEVEL

    Returns:
        The configured ``pathtracer`` logger
    """
    if level is None:
        level = LOG_LEVEL

    logger = logging.getLogger("pathtracer")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
