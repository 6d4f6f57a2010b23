# renderer/kernels.py
"""
Compiled path tracing kernels.

Scenes reach these functions as the tuple produced by ``World.to_arrays()``:

    (kinds, vectors, scalars, diffuse, emit, reflectiveness)

where ``kinds[i]`` selects how ``vectors[i]``/``scalars[i]`` are read
(sphere center and radius, or plane normal and distance along the normal).
The environment is ``(day, background, sky_horizon, sky_zenith)``.

Scene, camera and environment arrays are float32 and all arithmetic stays in
single precision. Vectors travel as separate x, y, z scalars so the inner
loops never allocate; the arrays are only read, which lets every worker
thread share them.
"""
import math
import numpy as np
from numba import njit, prange
from pathtracer.geometry.hittable import PLANE, SPHERE

ZERO = np.float32(0.0)
HALF = np.float32(0.5)
ONE = np.float32(1.0)
TWO = np.float32(2.0)
# Returned by the intersection functions when there is no hit
MISS = np.float32(-1.0)

@njit
def dot(ax, ay, az, bx, by, bz):
    return ax * bx + ay * by + az * bz

@njit
def normalize(x, y, z):
    length = math.sqrt(dot(x, y, z, x, y, z))
    if length > ZERO:
        return x / length, y / length, z / length
    return x, y, z

@njit
def reflect(dx, dy, dz, nx, ny, nz):
    k = TWO * dot(dx, dy, dz, nx, ny, nz)
    return dx - nx * k, dy - ny * k, dz - nz * k

@njit
def intersect_sphere(ox, oy, oz, dx, dy, dz, cx, cy, cz, radius):
    """Distance to the near root of the ray/sphere quadratic, or MISS."""
    ocx = ox - cx
    ocy = oy - cy
    ocz = oz - cz
    a = dot(dx, dy, dz, dx, dy, dz)
    half_b = dot(ocx, ocy, ocz, dx, dy, dz)
    c = dot(ocx, ocy, ocz, ocx, ocy, ocz) - radius * radius
    discriminant = half_b * half_b - a * c

    if discriminant < ZERO:
        return MISS

    distance = (-half_b - math.sqrt(discriminant)) / a
    if distance <= ZERO:
        return MISS
    return distance

@njit
def intersect_plane(ox, oy, oz, dx, dy, dz, nx, ny, nz, distance_along_normal):
    """Distance along the ray, or MISS; planes are visible from the normal side only."""
    vd = dot(nx, ny, nz, dx, dy, dz)
    # vd == 0 would make the plane double sided
    if vd >= ZERO:
        return MISS

    vo = -(dot(nx, ny, nz, ox, oy, oz) + distance_along_normal)
    distance = vo / vd
    if distance <= ZERO:
        return MISS
    return distance

@njit
def intersect_object(ox, oy, oz, dx, dy, dz, scene, index):
    """Dispatch on the object kind."""
    kinds = scene[0]
    vectors = scene[1]
    scalars = scene[2]
    kind = kinds[index]
    if kind == SPHERE:
        return intersect_sphere(ox, oy, oz, dx, dy, dz,
                                vectors[index, 0], vectors[index, 1], vectors[index, 2],
                                scalars[index])
    if kind == PLANE:
        return intersect_plane(ox, oy, oz, dx, dy, dz,
                               vectors[index, 0], vectors[index, 1], vectors[index, 2],
                               scalars[index])
    return MISS

@njit
def closest_hit(ox, oy, oz, dx, dy, dz, scene):
    """
    Linear scan over every object. Returns (index, distance) with index -1
    on a miss. Exact ties keep the first object.
    """
    best_index = -1
    best_distance = MISS
    for i in range(scene[0].shape[0]):
        distance = intersect_object(ox, oy, oz, dx, dy, dz, scene, i)
        if distance > ZERO and (best_index < 0 or distance < best_distance):
            best_index = i
            best_distance = distance
    return best_index, best_distance

@njit
def surface_normal(scene, index, px, py, pz):
    """Unit normal of object ``index`` at the surface point ``p``."""
    kinds = scene[0]
    vectors = scene[1]
    scalars = scene[2]
    if kinds[index] == SPHERE:
        inverse_radius = ONE / scalars[index]
        return ((px - vectors[index, 0]) * inverse_radius,
                (py - vectors[index, 1]) * inverse_radius,
                (pz - vectors[index, 2]) * inverse_radius)
    return vectors[index, 0], vectors[index, 1], vectors[index, 2]

@njit
def background(dy, environment):
    """Radiance of a ray that escapes the scene, given its y direction."""
    day, background_color, sky_horizon, sky_zenith = environment
    if day:
        t = dy * HALF + HALF
        return (np.float32(sky_horizon[0] * (ONE - t) + sky_zenith[0] * t),
                np.float32(sky_horizon[1] * (ONE - t) + sky_zenith[1] * t),
                np.float32(sky_horizon[2] * (ONE - t) + sky_zenith[2] * t))
    return background_color[0], background_color[1], background_color[2]

@njit
def random_in_direction(dx, dy, dz):
    """
    Random vector with components uniform in [-1, 1], flipped into the
    hemisphere around ``d``.
    """
    rx = np.float32(np.random.random()) * TWO - ONE
    ry = np.float32(np.random.random()) * TWO - ONE
    rz = np.float32(np.random.random()) * TWO - ONE
    if dot(rx, ry, rz, dx, dy, dz) < ZERO:
        return -rx, -ry, -rz
    return rx, ry, rz

@njit
def trace_ray(ox, oy, oz, dx, dy, dz, scene, environment, depth, samples_per_bounce, epsilon):
    """
    Radiance arriving along the ray, estimated with ``samples_per_bounce``
    recursive samples per hit down to ``depth`` bounces. Returns (r, g, b).
    """
    if depth == 0:
        return ZERO, ZERO, ZERO

    index, distance = closest_hit(ox, oy, oz, dx, dy, dz, scene)
    if index < 0:
        return background(dy, environment)

    diffuse = scene[3]
    emit = scene[4]
    k = scene[5][index]

    px = ox + dx * distance
    py = oy + dy * distance
    pz = oz + dz * distance
    nx, ny, nz = surface_normal(scene, index, px, py, pz)
    mx, my, mz = reflect(dx, dy, dz, nx, ny, nz)
    bounce_x = np.float32(px + nx * epsilon)
    bounce_y = np.float32(py + ny * epsilon)
    bounce_z = np.float32(pz + nz * epsilon)

    r = ZERO
    g = ZERO
    b = ZERO
    for _ in range(samples_per_bounce):
        rx, ry, rz = random_in_direction(mx, my, mz)
        sx = rx * (ONE - k) + mx * k
        sy = ry * (ONE - k) + my * k
        sz = rz * (ONE - k) + mz * k
        length = math.sqrt(dot(sx, sy, sz, sx, sy, sz))
        if length > ZERO:
            sx = sx / length
            sy = sy / length
            sz = sz / length
        else:
            sx = mx
            sy = my
            sz = mz
        cr, cg, cb = trace_ray(bounce_x, bounce_y, bounce_z,
                               np.float32(sx), np.float32(sy), np.float32(sz),
                               scene, environment, depth - 1, samples_per_bounce, epsilon)
        r += cr
        g += cg
        b += cb

    n = np.float32(samples_per_bounce)
    return (np.float32(emit[index, 0] + diffuse[index, 0] * (r / n)),
            np.float32(emit[index, 1] + diffuse[index, 1] * (g / n)),
            np.float32(emit[index, 2] + diffuse[index, 2] * (b / n)))

@njit
def camera_direction(u, v, aspect, right, up, forward):
    sx = (u * TWO - ONE) * aspect
    sy = v * TWO - ONE
    return normalize(right[0] * sx + up[0] * sy + forward[0],
                     right[1] * sx + up[1] * sy + forward[1],
                     right[2] * sx + up[2] * sy + forward[2])

@njit(parallel=True)
def estimate_frame(estimate, position, right, up, forward, scene, environment,
                   depth, samples_per_bounce, epsilon):
    """
    Fill ``estimate`` (height x width x 3) with one noisy radiance estimate per
    pixel. Rows are distributed over the worker threads.
    """
    height = estimate.shape[0]
    width = estimate.shape[1]
    fwidth = np.float32(width)
    fheight = np.float32(height)
    aspect = fwidth / fheight
    n = np.float32(samples_per_bounce)
    for y in prange(height):
        for x in range(width):
            r = ZERO
            g = ZERO
            b = ZERO
            for _ in range(samples_per_bounce):
                # Jitter up to a full pixel in each direction
                u = (np.float32(x) + np.float32(np.random.random()) * TWO - ONE) / fwidth
                v = (np.float32(y) + np.float32(np.random.random()) * TWO - ONE) / fheight
                dx, dy, dz = camera_direction(u, v, aspect, right, up, forward)
                cr, cg, cb = trace_ray(position[0], position[1], position[2],
                                       np.float32(dx), np.float32(dy), np.float32(dz),
                                       scene, environment, depth, samples_per_bounce, epsilon)
                r += cr
                g += cg
                b += cb
            estimate[y, x, 0] = r / n
            estimate[y, x, 1] = g / n
            estimate[y, x, 2] = b / n

@njit(parallel=True)
def accumulate_frame(accumulator, estimate, frames_since_movement):
    """
    Fold ``estimate`` into the running per-pixel mean. After frames
    0..n-1 the accumulator holds the arithmetic mean of their estimates.
    """
    height = accumulator.shape[0]
    width = accumulator.shape[1]
    weight = np.float32(frames_since_movement + 1)
    for y in prange(height):
        for x in range(width):
            for c in range(3):
                if frames_since_movement == 0:
                    accumulator[y, x, c] = ZERO
                accumulator[y, x, c] += (estimate[y, x, c] - accumulator[y, x, c]) / weight
