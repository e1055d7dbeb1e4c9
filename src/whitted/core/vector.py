"""Double-precision vector kernel for the ray tracer.

All functions are Taichi functions operating on ``vec3`` values. Taichi
vectors are immutable values inside kernels, so every operation returns a new
vector and nothing is modified in place.

Degenerate inputs never produce NaN or Inf: normalizing a zero vector returns
it unchanged, and refraction reports total internal reflection through an
integer flag instead of a sentinel direction.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.vector import normalize, reflect, vec3
    >>> @ti.kernel
    ... def mirror() -> vec3:
    ...     return reflect(normalize(vec3(1.0, -1.0, 0.0)), vec3(0.0, 1.0, 0.0))
"""

import taichi as ti
import taichi.math as tm

# Scalar and vector types used throughout the renderer
real = ti.f64
vec3 = ti.types.vector(3, ti.f64)

# Threshold below which a quantity is treated as zero
EPSILON = 1e-8


@ti.func
def dot(a: vec3, b: vec3) -> real:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the right-handed cross product a x b."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes, as it avoids the
    square root.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or v itself when it has
        zero length.
    """
    result = v
    v_len = length(v)
    if v_len > 0.0:
        result = v / v_len
    return result


@ti.func
def reflect(v: vec3, normal: vec3) -> vec3:
    """Reflect a vector about a normal: v - 2 (v . n) n.

    Args:
        v: The vector to reflect.
        normal: The surface normal (should be unit length).

    Returns:
        The reflected vector, with the same length as v.
    """
    return v - 2.0 * tm.dot(v, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: real):
    """Refract a direction through a surface using Snell's law.

    Uses sin^2(theta_t) = eta^2 * (1 - cos^2(theta_i)) with
    cos(theta_i) = -incident . normal.

    Args:
        incident: The incoming direction (unit length, toward the surface).
        normal: The surface normal facing the incoming ray (unit length).
        eta: Ratio of refractive indices n_incident / n_transmitted.

    Returns:
        A tuple (direction, ok). ok is 0 on total internal reflection, in
        which case direction is the zero vector.
    """
    cos_i = -tm.dot(incident, normal)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    direction = vec3(0.0, 0.0, 0.0)
    ok = 0
    if sin2_t <= 1.0:
        cos_t = ti.sqrt(1.0 - sin2_t)
        direction = eta * incident + (eta * cos_i - cos_t) * normal
        ok = 1
    return direction, ok


@ti.func
def clamp(v: vec3, lo: real, hi: real) -> vec3:
    """Clamp each component of v to [lo, hi]."""
    return tm.clamp(v, lo, hi)


@ti.func
def lerp(a: vec3, b: vec3, t: real) -> vec3:
    """Linear blend a * (1 - t) + b * t."""
    return a * (1.0 - t) + b * t


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Return 1 if every component of v is below EPSILON in magnitude."""
    return ti.abs(v.x) < EPSILON and ti.abs(v.y) < EPSILON and ti.abs(v.z) < EPSILON


@ti.func
def solve_quadratic(a: real, half_b: real, c: real):
    """Solve a*t^2 + 2*half_b*t + c = 0 with the robust quadratic formula.

    Uses q = -(half_b + sign(half_b) * sqrt(discriminant)) to avoid
    catastrophic cancellation when half_b^2 is close to a*c.

    Args:
        a: Quadratic coefficient.
        half_b: Half of the linear coefficient.
        c: Constant term.

    Returns:
        A tuple (t0, t1, ok) with t0 <= t1. ok is 0 when the discriminant is
        negative or a is too small to divide by.
    """
    t0 = 0.0
    t1 = 0.0
    ok = 0
    discriminant = half_b * half_b - a * c

    if ti.abs(a) > EPSILON and discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        sign_h = ti.select(half_b < 0.0, -1.0, 1.0)
        q = -(half_b + sign_h * sqrt_d)

        if ti.abs(q) < 1e-12:
            # Tangent ray through the origin of the parametrization
            t0 = (-half_b - sqrt_d) / a
            t1 = (-half_b + sqrt_d) / a
        else:
            t0 = q / a
            t1 = c / q

        if t0 > t1:
            tmp = t0
            t0 = t1
            t1 = tmp
        ok = 1

    return t0, t1, ok
