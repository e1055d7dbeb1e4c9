"""Whitted-style recursive shading.

shade_ray() computes the color seen along one ray:

1. An exhausted recursion budget returns black.
2. A ray that escapes the scene returns the background color.
3. Otherwise the hit surface contributes its ambient term, plus for every
   light that is not blocked by a shadow ray a diffuse and a specular term
   scaled by the light's distance attenuation.
4. Reflective surfaces (when reflection is enabled) blend in the color of the
   mirrored ray, and transparent surfaces blend in the color of the refracted
   ray, each traced with one less unit of budget.
5. The result is clamped to [0, 1].

Taichi functions are inlined and cannot recurse, so the recursion runs on an
explicit stack of frames held in local matrices. Each frame remembers its ray,
its hit, the color blended so far and the stage it has reached; a frame that
needs a child color pushes a new frame and resumes once the child is popped.
At most one frame per unit of budget is live, so the stack holds
MAX_SUPPORTED_DEPTH frames.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.integrator import trace_ray
    >>> from whitted.scene.demo_scenes import create_scene
    >>> scene = create_scene("scene1")
    >>> scene.upload()
    >>> trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
"""

import taichi as ti

from whitted.camera.pinhole import get_ray
from whitted.core.ray import Ray, make_ray
from whitted.core.vector import clamp, dot, lerp, normalize, real, reflect, refract, vec3
from whitted.materials.phong import get_material
from whitted.scene.intersection import intersect_scene, intersect_scene_any
from whitted.scene.lighting import (
    get_background_color,
    light_attenuation,
    light_colors,
    light_intensities,
    light_positions,
    num_lights,
)

# =============================================================================
# Rendering Constants
# =============================================================================

# Default recursion budget for primary rays
DEFAULT_MAX_DEPTH = 5

# Largest budget accepted; also the number of shading frames per ray
MAX_SUPPORTED_DEPTH = 8

# Lower bound of the hit interval for every ray
T_MIN = 0.001

# Offset applied along the normal to secondary ray origins
RAY_EPSILON = 0.001

# Upper bound standing in for infinity
T_MAX = 1e30

# Frame stages
STAGE_INTERSECT = 0
STAGE_REFLECT = 1
STAGE_BLEND_REFLECTION = 2
STAGE_REFRACT = 3
STAGE_BLEND_REFRACTION = 4
STAGE_DONE = 5


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _direct_lighting(point: vec3, normal: vec3, view_dir: vec3, material_id: ti.i32) -> vec3:
    """Sum the diffuse and specular contributions of every unoccluded light.

    Args:
        point: The shaded surface point.
        normal: Unit normal facing the incoming ray.
        view_dir: Unit vector from the point back toward the viewer.
        material_id: Material slot of the shaded surface.

    Returns:
        The attenuated diffuse + specular color (ambient not included).
    """
    material = get_material(material_id)
    shadow_origin = point + normal * RAY_EPSILON
    color = vec3(0.0, 0.0, 0.0)

    for i in range(num_lights[None]):
        to_light = light_positions[i] - point
        distance = to_light.norm()
        light_dir = normalize(to_light)

        occluded = intersect_scene_any(shadow_origin, light_dir, T_MIN, distance)
        if occluded == 0:
            intensity = light_intensities[i]
            light_color = light_colors[i]

            n_dot_l = ti.max(0.0, dot(normal, light_dir))
            diffuse = material.color * light_color * (material.diffuse * n_dot_l * intensity)

            reflected = reflect(-light_dir, normal)
            v_dot_r = ti.max(0.0, dot(view_dir, reflected))
            specular = light_color * (
                material.specular * ti.pow(v_dot_r, material.shininess) * intensity
            )

            color += (diffuse + specular) * light_attenuation(distance)

    return color


@ti.func
def _frame_vec(frames: ti.template(), sp: ti.i32) -> vec3:
    return vec3(frames[sp, 0], frames[sp, 1], frames[sp, 2])


@ti.func
def _set_frame_vec(frames: ti.template(), sp: ti.i32, value: vec3):
    for c in ti.static(range(3)):
        frames[sp, c] = value[c]


@ti.func
def shade_ray(ray: Ray, enable_reflection: ti.i32, depth: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Frames are evaluated post-order: a frame blends in a child's color only
    after the child frame has finished and been popped. The most recently
    popped frame leaves its color in child_color.

    Args:
        ray: The ray to shade (unit direction).
        enable_reflection: 1 to trace mirror reflections, 0 to skip them.
        depth: Recursion budget, at most MAX_SUPPORTED_DEPTH.

    Returns:
        The clamped RGB color, or the background color for a primary miss.
    """
    origins = ti.Matrix.zero(real, MAX_SUPPORTED_DEPTH, 3)
    directions = ti.Matrix.zero(real, MAX_SUPPORTED_DEPTH, 3)
    points = ti.Matrix.zero(real, MAX_SUPPORTED_DEPTH, 3)
    normals = ti.Matrix.zero(real, MAX_SUPPORTED_DEPTH, 3)
    colors = ti.Matrix.zero(real, MAX_SUPPORTED_DEPTH, 3)
    front_faces = ti.Vector.zero(ti.i32, MAX_SUPPORTED_DEPTH)
    material_ids = ti.Vector.zero(ti.i32, MAX_SUPPORTED_DEPTH)
    stages = ti.Vector.zero(ti.i32, MAX_SUPPORTED_DEPTH)

    black = vec3(0.0, 0.0, 0.0)
    child_color = vec3(0.0, 0.0, 0.0)
    sp = -1
    if depth > 0:
        sp = 0
        _set_frame_vec(origins, 0, ray.origin)
        _set_frame_vec(directions, 0, ray.direction)
        stages[0] = STAGE_INTERSECT

    while sp >= 0:
        stage = stages[sp]
        # Budget left for this frame's children
        child_budget = depth - sp - 1
        direction = _frame_vec(directions, sp)
        material = get_material(material_ids[sp])

        if stage == STAGE_INTERSECT:
            origin = _frame_vec(origins, sp)
            rec = intersect_scene(origin, direction, T_MIN, T_MAX)
            if rec.hit == 0:
                child_color = get_background_color()
                sp -= 1
            else:
                hit_material = get_material(rec.material_id)
                local = hit_material.color * hit_material.ambient
                local += _direct_lighting(rec.point, rec.normal, -direction, rec.material_id)
                _set_frame_vec(points, sp, rec.point)
                _set_frame_vec(normals, sp, rec.normal)
                _set_frame_vec(colors, sp, local)
                front_faces[sp] = rec.front_face
                material_ids[sp] = rec.material_id
                stages[sp] = STAGE_REFLECT

        elif stage == STAGE_REFLECT:
            stages[sp] = STAGE_REFRACT
            if enable_reflection != 0 and material.reflectivity > 0.0:
                if child_budget > 0:
                    point = _frame_vec(points, sp)
                    normal = _frame_vec(normals, sp)
                    stages[sp] = STAGE_BLEND_REFLECTION
                    _set_frame_vec(origins, sp + 1, point + normal * RAY_EPSILON)
                    _set_frame_vec(directions, sp + 1, normalize(reflect(direction, normal)))
                    stages[sp + 1] = STAGE_INTERSECT
                    sp += 1
                else:
                    # An exhausted child contributes black
                    color = _frame_vec(colors, sp)
                    _set_frame_vec(colors, sp, lerp(color, black, material.reflectivity))

        elif stage == STAGE_BLEND_REFLECTION:
            color = _frame_vec(colors, sp)
            _set_frame_vec(colors, sp, lerp(color, child_color, material.reflectivity))
            stages[sp] = STAGE_REFRACT

        elif stage == STAGE_REFRACT:
            stages[sp] = STAGE_DONE
            if material.transparency > 0.0:
                normal = _frame_vec(normals, sp)
                eta = material.refractive_index
                if front_faces[sp] == 1:
                    eta = 1.0 / material.refractive_index

                refracted, ok = refract(direction, normal, eta)
                if ok == 1:
                    if child_budget > 0:
                        point = _frame_vec(points, sp)
                        stages[sp] = STAGE_BLEND_REFRACTION
                        _set_frame_vec(origins, sp + 1, point - normal * RAY_EPSILON)
                        _set_frame_vec(directions, sp + 1, normalize(refracted))
                        stages[sp + 1] = STAGE_INTERSECT
                        sp += 1
                    else:
                        color = _frame_vec(colors, sp)
                        _set_frame_vec(colors, sp, lerp(color, black, material.transparency))

        elif stage == STAGE_BLEND_REFRACTION:
            color = _frame_vec(colors, sp)
            _set_frame_vec(colors, sp, lerp(color, child_color, material.transparency))
            stages[sp] = STAGE_DONE

        else:
            child_color = clamp(_frame_vec(colors, sp), 0.0, 1.0)
            sp -= 1

    return child_color


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _trace_single_ray(
    ox: ti.f64,
    oy: ti.f64,
    oz: ti.f64,
    dx: ti.f64,
    dy: ti.f64,
    dz: ti.f64,
    enable_reflection: ti.i32,
    depth: ti.i32,
) -> vec3:
    color = vec3(0.0, 0.0, 0.0)
    # Single-iteration outer loop keeps the scene scans serial
    for _ in range(1):
        ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        color = shade_ray(ray, enable_reflection, depth)
    return color


@ti.func
def _viewport_coordinate(index: ti.i32, extent: ti.i32) -> real:
    """Map a pixel index to [0, 1]; a one-pixel extent maps to its center."""
    coord = 0.5
    if extent > 1:
        coord = ti.cast(index, real) / ti.cast(extent - 1, real)
    return coord


@ti.kernel
def render_rows(
    image: ti.types.ndarray(dtype=ti.f64, ndim=3),
    row_start: ti.i32,
    row_end: ti.i32,
    enable_reflection: ti.i32,
    depth: ti.i32,
):
    """Shade rows [row_start, row_end) of an image in parallel.

    Row 0 is the top of the image. Each (row, col) task writes only its own
    pixel, so the order in which tasks run has no effect on the result.

    Args:
        image: Float64 array of shape (height, width, 3) to write into.
        row_start: First row to shade.
        row_end: One past the last row to shade.
        enable_reflection: 1 to trace mirror reflections.
        depth: Recursion budget for primary rays.
    """
    height = image.shape[0]
    width = image.shape[1]
    for row, col in ti.ndrange((row_start, row_end), width):
        u = _viewport_coordinate(col, width)
        v = _viewport_coordinate(height - 1 - row, height)
        color = shade_ray(get_ray(u, v), enable_reflection, depth)
        for c in ti.static(range(3)):
            image[row, col, c] = color[c]


# =============================================================================
# Public API
# =============================================================================


def validate_depth(depth: int) -> None:
    """Raise ValueError unless 0 <= depth <= MAX_SUPPORTED_DEPTH."""
    if not isinstance(depth, int) or depth < 0 or depth > MAX_SUPPORTED_DEPTH:
        raise ValueError(f"Depth must be an integer in [0, {MAX_SUPPORTED_DEPTH}], got {depth!r}")


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = DEFAULT_MAX_DEPTH,
    enable_reflection: bool = False,
) -> tuple[float, float, float]:
    """Shade a single ray against the uploaded scene.

    This is a Python-callable function for testing. For rendering images,
    use whitted.core.render.render() which shades all pixels in parallel.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized internally; must be non-zero).
        depth: Recursion budget; 0 returns black.
        enable_reflection: Whether mirror reflection rays are traced.

    Returns:
        Tuple of (R, G, B) color values in [0, 1].

    Raises:
        ValueError: If depth is out of range or the direction is zero.
    """
    validate_depth(depth)
    if direction[0] == 0.0 and direction[1] == 0.0 and direction[2] == 0.0:
        raise ValueError("Ray direction must be non-zero")

    color = _trace_single_ray(
        float(origin[0]),
        float(origin[1]),
        float(origin[2]),
        float(direction[0]),
        float(direction[1]),
        float(direction[2]),
        int(bool(enable_reflection)),
        depth,
    )
    return (float(color[0]), float(color[1]), float(color[2]))
