"""Unit tests for capped cylinder intersection.

Tests cover:
- Lateral surface hits and normals
- Cap hits for rays along the axis
- Nearest candidate selection between lateral surface and caps
- Misses above the caps and outside the radius
"""

import pytest
import taichi as ti


def _probe_cylinder(
    origin, direction, center=(0.0, 0.0, 0.0), radius=1.0, height=2.0, t_min=0.001, t_max=1000.0
):
    from whitted.core.vector import vec3
    from whitted.geometry.cylinder import Cylinder, hit_cylinder

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    normal = ti.Vector.field(3, dtype=ti.f64, shape=())
    front_face = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(
        ox: ti.f64, oy: ti.f64, oz: ti.f64,
        dx: ti.f64, dy: ti.f64, dz: ti.f64,
        cx: ti.f64, cy: ti.f64, cz: ti.f64,
        r: ti.f64, h: ti.f64, lo: ti.f64, hi: ti.f64,
    ):
        cylinder = Cylinder(center=vec3(cx, cy, cz), radius=r, height=h)
        record = hit_cylinder(vec3(ox, oy, oz), vec3(dx, dy, dz), cylinder, lo, hi)
        hit[None] = record.hit
        t_val[None] = record.t
        normal[None] = record.normal
        front_face[None] = record.front_face

    test_kernel(*origin, *direction, *center, radius, height, t_min, t_max)
    n = normal[None]
    return hit[None], t_val[None], (n[0], n[1], n[2]), front_face[None]


class TestCylinderLateral:
    """Tests for the lateral surface."""

    def test_side_hit(self):
        """Test a horizontal ray hitting the side at t = 5 - r."""
        hit, t, normal, front_face = _probe_cylinder((0.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert normal == pytest.approx((0.0, 0.0, 1.0))
        assert front_face == 1

    def test_side_hit_off_center(self):
        hit, t, normal, _ = _probe_cylinder(
            (5.0, 0.5, 0.0), (-1.0, 0.0, 0.0), center=(0.0, 0.0, -7.0), radius=0.5, height=2.0
        )
        assert hit == 0

        hit, t, normal, _ = _probe_cylinder(
            (5.0, 0.5, -7.0), (-1.0, 0.0, 0.0), center=(0.0, 0.0, -7.0), radius=0.5, height=2.0
        )
        assert hit == 1
        assert t == pytest.approx(4.5)
        assert normal == pytest.approx((1.0, 0.0, 0.0))

    def test_above_cap_misses(self):
        """Test a horizontal ray passing above the top cap."""
        hit, _, _, _ = _probe_cylinder((0.0, 1.5, 5.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_outside_radius_misses(self):
        hit, _, _, _ = _probe_cylinder((2.0, 0.0, 5.0), (0.0, 0.0, -1.0))
        assert hit == 0

    def test_inside_hits_far_wall(self):
        hit, t, normal, front_face = _probe_cylinder((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(1.0)
        assert front_face == 0
        assert normal == pytest.approx((-1.0, 0.0, 0.0))


class TestCylinderCaps:
    """Tests for the cap disks."""

    def test_ray_down_the_axis_hits_top_cap(self):
        """Test a vertical ray (no lateral solution) hits the top cap."""
        hit, t, normal, front_face = _probe_cylinder((0.0, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert normal == pytest.approx((0.0, 1.0, 0.0))
        assert front_face == 1

    def test_ray_up_hits_bottom_cap(self):
        hit, t, normal, _ = _probe_cylinder((0.5, -5.0, 0.0), (0.0, 1.0, 0.0))
        assert hit == 1
        assert t == pytest.approx(4.0)
        assert normal == pytest.approx((0.0, -1.0, 0.0))

    def test_vertical_ray_outside_radius_misses(self):
        hit, _, _, _ = _probe_cylinder((1.5, 5.0, 0.0), (0.0, -1.0, 0.0))
        assert hit == 0

    def test_nearest_of_cap_and_side(self):
        """Test a diagonal ray entering through the top cap and leaving through the side."""
        s = 1.0 / 2.0**0.5
        # Enters the top cap (y = 1) at x = 0, then would exit the side at x = 1
        hit, t, normal, _ = _probe_cylinder((-2.0, 3.0, 0.0), (s, -s, 0.0))
        assert hit == 1
        assert t == pytest.approx(2.0 * 2.0**0.5)
        assert normal == pytest.approx((0.0, 1.0, 0.0))
