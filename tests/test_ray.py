"""Unit tests for the ray module.

Tests cover:
- Ray dataclass and ray_at function
- make_ray direction normalization
- Hit record construction and normal orientation
"""

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_origin(self):
        """Test ray_at returns origin when t=0."""
        from whitted.core.ray import Ray, ray_at
        from whitted.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 0.0, -1.0))
            result[None] = ray_at(ray, 0.0)

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == (1.0, 2.0, 3.0)

    def test_ray_at_positive_t(self):
        """Test ray_at computes origin + t * direction."""
        from whitted.core.ray import Ray, ray_at
        from whitted.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 0.0, 0.0), direction=vec3(0.0, 1.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert (r[0], r[1], r[2]) == pytest.approx((1.0, 2.5, 0.0))

    def test_make_ray_normalizes_direction(self):
        """Test that make_ray stores a unit direction."""
        from whitted.core.ray import make_ray
        from whitted.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -2.0))
            result[None] = ray.direction

        test_kernel()
        d = result[None]
        assert (d[0], d[1], d[2]) == pytest.approx((0.0, 0.0, -1.0))

    def test_make_ray_zero_direction_stays_zero(self):
        """Test that a zero direction does not produce NaN."""
        from whitted.core.ray import make_ray
        from whitted.core.vector import vec3

        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(1.0, 1.0, 1.0), vec3(0.0, 0.0, 0.0))
            result[None] = ray.direction

        test_kernel()
        d = result[None]
        assert (d[0], d[1], d[2]) == (0.0, 0.0, 0.0)


class TestHitRecord:
    """Tests for hit record construction."""

    def test_front_face_keeps_outward_normal(self):
        """Test a ray opposing the outward normal hits the front face."""
        from whitted.core.ray import make_hit_record
        from whitted.core.vector import vec3

        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())
        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = make_hit_record(
                vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0), 4.0, vec3(0.0, 0.0, -1.0)
            )
            normal[None] = rec.normal
            front_face[None] = rec.front_face
            hit[None] = rec.hit

        test_kernel()
        assert hit[None] == 1
        assert front_face[None] == 1
        n = normal[None]
        assert (n[0], n[1], n[2]) == (0.0, 0.0, 1.0)

    def test_back_face_flips_normal(self):
        """Test a ray travelling with the outward normal gets a flipped normal."""
        from whitted.core.ray import make_hit_record
        from whitted.core.vector import vec3

        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        front_face = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = make_hit_record(
                vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0), 1.0, vec3(0.0, 0.0, 1.0)
            )
            normal[None] = rec.normal
            front_face[None] = rec.front_face

        test_kernel()
        assert front_face[None] == 0
        n = normal[None]
        assert (n[0], n[1], n[2]) == (0.0, 0.0, -1.0)

    def test_miss_record(self):
        from whitted.core.ray import make_miss_record

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            hit[None] = make_miss_record().hit

        test_kernel()
        assert hit[None] == 0
