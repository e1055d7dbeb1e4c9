"""Unit tests for the Scene container.

Tests cover:
- Primitive addition and validation
- Light and camera management
- Upload into the Taichi-side storage
- Nearest-hit queries through the scene
- Scene serialization (to_dict, from_dict)
- Scene clearing
"""

import pytest


@pytest.fixture
def fresh_scene():
    """Create a fresh Scene for each test."""
    from whitted.scene.manager import Scene

    scene = Scene()
    yield scene
    scene.clear()


class TestPrimitiveAddition:
    """Tests for adding primitives."""

    def test_add_sphere(self, fresh_scene):
        """Test adding a sphere returns its index and uses the default material."""
        from whitted.materials.phong import Material

        idx = fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        assert idx == 0
        assert fresh_scene.get_sphere_count() == 1
        assert fresh_scene.spheres[0].material == Material.default()

    def test_indices_are_per_kind(self, fresh_scene):
        """Test that each primitive kind numbers its own entries."""
        assert fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0) == 0
        assert fresh_scene.add_sphere((2.0, 0.0, -5.0), 1.0) == 1
        assert fresh_scene.add_plane((0.0, -1.0, 0.0), (0.0, 1.0, 0.0)) == 0
        assert fresh_scene.add_cube((0.0, 0.0, -5.0), 1.0) == 0
        assert fresh_scene.add_cylinder((0.0, 0.0, -7.0), 0.5, 2.0) == 0
        assert fresh_scene.get_primitive_count() == 5

    def test_plane_normal_is_normalized(self, fresh_scene):
        fresh_scene.add_plane((0.0, 0.0, 0.0), (0.0, 0.0, 2.0))
        assert fresh_scene.planes[0].normal == pytest.approx((0.0, 0.0, 1.0))

    @pytest.mark.parametrize(
        "method, args",
        [
            ("add_sphere", ((0.0, 0.0, 0.0), 0.0)),
            ("add_sphere", ((0.0, 0.0, 0.0), -1.0)),
            ("add_plane", ((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))),
            ("add_cube", ((0.0, 0.0, 0.0), 0.0)),
            ("add_cylinder", ((0.0, 0.0, 0.0), 0.0, 1.0)),
            ("add_cylinder", ((0.0, 0.0, 0.0), 1.0, -1.0)),
            ("add_sphere", ((0.0, 0.0), 1.0)),
        ],
    )
    def test_invalid_primitives_rejected(self, fresh_scene, method, args):
        with pytest.raises(ValueError):
            getattr(fresh_scene, method)(*args)
        assert fresh_scene.get_primitive_count() == 0

    def test_sphere_capacity(self, fresh_scene):
        from whitted.scene.intersection import MAX_SPHERES

        for i in range(MAX_SPHERES):
            fresh_scene.add_sphere((float(i), 0.0, -5.0), 0.1)
        with pytest.raises(RuntimeError):
            fresh_scene.add_sphere((0.0, 0.0, -5.0), 0.1)


class TestLightsAndCamera:
    """Tests for light and camera management."""

    def test_add_and_clear_lights(self, fresh_scene):
        from whitted.scene.lighting import Light

        assert fresh_scene.add_light(Light(position=(5.0, 5.0, 5.0))) == 0
        assert fresh_scene.add_light(Light(position=(-5.0, 5.0, 5.0))) == 1
        assert fresh_scene.get_light_count() == 2
        fresh_scene.clear_lights()
        assert fresh_scene.get_light_count() == 0

    def test_camera_defaults_to_none(self, fresh_scene):
        assert fresh_scene.camera is None

    def test_set_camera(self, fresh_scene, default_camera):
        fresh_scene.set_camera(default_camera)
        assert fresh_scene.camera is default_camera

    def test_degenerate_camera_rejected(self, fresh_scene):
        from whitted.camera.pinhole import PinholeCamera

        camera = PinholeCamera(
            position=(0.0, 0.0, 0.0),
            look_at=(0.0, 5.0, 0.0),
            up=(0.0, 1.0, 0.0),
            vfov=45.0,
            aspect_ratio=1.0,
        )
        with pytest.raises(ValueError):
            fresh_scene.set_camera(camera)
        assert fresh_scene.camera is None


class TestUpload:
    """Tests for writing the scene into Taichi fields."""

    def test_upload_assigns_one_material_per_primitive(self, fresh_scene):
        from whitted.materials.phong import get_material_count
        from whitted.scene.intersection import (
            PrimitiveKind,
            cube_material_ids,
            get_primitive_counts,
            sphere_material_ids,
        )
        from whitted.scene.lighting import Light, get_light_count

        fresh_scene.add_cube((0.0, 0.0, -5.0), 1.0)
        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        fresh_scene.add_sphere((2.0, 0.0, -5.0), 1.0)
        fresh_scene.add_light(Light(position=(5.0, 5.0, 5.0)))
        fresh_scene.upload()

        counts = get_primitive_counts()
        assert counts[PrimitiveKind.SPHERE] == 2
        assert counts[PrimitiveKind.CUBE] == 1
        assert get_material_count() == 3
        assert get_light_count() == 1
        # Spheres are uploaded before cubes
        assert sphere_material_ids[0] == 0
        assert sphere_material_ids[1] == 1
        assert cube_material_ids[0] == 2

    def test_upload_replaces_previous_contents(self, fresh_scene):
        from whitted.materials.phong import get_material_count
        from whitted.scene.intersection import get_primitive_counts

        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        fresh_scene.upload()
        fresh_scene.upload()

        assert sum(get_primitive_counts().values()) == 1
        assert get_material_count() == 1


class TestSceneHit:
    """Tests for Scene.hit()."""

    def test_hit_reports_nearest(self, fresh_scene):
        from whitted.scene.intersection import PrimitiveKind

        fresh_scene.add_plane((0.0, 0.0, -20.0), (0.0, 0.0, 1.0))
        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        hit = fresh_scene.hit((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert hit is not None
        assert hit.primitive_kind == PrimitiveKind.SPHERE
        assert hit.t == pytest.approx(4.0)

    def test_miss_returns_none(self, fresh_scene):
        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        assert fresh_scene.hit((0.0, 0.0, 0.0), (0.0, 0.0, 1.0)) is None


class TestSerialization:
    """Tests for to_dict / from_dict."""

    def test_round_trip(self, fresh_scene, default_camera):
        from whitted.materials.phong import Material
        from whitted.scene.lighting import Light
        from whitted.scene.manager import Scene

        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0, Material.reflective((0.9, 0.9, 0.9), 0.8))
        fresh_scene.add_plane((0.0, -2.0, 0.0), (0.0, 1.0, 0.0))
        fresh_scene.add_cube((2.0, 0.0, -5.0), 1.0)
        fresh_scene.add_cylinder((0.0, 0.0, -7.0), 0.5, 2.0)
        fresh_scene.add_light(Light(position=(5.0, 5.0, 5.0), intensity=0.5))
        fresh_scene.set_camera(default_camera)

        data = fresh_scene.to_dict()
        restored = Scene.from_dict(data)

        assert restored.to_dict() == data
        assert restored.spheres[0].material.reflectivity == 0.8
        assert restored.camera == default_camera

    def test_to_dict_without_camera(self, fresh_scene):
        data = fresh_scene.to_dict()
        assert data["camera"] is None
        assert data["spheres"] == []

    def test_from_dict_missing_sections(self):
        from whitted.scene.lighting import DEFAULT_BACKGROUND_COLOR
        from whitted.scene.manager import Scene

        scene = Scene.from_dict({"spheres": [{"center": [0, 0, -5], "radius": 1}]})
        assert scene.get_primitive_count() == 1
        assert scene.get_light_count() == 0
        assert scene.camera is None
        assert scene.background_color == pytest.approx(DEFAULT_BACKGROUND_COLOR)

    def test_from_dict_invalid_primitive(self):
        from whitted.scene.manager import Scene

        with pytest.raises(ValueError):
            Scene.from_dict({"spheres": [{"center": [0, 0, -5], "radius": -1}]})


class TestSceneClear:
    def test_clear(self, fresh_scene, default_camera):
        from whitted.scene.lighting import Light

        fresh_scene.add_sphere((0.0, 0.0, -5.0), 1.0)
        fresh_scene.add_light(Light(position=(5.0, 5.0, 5.0)))
        fresh_scene.set_camera(default_camera)
        fresh_scene.clear()

        assert fresh_scene.get_primitive_count() == 0
        assert fresh_scene.get_light_count() == 0
        assert fresh_scene.camera is None
