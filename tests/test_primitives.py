import numpy as np
import pytest

from reefbuilder.primitives import (hue_at_depth, hue_to_rgba, make_cube,
                                    make_pentagonal_cylinder, make_smooth_cube,
                                    make_tapered_cube)
from reefbuilder.welding import remove_duplicates


def _assert_outward(mesh):
    """Per-vertex normals agree with the winding of their face."""
    tm = mesh.to_trimesh()
    for face, face_normal in zip(mesh.faces, tm.face_normals):
        assert np.dot(face_normal, mesh.normals[face[0]]) > 0.99


def test_cube_shape():
    cube = make_cube()
    assert cube.vertex_count == 24
    assert cube.face_count == 12
    np.testing.assert_allclose(cube.vertices.min(axis=0), (-0.5, 0.0, -0.5))
    np.testing.assert_allclose(cube.vertices.max(axis=0), (0.5, 1.0, 0.5))
    assert cube.uvs.shape == (24, 2)
    assert cube.colors is None
    _assert_outward(cube)


def test_cube_is_closed_with_unit_volume():
    tm = remove_duplicates(make_cube()).to_trimesh()
    assert tm.is_watertight
    assert tm.volume == pytest.approx(1.0)


def test_cube_colors_follow_hue():
    cube = make_cube(hue=0.0)
    np.testing.assert_allclose(cube.colors, np.tile((1.0, 0.0, 0.0, 1.0), (24, 1)))


def test_tapered_cube_slants_its_sides():
    mesh = make_tapered_cube(top_scale=0.5)
    top = mesh.vertices[mesh.vertices[:, 1] == 1.0]
    assert np.abs(top[:, [0, 2]]).max() == pytest.approx(0.25)

    # Side normals tilt upward
    sides = mesh.normals[:16]
    assert np.all(sides[:, 1] > 0)
    _assert_outward(mesh)


def test_pentagonal_cylinder_shape():
    mesh = make_pentagonal_cylinder(hue=0.3)
    assert mesh.vertex_count == 30
    assert mesh.face_count == 16
    assert mesh.uvs is not None and mesh.colors is not None
    _assert_outward(mesh)

    # No side vertex keeps an up or down normal
    sides = mesh.normals[10:]
    np.testing.assert_allclose(sides[:, 1], 0.0, atol=1e-12)


def test_pentagonal_cylinder_is_closed():
    tm = remove_duplicates(make_pentagonal_cylinder()).to_trimesh()
    assert len(tm.vertices) == 10
    assert tm.is_watertight
    # Shoelace area of the cross-section times unit height
    assert tm.volume == pytest.approx(0.625)


def test_smooth_cube():
    mesh = make_smooth_cube()
    assert mesh.vertex_count == 8
    assert mesh.face_count == 12
    np.testing.assert_allclose(mesh.vertices.min(axis=0), (-0.5, 0.0, -0.5))
    np.testing.assert_allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)


def test_hue_helpers():
    np.testing.assert_allclose(hue_to_rgba(0.0), (1, 0, 0, 1))
    np.testing.assert_allclose(hue_to_rgba(1 / 3.0), (0, 1, 0, 1), atol=1e-9)
    assert hue_at_depth(0, 4, 0.2, 0.6) == pytest.approx(0.2)
    assert hue_at_depth(4, 4, 0.2, 0.6) == pytest.approx(0.6)
    assert hue_at_depth(2, 4, 0.2, 0.6) == pytest.approx(0.4)
    assert hue_at_depth(3, 0, 0.2, 0.6) == 0.2


def test_primitive_catalog_is_exported():
    import reefbuilder

    assert reefbuilder.make_tapered_cube is make_tapered_cube
    assert reefbuilder.make_smooth_cube().vertex_count == 8
