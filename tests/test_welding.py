import logging

import numpy as np

from reefbuilder.models import MeshData
from reefbuilder.primitives import make_cube
from reefbuilder.welding import remove_duplicates


def test_cube_welds_to_eight_corners():
    cube = make_cube(hue=0.4)
    welded = remove_duplicates(cube)
    assert welded.vertex_count == 8
    assert welded.face_count == 12
    assert welded.uvs is None
    assert welded.colors is None
    np.testing.assert_array_equal(welded.vertices[0], cube.vertices[0])


def test_smooth_normals_point_outward():
    welded = remove_duplicates(make_cube())
    center = np.array([0.0, 0.5, 0.0])
    outward = welded.vertices - center
    assert np.all(np.einsum('ij,ij->i', welded.normals, outward) > 0)
    np.testing.assert_allclose(np.linalg.norm(welded.normals, axis=1), 1.0)


def test_flat_weld_has_no_normals():
    assert remove_duplicates(make_cube(), smooth=False).normals is None


def test_weld_is_idempotent():
    once = remove_duplicates(make_cube())
    twice = remove_duplicates(once)
    np.testing.assert_array_equal(once.vertices, twice.vertices)
    np.testing.assert_array_equal(once.faces, twice.faces)


def test_weld_preserves_geometry():
    cube = make_cube()
    welded = remove_duplicates(cube)
    np.testing.assert_array_equal(welded.vertices[welded.faces], cube.vertices[cube.faces])


def test_weld_empty_mesh():
    assert remove_duplicates(MeshData.empty()).vertex_count == 0


def test_debug_logs_reduction(caplog):
    with caplog.at_level(logging.INFO, logger="reefbuilder.welding"):
        remove_duplicates(make_cube(), debug=True)
    assert "24 reduced to 8" in caplog.text
