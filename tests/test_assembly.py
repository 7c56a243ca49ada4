import logging

import numpy as np

from reefbuilder.assembly import combine
from reefbuilder.models import Segment, Transform
from reefbuilder.primitives import make_cube, make_smooth_cube
from reefbuilder.transforms import euler_quaternion


def test_combine_empty():
    mesh = combine([])
    assert mesh.vertex_count == 0
    assert mesh.face_count == 0
    assert mesh.normals is None


def test_combine_offsets_faces():
    segments = [
        Segment(make_cube(hue=0.1), Transform()),
        Segment(make_cube(hue=0.2), Transform(position=(10, 0, 0))),
    ]
    mesh = combine(segments)
    assert mesh.vertex_count == 48
    assert mesh.face_count == 24
    assert mesh.faces.max() < mesh.vertex_count
    np.testing.assert_array_equal(mesh.faces[12:], make_cube().faces + 24)
    assert mesh.vertices[24:, 0].min() == 9.5


def test_combine_bakes_rotation_and_scale():
    seg = Segment(make_cube(), Transform(rotation=euler_quaternion(0, 0, 90),
                                         scale=(1, 2, 1)))
    mesh = combine([seg])
    # Rolled onto its side: height 2 now runs along -X
    np.testing.assert_allclose(mesh.vertices.min(axis=0), (-2, -0.5, -0.5), atol=1e-9)
    np.testing.assert_allclose(np.linalg.norm(mesh.normals, axis=1), 1.0)


def test_combine_drops_partial_attributes(caplog):
    segments = [
        Segment(make_cube(hue=0.5), Transform()),
        Segment(make_smooth_cube(), Transform(position=(0, 2, 0))),
    ]
    with caplog.at_level(logging.DEBUG, logger="reefbuilder.assembly"):
        mesh = combine(segments)
    assert mesh.normals is not None
    assert mesh.uvs is None
    assert mesh.colors is None
    assert mesh.vertex_count == 32
    assert "Dropping colors" in caplog.text


def test_combine_keeps_colors_when_all_have_them():
    mesh = combine([Segment(make_cube(hue=0.0), Transform()),
                    Segment(make_cube(hue=0.5), Transform())])
    assert mesh.colors.shape == (48, 4)
    np.testing.assert_allclose(mesh.colors[0], (1, 0, 0, 1))
