import random

import numpy as np
import pytest

from reefbuilder import (ConfigurationError, CoralParameters, KelpParameters,
                         MeshIntegrityError, ReefBuilder, build_coral, build_kelp)


def test_unknown_kind_rejected():
    with pytest.raises(ConfigurationError):
        ReefBuilder('sponge')


def test_mismatched_parameters_rejected():
    with pytest.raises(ConfigurationError):
        ReefBuilder('coral', KelpParameters())


def test_build_coral_mesh():
    mesh = build_coral(CoralParameters(iterations=2, branches=2, seed=0))
    # 3 cubes of 24 vertices each
    assert mesh.vertex_count == 72
    assert mesh.face_count == 36
    assert mesh.normals is not None and mesh.uvs is not None and mesh.colors is not None
    assert mesh.faces.max() < mesh.vertex_count


def test_build_kelp_mesh():
    mesh = build_kelp(KelpParameters(iterations=3, number_of_leaves=2, seed=0))
    # 3 pentagonal stems (30 vertices) and 6 leaf cubes (24 vertices)
    assert mesh.vertex_count == 3 * 30 + 6 * 24
    assert mesh.face_count == 3 * 16 + 6 * 12


def test_zero_iterations_build_empty_mesh():
    assert build_coral(CoralParameters(iterations=0)).vertex_count == 0
    assert build_kelp(KelpParameters(iterations=0)).face_count == 0


def test_same_seed_same_mesh():
    a = ReefBuilder('coral', CoralParameters(iterations=3, seed=21)).build()
    b = ReefBuilder('coral', CoralParameters(iterations=3, seed=21)).build()
    np.testing.assert_array_equal(a.vertices, b.vertices)
    np.testing.assert_array_equal(a.colors, b.colors)


def test_rebuild_replaces_mesh():
    builder = ReefBuilder('kelp', KelpParameters(iterations=4, seed=2))
    first = builder.build()
    second = builder.build(rng=random.Random(99))
    assert builder.mesh is second
    assert builder.segment_count == 4 * 6
    assert first.vertex_count == second.vertex_count
    assert not np.array_equal(first.vertices, second.vertices)


def test_progress_callback():
    seen = []
    ReefBuilder('coral').build(progress_callback=lambda pct, msg: seen.append(pct))
    assert seen
    assert seen == sorted(seen)


def test_weld_and_export(tmp_path):
    builder = ReefBuilder('coral', CoralParameters(iterations=2, branches=1, seed=4))
    builder.build()
    welded = builder.weld()
    assert welded.vertex_count < 48
    path = builder.export(str(tmp_path / "coral.ply"))
    assert (tmp_path / "coral.ply").exists()
    assert path.endswith("coral.ply")


def test_export_builds_on_demand(tmp_path):
    builder = ReefBuilder('kelp', KelpParameters(iterations=1, seed=1))
    builder.export(str(tmp_path / "kelp.glb"))
    assert builder.mesh is not None
    assert builder.segment_count == 6


def test_export_of_empty_structure_fails(tmp_path):
    builder = ReefBuilder('coral', CoralParameters(iterations=0))
    with pytest.raises(MeshIntegrityError):
        builder.export(str(tmp_path / "nothing.glb"))
