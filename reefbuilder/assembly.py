"""Combine placed segments into one mesh."""

import logging
from typing import Iterable

import numpy as np

from .models import MeshData, Segment
from .transforms import transform_normals, transform_points

logger = logging.getLogger(__name__)

_ATTRIBUTES = ('normals', 'uvs', 'colors')


def combine(segments: Iterable[Segment]) -> MeshData:
    """Bake every segment's placement into its vertices and concatenate.

    Face indices are offset by the running vertex count.  Vertices are
    not welded across segments.  An optional attribute (normals, UVs,
    colors) is kept only if every segment carries it.
    """
    segments = list(segments)
    if not segments:
        return MeshData.empty()

    keep = {name: all(getattr(s.mesh, name) is not None for s in segments)
            for name in _ATTRIBUTES}
    for name, kept in keep.items():
        if not kept and any(getattr(s.mesh, name) is not None for s in segments):
            logger.debug(f"Dropping {name}: not present on every segment")

    verts, faces = [], []
    attrs = {name: [] for name in _ATTRIBUTES if keep[name]}
    offset = 0
    for seg in segments:
        matrix = seg.transform.matrix
        mesh = seg.mesh
        verts.append(transform_points(matrix, mesh.vertices))
        faces.append(mesh.faces + offset)
        if 'normals' in attrs:
            attrs['normals'].append(transform_normals(matrix, mesh.normals))
        if 'uvs' in attrs:
            attrs['uvs'].append(mesh.uvs)
        if 'colors' in attrs:
            attrs['colors'].append(mesh.colors)
        offset += mesh.vertex_count

    combined = MeshData(
        vertices=np.concatenate(verts),
        faces=np.concatenate(faces),
        **{name: np.concatenate(parts) for name, parts in attrs.items()})
    logger.debug(f"Combined {len(segments)} segments: "
                 f"{combined.vertex_count} vertices, {combined.face_count} faces")
    return combined
