"""Vertex welding for meshes built from independent per-face vertices."""

import logging

import numpy as np
import trimesh

from .models import MeshData

logger = logging.getLogger(__name__)


def remove_duplicates(mesh: MeshData, smooth: bool = True,
                      debug: bool = False) -> MeshData:
    """Merge vertices whose positions are exactly equal.

    Surviving vertices keep their first-occurrence order, so a mesh that
    has no duplicates comes back with identical vertices and faces.  The
    result carries no UVs or colors.  With *smooth* the normals are
    recomputed by averaging adjacent face normals; otherwise the result
    has no normals.
    """
    if mesh.vertex_count == 0:
        return MeshData.empty()

    _, first, inverse = np.unique(mesh.vertices, axis=0,
                                  return_index=True, return_inverse=True)
    inverse = np.asarray(inverse).reshape(-1)

    # np.unique sorts rows; re-rank them by first appearance
    order = np.argsort(first)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))

    vertices = mesh.vertices[first[order]]
    faces = rank[inverse][mesh.faces]

    normals = None
    if smooth and len(faces):
        normals = trimesh.Trimesh(vertices=vertices, faces=faces,
                                  process=False).vertex_normals

    if debug:
        logger.info(f"{mesh.vertex_count} reduced to {len(vertices)}")
    return MeshData(vertices=vertices, faces=faces, normals=normals)
