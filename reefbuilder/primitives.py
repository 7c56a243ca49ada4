"""Unit primitive meshes used as growth segments.

Every primitive is 1 unit tall, anchored at the centre of its bottom
face, and built from independent per-face vertices so each face keeps a
hard edge.  Triangles wind counter-clockwise seen from outside.  Use
:func:`reefbuilder.welding.remove_duplicates` for smooth shading.
"""

import colorsys
from typing import Optional

import numpy as np
import trimesh

from .models import MeshData

# Cross-section corners of the kelp stem, walking around the Y axis
PENTAGON = [(0.5, 0.0), (0.0, -0.5), (-0.5, -0.25), (-0.5, 0.25), (0.0, 0.5)]

_QUAD_UVS = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]


def hue_to_rgba(hue: float) -> np.ndarray:
    """RGBA float color for *hue* at full saturation and value."""
    r, g, b = colorsys.hsv_to_rgb(min(max(float(hue), 0.0), 1.0), 1.0, 1.0)
    return np.array([r, g, b, 1.0])


def hue_at_depth(depth: int, iterations: int, start: float, end: float) -> float:
    """Interpolate from *start* (depth 0) to *end* (depth == iterations)."""
    if iterations <= 0:
        return start
    t = depth / float(iterations)
    return start + (end - start) * t


class _FaceBuilder:
    """Accumulate flat faces that each own their vertices."""

    def __init__(self):
        self.verts = []
        self.normals = []
        self.uvs = []
        self.faces = []

    def quad(self, corners, uvs=_QUAD_UVS):
        """Add a planar quad; corners are counter-clockwise from outside."""
        c = np.asarray(corners, dtype=np.float64)
        normal = trimesh.util.unitize(np.cross(c[2] - c[0], c[3] - c[1]))
        base = len(self.verts)
        self.verts.extend(c)
        self.normals.extend([normal] * 4)
        self.uvs.extend(uvs)
        self.faces.append([base, base + 1, base + 2])
        self.faces.append([base + 2, base + 3, base])

    def fan(self, ring, normal, uvs):
        """Add a convex polygon as a triangle fan from its first corner."""
        base = len(self.verts)
        self.verts.extend(np.asarray(ring, dtype=np.float64))
        self.normals.extend([normal] * len(ring))
        self.uvs.extend(uvs)
        for i in range(1, len(ring) - 1):
            self.faces.append([base, base + i, base + i + 1])

    def build(self, hue: Optional[float] = None) -> MeshData:
        colors = None
        if hue is not None:
            colors = np.tile(hue_to_rgba(hue), (len(self.verts), 1))
        return MeshData(vertices=self.verts, faces=self.faces,
                        normals=self.normals, uvs=self.uvs, colors=colors)


def _box_faces(fb: _FaceBuilder, top_half: float):
    """Six faces of a box whose top face has half-width *top_half*."""
    b, t = 0.5, top_half
    # Front (-Z)
    fb.quad([(-b, 0, -b), (-t, 1, -t), (t, 1, -t), (b, 0, -b)])
    # Back (+Z)
    fb.quad([(-b, 0, b), (b, 0, b), (t, 1, t), (-t, 1, t)])
    # Left (-X)
    fb.quad([(-b, 0, -b), (-b, 0, b), (-t, 1, t), (-t, 1, -t)])
    # Right (+X)
    fb.quad([(b, 0, -b), (t, 1, -t), (t, 1, t), (b, 0, b)])
    # Top
    fb.quad([(-t, 1, -t), (-t, 1, t), (t, 1, t), (t, 1, -t)])
    # Bottom
    fb.quad([(-b, 0, -b), (b, 0, -b), (b, 0, b), (-b, 0, b)])


def make_cube(hue: Optional[float] = None) -> MeshData:
    """1m cube (24 vertices, 12 triangles), optionally vertex-colored by *hue*."""
    fb = _FaceBuilder()
    _box_faces(fb, 0.5)
    return fb.build(hue)


def make_tapered_cube(top_scale: float = 0.5, hue: Optional[float] = None) -> MeshData:
    """1m cube whose top face is shrunk to *top_scale* of the base width."""
    fb = _FaceBuilder()
    _box_faces(fb, 0.5 * top_scale)
    return fb.build(hue)


def make_pentagonal_cylinder(hue: Optional[float] = None) -> MeshData:
    """1m tall pentagonal prism (30 vertices, 16 triangles)."""
    fb = _FaceBuilder()
    cap_uvs = [(x + 0.5, z + 0.5) for x, z in PENTAGON]

    fb.fan([(x, 1.0, z) for x, z in PENTAGON], (0.0, 1.0, 0.0), cap_uvs)
    fb.fan([(x, 0.0, z) for x, z in reversed(PENTAGON)], (0.0, -1.0, 0.0),
           list(reversed(cap_uvs)))

    n = len(PENTAGON)
    for i in range(n):
        x0, z0 = PENTAGON[i]
        x1, z1 = PENTAGON[(i + 1) % n]
        u0, u1 = i / n, (i + 1) / n
        fb.quad([(x0, 0, z0), (x1, 0, z1), (x1, 1, z1), (x0, 1, z0)],
                uvs=[(u0, 0.0), (u1, 0.0), (u1, 1.0), (u0, 1.0)])
    return fb.build(hue)


def make_smooth_cube() -> MeshData:
    """1m cube with 8 shared vertices and averaged normals, no UVs or colors."""
    box = trimesh.creation.box(
        extents=[1.0, 1.0, 1.0],
        transform=trimesh.transformations.translation_matrix([0.0, 0.5, 0.0]))
    return MeshData(vertices=box.vertices, faces=box.faces,
                    normals=box.vertex_normals)
