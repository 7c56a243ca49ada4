"""Mesh and map export: GLB, PLY, OBJ and STL via trimesh, biome maps via Pillow."""

import logging
import pathlib
from typing import Optional

import numpy as np
import trimesh
from PIL import Image

from .biome import Biome, BiomeField
from .errors import MeshIntegrityError
from .models import MeshData, PathManager

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ('glb', 'ply', 'obj', 'stl')


def export_mesh(mesh: MeshData, output_path: str, file_type: Optional[str] = None,
                name: str = "reef") -> str:
    """Write *mesh* to disk and return the absolute path.

    The format defaults to the file suffix.  GLB output wraps the mesh
    in a scene so vertex colors survive as a COLOR_0 attribute.
    """
    if mesh.face_count == 0:
        raise MeshIntegrityError("cannot export an empty mesh")

    output_path = PathManager.get_output_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    file_type = (file_type or output_path.suffix.lstrip('.')).lower()
    if file_type not in SUPPORTED_FORMATS:
        raise ValueError(f"unsupported format {file_type!r}, "
                         f"expected one of {SUPPORTED_FORMATS}")

    tm = mesh.to_trimesh()
    if file_type == 'glb':
        scene = trimesh.Scene()
        scene.add_geometry(tm, geom_name=name)
        scene.export(str(output_path), file_type='glb')
    else:
        tm.export(str(output_path), file_type=file_type)

    size_kb = output_path.stat().st_size / 1024
    logger.info(f"Exported {mesh.vertex_count} vertices, {mesh.face_count} faces "
                f"to {output_path} ({size_kb:.1f} KB)")
    return str(output_path.resolve())


def biome_image(field: BiomeField, size: int = 128, step: float = 1.0,
                y: float = 0.0, origin=(0.0, 0.0)) -> Image.Image:
    """Render a size x size top-down biome map, one pixel per sample."""
    xs = origin[0] + np.arange(size) * step
    zs = origin[1] + np.arange(size) * step
    ids = field.sample_grid(xs, zs, y=y)
    palette = np.array([np.round(b.vertex_color[:3] * 255) for b in Biome],
                       dtype=np.uint8)
    return Image.fromarray(palette[ids])


def write_biome_map(field: BiomeField, output_path: str, size: int = 128,
                    step: float = 1.0, y: float = 0.0) -> str:
    """Save a biome map PNG and return its absolute path."""
    output_path = PathManager.get_output_path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    biome_image(field, size=size, step=step, y=y).save(str(output_path))
    logger.info(f"Biome map written to {output_path}")
    return str(pathlib.Path(output_path).resolve())
