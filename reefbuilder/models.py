"""Data classes for meshes, placements and growth parameters."""

import logging
import pathlib
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np
import trimesh

from .constants import OUTPUT_DIR
from .errors import ConfigurationError, MeshIntegrityError
from .transforms import IDENTITY, normalize, transform_points, trs_matrix

logger = logging.getLogger(__name__)

Vector3 = Tuple[float, float, float]


class PathManager:
    """Manage paths relative to the configured output directory."""

    @staticmethod
    def get_output_path(filename: str) -> pathlib.Path:
        """Get the output file path (absolute paths are kept as-is)."""
        path = pathlib.Path(filename)
        if path.is_absolute():
            return path
        return OUTPUT_DIR / path


def _frozen_array(values, dtype, width: int) -> np.ndarray:
    arr = np.array(values, dtype=dtype).reshape(-1, width)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class MeshData:
    """Triangle mesh with optional per-vertex normals, UVs and RGBA colors.

    Arrays are read-only once constructed.  Every face index must
    reference an existing vertex and every attribute array must have one
    row per vertex, otherwise :class:`MeshIntegrityError` is raised.
    """
    vertices: np.ndarray
    faces: np.ndarray
    normals: Optional[np.ndarray] = None
    uvs: Optional[np.ndarray] = None
    colors: Optional[np.ndarray] = None

    def __post_init__(self):
        vertices = _frozen_array(self.vertices, np.float64, 3)
        faces = _frozen_array(self.faces, np.int64, 3)
        n = len(vertices)
        if faces.size and (faces.min() < 0 or faces.max() >= n):
            raise MeshIntegrityError(
                f"face index out of range [0, {n}): "
                f"min={faces.min()}, max={faces.max()}")
        object.__setattr__(self, 'vertices', vertices)
        object.__setattr__(self, 'faces', faces)

        for name, width in (('normals', 3), ('uvs', 2), ('colors', 4)):
            values = getattr(self, name)
            if values is None:
                continue
            values = _frozen_array(values, np.float64, width)
            if len(values) != n:
                raise MeshIntegrityError(
                    f"{name} has {len(values)} rows for {n} vertices")
            object.__setattr__(self, name, values)

    @classmethod
    def empty(cls) -> "MeshData":
        return cls(vertices=np.zeros((0, 3)), faces=np.zeros((0, 3), dtype=np.int64))

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def to_trimesh(self) -> trimesh.Trimesh:
        """Convert to an unprocessed trimesh (no vertex merging)."""
        kwargs = {}
        if self.normals is not None:
            kwargs['vertex_normals'] = np.array(self.normals)
        if self.colors is not None:
            kwargs['vertex_colors'] = np.round(
                np.clip(self.colors, 0.0, 1.0) * 255).astype(np.uint8)
        return trimesh.Trimesh(vertices=np.array(self.vertices),
                               faces=np.array(self.faces),
                               process=False, **kwargs)


@dataclass(frozen=True, eq=False)
class Transform:
    """Placement of a segment: position, unit rotation, positive scale."""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: IDENTITY.copy())
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))

    def __post_init__(self):
        position = np.array(self.position, dtype=np.float64).reshape(3)
        try:
            rotation = normalize(self.rotation)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        scale = np.array(self.scale, dtype=np.float64).reshape(3)
        if np.any(scale <= 0):
            raise ConfigurationError(f"scale components must be positive, got {scale}")
        for arr in (position, rotation, scale):
            arr.setflags(write=False)
        object.__setattr__(self, 'position', position)
        object.__setattr__(self, 'rotation', rotation)
        object.__setattr__(self, 'scale', scale)

    @property
    def matrix(self) -> np.ndarray:
        return trs_matrix(self.position, self.rotation, self.scale)

    def transform_point(self, point) -> np.ndarray:
        """Map a local point into the parent frame."""
        return transform_points(self.matrix, point)[0]


@dataclass(frozen=True, eq=False)
class Segment:
    """One primitive mesh placed in the structure's frame."""
    mesh: MeshData
    transform: Transform
    kind: str = "branch"
    depth: int = 0


def _fix_hue_range(name: str, hue_min: float, hue_max: float) -> float:
    if hue_min >= hue_max:
        corrected = hue_max - 0.1
        logger.warning(f"{name}: hue_min {hue_min} >= hue_max {hue_max}, "
                       f"using hue_min={corrected:.3f}")
        return corrected
    return hue_min


def _check_scale(name: str, values) -> Vector3:
    values = tuple(float(v) for v in values)
    if len(values) != 3 or any(v <= 0 for v in values):
        raise ConfigurationError(f"{name} must be three positive values, got {values}")
    return values


# Coral faces a branch can sprout from.
CORAL_SLOT_COUNT = 5

# Segment primitives a coral can be grown from
CORAL_SHAPES = ("cube", "tapered")


@dataclass(frozen=True)
class CoralParameters:
    """Settings for discrete-face (coral) growth."""
    iterations: int = 3
    branches: int = 4
    scaling: Vector3 = (0.15, 1.0, 0.15)
    scale_decay: Vector3 = (0.8, 0.65, 0.8)
    hue_min: float = 0.94
    hue_max: float = 0.99
    top_offset: float = 0.9
    side_offset_range: Tuple[float, float] = (0.5, 0.8)
    top_jitter: float = 15.0
    roll_range: Tuple[float, float] = (45.0, 95.0)
    pitch_range: Tuple[float, float] = (75.0, 95.0)
    shape: str = "cube"
    seed: Optional[int] = None

    def __post_init__(self):
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        if self.branches < 1:
            raise ConfigurationError(f"branches must be >= 1, got {self.branches}")
        if self.branches > CORAL_SLOT_COUNT:
            logger.warning(f"branches={self.branches} exceeds the {CORAL_SLOT_COUNT} "
                           f"available faces, clamping")
            object.__setattr__(self, 'branches', CORAL_SLOT_COUNT)
        object.__setattr__(self, 'scaling', _check_scale('scaling', self.scaling))
        object.__setattr__(self, 'scale_decay', _check_scale('scale_decay', self.scale_decay))
        object.__setattr__(self, 'hue_min',
                           _fix_hue_range('coral', self.hue_min, self.hue_max))
        lo, hi = self.side_offset_range
        if lo > hi:
            object.__setattr__(self, 'side_offset_range', (hi, lo))
        if self.shape not in CORAL_SHAPES:
            raise ConfigurationError(f"unknown coral shape {self.shape!r}, "
                                     f"expected one of {CORAL_SHAPES}")


@dataclass(frozen=True)
class KelpParameters:
    """Settings for radial + continuation (kelp) growth."""
    iterations: int = 3
    number_of_leaves: int = 5
    stem_scaling: Vector3 = (0.25, 1.0, 0.25)
    leaf_scaling: Vector3 = (0.25, 1.0, 0.35)
    angle: Vector3 = (0.0, 45.0, 45.0)
    leaf_offset_angle: Vector3 = (90.0, 90.0, 90.0)
    min_random: float = 0.0
    max_random: float = 30.0
    hue_min: float = 0.1
    hue_max: float = 1.0
    base_up: Vector3 = (0.0, 1.0, 0.0)
    seed: Optional[int] = None

    def __post_init__(self):
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        if self.number_of_leaves < 0:
            raise ConfigurationError(
                f"number_of_leaves must be >= 0, got {self.number_of_leaves}")
        object.__setattr__(self, 'stem_scaling', _check_scale('stem_scaling', self.stem_scaling))
        object.__setattr__(self, 'leaf_scaling', _check_scale('leaf_scaling', self.leaf_scaling))
        if self.min_random >= self.max_random:
            corrected = self.max_random - 1
            logger.warning(f"kelp: min_random {self.min_random} >= max_random "
                           f"{self.max_random}, using min_random={corrected}")
            object.__setattr__(self, 'min_random', corrected)
        object.__setattr__(self, 'hue_min',
                           _fix_hue_range('kelp', self.hue_min, self.hue_max))
        if not np.any(np.asarray(self.base_up, dtype=np.float64)):
            raise ConfigurationError("base_up must be a non-zero vector")
