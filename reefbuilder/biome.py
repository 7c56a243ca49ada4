"""Biome classification from a 3-channel Perlin noise field.

The field is a pure function of position: the same position, scale,
offsets and noise base always give the same biome.  Three offset noise
channels are remapped non-linearly, read as an RGB color, and the hue
of that color is posterized into one of ``BIOME_COUNT`` ids.
"""

import colorsys
import logging
from enum import IntEnum
from typing import Sequence, Tuple

import numpy as np
from noise import pnoise3

from .constants import BIOME_SCALE
from .primitives import hue_to_rgba

logger = logging.getLogger(__name__)


class Biome(IntEnum):
    """Fixed set of biome ids.  Names carry no meaning beyond identity.

    ``Biome.COUNT`` is the declared number of ids.
    """
    B00 = 0
    B01 = 1
    B02 = 2
    B03 = 3
    B04 = 4
    B05 = 5
    B06 = 6
    B07 = 7
    B08 = 8
    B09 = 9
    B10 = 10
    B11 = 11
    B12 = 12

    @property
    def hue(self) -> float:
        """Hue in [0, 1) used to paint this biome as a vertex color."""
        return int(self) / float(BIOME_COUNT)

    @property
    def vertex_color(self) -> np.ndarray:
        return hue_to_rgba(self.hue)

    @classmethod
    def from_int(cls, value: int) -> "Biome":
        return cls(int(value) % BIOME_COUNT)

    @classmethod
    def from_hue(cls, hue: float) -> "Biome":
        # round(1.0 * COUNT) would overflow the table; hue wraps around
        return cls.from_int(int(round(hue * BIOME_COUNT)))

    @classmethod
    def from_color(cls, color) -> "Biome":
        r, g, b = (float(c) for c in list(color)[:3])
        h, _, _ = colorsys.rgb_to_hsv(r, g, b)
        return cls.from_hue(h)


BIOME_COUNT = len(Biome)
Biome.COUNT = BIOME_COUNT

# Noise channel offsets for the R, G and B channels
CHANNEL_OFFSETS = (
    (123.0, 456.0, 789.0),
    (-99.0, 999.0, 300.0),
    (900.0, 500.0, -99.0),
)

# pnoise3 stays within [-1, 1]; stretch to +-1.1, square, then squeeze so
# the result lands in [0.5, 1.0]
NOISE_AMPLITUDE = 1.0
_STRETCH = 1.1 / NOISE_AMPLITUDE
_SQUEEZE = 2.42


def redistribute(value: float) -> float:
    """Non-linear remap of one noise channel into [0, 1]."""
    value = (value * _STRETCH) ** 2 / _SQUEEZE + 0.5
    return min(max(value, 0.0), 1.0)


class BiomeField:
    """Deterministic position -> :class:`Biome` classifier."""

    def __init__(self, scale: float = BIOME_SCALE,
                 offsets: Sequence[Tuple[float, float, float]] = CHANNEL_OFFSETS,
                 octaves: int = 1, base: int = 0):
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        if len(offsets) != 3:
            raise ValueError("BiomeField needs exactly three channel offsets")
        self.scale = float(scale)
        self.offsets = tuple(tuple(float(c) for c in o) for o in offsets)
        self.octaves = int(octaves)
        self.base = int(base)

    def channels(self, position) -> Tuple[float, float, float]:
        """Remapped (r, g, b) channel values at *position*."""
        x, y, z = (float(c) / self.scale for c in position)
        return tuple(
            redistribute(pnoise3(x + ox, y + oy, z + oz,
                                 octaves=self.octaves, base=self.base))
            for ox, oy, oz in self.offsets)

    def sample(self, position) -> Biome:
        """Biome at a world-space *position*."""
        return Biome.from_color(self.channels(position))

    def sample_grid(self, xs, zs, y: float = 0.0) -> np.ndarray:
        """Biome ids on the horizontal grid ``xs`` x ``zs`` at height *y*.

        Returns an int array of shape ``(len(zs), len(xs))``.
        """
        xs = np.asarray(xs, dtype=np.float64)
        zs = np.asarray(zs, dtype=np.float64)
        grid = np.empty((len(zs), len(xs)), dtype=np.int64)
        for row, z in enumerate(zs):
            for col, x in enumerate(xs):
                grid[row, col] = int(self.sample((x, y, z)))
        logger.debug(f"Sampled {grid.size} biome cells")
        return grid
