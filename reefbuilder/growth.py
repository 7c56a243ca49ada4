"""Recursive branch growth for coral and kelp structures.

Both growers walk a conceptual branching tree, append one
:class:`~reefbuilder.models.Segment` per node (parent before children)
and recurse until the remaining depth reaches zero.

Coral (discrete-face growth)
    Each node is a cube.  Children sprout from up to five faces of the
    parent (front, back, left, right, top) and no face is used twice at
    the same node.  Child scale decays per axis.

Kelp (radial + continuation growth)
    Each node is a pentagonal stem with a fan of leaf cubes at its base.
    A single continuation stem grows from the tip; its orientation
    blends from upright near the base toward random near the tips.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .models import CoralParameters, KelpParameters, MeshData, Segment, Transform
from .primitives import (hue_at_depth, make_cube, make_pentagonal_cylinder,
                         make_tapered_cube)
from .transforms import (IDENTITY, WORLD_UP, compose, euler_quaternion,
                         from_to_rotation, slerp)

logger = logging.getLogger(__name__)

CORAL_SLOTS = ("front", "back", "left", "right", "top")

CORAL_PRIMITIVES = {
    "cube": make_cube,
    "tapered": make_tapered_cube,
}


@dataclass(frozen=True, eq=False)
class BranchSlot:
    """Candidate anchor and orientation for a child branch."""
    name: str
    position: np.ndarray
    rotation: np.ndarray


class CoralGrower:
    """Discrete-face growth: every node picks unique faces for its children."""

    def __init__(self, params: Optional[CoralParameters] = None,
                 rng: Optional[random.Random] = None,
                 primitive: Optional[Callable[..., MeshData]] = None):
        self.params = params or CoralParameters()
        self.rng = rng or random.Random(self.params.seed)
        self.primitive = primitive or CORAL_PRIMITIVES[self.params.shape]

    def build(self) -> List[Segment]:
        """Grow a full coral from the origin and return its segments."""
        segments: List[Segment] = []
        self.grow(self.params.iterations, segments,
                  np.zeros(3), IDENTITY, self.params.scaling)
        logger.debug(f"Coral grew {len(segments)} segments")
        return segments

    def hue(self, depth: int) -> float:
        """Segment hue at *depth*: hue_min at the root, toward hue_max at the tips."""
        p = self.params
        return hue_at_depth(depth, p.iterations, p.hue_max, p.hue_min)

    def grow(self, depth: int, segments: List[Segment], position, rotation, scale) -> None:
        """Emit the node at *depth* and recurse into its branches."""
        if depth <= 0:
            return

        transform = Transform(position, rotation, scale)
        segments.append(Segment(mesh=self.primitive(hue=self.hue(depth)),
                                transform=transform, kind="branch", depth=depth))
        depth -= 1

        # Children inherit the decayed scale, not the parent's
        child_scale = np.asarray(scale, dtype=np.float64) * self.params.scale_decay

        for slot in self.pick_slots(self.branch_slots(transform)):
            self.grow(depth, segments, slot.position, slot.rotation, child_scale)

    def branch_slots(self, transform: Transform) -> List[BranchSlot]:
        """Anchors on the five faces of a placed segment."""
        p = self.params
        rng = self.rng
        rot = transform.rotation

        def side_point():
            return transform.transform_point((0.0, rng.uniform(*p.side_offset_range), 0.0))

        top = compose(rot, euler_quaternion(rng.uniform(-p.top_jitter, p.top_jitter),
                                            rng.uniform(-p.top_jitter, p.top_jitter),
                                            rng.uniform(-p.top_jitter, p.top_jitter)))
        return [
            BranchSlot("front", side_point(),
                       compose(rot, euler_quaternion(0, 0, rng.uniform(*p.roll_range)))),
            BranchSlot("back", side_point(),
                       compose(rot, euler_quaternion(0, 0, -rng.uniform(*p.roll_range)))),
            BranchSlot("left", side_point(),
                       compose(rot, euler_quaternion(rng.uniform(*p.pitch_range), 0, 0))),
            BranchSlot("right", side_point(),
                       compose(rot, euler_quaternion(-rng.uniform(*p.pitch_range), 0, 0))),
            BranchSlot("top", transform.transform_point((0.0, p.top_offset, 0.0)), top),
        ]

    def pick_slots(self, slots: List[BranchSlot]) -> List[BranchSlot]:
        """Choose ``min(branches, len(slots))`` distinct slots at random."""
        available = list(slots)
        self.rng.shuffle(available)
        return available[:self.params.branches]


class KelpGrower:
    """Radial + continuation growth: leaf fan per node, one stem onward."""

    def __init__(self, params: Optional[KelpParameters] = None,
                 rng: Optional[random.Random] = None):
        self.params = params or KelpParameters()
        self.rng = rng or random.Random(self.params.seed)
        self._upright = from_to_rotation(self.params.base_up, WORLD_UP)

    def build(self) -> List[Segment]:
        """Grow a full kelp strand from the origin and return its segments."""
        segments: List[Segment] = []
        self.grow(self.params.iterations, segments, np.zeros(3), IDENTITY)
        logger.debug(f"Kelp grew {len(segments)} segments")
        return segments

    def hue(self, depth: int) -> float:
        """Stem and leaf hue at *depth*: hue_max at the base, toward hue_min at the tip."""
        p = self.params
        return hue_at_depth(depth, p.iterations, p.hue_min, p.hue_max)

    def leaf_rotation(self, rotation, index: int) -> np.ndarray:
        """Rotation of the *index*-th leaf (1-based) around a stem node."""
        p = self.params
        amount = 360.0 / (p.number_of_leaves * index)
        ox, oy, oz = p.leaf_offset_angle
        return compose(rotation, euler_quaternion(ox, oy * amount, oz))

    def next_rotation(self, depth: int) -> np.ndarray:
        """Orientation of the stem that continues at *depth*."""
        p = self.params
        wild = euler_quaternion(*(a + self.rng.uniform(p.min_random, p.max_random)
                                  for a in p.angle))
        # depth / iterations is the weight of the upright pose: tips go wild
        weight = depth / float(p.iterations) if p.iterations else 0.0
        return slerp(wild, self._upright, weight)

    def grow(self, depth: int, segments: List[Segment], position, rotation) -> None:
        """Emit the stem and leaves at *depth*, then continue from the tip."""
        if depth <= 0:
            return

        p = self.params
        hue = self.hue(depth)
        stem = Transform(position, rotation, p.stem_scaling)
        segments.append(Segment(mesh=make_pentagonal_cylinder(hue=hue),
                                transform=stem, kind="stem", depth=depth))

        for i in range(1, p.number_of_leaves + 1):
            leaf = Transform(position, self.leaf_rotation(rotation, i), p.leaf_scaling)
            segments.append(Segment(mesh=make_cube(hue=hue),
                                    transform=leaf, kind="leaf", depth=depth))

        depth -= 1
        tip = stem.transform_point((0.0, 1.0, 0.0))
        self.grow(depth, segments, tip, self.next_rotation(depth))
