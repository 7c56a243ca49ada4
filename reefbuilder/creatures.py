"""Creature steering and proximity probing.

Everything here is a plain step function over explicit state; the
caller owns the :class:`RepulsorRegistry` and decides when to step.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional

import numpy as np

from .transforms import IDENTITY, rotate_vector

logger = logging.getLogger(__name__)

# Probe order matters: the first direction with a hit is reported
PROBE_DIRECTIONS = {
    'forward': (0.0, 0.0, 1.0),
    'back': (0.0, 0.0, -1.0),
    'right': (1.0, 0.0, 0.0),
    'left': (-1.0, 0.0, 0.0),
    'up': (0.0, 1.0, 0.0),
    'down': (0.0, -1.0, 0.0),
}


class RepulsorRegistry:
    """Positions that push creatures away (coral heads, rocks, divers...)."""

    def __init__(self, positions=()):
        self._positions: List[np.ndarray] = []
        for p in positions:
            self.add(p)

    def add(self, position) -> int:
        """Register a repulsor and return its handle."""
        self._positions.append(np.array(position, dtype=np.float64).reshape(3))
        return len(self._positions) - 1

    def remove(self, handle: int) -> None:
        if not 0 <= handle < len(self._positions) or self._positions[handle] is None:
            raise KeyError(f"no repulsor with handle {handle}")
        self._positions[handle] = None

    def __iter__(self) -> Iterator[np.ndarray]:
        return (p for p in self._positions if p is not None)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def nearest(self, point) -> Optional[np.ndarray]:
        """Closest registered position to *point*, or None when empty."""
        point = np.asarray(point, dtype=np.float64)
        best, best_d = None, np.inf
        for p in self:
            d = np.linalg.norm(p - point)
            if d < best_d:
                best, best_d = p, d
        return best


@dataclass(frozen=True)
class SteeringParameters:
    max_speed: float = 0.5
    arrive_radius: float = 1.0
    slow_radius: float = 5.0
    slow_factor: float = 0.9
    seek_factor: float = 0.8
    acceleration_gain: float = 0.6
    forward_bias: float = 1.0
    repel_radius: float = 3.0
    repel_strength: float = 1.0


@dataclass(frozen=True, eq=False)
class SteeringState:
    position: np.ndarray
    velocity: np.ndarray
    home: np.ndarray
    target: np.ndarray
    current_speed: float


def _clamp_magnitude(v: np.ndarray, limit: float) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm > limit > 0:
        return v * (limit / norm)
    return v


def pick_target(home, rng: random.Random) -> np.ndarray:
    """Random wander target in a box above *home*."""
    home = np.asarray(home, dtype=np.float64)
    return home + np.array([rng.uniform(-30, 30), rng.uniform(5, 20),
                            rng.uniform(-10, 10)])


def spawn(home, rng: random.Random,
          params: Optional[SteeringParameters] = None) -> SteeringState:
    """Initial state for a creature resting at *home*."""
    params = params or SteeringParameters()
    home = np.array(home, dtype=np.float64).reshape(3)
    return SteeringState(position=home.copy(), velocity=np.zeros(3), home=home,
                         target=pick_target(home, rng),
                         current_speed=params.max_speed)


def steer(state: SteeringState, dt: float, rng: random.Random,
          params: Optional[SteeringParameters] = None,
          registry: Optional[RepulsorRegistry] = None) -> SteeringState:
    """Advance one creature by *dt* and return its new state.

    Seeks the current target, picks a new one on arrival, slows down
    when close, keeps a forward bias along its heading so it never spins
    in place, and is pushed away from nearby repulsors.
    """
    params = params or SteeringParameters()
    target, speed = state.target, state.current_speed

    offset = target - state.position
    distance = np.linalg.norm(offset)
    if distance < params.arrive_radius:
        target = pick_target(state.home, rng)
        speed = params.max_speed
        offset = target - state.position
        distance = np.linalg.norm(offset)
    elif distance < params.slow_radius:
        speed *= params.slow_factor

    desired = np.zeros(3) if distance == 0 else offset / distance * speed * params.seek_factor
    accel = _clamp_magnitude(desired - state.velocity, params.max_speed)

    if registry is not None:
        for p in registry:
            away = state.position - p
            d = np.linalg.norm(away)
            if 0 < d < params.repel_radius:
                accel = accel + away / d * params.repel_strength * (1 - d / params.repel_radius)

    velocity = state.velocity + accel * params.acceleration_gain
    heading = np.linalg.norm(state.velocity)
    if heading > 0:
        velocity = velocity + state.velocity / heading * params.forward_bias
    velocity = _clamp_magnitude(velocity, params.max_speed)

    return replace(state, position=state.position + velocity * dt,
                   velocity=velocity, target=target, current_speed=speed)


def probe(origin, registry: RepulsorRegistry, distance: float = 2.0,
          rotation=IDENTITY, radius: float = 0.5) -> Optional[str]:
    """Name of the first probe direction that hits a repulsor, or None.

    A repulsor counts as a hit when it lies within *radius* of the ray
    and no further than *distance* along it.
    """
    origin = np.asarray(origin, dtype=np.float64)
    for name, local in PROBE_DIRECTIONS.items():
        direction = rotate_vector(rotation, local)
        for p in registry:
            v = p - origin
            along = float(np.dot(v, direction))
            if 0 <= along <= distance and np.linalg.norm(v - along * direction) <= radius:
                logger.debug(f"Probe hit {name} at {along:.2f}")
                return name
    return None
