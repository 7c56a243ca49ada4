"""ReefBuilder package: procedural coral and kelp meshes and biome fields."""

from reefbuilder.biome import Biome, BiomeField
from reefbuilder.builder import ReefBuilder, build_coral, build_kelp
from reefbuilder.creatures import (RepulsorRegistry, SteeringParameters, SteeringState,
                                   probe, spawn, steer)
from reefbuilder.errors import ConfigurationError, MeshIntegrityError
from reefbuilder.models import CoralParameters, KelpParameters, MeshData
from reefbuilder.primitives import (make_cube, make_pentagonal_cylinder, make_smooth_cube,
                                    make_tapered_cube)
