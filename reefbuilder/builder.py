"""ReefBuilder: parameters in, one combined mesh out."""

import logging
import random
import time
from typing import Optional, Union

from .assembly import combine
from .errors import ConfigurationError
from .export import export_mesh
from .growth import CoralGrower, KelpGrower
from .models import CoralParameters, KelpParameters, MeshData
from .welding import remove_duplicates

logger = logging.getLogger(__name__)

GROWERS = {
    'coral': (CoralParameters, CoralGrower),
    'kelp': (KelpParameters, KelpGrower),
}

Parameters = Union[CoralParameters, KelpParameters]


def build_coral(params: Optional[CoralParameters] = None,
                rng: Optional[random.Random] = None) -> MeshData:
    """Grow and assemble a coral mesh."""
    return combine(CoralGrower(params, rng=rng).build())


def build_kelp(params: Optional[KelpParameters] = None,
               rng: Optional[random.Random] = None) -> MeshData:
    """Grow and assemble a kelp mesh."""
    return combine(KelpGrower(params, rng=rng).build())


class ReefBuilder:
    def __init__(self, kind: str = 'coral', params: Optional[Parameters] = None):
        """
        kind: 'coral' or 'kelp'.
        params: matching parameter object; defaults are used when None.
        """
        if kind not in GROWERS:
            raise ConfigurationError(f"unknown structure kind {kind!r}, "
                                     f"expected one of {sorted(GROWERS)}")
        params_cls, _ = GROWERS[kind]
        params = params if params is not None else params_cls()
        if not isinstance(params, params_cls):
            raise ConfigurationError(f"{kind} needs {params_cls.__name__}, "
                                     f"got {type(params).__name__}")
        self.kind = kind
        self.params = params
        self.mesh: Optional[MeshData] = None
        self.segment_count = 0

    def build(self, rng: Optional[random.Random] = None,
              progress_callback=None) -> MeshData:
        """Generate the structure, replacing any previous mesh."""
        def _progress(pct, msg):
            if progress_callback:
                progress_callback(pct, msg)

        _, grower_cls = GROWERS[self.kind]
        t0 = time.perf_counter()

        _progress(10, f"Growing {self.kind}...")
        segments = grower_cls(self.params, rng=rng).build()

        _progress(60, f"Assembling {len(segments)} segments...")
        self.mesh = combine(segments)
        self.segment_count = len(segments)

        logger.info(f"Built {self.kind}: {len(segments)} segments, "
                    f"{self.mesh.vertex_count} vertices, {self.mesh.face_count} faces "
                    f"in {time.perf_counter() - t0:.3f}s")
        return self.mesh

    def weld(self, smooth: bool = True, debug: bool = False) -> MeshData:
        """Merge coincident vertices of the current mesh."""
        if self.mesh is None:
            self.build()
        self.mesh = remove_duplicates(self.mesh, smooth=smooth, debug=debug)
        return self.mesh

    def export(self, output_path: str, file_type: Optional[str] = None) -> str:
        """Write the current mesh, building it first if needed."""
        if self.mesh is None:
            self.build()
        return export_mesh(self.mesh, output_path, file_type=file_type, name=self.kind)
