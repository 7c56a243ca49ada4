"""Configuration constants and paths.

Values can be overridden through environment variables or a ``.env``
file in the working directory.
"""

import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
OUTPUT_DIR = pathlib.Path(os.environ.get("REEFBUILDER_OUTPUT_DIR", BASE_DIR / "output"))

# World units per noise unit when sampling the biome field
BIOME_SCALE = float(os.environ.get("REEFBUILDER_BIOME_SCALE", "50.0"))

# Empty means a fresh random seed per build
_seed = os.environ.get("REEFBUILDER_SEED", "").strip()
DEFAULT_SEED = int(_seed) if _seed else None

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
