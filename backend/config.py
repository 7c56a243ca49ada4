import os
import pathlib

BASE_DIR = pathlib.Path(__file__).parent.parent.absolute()
OUTPUT_DIR = pathlib.Path(os.environ.get("REEFBUILDER_OUTPUT_DIR", BASE_DIR / "output"))

# Largest recursion depth the service will build on request
MAX_CORAL_ITERATIONS = int(os.environ.get("REEFBUILDER_MAX_CORAL_ITERATIONS", "6"))
MAX_KELP_ITERATIONS = int(os.environ.get("REEFBUILDER_MAX_KELP_ITERATIONS", "20"))
