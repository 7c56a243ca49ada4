from pydantic import BaseModel, Field
from typing import Optional


class CoralBuildRequest(BaseModel):
    iterations: int = Field(3, ge=0)
    branches: int = Field(4, ge=1)
    shape: str = "cube"  # "cube" or "tapered"
    seed: Optional[int] = None
    weld: bool = False
    name: Optional[str] = None
    output_format: str = "glb"  # "glb" or "ply"


class KelpBuildRequest(BaseModel):
    iterations: int = Field(3, ge=0)
    number_of_leaves: int = Field(5, ge=0)
    seed: Optional[int] = None
    weld: bool = False
    name: Optional[str] = None
    output_format: str = "glb"


class JobResponse(BaseModel):
    job_id: str
    status: str
    progress: float
    message: str
    result: Optional[dict] = None


class ModelInfo(BaseModel):
    name: str
    filename: str


class BiomeResponse(BaseModel):
    x: float
    y: float
    z: float
    biome: str
    biome_id: int
