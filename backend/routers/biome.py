from fastapi import APIRouter, Query

from backend.models import BiomeResponse
from reefbuilder import BiomeField
from reefbuilder.constants import BIOME_SCALE

router = APIRouter(prefix="/api/biome", tags=["biome"])


@router.get("", response_model=BiomeResponse)
async def sample_biome(
    x: float = Query(...),
    y: float = Query(0.0),
    z: float = Query(...),
    scale: float = Query(BIOME_SCALE, gt=0),
):
    """Classify a world position into a biome id."""
    biome = BiomeField(scale=scale).sample((x, y, z))
    return BiomeResponse(x=x, y=y, z=z, biome=biome.name, biome_id=int(biome))
