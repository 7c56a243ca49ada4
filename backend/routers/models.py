import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.models import ModelInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])

_MEDIA_TYPES = {
    ".glb": "model/gltf-binary",
    ".ply": "application/octet-stream",
}


@router.get("", response_model=List[ModelInfo])
async def list_models():
    """Return metadata for every generated mesh in the output directory."""
    output_dir: Path = config.OUTPUT_DIR
    if not output_dir.exists():
        return []

    models: list[ModelInfo] = []
    for mesh_file in sorted(output_dir.iterdir()):
        if mesh_file.suffix not in _MEDIA_TYPES:
            continue
        models.append(
            ModelInfo(
                name=mesh_file.stem.replace("-", " ").title(),
                filename=mesh_file.name,
            )
        )
    return models


@router.get("/{filename}")
async def get_model(filename: str):
    """Serve a specific mesh file from the output directory."""
    file_path = config.OUTPUT_DIR / filename
    if (not file_path.exists() or not file_path.is_file()
            or file_path.suffix not in _MEDIA_TYPES):
        raise HTTPException(status_code=404, detail="Model file not found")

    return FileResponse(
        path=str(file_path),
        media_type=_MEDIA_TYPES[file_path.suffix],
        filename=filename,
    )
