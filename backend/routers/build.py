import asyncio
import logging

from fastapi import APIRouter, HTTPException

from backend import config
from backend.jobs import job_manager
from backend.models import CoralBuildRequest, KelpBuildRequest, JobResponse
from reefbuilder import ConfigurationError, CoralParameters, KelpParameters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/build", tags=["build"])

_FORMATS = ("glb", "ply")


def _start(kind: str, params, name: str, output_format: str, weld: bool) -> JobResponse:
    if output_format not in _FORMATS:
        raise HTTPException(status_code=400,
                            detail=f"output_format must be one of {_FORMATS}")

    job = job_manager.create_job()
    asyncio.create_task(job_manager.run_build(
        job, kind, params, name,
        output_format=output_format, weld=weld))

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )


@router.post("/coral", response_model=JobResponse)
async def build_coral(request: CoralBuildRequest):
    """Start a coral build.

    Parameters are validated up front so a bad request fails with 400
    instead of a failed job.  The build runs in a background task; poll
    ``/status/{job_id}`` for progress.
    """
    if request.iterations > config.MAX_CORAL_ITERATIONS:
        raise HTTPException(status_code=400,
                            detail=f"iterations is limited to {config.MAX_CORAL_ITERATIONS}")
    try:
        params = CoralParameters(iterations=request.iterations,
                                 branches=request.branches, shape=request.shape,
                                 seed=request.seed)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    name = request.name or f"coral-{request.iterations}-{request.branches}-{request.seed}"
    return _start("coral", params, name, request.output_format, request.weld)


@router.post("/kelp", response_model=JobResponse)
async def build_kelp(request: KelpBuildRequest):
    """Start a kelp build."""
    if request.iterations > config.MAX_KELP_ITERATIONS:
        raise HTTPException(status_code=400,
                            detail=f"iterations is limited to {config.MAX_KELP_ITERATIONS}")
    try:
        params = KelpParameters(iterations=request.iterations,
                                number_of_leaves=request.number_of_leaves,
                                seed=request.seed)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    name = request.name or f"kelp-{request.iterations}-{request.number_of_leaves}-{request.seed}"
    return _start("kelp", params, name, request.output_format, request.weld)


@router.get("/status/{job_id}", response_model=JobResponse)
async def get_build_status(job_id: str):
    """Poll the status of a running or completed build job."""
    job = job_manager.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        result=job.result,
    )
