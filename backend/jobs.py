import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    queued = "queued"
    running = "running"
    completed = "completed"
    failed = "failed"


@dataclass
class Job:
    id: str
    status: JobStatus = JobStatus.queued
    progress: float = 0.0
    message: str = "Queued"
    result: Optional[dict] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def _sync_build(kind: str, params, output_filename: str,
                weld: bool = False, progress_callback=None) -> dict:
    """Run the full ReefBuilder pipeline in a worker thread."""
    from reefbuilder import ReefBuilder
    from backend import config as _cfg

    builder = ReefBuilder(kind, params)
    mesh = builder.build(progress_callback=progress_callback)
    if weld:
        if progress_callback:
            progress_callback(75, "Welding vertices...")
        mesh = builder.weld(smooth=True)

    if progress_callback:
        progress_callback(85, "Exporting mesh...")
    path = builder.export(str(_cfg.OUTPUT_DIR / output_filename))
    return {
        "kind": kind,
        "path": path,
        "model_url": f"/output/{output_filename}",
        "segments": builder.segment_count,
        "vertices": mesh.vertex_count,
        "faces": mesh.face_count,
    }


class JobManager:
    def __init__(self) -> None:
        self.jobs: dict[str, Job] = {}

    def create_job(self) -> Job:
        job = Job(id=str(uuid.uuid4()))
        self.jobs[job.id] = job
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        return self.jobs.get(job_id)

    async def run_build(self, job: Job, kind: str, params, name: str,
                        output_format: str = "glb", weld: bool = False) -> None:
        """Execute the build pipeline, updating *job* with progress."""
        try:
            job.status = JobStatus.running
            job.progress = 5.0
            job.message = "Preparing build..."

            # Derive a filename-safe string from the requested name
            safe_name = (
                name.lower()
                .replace(" ", "-")
                .replace("/", "")
                .replace("'", "")
            )
            output_filename = f"{safe_name}.{output_format}"

            def _update_progress(pct: float, msg: str) -> None:
                job.progress = pct
                job.message = msg

            result = await asyncio.to_thread(
                _sync_build,
                kind,
                params,
                output_filename,
                weld=weld,
                progress_callback=_update_progress,
            )

            job.progress = 100.0
            job.message = "Build complete"
            job.status = JobStatus.completed
            job.result = result

        except Exception as exc:
            logger.exception("Build failed for job %s", job.id)
            job.status = JobStatus.failed
            job.progress = 0.0
            job.message = f"Build failed: {exc}"


# Singleton instance used across the application
job_manager = JobManager()
