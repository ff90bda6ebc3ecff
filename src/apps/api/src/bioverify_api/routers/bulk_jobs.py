"""Bulk verification job endpoints."""
import structlog
from fastapi import APIRouter, Depends, HTTPException

from bioverify_api.deps import Actor, get_actor, get_dispatcher
from bioverify_core.jobs import BulkJob, get_job, list_jobs_for_tenant
from bioverify_core.util import ValidationError
from bioverify_core.verification import start_bulk_verification

router = APIRouter(prefix="/bulk-jobs", tags=["bulk-jobs"])
logger = structlog.get_logger()


@router.post("", status_code=202)
def start_bulk_job(actor: Actor = Depends(get_actor), dispatch=Depends(get_dispatcher)):
    """Start verifying every record awaiting verification. Fire-and-forget:
    poll the job to learn the outcome."""
    try:
        job_id = start_bulk_verification(actor.tenant_id, actor.actor_id, dispatch)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if job_id is None:
        logger.info("bulk_job_not_created", tenant_id=actor.tenant_id)
    return {"job_id": job_id}


@router.get("")
def list_bulk_jobs(active_only: bool = False, actor: Actor = Depends(get_actor)):
    """Job history for the caller's tenant, newest first."""
    jobs = list_jobs_for_tenant(actor.tenant_id)
    if active_only:
        jobs = [j for j in jobs if not j.status.is_terminal]
    return {"jobs": [j.model_dump() for j in jobs]}


@router.get("/{job_id}", response_model=BulkJob)
def get_bulk_job(job_id: str, actor: Actor = Depends(get_actor)):
    """Get job status."""
    job = get_job(job_id)
    if not job or job.tenant_id != actor.tenant_id:
        raise HTTPException(status_code=404, detail="Job not found")
    return job
