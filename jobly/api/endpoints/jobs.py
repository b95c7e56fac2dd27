import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.crud import job as job_crud
from jobly.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobEnvelope,
    JobListEnvelope,
    JobDeletedResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobEnvelope)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Create a new job for an existing company.

    Returns { job: { id, title, salary, equity, companyHandle } }

    Authorization required: admin
    """
    job = job_crud.create(db, request.model_dump(by_alias=True))
    logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
    return {"job": job}


@router.get("/", response_model=JobListEnvelope)
def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title.

    Optional filters:
    - title: case-insensitive partial match
    - minSalary: salary at least this much
    - hasEquity: true for jobs with non-zero equity, false for zero equity

    With filters and no match, responds 404.
    """
    criteria = {
        key: value
        for key, value in (
            ("title", title),
            ("minSalary", min_salary),
            ("hasEquity", has_equity),
        )
        if value is not None
    }

    if criteria:
        jobs = job_crud.find_where(db, criteria)
    else:
        jobs = job_crud.find_all(db)
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobEnvelope)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    return {"job": job_crud.get(db, job_id)}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Partially update a job.

    Fields can be: { title, salary, equity }

    Authorization required: admin
    """
    job = job_crud.update(db, job_id, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Updated job {job_id}")
    return {"job": job}


@router.delete("/{job_id}", response_model=JobDeletedResponse)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    logger.info(f"Deleted job {job_id}")
    return {"deleted": job_id}
