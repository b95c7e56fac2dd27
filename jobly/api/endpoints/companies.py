import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import ensure_admin
from jobly.crud import company as company_crud
from jobly.crud import job as job_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyUpdateRequest,
    CompanyEnvelope,
    CompanyDetailEnvelope,
    CompanyListEnvelope,
    CompanyDeletedResponse,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CompanyEnvelope)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Create a new company.

    Authorization required: admin
    """
    company = company_crud.create(db, request.model_dump(by_alias=True))
    logger.info(f"Company {company['handle']} created by {admin.get('username')}")
    return {"company": company}


@router.get("/", response_model=CompanyListEnvelope)
def list_companies(
    name_like: Optional[str] = Query(None, alias="nameLike"),
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional filters:
    - nameLike: case-insensitive partial match on the name
    - minEmployees / maxEmployees: bounds on the number of employees

    With filters and no match, responds 404.
    """
    criteria = {
        key: value
        for key, value in (
            ("nameLike", name_like),
            ("minEmployees", min_employees),
            ("maxEmployees", max_employees),
        )
        if value is not None
    }

    if criteria:
        companies = company_crud.find_where(db, criteria)
    else:
        companies = company_crud.find_all(db)
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company by handle, with its jobs.
    """
    company = company_crud.get(db, handle)
    jobs = job_crud.find_by_company(db, handle)
    return {"company": {**company, "jobs": jobs}}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Partially update a company.

    Fields can be: { name, description, numEmployees, logoUrl }

    Authorization required: admin
    """
    company = company_crud.update(db, handle, request.model_dump(by_alias=True, exclude_unset=True))
    logger.info(f"Company {handle} updated by {admin.get('username')}")
    return {"company": company}


@router.delete("/{handle}", response_model=CompanyDeletedResponse)
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin: dict = Depends(ensure_admin)
):
    """
    Delete a company and its jobs.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    logger.info(f"Company {handle} deleted by {admin.get('username')}")
    return {"deleted": handle}
