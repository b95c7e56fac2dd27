"""
CRUD operations for jobs.

Records use the API's field names: id, title, salary, equity, companyHandle.
"""

from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.core.sql import FilterSet, at_least, build_filter_clause, build_update_clause, contains, has_positive

COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# id and company_handle are fixed once the job exists
UPDATABLE_FIELDS = {"title", "salary", "equity"}

SEARCH_FILTERS = FilterSet(
    predicates={
        "title": contains("title"),
        "minSalary": at_least("salary"),
        "hasEquity": has_positive("equity"),
    },
)


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a job for an existing company.

    Args:
        db: Database session
        data: {title, salary, equity, companyHandle}; salary and equity may be omitted

    Returns:
        The created job, including its generated id

    Raises:
        NotFoundError: If companyHandle does not name a company
        BadRequestError: If the row breaks a table constraint (e.g. negative salary)
    """
    company_handle = data["companyHandle"]
    company = execute(db, "SELECT handle FROM companies WHERE handle = $1", [company_handle])
    if not company:
        raise NotFoundError(f"No company: {company_handle}")

    try:
        rows = execute(
            db,
            f"""INSERT INTO jobs (title, salary, equity, company_handle)
                VALUES ($1, $2, $3, $4)
                RETURNING {COLUMNS}""",
            [data["title"], data.get("salary"), data.get("equity"), company_handle],
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise BadRequestError(f"Invalid job data: {e.orig}")

    return rows[0]


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    Retrieve all jobs ordered by title.
    """
    return execute(db, f"SELECT {COLUMNS} FROM jobs ORDER BY title, id")


def find_where(db: Session, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Retrieve the jobs matching search criteria, ordered by title.

    Args:
        db: Database session
        criteria: Any of {title, minSalary, hasEquity}

    Raises:
        BadRequestError: If criteria is empty or invalid
        NotFoundError: If no job matches
    """
    where = build_filter_clause(criteria, SEARCH_FILTERS)
    jobs = execute(
        db,
        f"SELECT {COLUMNS} FROM jobs WHERE {where.clause} ORDER BY title, id",
        where.values,
    )

    if not jobs:
        raise NotFoundError("No jobs match the criteria")

    return jobs


def find_by_company(db: Session, company_handle: str) -> List[Dict[str, Any]]:
    """
    Retrieve the jobs of one company, oldest first. May be empty.
    """
    return execute(
        db,
        f"SELECT {COLUMNS} FROM jobs WHERE company_handle = $1 ORDER BY id",
        [company_handle],
    )


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If there is no such job
    """
    rows = execute(db, f"SELECT {COLUMNS} FROM jobs WHERE id = $1", [job_id])
    if not rows:
        raise NotFoundError(f"No job: {job_id}")
    return rows[0]


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job; only the fields present in data change.

    Args:
        db: Database session
        job_id: Job to update
        data: Any of {title, salary, equity}

    Returns:
        The updated job

    Raises:
        BadRequestError: If data is empty or tries to change id, companyHandle
            or any other field outside {title, salary, equity}
            or breaks a table constraint (e.g. a null title)
        NotFoundError: If there is no such job
    """
    invalid = [key for key in data if key not in UPDATABLE_FIELDS]
    if invalid:
        raise BadRequestError(f"Cannot update job fields: {', '.join(invalid)}")

    set_cols = build_update_clause(data, {})
    id_idx = len(set_cols.values) + 1

    try:
        rows = execute(
            db,
            f"""UPDATE jobs
                   SET {set_cols.clause}
                 WHERE id = ${id_idx}
             RETURNING {COLUMNS}""",
            [*set_cols.values, job_id],
        )
    except IntegrityError as e:
        db.rollback()
        raise BadRequestError(f"Invalid job data: {e.orig}")
    if not rows:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    return rows[0]


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If there is no such job
    """
    rows = execute(db, "DELETE FROM jobs WHERE id = $1 RETURNING id", [job_id])
    if not rows:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
