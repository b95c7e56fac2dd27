"""
CRUD operations for companies.

Queries are written as parameterized SQL; partial updates and searches
are assembled by the builders in jobly.core.sql. Records use the API's
field names: handle, name, description, numEmployees, logoUrl.
"""

from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import BadRequestError, DuplicateError, NotFoundError
from jobly.core.sql import FilterSet, at_least, at_most, build_filter_clause, build_update_clause, contains, range_rule

COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

COLUMN_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

UPDATABLE_FIELDS = {"name", "description", "numEmployees", "logoUrl"}

SEARCH_FILTERS = FilterSet(
    predicates={
        "nameLike": contains("name"),
        "minEmployees": at_least("num_employees"),
        "maxEmployees": at_most("num_employees"),
    },
    rules=(range_rule("minEmployees", "maxEmployees", "Min employees cannot exceed max employees"),),
)


def create(db: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Create a company.

    Args:
        db: Database session
        data: {handle, name, description, numEmployees, logoUrl}; all but
            handle and name may be omitted

    Returns:
        The created company

    Raises:
        DuplicateError: If a company with this handle already exists
        BadRequestError: If the row breaks another table constraint (e.g. negative numEmployees)
    """
    handle = data["handle"]
    duplicate = execute(db, "SELECT handle FROM companies WHERE handle = $1", [handle])
    if duplicate:
        raise DuplicateError(f"Duplicate company: {handle}")

    try:
        rows = execute(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COLUMNS}""",
            [
                handle,
                data["name"],
                data.get("description"),
                data.get("numEmployees"),
                data.get("logoUrl"),
            ],
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # Lost a race with a concurrent create of the same handle
        if execute(db, "SELECT handle FROM companies WHERE handle = $1", [handle]):
            raise DuplicateError(f"Duplicate company: {handle}")
        raise BadRequestError(f"Invalid company data: {e.orig}")

    return rows[0]


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    Retrieve all companies ordered by name.
    """
    return execute(db, f"SELECT {COLUMNS} FROM companies ORDER BY name, handle")


def find_where(db: Session, criteria: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Retrieve the companies matching search criteria, ordered by name.

    nameLike matches the company name, not its handle.

    Args:
        db: Database session
        criteria: Any of {nameLike, minEmployees, maxEmployees}

    Raises:
        BadRequestError: If criteria is empty or invalid
        NotFoundError: If no company matches
    """
    where = build_filter_clause(criteria, SEARCH_FILTERS)
    companies = execute(
        db,
        f"SELECT {COLUMNS} FROM companies WHERE {where.clause} ORDER BY name, handle",
        where.values,
    )

    if not companies:
        raise NotFoundError("No companies match the criteria")

    return companies


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company by its handle.

    Raises:
        NotFoundError: If there is no such company
    """
    rows = execute(db, f"SELECT {COLUMNS} FROM companies WHERE handle = $1", [handle])
    if not rows:
        raise NotFoundError(f"No company: {handle}")
    return rows[0]


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company; only the fields present in data change.

    Args:
        db: Database session
        handle: Company to update
        data: Any of {name, description, numEmployees, logoUrl}

    Returns:
        The updated company

    Raises:
        BadRequestError: If data is empty, holds a field that cannot be updated,
            or breaks a table constraint (e.g. a null name)
        NotFoundError: If there is no such company
    """
    invalid = [key for key in data if key not in UPDATABLE_FIELDS]
    if invalid:
        raise BadRequestError(f"Cannot update company fields: {', '.join(invalid)}")

    set_cols = build_update_clause(data, COLUMN_MAP)
    handle_idx = len(set_cols.values) + 1

    try:
        rows = execute(
            db,
            f"""UPDATE companies
                   SET {set_cols.clause}
                 WHERE handle = ${handle_idx}
             RETURNING {COLUMNS}""",
            [*set_cols.values, handle],
        )
    except IntegrityError as e:
        db.rollback()
        raise BadRequestError(f"Invalid company data: {e.orig}")
    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company and, through the foreign key, its jobs.

    Raises:
        NotFoundError: If there is no such company
    """
    rows = execute(db, "DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle])
    if not rows:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
