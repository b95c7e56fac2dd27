"""
Test suite for the job CRUD layer.

Tests cover:
- Creation for existing and unknown companies
- Listing and searching (title, minSalary, hasEquity)
- Retrieval, partial update with immutable fields, removal
"""

import pytest

from jobly.core.exceptions import BadRequestError, NotFoundError
from jobly.crud import job as job_crud


def titles(jobs):
    return [job["title"] for job in jobs]


class TestCreate:
    """Tests for job creation"""

    def test_create(self, seeded_db):
        job = job_crud.create(seeded_db, {
            "title": "CEO",
            "salary": 100000,
            "equity": 0.5,
            "companyHandle": "c1",
        })

        assert isinstance(job["id"], int)
        assert job == {
            "id": job["id"],
            "title": "CEO",
            "salary": 100000,
            "equity": 0.5,
            "companyHandle": "c1",
        }
        assert job_crud.get(seeded_db, job["id"]) == job

    def test_create_without_salary_or_equity(self, seeded_db):
        job = job_crud.create(seeded_db, {"title": "Intern", "companyHandle": "c2"})

        assert job["salary"] is None
        assert job["equity"] is None

    @pytest.mark.parametrize("data", [
        {"title": "CEO", "salary": -1, "companyHandle": "c1"},
        {"title": "CEO", "equity": 1.5, "companyHandle": "c1"},
        {"title": None, "companyHandle": "c1"},
    ])
    def test_create_constraint_violation(self, seeded_db, data):
        with pytest.raises(BadRequestError):
            job_crud.create(seeded_db, data)

        assert len(job_crud.find_all(seeded_db)) == 4

    def test_create_unknown_company(self, seeded_db):
        with pytest.raises(NotFoundError, match="nope"):
            job_crud.create(seeded_db, {"title": "CEO", "companyHandle": "nope"})


class TestFind:
    """Tests for listing and searching jobs"""

    def test_find_all(self, seeded_db, job_ids):
        jobs = job_crud.find_all(seeded_db)

        assert titles(jobs) == ["Paper Boy", "Paper Girl", "Paper Man", "Paper Woman"]
        assert jobs[0] == {
            "id": job_ids["Paper Boy"],
            "title": "Paper Boy",
            "salary": 20000,
            "equity": 0.005,
            "companyHandle": "c1",
        }

    def test_find_all_is_repeatable(self, seeded_db):
        assert job_crud.find_all(seeded_db) == job_crud.find_all(seeded_db)

    def test_find_where_title(self, seeded_db):
        """Title match is case-insensitive and partial"""
        assert titles(job_crud.find_where(seeded_db, {"title": "GIRL"})) == ["Paper Girl"]

    def test_find_where_min_salary(self, seeded_db):
        jobs = job_crud.find_where(seeded_db, {"minSalary": 20000})
        assert titles(jobs) == ["Paper Boy", "Paper Girl"]

    def test_find_where_has_equity(self, seeded_db):
        jobs = job_crud.find_where(seeded_db, {"hasEquity": True})
        assert titles(jobs) == ["Paper Boy", "Paper Girl"]

    def test_find_where_no_equity(self, seeded_db):
        """Zero equity matches; unrecorded (NULL) equity does not"""
        jobs = job_crud.find_where(seeded_db, {"hasEquity": False})
        assert titles(jobs) == ["Paper Man"]

    def test_find_where_combined(self, seeded_db):
        jobs = job_crud.find_where(seeded_db, {"title": "paper", "minSalary": 15000, "hasEquity": True})
        assert titles(jobs) == ["Paper Boy", "Paper Girl"]

    def test_find_where_no_match(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.find_where(seeded_db, {"title": "astronaut"})

    def test_find_where_unknown_filter(self, seeded_db):
        with pytest.raises(BadRequestError):
            job_crud.find_where(seeded_db, {"companyHandle": "c1"})

    def test_find_by_company(self, seeded_db):
        assert titles(job_crud.find_by_company(seeded_db, "c1")) == ["Paper Boy", "Paper Woman"]

    def test_find_by_company_without_jobs(self, seeded_db, job_ids):
        job_crud.remove(seeded_db, job_ids["Paper Man"])

        assert job_crud.find_by_company(seeded_db, "c3") == []


class TestGet:
    """Tests for job retrieval"""

    def test_get(self, seeded_db, job_ids):
        job = job_crud.get(seeded_db, job_ids["Paper Girl"])

        assert job == {
            "id": job_ids["Paper Girl"],
            "title": "Paper Girl",
            "salary": 30000,
            "equity": 0.1,
            "companyHandle": "c2",
        }

    def test_get_missing(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.get(seeded_db, 99999)


class TestUpdate:
    """Tests for partial job updates"""

    def test_update(self, seeded_db, job_ids):
        job_id = job_ids["Paper Girl"]

        job = job_crud.update(seeded_db, job_id, {"title": "CEO", "salary": 1, "equity": 0.5})

        assert job == {
            "id": job_id,
            "title": "CEO",
            "salary": 1,
            "equity": 0.5,
            "companyHandle": "c2",
        }
        assert job_crud.get(seeded_db, job_id) == job

    def test_update_partial(self, seeded_db, job_ids):
        job = job_crud.update(seeded_db, job_ids["Paper Boy"], {"salary": 25000})

        assert job["salary"] == 25000
        assert job["title"] == "Paper Boy"
        assert job["equity"] == 0.005

    @pytest.mark.parametrize("data", [
        {"companyHandle": "apple"},
        {"id": 4},
        {"title": "CEO", "companyHandle": "c3"},
    ])
    def test_update_immutable_fields(self, seeded_db, job_ids, data):
        job_id = job_ids["Paper Boy"]

        with pytest.raises(BadRequestError):
            job_crud.update(seeded_db, job_id, data)

        assert job_crud.get(seeded_db, job_id)["title"] == "Paper Boy"

    def test_update_null_title(self, seeded_db, job_ids):
        """title is NOT NULL; the session stays usable afterwards"""
        job_id = job_ids["Paper Girl"]

        with pytest.raises(BadRequestError):
            job_crud.update(seeded_db, job_id, {"title": None})

        assert job_crud.get(seeded_db, job_id)["title"] == "Paper Girl"

    def test_update_no_data(self, seeded_db, job_ids):
        with pytest.raises(BadRequestError):
            job_crud.update(seeded_db, job_ids["Paper Boy"], {})

    def test_update_missing(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.update(seeded_db, 99999, {"title": "CEO"})


class TestRemove:
    """Tests for job removal"""

    def test_remove(self, seeded_db, job_ids):
        job_crud.remove(seeded_db, job_ids["Paper Man"])

        with pytest.raises(NotFoundError):
            job_crud.get(seeded_db, job_ids["Paper Man"])

    def test_remove_missing(self, seeded_db):
        with pytest.raises(NotFoundError):
            job_crud.remove(seeded_db, 99999)
