from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional


class JobBase(BaseModel):
    """Fields are camelCase on the wire (companyHandle)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobCreateRequest(JobBase):
    """Schema for creating a new job"""
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)


class JobUpdateRequest(JobBase):
    """Schema for a partial job update; id and companyHandle cannot be changed"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        """title may be omitted but not cleared"""
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobResponse(JobBase):
    """Schema for job response"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[float] = None
    company_handle: str


class JobEnvelope(BaseModel):
    job: JobResponse


class JobListEnvelope(BaseModel):
    jobs: List[JobResponse]


class JobDeletedResponse(BaseModel):
    deleted: int
