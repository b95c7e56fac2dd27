from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from jobly.schemas.job import JobResponse


class CompanyBase(BaseModel):
    """Fields are camelCase on the wire (numEmployees, logoUrl)"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanyCreateRequest(CompanyBase):
    """Schema for creating a new company"""
    model_config = ConfigDict(extra="forbid")

    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None


class CompanyUpdateRequest(CompanyBase):
    """Schema for a partial company update; handle cannot be changed"""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v: Optional[str]) -> str:
        """name may be omitted but not cleared"""
        if v is None:
            raise ValueError("name cannot be null")
        return v


class CompanyResponse(CompanyBase):
    """Schema for company response"""
    handle: str
    name: str
    description: Optional[str] = None
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


class CompanyDetailResponse(CompanyResponse):
    """Schema for a single company together with its jobs"""
    jobs: List[JobResponse] = []


class CompanyEnvelope(BaseModel):
    company: CompanyResponse


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetailResponse


class CompanyListEnvelope(BaseModel):
    companies: List[CompanyResponse]


class CompanyDeletedResponse(BaseModel):
    deleted: str
