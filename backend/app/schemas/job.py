from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

EMPLOYMENT_TYPES = ("Full-time", "Part-time", "Contract", "Internship", "Freelance", "Temporary")
WORK_MODES = ("Remote", "On-site", "Hybrid", "Work From Office")

EmploymentType = Literal["Full-time", "Part-time", "Contract", "Internship", "Freelance", "Temporary"]
WorkMode = Literal["Remote", "On-site", "Hybrid", "Work From Office"]
JobStatus = Literal["active", "closed", "draft", "expired"]


class Range(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)


class JobPayload(BaseModel):
    """
    Raw job body as sent by the employer dashboard.

    Fields are loosely typed on purpose: the ordered checks in
    `services.job_validation` decide what is missing or malformed so the
    client gets one specific 400 instead of a list of type errors.
    """
    model_config = ConfigDict(extra="ignore")

    jobTitle: Any = None
    employmentType: Any = None
    workMode: Any = None
    minPrice: Any = None
    maxPrice: Any = None
    description: Any = None
    companyName: Any = None
    jobLocations: Any = None
    companyLogo: Any = None
    companyUrl: Any = None
    rolesAndResponsibilities: Any = None
    experience: Any = None
    status: Any = None


class ValidatedJob(BaseModel):
    """A job that passed every check; safe to write to the store."""
    job_title: str
    employment_type: list[EmploymentType] = Field(min_length=1)
    work_mode: list[WorkMode] = Field(min_length=1)
    salary: Range
    description: str
    company_name: str
    job_locations: list[str] = Field(min_length=1)
    company_logo: str | None = None
    company_url: str | None = None
    roles_and_responsibilities: str
    experience: Range
    status: JobStatus = "active"
