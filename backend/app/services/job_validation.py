"""
Ordered validation for job postings.

Each step raises a 400 and stops the pipeline, so the client always learns
about the first problem only:

1. required fields present
2. salary / experience bounds are non-negative numbers
3. salary min <= max
4. experience min <= max
5. employment types drawn from EMPLOYMENT_TYPES
6. work modes drawn from WORK_MODES
7. status (if given) drawn from VALID_JOB_STATUSES

Updates go through the same pipeline after merging onto the stored job.
"""
import logging
from typing import Any

from fastapi import HTTPException

from ..schemas.job import EMPLOYMENT_TYPES, WORK_MODES, Range, ValidatedJob
from ..utils.validation import as_string_list, coerce_number, is_blank, validate_job_status

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "jobTitle",
    "employmentType",
    "workMode",
    "minPrice",
    "maxPrice",
    "description",
    "companyName",
    "jobLocations",
    "rolesAndResponsibilities",
    "experience",
)


def _invalid(message: str, allowed: tuple[str, ...] | None = None) -> HTTPException:
    logger.info("Job payload rejected: %s", message)
    if allowed:
        message = f"{message}. Allowed: {', '.join(allowed)}"
    return HTTPException(status_code=400, detail=message)


def _text(value: Any) -> str:
    return str(value).strip()


def _optional_text(value: Any) -> str | None:
    if is_blank(value):
        return None
    return _text(value)


def validate_job_payload(data: dict) -> ValidatedJob:
    # 1. presence
    missing = [field for field in REQUIRED_FIELDS if is_blank(data.get(field))]
    locations = as_string_list(data.get("jobLocations"))
    if "jobLocations" not in missing and not locations:
        missing.append("jobLocations")
    if missing:
        raise _invalid(f"Missing required fields: {', '.join(missing)}")

    # 2. numeric coercion
    experience = data.get("experience")
    if not isinstance(experience, dict):
        experience = {}
    salary_min = coerce_number(data.get("minPrice"))
    salary_max = coerce_number(data.get("maxPrice"))
    exp_min = coerce_number(experience.get("min"))
    exp_max = coerce_number(experience.get("max"))
    if None in (salary_min, salary_max, exp_min, exp_max):
        raise _invalid("Invalid salary or experience values")

    # 3. / 4. ranges
    if salary_min > salary_max:
        raise _invalid("Minimum salary cannot be greater than maximum salary")
    if exp_min > exp_max:
        raise _invalid("Minimum experience cannot be greater than maximum experience")

    # 5. / 6. enumerations
    employment_types = as_string_list(data.get("employmentType"))
    if not employment_types or not all(t in EMPLOYMENT_TYPES for t in employment_types):
        raise _invalid("Invalid employment type(s)", allowed=EMPLOYMENT_TYPES)

    work_modes = as_string_list(data.get("workMode"))
    if not work_modes or not all(m in WORK_MODES for m in work_modes):
        raise _invalid("Invalid work mode(s)", allowed=WORK_MODES)

    # 7. status
    status = validate_job_status(None if is_blank(data.get("status")) else data.get("status"))

    return ValidatedJob(
        job_title=_text(data["jobTitle"]),
        employment_type=employment_types,
        work_mode=work_modes,
        salary=Range(min=salary_min, max=salary_max),
        description=_text(data["description"]),
        company_name=_text(data["companyName"]),
        job_locations=locations,
        company_logo=_optional_text(data.get("companyLogo")),
        company_url=_optional_text(data.get("companyUrl")),
        roles_and_responsibilities=_text(data["rolesAndResponsibilities"]),
        experience=Range(min=exp_min, max=exp_max),
        status=status,
    )
