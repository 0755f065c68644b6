from datetime import datetime
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..database import get_db
from ..models.job import Job, JobLocation
from ..schemas.job import JobPayload, ValidatedJob
from ..services.job_search import apply_search
from ..services.job_validation import validate_job_payload
from ..utils.roles import employer_only
from ..utils.error_handlers import get_error_message, handle_database_error

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Jobs"])


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if isinstance(value, datetime) else value


def _json_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.warning("Unreadable list column value: %r", raw)
        return []
    return [str(x) for x in parsed] if isinstance(parsed, list) else []


def _job_to_public(job: Job) -> dict:
    # Keys mirror the job form field names the frontend posts.
    employer = job.employer
    return {
        "id": job.id,
        "jobTitle": job.job_title,
        "employmentType": _json_list(job.employment_type),
        "workMode": _json_list(job.work_mode),
        "salary": {"min": job.salary_min, "max": job.salary_max},
        "description": job.description,
        "companyName": job.company_name,
        "jobLocations": [loc.location for loc in job.locations],
        "companyLogo": job.company_logo,
        "companyUrl": job.company_url,
        "rolesAndResponsibilities": job.roles_and_responsibilities,
        "experience": {"min": job.experience_min, "max": job.experience_max},
        "status": job.status or "active",
        "postedBy": job.user_id,
        "employerEmail": employer.email if employer else None,
        "createdAt": _iso(job.created_at),
        "updatedAt": _iso(job.updated_at),
    }


def _job_to_payload(job: Job) -> dict:
    """Stored job in request-body shape, used as the base an update is merged onto."""
    return {
        "jobTitle": job.job_title,
        "employmentType": _json_list(job.employment_type),
        "workMode": _json_list(job.work_mode),
        "minPrice": job.salary_min,
        "maxPrice": job.salary_max,
        "description": job.description,
        "companyName": job.company_name,
        "jobLocations": [loc.location for loc in job.locations],
        "companyLogo": job.company_logo,
        "companyUrl": job.company_url,
        "rolesAndResponsibilities": job.roles_and_responsibilities,
        "experience": {"min": job.experience_min, "max": job.experience_max},
        "status": job.status,
    }


def _apply_validated(job: Job, data: ValidatedJob) -> None:
    job.job_title = data.job_title
    job.employment_type = json.dumps(data.employment_type, ensure_ascii=False)
    job.work_mode = json.dumps(data.work_mode, ensure_ascii=False)
    job.salary_min = data.salary.min
    job.salary_max = data.salary.max
    job.description = data.description
    job.company_name = data.company_name
    job.company_logo = data.company_logo
    job.company_url = data.company_url
    job.roles_and_responsibilities = data.roles_and_responsibilities
    job.experience_min = data.experience.min
    job.experience_max = data.experience.max
    job.status = data.status
    job.locations = [
        JobLocation(position=i, location=location)
        for i, location in enumerate(data.job_locations)
    ]


def _jobs_query(db: Session):
    return db.query(Job).options(joinedload(Job.employer), selectinload(Job.locations))


def _find_owned_job(db: Session, *, job_id: int, user: dict) -> Job:
    # Someone else's job is reported exactly like a missing one.
    job = (
        _jobs_query(db)
        .filter(Job.id == job_id, Job.user_id == int(user.get("sub")))
        .first()
    )
    if not job:
        raise HTTPException(status_code=404, detail=get_error_message("job_not_owned"))
    return job


@router.get("/jobs")
def list_jobs(db: Session = Depends(get_db)):
    try:
        jobs = _jobs_query(db).order_by(Job.created_at.desc(), Job.id.desc()).all()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing jobs") from e

    return {
        "success": True,
        "message": "Jobs fetched successfully",
        "data": [_job_to_public(j) for j in jobs],
    }


@router.get("/jobs/search")
def search_jobs(
    keyword: str | None = Query(default=None, description="Matches title, description or company"),
    location: str | None = Query(default=None, description="Matches any job location"),
    db: Session = Depends(get_db),
):
    try:
        jobs = apply_search(_jobs_query(db), keyword=keyword, location=location).all()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "searching jobs") from e

    return {"success": True, "data": [_job_to_public(j) for j in jobs]}


@router.get("/jobs/{job_id:int}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    try:
        job = _jobs_query(db).filter(Job.id == job_id).first()
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching job") from e

    if not job:
        raise HTTPException(status_code=404, detail=get_error_message("job_not_found"))

    return {"success": True, "message": "Job fetched successfully", "data": _job_to_public(job)}


@router.get("/my-jobs")
def my_jobs(db: Session = Depends(get_db), user=Depends(employer_only)):
    try:
        jobs = (
            _jobs_query(db)
            .filter(Job.user_id == int(user.get("sub")))
            .order_by(Job.created_at.desc(), Job.id.desc())
            .all()
        )
    except SQLAlchemyError as e:
        raise handle_database_error(e, "listing employer jobs") from e

    return {"success": True, "message": "Jobs fetched successfully", "data": [_job_to_public(j) for j in jobs]}


@router.post("/jobs", status_code=201)
def create_job(
    payload: JobPayload,
    db: Session = Depends(get_db),
    user=Depends(employer_only),
):
    validated = validate_job_payload(payload.model_dump())

    # Owner always comes from the token, never from the body.
    job = Job(user_id=int(user.get("sub")))
    _apply_validated(job, validated)

    try:
        db.add(job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "creating job") from e

    job = _jobs_query(db).filter(Job.id == job.id).first()
    logger.info("Job %s posted by user %s", job.id, job.user_id)
    return {"success": True, "message": "Job posted successfully", "data": _job_to_public(job)}


@router.put("/jobs/{job_id:int}")
def update_job(
    job_id: int,
    payload: JobPayload,
    db: Session = Depends(get_db),
    user=Depends(employer_only),
):
    job = _find_owned_job(db, job_id=job_id, user=user)

    # Merge present fields over the stored job, then re-check the whole record.
    merged = {**_job_to_payload(job), **payload.model_dump(exclude_unset=True)}
    validated = validate_job_payload(merged)
    _apply_validated(job, validated)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating job") from e

    job = _jobs_query(db).filter(Job.id == job_id).first()
    return {"success": True, "message": "Job updated successfully", "data": _job_to_public(job)}


@router.delete("/jobs/{job_id:int}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    user=Depends(employer_only),
):
    job = _find_owned_job(db, job_id=job_id, user=user)

    try:
        db.delete(job)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "deleting job") from e

    logger.info("Job %s deleted by user %s", job_id, user.get("sub"))
    return {"success": True, "message": "Job deleted successfully"}
