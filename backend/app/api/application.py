from datetime import datetime
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse, StreamingResponse
from pydantic import BaseModel, Field
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.application import Application
from ..services.resume_store import ResumeStore, get_resume_store
from ..utils.error_handlers import get_error_message, handle_database_error

logger = logging.getLogger(__name__)

# NOTE: listing and status updates are open to anonymous callers, matching the
# existing employer dashboard. They should require the job owner's token.
router = APIRouter(prefix="/applications", tags=["Applications"])

VIEW_MEDIA_TYPE = "application/pdf"


class StatusUpdate(BaseModel):
    # Free-form, stored verbatim (even empty); only the column width is enforced.
    status: str = Field(max_length=50)


def _application_to_public(a: Application) -> dict:
    return {
        "id": a.id,
        "jobId": a.job_id,
        "email": a.email,
        "linkedinUrl": a.linkedin_url,
        "resumePath": a.resume_path,
        "submittedAt": a.submitted_at.isoformat() if isinstance(a.submitted_at, datetime) else a.submitted_at,
        "status": a.status,
    }


@router.post("/submit", status_code=201)
async def submit_application(
    jobId: str = Form(...),
    email: str = Form(...),
    linkedinUrl: str | None = Form(default=None),
    resume: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    store: ResumeStore = Depends(get_resume_store),
):
    job_id = jobId.strip()
    applicant_email = email.strip()
    if not job_id or not applicant_email:
        raise HTTPException(status_code=400, detail=get_error_message("validation_error"))

    # jobId is not checked against existing jobs.
    resume_path = None
    if resume is not None and resume.filename:
        resume_path = await store.save(resume)

    application = Application(
        job_id=job_id,
        email=applicant_email,
        linkedin_url=(linkedinUrl or "").strip() or None,
        resume_path=resume_path,
        status="pending",
    )
    try:
        db.add(application)
        db.commit()
        db.refresh(application)
    except SQLAlchemyError as e:
        db.rollback()
        if resume_path:
            store.discard(resume_path)
        raise handle_database_error(e, "submitting application") from e

    logger.info("Application %s submitted for job %s", application.id, job_id)
    return {
        "success": True,
        "message": "Application submitted successfully",
        "applicationId": application.id,
    }


@router.get("/job/{job_id}")
def list_applications_for_job(job_id: str, db: Session = Depends(get_db)):
    try:
        rows = (
            db.query(Application)
            .filter(Application.job_id == job_id)
            .order_by(Application.submitted_at.asc(), Application.id.asc())
            .all()
        )
    except SQLAlchemyError as e:
        raise handle_database_error(e, "fetching applications") from e

    return {"success": True, "applications": [_application_to_public(a) for a in rows]}


@router.get("/resume/download/{filename}")
def download_resume(filename: str, store: ResumeStore = Depends(get_resume_store)):
    path = store.resolve(filename)
    if path is None:
        raise HTTPException(status_code=404, detail=get_error_message("resume_not_found"))

    return FileResponse(path, media_type="application/octet-stream", filename=path.name)


@router.get("/resume/view/{filename}")
def view_resume(filename: str, store: ResumeStore = Depends(get_resume_store)):
    path = store.resolve(filename)
    if path is None:
        raise HTTPException(status_code=404, detail=get_error_message("resume_not_found"))

    return StreamingResponse(
        store.iter_file(path),
        media_type=VIEW_MEDIA_TYPE,
        headers={"Content-Disposition": "inline"},
    )


@router.patch("/{application_id:int}/status")
def update_application_status(
    application_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
):
    try:
        # Single update-by-filter statement; rowcount tells us whether it matched.
        result = db.execute(
            update(Application)
            .where(Application.id == application_id)
            .values(status=payload.status)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise handle_database_error(e, "updating application status") from e

    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail=get_error_message("application_not_found"))

    return {"success": True, "message": "Application status updated successfully"}
