"""
Centralized error messages and conversion of low-level failures to HTTP errors.
"""
import logging
from fastapi import HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid credentials",
    "email_exists": "User already exists",
    "invalid_role": "Invalid role specified",
    "company_required": "Company name is required for employers",
    "weak_password": "Password is required and must be 72 bytes or less",
    "wrong_password": "Current password is incorrect",
    "missing_token": "No authentication token, access denied",
    "invalid_token": "Token is invalid",
    "session_expired": "Your session has expired. Please login again.",
    "employer_required": "Access denied. Employer privileges required.",
    "user_not_found": "User not found",

    # Jobs
    "job_not_found": "Job not found",
    "job_not_owned": "Job not found or you do not have permission to modify it",

    # Applications / resumes
    "application_not_found": "Application not found",
    "resume_not_found": "Resume not found",
    "file_too_large": "File is too large. Maximum size is 5MB.",
    "file_processing_failed": "Failed to store the uploaded file. Please try again.",
    "resume_stream_failed": "Failed to stream resume",

    # General
    "forbidden": "You don't have permission to access this resource.",
    "not_found": "The requested resource was not found.",
    "server_error": "Something went wrong!",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def handle_file_upload_error(error: Exception, filename: str = "") -> HTTPException:
    """Map a failed resume write to an HTTP error."""
    logger.error("File upload error for %s: %s", filename, error)

    if isinstance(error, HTTPException):
        return error

    return HTTPException(
        status_code=500,
        detail=get_error_message("file_processing_failed")
    )


def handle_database_error(error: Exception, operation: str = "") -> HTTPException:
    """Handle database errors with user-friendly messages."""
    logger.error("Database error during %s: %s", operation, error)

    error_str = str(error).lower()

    # Unique keys are a client conflict; reported as 400 like other bad input.
    if "duplicate" in error_str or "unique" in error_str:
        return HTTPException(
            status_code=400,
            detail="This record already exists. Please check your input."
        )

    if "connection" in error_str or "operational" in error_str:
        return HTTPException(
            status_code=503,
            detail=get_error_message("database_error")
        )

    return HTTPException(
        status_code=500,
        detail=get_error_message("server_error")
    )


def create_error_response(
    status_code: int,
    message: str,
    error: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Create the standard `{success: false, message, error?}` envelope."""
    content = {
        "success": False,
        "message": message,
    }

    if error:
        content["error"] = error

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=headers,
    )
