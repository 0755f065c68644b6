from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import application as application_api
from .api import auth as auth_api
from .api import job as job_api
from .config import APP_ENV, DEBUG_ERRORS, FRONTEND_ORIGINS, LOG_LEVEL, MAX_RESUME_BYTES, UPLOAD_DIR
from .database import get_db, init_db, make_engine, make_session_factory
from .services.resume_store import STATIC_PREFIX, ResumeStore
from .utils.error_handlers import create_error_response, get_error_message

logger = logging.getLogger(__name__)

SERVICE_NAME = "Job Board API"

_default_origins = ["http://localhost:5173", "http://127.0.0.1:5173"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (retrying while the database comes up)."""
    await run_in_threadpool(init_db, app.state.engine)
    logger.info("%s started (env=%s)", SERVICE_NAME, APP_ENV)
    yield


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Render HTTPException (and unmatched routes) as the standard envelope."""
        message = exc.detail if isinstance(exc.detail, str) else get_error_message("validation_error")
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = get_error_message("not_found")
        return create_error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies/forms are bad input (400), not 422."""
        fields = sorted({".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()} - {""})
        message = get_error_message("validation_error")
        if fields:
            message = f"{message} Invalid or missing: {', '.join(fields)}"
        return create_error_response(400, message)

    @app.exception_handler(OperationalError)
    async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
        """Handle database operational errors."""
        logger.exception("Database OperationalError: %s", exc)
        return create_error_response(
            503,
            get_error_message("database_error"),
            error=str(getattr(exc, "orig", None) or exc) if request.app.state.debug_errors else None,
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        """Handle general database errors."""
        logger.exception("Database SQLAlchemyError: %s", exc)
        return create_error_response(
            500,
            get_error_message("server_error"),
            error=str(exc) if request.app.state.debug_errors else None,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors globally."""
        logger.exception("Unhandled exception: %s", exc)
        return create_error_response(
            500,
            get_error_message("server_error"),
            error=str(exc) if request.app.state.debug_errors else None,
        )


def create_app(
    *,
    engine: Engine | None = None,
    session_factory: sessionmaker | None = None,
    upload_dir: str | None = None,
    max_resume_bytes: int | None = None,
    debug_errors: bool | None = None,
) -> FastAPI:
    """
    Build the API.

    The database handle and the resume store are created once here and shared
    by every request through `app.state`; pass your own to point the app at a
    different database or upload directory. `debug_errors` defaults to
    APP_ENV=development and adds exception text to 500 responses.
    """
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if session_factory is None:
        engine = engine or make_engine()
        session_factory = make_session_factory(engine)
    elif engine is None:
        engine = session_factory.kw.get("bind")

    store = ResumeStore(upload_dir or UPLOAD_DIR, max_bytes=max_resume_bytes or MAX_RESUME_BYTES)
    store.ensure_directory()

    app = FastAPI(title=SERVICE_NAME, lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.resume_store = store
    app.state.debug_errors = DEBUG_ERRORS if debug_errors is None else debug_errors

    app.include_router(auth_api.router, prefix="/api")
    app.include_router(job_api.router, prefix="/api")
    app.include_router(application_api.router, prefix="/api")

    # Stored resumes are public, read-only.
    app.mount(f"/{STATIC_PREFIX}", StaticFiles(directory=store.directory), name=STATIC_PREFIX)

    _register_exception_handlers(app)

    @app.get("/")
    def root():
        return {
            "message": "Job Board Server is Running!",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": APP_ENV,
        }

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        """Health check endpoint."""
        db.execute(text("SELECT 1"))
        return {"status": "Backend running", "service": SERVICE_NAME, "database": "ok"}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[*_default_origins, *FRONTEND_ORIGINS],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    return app


app = create_app()
