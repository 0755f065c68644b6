import logging
import time
from pathlib import Path
from typing import Iterator

from fastapi import HTTPException, Request, UploadFile

from ..utils.error_handlers import handle_file_upload_error
from ..utils.validation import is_bare_filename, sanitize_filename

logger = logging.getLogger(__name__)

# Public prefix the upload directory is mounted under (see main.create_app).
STATIC_PREFIX = "uploads"
CHUNK_SIZE = 64 * 1024


class ResumeStore:
    """Flat directory of uploaded resumes, addressed by generated filename."""

    def __init__(self, directory: str | Path, *, max_bytes: int):
        self.directory = Path(directory)
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_filename: str) -> str:
        """`<epoch millis>-<sanitized original name>`"""
        safe = sanitize_filename(Path(original_filename).name)
        return f"{int(time.time() * 1000)}-{safe}"

    async def save(self, upload: UploadFile) -> str:
        """
        Write an upload to disk and return its public path (`uploads/<name>`).

        Files are only ever created, never overwritten.
        """
        stored_filename = self.generate_name(upload.filename or "resume")
        dest = self.directory / stored_filename

        size = 0
        try:
            self.ensure_directory()
            with open(dest, "xb") as out:
                while True:
                    chunk = await upload.read(1024 * 1024)  # 1MB
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_bytes:
                        raise HTTPException(
                            status_code=413,
                            detail=f"File is too large. Maximum size is {self.max_bytes // (1024 * 1024) or 1}MB.",
                        )
                    out.write(chunk)
        except HTTPException:
            # Clean up partial file
            dest.unlink(missing_ok=True)
            raise
        except FileExistsError as e:
            # Same millisecond, same name: leave the existing file alone.
            raise handle_file_upload_error(e, stored_filename) from e
        except OSError as e:
            dest.unlink(missing_ok=True)
            raise handle_file_upload_error(e, stored_filename) from e
        finally:
            await upload.close()

        logger.info("Stored resume %s (%d bytes)", stored_filename, size)
        return f"{STATIC_PREFIX}/{stored_filename}"

    def discard(self, public_path: str) -> None:
        """Remove a file stored by `save` whose application row was never written."""
        filename = public_path.rsplit("/", 1)[-1]
        if not is_bare_filename(filename):
            return
        (self.directory / filename).unlink(missing_ok=True)
        logger.info("Discarded orphaned resume %s", filename)

    def resolve(self, filename: str) -> Path | None:
        """Path of an existing stored file, or None (also for names that try to leave the store)."""
        if not is_bare_filename(filename):
            return None
        path = self.directory / filename
        return path if path.is_file() else None

    def iter_file(self, path: Path) -> Iterator[bytes]:
        try:
            with open(path, "rb") as fh:
                while True:
                    chunk = fh.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    yield chunk
        except OSError:
            # Headers are already sent; the client sees a truncated body.
            logger.exception("Error streaming resume %s", path.name)
            raise


def get_resume_store(request: Request) -> ResumeStore:
    return request.app.state.resume_store
