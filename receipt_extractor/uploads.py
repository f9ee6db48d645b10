import logging
import os
import uuid
from contextlib import contextmanager

from fastapi import UploadFile
from pydantic import BaseModel

from receipt_extractor.errors import InvalidInputError

logger = logging.getLogger("receipt_extractor")

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}
CHUNK_SIZE = 64 * 1024

FILE_TYPE_ERROR = "Only .jpg, .jpeg, and .png files are allowed"


class UploadedFile(BaseModel):
    original_filename: str
    content_type: str
    filename: str  # name on disk, also the public /uploads/<filename> path segment
    path: str
    size: int


def get_upload_dir() -> str:
    return os.getenv("UPLOAD_DIR", "./uploads")


def remove_upload(path: str | None) -> bool:
    """Delete a stored upload. Returns False when there was nothing to delete."""
    if not path or not os.path.exists(path):
        return False
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True


async def store_upload(file: UploadFile | None) -> UploadedFile:
    """Write an incoming multipart file to the upload directory under a fresh uuid name."""
    if file is None or not file.filename:
        raise InvalidInputError("No file uploaded")

    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS or file.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidInputError(FILE_TYPE_ERROR)

    upload_dir = get_upload_dir()
    os.makedirs(upload_dir, exist_ok=True)
    filename = f"{uuid.uuid4()}{ext}"
    path = os.path.join(upload_dir, filename)

    size = 0
    try:
        with open(path, "wb") as out:
            while chunk := await file.read(CHUNK_SIZE):
                size += len(chunk)
                if size > MAX_FILE_SIZE:
                    raise InvalidInputError("File too large. Maximum size is 10 MB.")
                out.write(chunk)
    except Exception:
        remove_upload(path)
        raise

    logger.info(
        "Upload stored",
        extra={"extra_data": {"filename": filename, "size": size, "content_type": file.content_type}},
    )
    return UploadedFile(
        original_filename=file.filename,
        content_type=file.content_type,
        filename=filename,
        path=path,
        size=size,
    )


@contextmanager
def cleanup_on_failure(upload: UploadedFile | None):
    """Remove ``upload`` from disk if the wrapped block raises, then re-raise unchanged.

    On success the file is kept: it is the image served under ``/uploads``.
    """
    try:
        yield upload
    except BaseException:
        if upload is not None and remove_upload(upload.path):
            logger.info(
                "Removed upload after failed extraction",
                extra={"extra_data": {"filename": upload.filename}},
            )
        raise
