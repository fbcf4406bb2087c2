import logging
import os
import shutil
import uuid

from starlette.datastructures import UploadFile

from admin_backend.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def is_uploaded_file(value) -> bool:
    """True for an actual upload, False for missing or empty file inputs."""
    return isinstance(value, UploadFile) and bool(value.filename)


def add_uploaded_file(file: UploadFile, folder: str) -> str:
    """
    Store an uploaded image below UPLOAD_DIR/<folder> under a unique name.

    Returns the path relative to UPLOAD_DIR, e.g. "backend_user_images/<uuid>.png".
    Raises ValueError for non-image files and OSError when the file can't be written.
    """
    _, ext = os.path.splitext(file.filename or "")
    ext = ext.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValueError(f"Invalid file type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}")

    if ".." in folder or folder.startswith(("/", "\\")):
        raise ValueError(f"Invalid asset folder '{folder}'")

    target_dir = os.path.join(settings.UPLOAD_DIR, folder)
    os.makedirs(target_dir, exist_ok=True)

    unique_filename = f"{uuid.uuid4()}{ext}"
    file_path = os.path.join(target_dir, unique_filename)

    file.file.seek(0)
    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    logger.debug(f"Stored upload '{file.filename}' as {file_path}")
    return f"{folder}/{unique_filename}"
