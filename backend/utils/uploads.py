# backend/utils/uploads.py
import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List

from fastapi import HTTPException, UploadFile

from config import settings

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "gif"}
URL_PREFIX = "/uploads"


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_image(file: UploadFile) -> dict:
    """Validate and store one product image, returning its public URL and metadata."""
    if file.content_type not in ALLOWED_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type: {file.content_type}. Allowed types are: JPEG, PNG, WebP, and GIF.",
        )

    data = file.file.read()
    size = len(data)
    if size == 0:
        raise HTTPException(status_code=400, detail="The file appears to be empty. Please select a valid image.")
    if size > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File is too large ({size / (1024 * 1024):.2f}MB). Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB.",
        )

    ext = (file.filename or "").rsplit(".", 1)[-1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        ext = "jpg"
    unique_filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex}.{ext}"
    save_path = upload_dir() / unique_filename

    try:
        save_path.write_bytes(data)
    except OSError as e:
        logger.error(f"Image save failed for {file.filename}: {e}")
        raise HTTPException(status_code=500, detail="Failed to store the image. Please try again.")
    finally:
        file.file.close()

    return {
        "image_url": f"{URL_PREFIX}/{unique_filename}",
        "file_name": file.filename or unique_filename,
        "file_size": size,
        "mime_type": file.content_type,
        "stored_as": unique_filename,
    }


def list_images() -> List[dict]:
    images = []
    for path in upload_dir().iterdir():
        if not path.is_file() or path.suffix.lstrip(".").lower() not in ALLOWED_EXTENSIONS:
            continue
        stat = path.stat()
        images.append({
            "name": path.name,
            "url": f"{URL_PREFIX}/{path.name}",
            "size": stat.st_size,
            "uploaded_at": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        })
    images.sort(key=lambda i: i["uploaded_at"], reverse=True)
    return images


def delete_image(name: str) -> bool:
    # Only bare file names inside the upload directory
    if "/" in name or "\\" in name or name.startswith("."):
        raise HTTPException(status_code=400, detail="Invalid image name")
    path = upload_dir() / name
    if not path.is_file():
        return False
    path.unlink()
    return True
