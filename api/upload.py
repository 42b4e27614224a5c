"""Upload API router: multipart file uploads stored on local disk."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import Optional

from core.config import UPLOAD_DEFAULT_FOLDER
from core.exceptions import ValidationError
from core.logger import get_logger
from core.security import get_current_user
from database import models
from schemas import UploadResponse
from services.upload_service import upload_service

logger = get_logger("api.upload")
router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    folder: str = Form(UPLOAD_DEFAULT_FOLDER),
    current_user: models.User = Depends(get_current_user),
):
    """Store an uploaded file and return its public URL.

    Raises:
        ValidationError: If no file was sent, it is empty, or it is too large.
    """
    if file is None:
        raise ValidationError("No file uploaded", field="file")
    # one byte over the limit is enough to reject the file
    data = await file.read(upload_service.max_bytes + 1)
    url = await run_in_threadpool(upload_service.save, file.filename, data, folder)
    logger.info("User %s uploaded %s -> %s", current_user.id, file.filename, url)
    return UploadResponse(url=url, success=True)
