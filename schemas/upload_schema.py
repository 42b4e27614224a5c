"""Schema for the file upload endpoint."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
    success: bool = True
