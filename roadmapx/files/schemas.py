# FILE: roadmapx/files/schemas.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class FileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    url: str
    created_at: datetime


class DownloadUrlOut(BaseModel):
    download_url: str
