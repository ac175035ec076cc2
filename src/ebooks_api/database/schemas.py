"""
Record schemas for the metadata store.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EbookStatus(str, Enum):
    """Lifecycle of an uploaded e-book."""
    PENDING = 'pending'
    READY = 'ready'


class EbookRecord(BaseModel):
    """Metadata row for one uploaded e-book."""
    id: str = Field(..., description="Unique file identifier, generated at upload-intent time")
    owner_id: str = Field(..., min_length=1, description="Identity of the uploading user")
    object_path: str = Field(..., min_length=1, description="Storage key: {owner_id}/{id}{extension}")
    file_name: str = Field(..., min_length=1, max_length=255, description="Sanitized original filename")
    size_bytes: int = Field(..., ge=0, description="Size in bytes")
    mime_type: str = Field("application/pdf", description="MIME type declared at upload")
    status: EbookStatus = Field(EbookStatus.PENDING, description="pending until storage confirms the upload")
    created_at: datetime
    updated_at: datetime


class ViewLogEntry(BaseModel):
    """Audit entry written whenever a view URL is issued."""
    user_id: str
    object_path: str
    viewed_at: datetime
    expires_at: datetime
    id: Optional[int] = None
