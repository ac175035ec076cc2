####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ebooks_api.database import EbookRecord, EbookStatus


class SignUploadRequest(BaseModel):
    """Request body for `POST /api/pdf/uploads/sign`."""
    file_name: Optional[str] = Field(
        None,
        alias="fileName",
        description="Original filename; the extension must be .pdf or .epub.",
        json_schema_extra={"example": "grammar_book_level2.pdf"},
    )
    size: Optional[StrictInt] = Field(None, description="Size of the file in bytes.")
    mime: Optional[str] = Field(None, description="MIME type of the file.")

    model_config = ConfigDict(populate_by_name=True)


class SignUploadResponse(BaseModel):
    """Response model for `POST /api/pdf/uploads/sign`."""
    upload_url: str = Field(alias="uploadUrl", description="Signed URL to PUT the file to.")
    object_path: str = Field(alias="objectPath", description="Storage key of the file.")
    token: str = Field(description="Signature carried by the upload URL.")
    file_id: str = Field(alias="fileId", description="Identifier of the e-book record.")
    expires_in: int = Field(alias="expiresIn", description="Seconds until the upload URL expires.")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "uploadUrl": "https://ebooks.s3.amazonaws.com/u1/4f1c...pdf?X-Amz-Signature=...",
                "objectPath": "u1/4f1c2a7e-8f0b-4c9e-a1d2-3b4c5d6e7f80.pdf",
                "token": "9a8b7c...",
                "fileId": "4f1c2a7e-8f0b-4c9e-a1d2-3b4c5d6e7f80",
                "expiresIn": 3600,
            }
        },
    )


class ObjectPathRequest(BaseModel):
    """Request body for `POST /api/pdf/uploads/complete` and `POST /api/pdf/view-url`."""
    object_path: Optional[str] = Field(
        None,
        alias="objectPath",
        json_schema_extra={"example": "u1/4f1c2a7e-8f0b-4c9e-a1d2-3b4c5d6e7f80.pdf"},
    )

    model_config = ConfigDict(populate_by_name=True)


class CompleteUploadResponse(BaseModel):
    """Response model for `POST /api/pdf/uploads/complete`."""
    success: bool = True
    object_path: str = Field(alias="objectPath")
    status: EbookStatus = EbookStatus.READY

    model_config = ConfigDict(populate_by_name=True)


class ViewUrlResponse(BaseModel):
    """Response model for `POST /api/pdf/view-url`."""
    url: str = Field(description="Signed, view-only URL of the e-book.")
    expires_at: datetime = Field(alias="expiresAt", description="When the URL stops working (UTC).")
    expires_in: int = Field(alias="expiresIn", description="Seconds until the URL expires.")

    model_config = ConfigDict(populate_by_name=True)


class EbookMetadata(BaseModel):
    """One e-book as returned by `GET /api/pdf/list`."""
    id: str
    user_id: str
    object_path: str
    file_name: str
    size_bytes: int
    mime_type: str
    status: EbookStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: EbookRecord) -> "EbookMetadata":
        return cls(
            id=record.id,
            user_id=record.owner_id,
            object_path=record.object_path,
            file_name=record.file_name,
            size_bytes=record.size_bytes,
            mime_type=record.mime_type,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ListEbooksResponse(BaseModel):
    """Response model for `GET /api/pdf/list`."""
    pdfs: List[EbookMetadata]
    count: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "pdfs": [
                    {
                        "id": "4f1c2a7e-8f0b-4c9e-a1d2-3b4c5d6e7f80",
                        "user_id": "u1",
                        "object_path": "u1/4f1c2a7e-8f0b-4c9e-a1d2-3b4c5d6e7f80.pdf",
                        "file_name": "grammar_book_level2.pdf",
                        "size_bytes": 2048,
                        "mime_type": "application/pdf",
                        "status": "ready",
                        "created_at": "2024-01-01T00:00:00Z",
                        "updated_at": "2024-01-01T00:01:00Z",
                    }
                ],
                "count": 1,
            }
        }
    )
