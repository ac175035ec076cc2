from typing import Optional

from fastapi import APIRouter, Depends, status

from ebooks_api.dependencies import (
    get_current_user_id,
    get_library_service,
    get_upload_service,
    get_view_service,
)
from ebooks_api.schemas import (
    CompleteUploadResponse,
    EbookMetadata,
    ListEbooksResponse,
    ObjectPathRequest,
    SignUploadRequest,
    SignUploadResponse,
    ViewUrlResponse,
)
from ebooks_api.services.library import LibraryService
from ebooks_api.services.uploads import UploadService
from ebooks_api.services.viewer import ViewService

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Missing field, unsupported file type or file too large."},
    status.HTTP_401_UNAUTHORIZED: {"description": "No caller identity."},
    status.HTTP_403_FORBIDDEN: {"description": "The object path belongs to another user."},
    status.HTTP_404_NOT_FOUND: {"description": "The object does not exist in storage."},
}


@router.post(
    "/uploads/sign",
    response_model=SignUploadResponse,
    responses={code: ERROR_RESPONSES[code] for code in (400, 401)},
)
def sign_upload(
    body: SignUploadRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    upload_service: UploadService = Depends(get_upload_service),
) -> SignUploadResponse:
    """
    Issue a signed URL the client uploads the e-book to.

    The e-book is recorded as `pending` until `POST /uploads/complete` is
    called after the upload.
    """
    ticket = upload_service.begin_upload(
        owner_id=user_id,
        file_name=body.file_name,
        size_bytes=body.size,
        mime_type=body.mime,
    )
    return SignUploadResponse(
        upload_url=ticket.upload_url,
        object_path=ticket.object_path,
        token=ticket.token,
        file_id=ticket.file_id,
        expires_in=ticket.expires_in,
    )


@router.post("/uploads/complete", response_model=CompleteUploadResponse, responses=ERROR_RESPONSES)
def complete_upload(
    body: ObjectPathRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    upload_service: UploadService = Depends(get_upload_service),
) -> CompleteUploadResponse:
    """Confirm an upload landed in storage and mark the e-book `ready`."""
    completed = upload_service.complete_upload(owner_id=user_id, object_path=body.object_path)
    return CompleteUploadResponse(object_path=completed.object_path, status=completed.status)


@router.post("/view-url", response_model=ViewUrlResponse, responses=ERROR_RESPONSES)
def create_view_url(
    body: ObjectPathRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    view_service: ViewService = Depends(get_view_service),
) -> ViewUrlResponse:
    """Issue a view-only signed URL, valid for one hour by default."""
    view_url = view_service.create_view_url(owner_id=user_id, object_path=body.object_path)
    return ViewUrlResponse(
        url=view_url.url,
        expires_at=view_url.expires_at,
        expires_in=view_url.expires_in,
    )


@router.get(
    "/list",
    response_model=ListEbooksResponse,
    responses={status.HTTP_401_UNAUTHORIZED: ERROR_RESPONSES[status.HTTP_401_UNAUTHORIZED]},
)
def list_ebooks(
    user_id: Optional[str] = Depends(get_current_user_id),
    library_service: LibraryService = Depends(get_library_service),
) -> ListEbooksResponse:
    """List the caller's e-books whose upload has completed, newest first."""
    records = library_service.list_ready(user_id)
    return ListEbooksResponse(
        pdfs=[EbookMetadata.from_record(record) for record in records],
        count=len(records),
    )
