"""
Two-phase e-book upload.

Phase 1 (`begin_upload`) validates the request, mints an object path, hands
out a signed upload URL and records a `pending` row. The client then PUTs the
bytes straight to storage. Phase 2 (`complete_upload`) confirms the object is
really there and flips the row to `ready` with the size storage reports.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from ebooks_api.adapters.storage import ObjectStorage
from ebooks_api.config.settings import DEFAULT_MAX_FILE_SIZE, DEFAULT_SIGNED_URL_EXPIRES_IN
from ebooks_api.database import EbookRecord, EbookStatus, EbookStore
from ebooks_api.errors import (
    InvalidArgument,
    PayloadTooLarge,
    StorageError,
    Unauthenticated,
    UnsupportedType,
)
from ebooks_api.services.access import authorize_object_path
from ebooks_api.services.naming import (
    ALLOWED_EXTENSIONS,
    build_object_path,
    is_allowed_extension,
    sanitize_file_name,
)
from ebooks_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/pdf"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UploadTicket:
    """Result of phase 1."""
    upload_url: str
    object_path: str
    token: str
    file_id: str
    expires_in: int


@dataclass(frozen=True)
class CompletedUpload:
    """Result of phase 2."""
    object_path: str
    size_bytes: int
    status: EbookStatus = EbookStatus.READY


class UploadService:
    """Upload workflow controller."""

    def __init__(
        self,
        storage: ObjectStorage,
        store: EbookStore,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        expires_in: int = DEFAULT_SIGNED_URL_EXPIRES_IN,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.storage = storage
        self.store = store
        self.max_file_size = max_file_size
        self.expires_in = expires_in
        self.clock = clock
        self.id_factory = id_factory

    @log_execution_time
    def begin_upload(
        self,
        owner_id: Optional[str],
        file_name: Optional[str],
        size_bytes: Optional[int],
        mime_type: Optional[str] = None,
    ) -> UploadTicket:
        """
        Issue a signed upload URL and record a pending e-book.

        :raises Unauthenticated: no owner identity.
        :raises InvalidArgument: missing file name or size.
        :raises UnsupportedType: extension other than .pdf/.epub.
        :raises PayloadTooLarge: size above the configured maximum.
        """
        if not owner_id:
            raise Unauthenticated()

        if not file_name or not size_bytes:
            raise InvalidArgument("Missing required field", required=["fileName", "size"])
        if size_bytes < 0:
            raise InvalidArgument("size must be a positive number of bytes", providedSize=size_bytes)

        if not is_allowed_extension(file_name):
            raise UnsupportedType(allowedExtensions=list(ALLOWED_EXTENSIONS))

        if size_bytes > self.max_file_size:
            raise PayloadTooLarge(maxSize=self.max_file_size, providedSize=size_bytes)

        safe_file_name = sanitize_file_name(file_name)
        file_id, object_path = build_object_path(owner_id, file_name, self.id_factory)

        logger.info(
            f"Upload URL requested: user={owner_id}, fileName={file_name}, "
            f"size={size_bytes}, objectPath={object_path}"
        )

        signed_upload = self.storage.create_signed_upload_url(object_path, self.expires_in)

        now = self.clock()
        record = EbookRecord(
            id=file_id,
            owner_id=owner_id,
            object_path=object_path,
            file_name=safe_file_name,
            size_bytes=size_bytes,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            status=EbookStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        try:
            self.store.create_record(record)
        except Exception as e:
            # The signed URL is still returned; the missing row is repaired out-of-band.
            logger.error(f"Failed to save pending metadata for {object_path}: {str(e)}")

        logger.info(f"Upload URL issued: objectPath={object_path}")
        return UploadTicket(
            upload_url=signed_upload.url,
            object_path=object_path,
            token=signed_upload.token,
            file_id=file_id,
            expires_in=signed_upload.expires_in,
        )

    @log_execution_time
    def complete_upload(self, owner_id: Optional[str], object_path: Optional[str]) -> CompletedUpload:
        """
        Confirm an upload finished and mark its record ready.

        Safe to call more than once for the same object.

        :raises Unauthenticated: no owner identity.
        :raises InvalidArgument: missing object path.
        :raises Forbidden: the object path belongs to someone else.
        :raises NotFound: storage has no such object.
        :raises StorageError: the metadata update failed.
        """
        authorize_object_path(self.storage, owner_id, object_path)

        logger.info(f"Completing upload: user={owner_id}, objectPath={object_path}")
        metadata = self.storage.get_object_metadata(object_path)

        try:
            matched = self.store.mark_ready(
                object_path=object_path,
                owner_id=owner_id,
                size_bytes=metadata.size_bytes,
                updated_at=self.clock(),
            )
        except Exception as e:
            logger.error(f"Metadata update failed for {object_path}: {str(e)}")
            raise StorageError() from e

        if not matched:
            logger.warning(f"No metadata row for {object_path}; upload confirmed in storage only")

        logger.info(f"Upload completed: objectPath={object_path}, size={metadata.size_bytes}")
        return CompletedUpload(object_path=object_path, size_bytes=metadata.size_bytes)
