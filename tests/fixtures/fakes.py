"""In-memory stand-ins for object storage and the metadata store."""
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

import pytest

from ebooks_api.adapters.storage import ObjectMetadata, ObjectStorage, SignedUpload
from ebooks_api.database import EbookRecord, EbookStatus, EbookStore, ViewLogEntry

FAKE_STORAGE_HOST = "https://storage.test"


class FakeObjectStorage(ObjectStorage):
    """Keeps objects in a dict and issues URLs that look like presigned ones."""

    def __init__(self, bucket_name: str = "fake-bucket"):
        self.bucket_name = bucket_name
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}
        self.signed_uploads: List[SignedUpload] = []
        self.view_urls: List[str] = []

    def put_object(self, object_path: str, content: bytes, content_type: str = "application/pdf") -> None:
        """What the client's direct upload does to real storage."""
        self.objects[object_path] = content
        self.content_types[object_path] = content_type

    def upload_via_signed_url(self, url: str, content: bytes) -> None:
        prefix = f"{FAKE_STORAGE_HOST}/{self.bucket_name}/upload/"
        assert url.startswith(prefix), url
        object_path = url[len(prefix):].split("?", 1)[0]
        self.put_object(object_path, content)

    def create_signed_upload_url(self, object_path: str, expires_in: int) -> SignedUpload:
        token = f"sig-{len(self.signed_uploads) + 1}"
        url = (
            f"{FAKE_STORAGE_HOST}/{self.bucket_name}/upload/{object_path}"
            f"?X-Amz-Expires={expires_in}&X-Amz-Signature={token}"
        )
        signed = SignedUpload(url=url, token=token, object_path=object_path, expires_in=expires_in)
        self.signed_uploads.append(signed)
        return signed

    def create_signed_view_url(self, object_path: str, expires_in: int) -> str:
        url = (
            f"{FAKE_STORAGE_HOST}/{self.bucket_name}/view/{object_path}"
            f"?X-Amz-Expires={expires_in}&response-content-disposition={quote('inline')}"
        )
        self.view_urls.append(url)
        return url

    def object_exists(self, object_path: str) -> bool:
        return object_path in self.objects

    def get_object_metadata(self, object_path: str) -> ObjectMetadata:
        return ObjectMetadata(
            object_path=object_path,
            size_bytes=len(self.objects[object_path]),
            content_type=self.content_types.get(object_path),
        )


class FakeEbookStore(EbookStore):
    """EbookStore kept in memory, with switches to simulate write failures."""

    def __init__(self):
        self.records: Dict[str, EbookRecord] = {}
        self.view_logs: List[ViewLogEntry] = []
        self.fail_on_create = False
        self.fail_on_mark_ready = False
        self.fail_on_view_log = False

    def create_record(self, record: EbookRecord) -> None:
        if self.fail_on_create:
            raise RuntimeError("insert failed")
        self.records[record.object_path] = record

    def mark_ready(self, object_path: str, owner_id: str, size_bytes: int, updated_at: datetime) -> bool:
        if self.fail_on_mark_ready:
            raise RuntimeError("update failed")
        record = self.records.get(object_path)
        if record is None or record.owner_id != owner_id:
            return False
        self.records[object_path] = record.model_copy(update={
            "status": EbookStatus.READY,
            "size_bytes": size_bytes,
            "updated_at": updated_at,
        })
        return True

    def list_ready(self, owner_id: str) -> List[EbookRecord]:
        ready = [
            record for record in self.records.values()
            if record.owner_id == owner_id and record.status == EbookStatus.READY
        ]
        return sorted(ready, key=lambda record: record.created_at, reverse=True)

    def add_view_log(self, entry: ViewLogEntry) -> None:
        if self.fail_on_view_log:
            raise RuntimeError("log insert failed")
        self.view_logs.append(entry)


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def fake_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def fake_store() -> FakeEbookStore:
    return FakeEbookStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()
