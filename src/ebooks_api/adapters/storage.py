"""
Object storage adapter.

The workflows only talk to :class:`ObjectStorage`. :class:`S3ObjectStorage`
implements it with boto3 presigned URLs so that e-book bytes travel directly
between the client and the bucket, never through the API process.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import parse_qs, urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

try:
    from mypy_boto3_s3 import S3Client
except ImportError:
    ...

from ebooks_api.config.settings import Settings

logger = logging.getLogger(__name__)

# Query parameters that carry the signature of a presigned URL
_SIGNATURE_PARAMS = ("X-Amz-Signature", "Signature")
_NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


@dataclass(frozen=True)
class SignedUpload:
    """A capability to PUT one object, valid until the URL expires."""
    url: str
    token: str
    object_path: str
    expires_in: int


@dataclass(frozen=True)
class ObjectMetadata:
    """What storage reports about a stored object."""
    object_path: str
    size_bytes: int
    content_type: Optional[str] = None
    last_modified: Optional[datetime] = None


class ObjectStorage(ABC):
    """Interface of the object storage the e-book workflows depend on."""

    bucket_name: str

    @abstractmethod
    def create_signed_upload_url(self, object_path: str, expires_in: int) -> SignedUpload:
        """Issue a signed URL allowing a single upload to `object_path`."""

    @abstractmethod
    def create_signed_view_url(self, object_path: str, expires_in: int) -> str:
        """Issue a signed URL for viewing (not downloading) `object_path`."""

    @abstractmethod
    def object_exists(self, object_path: str) -> bool:
        """Return True if the object is present in storage."""

    @abstractmethod
    def get_object_metadata(self, object_path: str) -> ObjectMetadata:
        """Fetch size and content type of an existing object."""

    def ensure_bucket(self) -> None:
        """Create the bucket if the backend supports it. No-op by default."""


def extract_signature(signed_url: str) -> str:
    """Return the signature carried in the query string of a presigned URL."""
    query = parse_qs(urlparse(signed_url).query)
    for param in _SIGNATURE_PARAMS:
        if param in query:
            return query[param][0]
    return ""


def create_s3_client(settings: Settings) -> "S3Client":
    """Build an S3 client from settings; SigV4 so presigned URLs carry X-Amz-Signature."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=Config(signature_version="s3v4"),
    )


class S3ObjectStorage(ObjectStorage):
    """ObjectStorage backed by an S3 (or S3-compatible) bucket."""

    def __init__(self, bucket_name: str, s3_client: Optional["S3Client"] = None):
        self.bucket_name = bucket_name
        self._s3_client = s3_client or boto3.client("s3", config=Config(signature_version="s3v4"))

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStorage":
        return cls(settings.s3_bucket_name, create_s3_client(settings))

    def create_signed_upload_url(self, object_path: str, expires_in: int) -> SignedUpload:
        url = self._s3_client.generate_presigned_url(
            ClientMethod="put_object",
            Params={"Bucket": self.bucket_name, "Key": object_path},
            ExpiresIn=expires_in,
            HttpMethod="PUT",
        )
        logger.info(f"Generated presigned upload URL for {object_path} (expires in {expires_in}s)")
        return SignedUpload(
            url=url,
            token=extract_signature(url),
            object_path=object_path,
            expires_in=expires_in,
        )

    def create_signed_view_url(self, object_path: str, expires_in: int) -> str:
        # inline disposition asks the browser to render the book instead of saving it
        file_name = object_path.rsplit("/", 1)[-1]
        url = self._s3_client.generate_presigned_url(
            ClientMethod="get_object",
            Params={
                "Bucket": self.bucket_name,
                "Key": object_path,
                "ResponseContentDisposition": f'inline; filename="{file_name}"',
            },
            ExpiresIn=expires_in,
            HttpMethod="GET",
        )
        logger.info(f"Generated presigned view URL for {object_path} (expires in {expires_in}s)")
        return url

    def object_exists(self, object_path: str) -> bool:
        try:
            self._s3_client.head_object(Bucket=self.bucket_name, Key=object_path)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise

    def get_object_metadata(self, object_path: str) -> ObjectMetadata:
        response = self._s3_client.head_object(Bucket=self.bucket_name, Key=object_path)
        return ObjectMetadata(
            object_path=object_path,
            size_bytes=response.get("ContentLength", 0),
            content_type=response.get("ContentType"),
            last_modified=response.get("LastModified"),
        )

    def ensure_bucket(self) -> None:
        try:
            self._s3_client.head_bucket(Bucket=self.bucket_name)
            return
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") not in _NOT_FOUND_CODES + ("NoSuchBucket",):
                raise

        region = self._s3_client.meta.region_name
        if region and region != "us-east-1":
            self._s3_client.create_bucket(
                Bucket=self.bucket_name,
                CreateBucketConfiguration={"LocationConstraint": region},
            )
        else:
            self._s3_client.create_bucket(Bucket=self.bucket_name)
        logger.info(f"Created S3 bucket: {self.bucket_name}")
