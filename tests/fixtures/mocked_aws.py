"""Fixtures that point boto3 at moto's in-memory AWS."""
import boto3
import pytest
from moto import mock_aws

from tests.consts import TEST_BUCKET_NAME


def point_away_from_aws(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure boto3 never talks to real AWS during tests."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def mocked_aws(monkeypatch: pytest.MonkeyPatch):
    """Mocked AWS with an empty test bucket."""
    point_away_from_aws(monkeypatch)
    with mock_aws():
        s3_client = boto3.client("s3")
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield s3_client
