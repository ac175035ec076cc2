"""Shared fixtures: settings on a temporary database, app clients, fakes and moto."""
import pytest
from fastapi.testclient import TestClient

from ebooks_api.config.settings import Settings
from ebooks_api.main import create_app
from tests.consts import TEST_BUCKET_NAME

from tests.fixtures.fakes import clock, fake_storage, fake_store  # noqa: F401
from tests.fixtures.mocked_aws import mocked_aws  # noqa: F401


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "test_ebooks.db")


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(
        _env_file=None,
        s3_bucket_name=TEST_BUCKET_NAME,
        database_path=db_path,
        max_file_size=104857600,
        auth_mode="header",
    )


@pytest.fixture
def client(settings, fake_storage) -> TestClient:
    """App on a real SQLite file with in-memory object storage."""
    app = create_app(settings=settings, storage=fake_storage)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def s3_client_app(mocked_aws, settings) -> TestClient:
    """App on a real SQLite file and moto-backed S3."""
    app = create_app(settings=settings)
    with TestClient(app) as test_client:
        yield test_client
