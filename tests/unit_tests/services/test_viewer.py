from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from ebooks_api.errors import Forbidden, InvalidArgument, NotFound, Unauthenticated
from ebooks_api.services.viewer import ViewService
from tests.consts import TEST_PDF_CONTENT


@pytest.fixture
def view_service(fake_storage, fake_store, clock) -> ViewService:
    return ViewService(storage=fake_storage, store=fake_store, expires_in=3600, clock=clock)


def test_create_view_url(view_service, fake_storage, fake_store, clock):
    fake_storage.put_object("u1/abc.pdf", TEST_PDF_CONTENT)

    view_url = view_service.create_view_url("u1", "u1/abc.pdf")

    assert view_url.url == fake_storage.view_urls[0]
    assert view_url.expires_in == 3600
    assert view_url.expires_at == clock.now + timedelta(hours=1)
    query = parse_qs(urlparse(view_url.url).query)
    assert query["response-content-disposition"] == ["inline"]

    [entry] = fake_store.view_logs
    assert entry.user_id == "u1"
    assert entry.object_path == "u1/abc.pdf"
    assert entry.viewed_at == clock.now
    assert entry.expires_at == view_url.expires_at


def test_create_view_url_ignores_view_log_failures(view_service, fake_storage, fake_store):
    fake_storage.put_object("u1/abc.pdf", TEST_PDF_CONTENT)
    fake_store.fail_on_view_log = True

    view_url = view_service.create_view_url("u1", "u1/abc.pdf")

    assert view_url.url == fake_storage.view_urls[0]
    assert fake_store.view_logs == []


def test_create_view_url_requires_owner(view_service):
    with pytest.raises(Unauthenticated):
        view_service.create_view_url(None, "u1/abc.pdf")


def test_create_view_url_requires_object_path(view_service):
    with pytest.raises(InvalidArgument):
        view_service.create_view_url("u1", "")


def test_create_view_url_rejects_other_owners(view_service, fake_storage, fake_store):
    fake_storage.put_object("u2/abc.pdf", TEST_PDF_CONTENT)

    with pytest.raises(Forbidden):
        view_service.create_view_url("u1", "u2/abc.pdf")

    assert fake_storage.view_urls == []
    assert fake_store.view_logs == []


def test_create_view_url_rejects_paths_without_owner_segment(view_service, fake_storage):
    fake_storage.put_object("u1", TEST_PDF_CONTENT)
    with pytest.raises(Forbidden):
        view_service.create_view_url("u1", "u1")


def test_create_view_url_missing_object(view_service, fake_store):
    with pytest.raises(NotFound) as exc_info:
        view_service.create_view_url("u1", "u1/missing.pdf")
    assert exc_info.value.details == {"objectPath": "u1/missing.pdf"}
    assert fake_store.view_logs == []
