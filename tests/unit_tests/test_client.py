import pytest
from fastapi.testclient import TestClient

from ebooks_api.client import EbooksAPIError, EbooksClient
from tests.consts import TEST_PDF_CONTENT, TEST_USER_ID


class FakePutResponse:
    status_code = 200

    def raise_for_status(self):
        pass


@pytest.fixture
def ebooks_client(client: TestClient, fake_storage, monkeypatch) -> EbooksClient:
    """EbooksClient talking to the app in-process; signed URL PUTs land in the fake storage."""
    def put_to_fake_storage(url, data, timeout):
        fake_storage.upload_via_signed_url(url, data)
        return FakePutResponse()

    monkeypatch.setattr("ebooks_api.client.requests.put", put_to_fake_storage)
    return EbooksClient(str(client.base_url), user_id=TEST_USER_ID, session=client)


def test_upload_bytes(ebooks_client: EbooksClient, fake_storage):
    completed = ebooks_client.upload_bytes("report.pdf", TEST_PDF_CONTENT)

    assert completed["success"] is True
    assert completed["status"] == "ready"
    assert fake_storage.objects[completed["objectPath"]] == TEST_PDF_CONTENT

    [ebook] = ebooks_client.list_ebooks()
    assert ebook["object_path"] == completed["objectPath"]
    assert ebook["size_bytes"] == len(TEST_PDF_CONTENT)


def test_upload_file(ebooks_client: EbooksClient, tmp_path):
    path = tmp_path / "Grammar Book.epub"
    path.write_bytes(TEST_PDF_CONTENT)

    completed = ebooks_client.upload_file(str(path))

    assert completed["objectPath"].endswith(".epub")
    [ebook] = ebooks_client.list_ebooks()
    assert ebook["file_name"] == "Grammar_Book.epub"
    assert ebook["mime_type"] == "application/epub+zip"


def test_view_url(ebooks_client: EbooksClient, fake_storage):
    completed = ebooks_client.upload_bytes("report.pdf", TEST_PDF_CONTENT)

    view = ebooks_client.view_url(completed["objectPath"])

    assert view["url"] == fake_storage.view_urls[0]
    assert view["expiresIn"] == 3600


def test_api_errors_are_raised(ebooks_client: EbooksClient):
    with pytest.raises(EbooksAPIError) as exc_info:
        ebooks_client.sign_upload("notes.docx", 10)

    assert exc_info.value.status_code == 400
    assert exc_info.value.payload["allowedExtensions"] == [".pdf", ".epub"]


def test_complete_before_upload_is_404(ebooks_client: EbooksClient):
    ticket = ebooks_client.sign_upload("report.pdf", 10)

    with pytest.raises(EbooksAPIError) as exc_info:
        ebooks_client.complete_upload(ticket["objectPath"])

    assert exc_info.value.status_code == 404
