"""
Synchronous HTTP client for the Ebooks API.

Drives the two-phase upload: ask for a signed URL, PUT the bytes straight to
storage, then confirm completion with the API.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class EbooksAPIError(Exception):
    """Raised when the API answers with an error status."""

    def __init__(self, status_code: int, payload: Any):
        self.status_code = status_code
        self.payload = payload
        message = payload.get("error") if isinstance(payload, dict) else payload
        super().__init__(f"{status_code}: {message}")


class EbooksClient:
    """
    Client for the `/api/pdf` endpoints.

    :param base_url: API root, e.g. `http://localhost:8000`.
    :param user_id: sent as `X-User-Id` (header auth mode).
    :param access_token: sent as a Bearer token (jwt auth mode).
    :param session: optional `requests.Session`, e.g. with retries configured.
    """

    def __init__(
        self,
        base_url: str,
        user_id: Optional[str] = None,
        access_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        if user_id:
            self.session.headers["X-User-Id"] = user_id
        if access_token:
            self.session.headers["Authorization"] = f"Bearer {access_token}"

    def _request(self, method: str, endpoint: str, json: Optional[dict] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Making {method} request to {url}")
        response = self.session.request(method, url, json=json, timeout=self.timeout)
        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise EbooksAPIError(response.status_code, payload)
        return response.json()

    def sign_upload(self, file_name: str, size: int, mime: Optional[str] = None) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/api/pdf/uploads/sign",
            json={"fileName": file_name, "size": size, "mime": mime},
        )

    def complete_upload(self, object_path: str) -> Dict[str, Any]:
        return self._request("POST", "/api/pdf/uploads/complete", json={"objectPath": object_path})

    def view_url(self, object_path: str) -> Dict[str, Any]:
        return self._request("POST", "/api/pdf/view-url", json={"objectPath": object_path})

    def list_ebooks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/pdf/list")["pdfs"]

    def upload_bytes(
        self,
        file_name: str,
        content: bytes,
        mime: str = "application/pdf",
    ) -> Dict[str, Any]:
        """
        Upload an e-book end to end.

        The signed URL goes to storage directly, so the PUT is sent without
        the API's auth headers.

        :return: the completion response, `{success, objectPath, status}`.
        """
        ticket = self.sign_upload(file_name, len(content), mime)
        logger.info(f"Uploading {file_name} ({len(content)} bytes) to {ticket['objectPath']}")

        upload_response = requests.put(
            ticket["uploadUrl"],
            data=content,
            timeout=self.timeout,
        )
        upload_response.raise_for_status()

        return self.complete_upload(ticket["objectPath"])

    def upload_file(self, path: str, mime: Optional[str] = None) -> Dict[str, Any]:
        """Upload an e-book from disk."""
        file_name = os.path.basename(path)
        if mime is None:
            mime = "application/epub+zip" if file_name.lower().endswith(".epub") else "application/pdf"
        with open(path, "rb") as f:
            content = f.read()
        return self.upload_bytes(file_name, content, mime)
