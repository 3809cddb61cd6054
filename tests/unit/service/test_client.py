"""
Tests for the Document Service HTTP client.

The requests module is patched so no network traffic happens; each test
checks the URL/headers sent and how responses map to values or to the
project's exception hierarchy.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from relink.core.config import ServiceConfig
from relink.core.exceptions import (
    DecodeError,
    EditPermissionError,
    SubmissionError,
    TransportError,
)
from relink.service.client import DocumentServiceClient, PERMISSION_DENIED_MARKER
from relink.service.models import Backlink, DiscussionThread, EditPage


def make_response(status_code=200, payload=None, json_error=False, reason="OK"):
    """Build a MagicMock shaped like requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.url = "https://wiki.example.org/api/test"
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return DocumentServiceClient(ServiceConfig(domain="wiki.example.org", token="secret", timeout=5))


class TestRequests:
    """Tests for URL building and headers."""

    @patch("relink.service.client.requests.get")
    def test_backlink_url_and_auth(self, mock_get, client):
        mock_get.return_value = make_response(payload={"backlinks": []})

        client.backlinks("A/B title", "문서")

        args, kwargs = mock_get.call_args
        assert args[0] == "https://wiki.example.org/api/backlink/A%2FB%20title"
        assert kwargs["params"] == {"namespace": "문서"}
        assert kwargs["headers"]["Authorization"] == "Bearer secret"
        assert kwargs["timeout"] == 5

    @patch("relink.service.client.requests.post")
    def test_submit_payload(self, mock_post, client):
        mock_post.return_value = make_response(status_code=200)

        client.submit_edit("Page", "new text", "tok", "summary")

        args, kwargs = mock_post.call_args
        assert args[0] == "https://wiki.example.org/api/edit/Page"
        assert kwargs["json"] == {"text": "new text", "log": "summary", "token": "tok"}

    def test_no_auth_header_without_token(self):
        client = DocumentServiceClient(ServiceConfig(domain="w", token=""))
        assert "Authorization" not in client._headers()


class TestBacklinks:
    """Tests for GET backlink."""

    @patch("relink.service.client.requests.get")
    def test_parses_entries(self, mock_get, client):
        mock_get.return_value = make_response(payload={
            "backlinks": [
                {"document": "A", "flags": "link"},
                {"document": "B", "flags": "include"},
            ]
        })
        assert client.backlinks("Old", "main") == [
            Backlink("A", "link"),
            Backlink("B", "include"),
        ]

    @patch("relink.service.client.requests.get")
    def test_connection_error(self, mock_get, client):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(TransportError):
            client.backlinks("Old", "main")

    @patch("relink.service.client.requests.get")
    def test_http_error_status(self, mock_get, client):
        mock_get.return_value = make_response(status_code=500, reason="Server Error")
        with pytest.raises(TransportError) as exc_info:
            client.backlinks("Old", "main")
        assert exc_info.value.status_code == 500

    @patch("relink.service.client.requests.get")
    def test_malformed_json(self, mock_get, client):
        mock_get.return_value = make_response(json_error=True)
        with pytest.raises(DecodeError):
            client.backlinks("Old", "main")


class TestDiscussions:
    """Tests for GET discuss."""

    @patch("relink.service.client.requests.get")
    def test_parses_threads(self, mock_get, client):
        mock_get.return_value = make_response(payload=[
            {"slug": "abc", "topic": "Move?", "updated_date": 1700000000, "status": "normal"},
        ])
        threads = client.discussions("Watched")
        assert threads == [DiscussionThread("abc", "Move?", 1700000000, "normal")]
        assert mock_get.call_args[0][0].endswith("/discuss/Watched")

    @patch("relink.service.client.requests.get")
    def test_object_instead_of_list(self, mock_get, client):
        mock_get.return_value = make_response(payload={"status": "error"})
        with pytest.raises(DecodeError):
            client.discussions("Watched")


class TestFetchEdit:
    """Tests for GET edit."""

    @patch("relink.service.client.requests.get")
    def test_returns_page(self, mock_get, client):
        mock_get.return_value = make_response(payload={"text": "[[Old]]", "token": "t", "status": ""})
        assert client.fetch_edit("Page") == EditPage("[[Old]]", "t", "")

    @patch("relink.service.client.requests.get")
    def test_permission_denied_marker(self, mock_get, client):
        mock_get.return_value = make_response(
            status_code=403,
            payload={"status": f"protected_document 권한{PERMISSION_DENIED_MARKER}"},
        )
        with pytest.raises(EditPermissionError):
            client.fetch_edit("Protected")

    @patch("relink.service.client.requests.get")
    def test_other_error_status(self, mock_get, client):
        mock_get.return_value = make_response(status_code=404, payload={"status": "not found"})
        with pytest.raises(TransportError):
            client.fetch_edit("Missing")

    @patch("relink.service.client.requests.get")
    def test_malformed_json(self, mock_get, client):
        mock_get.return_value = make_response(json_error=True)
        with pytest.raises(DecodeError):
            client.fetch_edit("Page")


class TestSubmitEdit:
    """Tests for POST edit."""

    @patch("relink.service.client.requests.post")
    def test_non_success_status(self, mock_post, client):
        mock_post.return_value = make_response(status_code=400, reason="Bad Request")
        with pytest.raises(SubmissionError) as exc_info:
            client.submit_edit("Page", "text", "tok", "log")
        assert exc_info.value.status_code == 400

    @patch("relink.service.client.requests.post")
    def test_timeout(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(TransportError):
            client.submit_edit("Page", "text", "tok", "log")
