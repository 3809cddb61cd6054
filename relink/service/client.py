#!/usr/bin/env python3
"""
client.py
---------
HTTP access to the wiki Document Service.

Callers pass titles in and get parsed values back. Auth headers, URL
escaping and the mapping of HTTP failures to the exception hierarchy are
handled here. Requests are never retried; every failure is raised to the
caller, which decides whether to skip or stop.

Endpoints (relative to ``https://{domain}/api``):
    GET  backlink/{title}?namespace={ns}
    GET  discuss/{title}
    GET  edit/{title}
    POST edit/{title}   JSON {text, log, token}

Usage:
    from relink.service.client import DocumentServiceClient

    client = DocumentServiceClient(config.service, logger)
    page = client.fetch_edit("Some document")
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote

# --- Third-party imports ---
import requests

# --- Local imports ---
from relink.core.config import ServiceConfig
from relink.core.exceptions import (
    DecodeError,
    EditPermissionError,
    SubmissionError,
    TransportError,
)
from relink.core.logging_manager import RelinkLogger, safe_logger
from relink.service.models import Backlink, DiscussionThread, EditPage

# Status text the service returns when the account lacks edit rights
PERMISSION_DENIED_MARKER = "때문에 편집 권한이 부족합니다."


class DocumentService(ABC):
    """Operations the rename engine needs from the wiki.

    Every method raises a ``DocumentServiceError`` subclass on failure.
    """

    @abstractmethod
    def backlinks(self, title: str, namespace: str) -> List[Backlink]:
        """Backlinks to ``title`` from documents in ``namespace``."""

    @abstractmethod
    def discussions(self, title: str) -> List[DiscussionThread]:
        """Discussion threads attached to ``title``."""

    @abstractmethod
    def fetch_edit(self, title: str) -> EditPage:
        """Current text and edit token of ``title``.

        Raises:
            EditPermissionError: The account may not edit ``title``.
        """

    @abstractmethod
    def submit_edit(self, title: str, text: str, token: str, log: str) -> None:
        """Replace the content of ``title``.

        Raises:
            SubmissionError: The service rejected the edit.
        """


class DocumentServiceClient(DocumentService):
    """HTTP implementation of :class:`DocumentService`.

    Args:
        config: Domain, bearer token and timeout.
        logger: Optional RelinkLogger for request tracing.
    """

    def __init__(self, config: ServiceConfig, logger: Optional[RelinkLogger] = None):
        self.config = config
        self.base_url = config.base_url
        self.timeout = config.timeout
        self.logger = logger

    def _headers(self) -> Dict[str, str]:
        """Build request headers, including auth if a token is configured."""
        headers = {"Accept": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _url(self, endpoint: str, title: str) -> str:
        # Titles may contain "/" which must stay inside a single path segment
        return f"{self.base_url}/{endpoint}/{quote(title, safe='')}"

    def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
        safe_logger(self.logger).log_debug("GET", {"url": url, "params": params})
        try:
            return requests.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"GET {url} failed: {type(exc).__name__}: {exc}") from exc

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(
                f"Malformed JSON from {response.url}: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _check_status(response: requests.Response) -> None:
        if response.status_code >= 400:
            raise TransportError(
                f"HTTP {response.status_code} {response.reason} from {response.url}",
                status_code=response.status_code,
            )

    # ----- read operations -------------------------------------------------

    def backlinks(self, title: str, namespace: str) -> List[Backlink]:
        response = self._get(self._url("backlink", title), params={"namespace": namespace})
        self._check_status(response)
        return Backlink.list_from_payload(self._decode(response))

    def discussions(self, title: str) -> List[DiscussionThread]:
        response = self._get(self._url("discuss", title))
        self._check_status(response)
        return DiscussionThread.list_from_payload(self._decode(response))

    def fetch_edit(self, title: str) -> EditPage:
        """Fetch content and edit token.

        The permission check runs before the HTTP status check: the service
        reports missing edit rights in the body of an error response.
        """
        response = self._get(self._url("edit", title))
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            status = payload.get("status")
            if isinstance(status, str) and PERMISSION_DENIED_MARKER in status:
                raise EditPermissionError(
                    f"Insufficient edit permission for '{title}': {status}",
                    status_code=response.status_code,
                )
        self._check_status(response)
        if payload is None:
            raise DecodeError(
                f"Malformed JSON from {response.url}", status_code=response.status_code
            )
        return EditPage.from_payload(payload)

    # ----- write operations ------------------------------------------------

    def submit_edit(self, title: str, text: str, token: str, log: str) -> None:
        url = self._url("edit", title)
        safe_logger(self.logger).log_debug("POST", {"url": url, "bytes": len(text.encode("utf-8"))})
        try:
            response = requests.post(
                url,
                json={"text": text, "log": log, "token": token},
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"POST {url} failed: {type(exc).__name__}: {exc}") from exc

        if response.status_code >= 300:
            raise SubmissionError(
                f"HTTP {response.status_code} {response.reason}",
                status_code=response.status_code,
            )
