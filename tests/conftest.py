"""
conftest.py
-----------
Shared pytest fixtures for relink tests.

Provides fixtures for:
- An in-memory Document Service fake
- Rename jobs with test-friendly timings
- Sample wikitext
"""
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from relink.core.config import RenameJob
from relink.service.client import DocumentService
from relink.service.models import Backlink, DiscussionThread, EditPage


BacklinkEntry = Union[List[Backlink], Exception]
PageEntry = Union[EditPage, Exception]


class FakeDocumentService(DocumentService):
    """
    In-memory Document Service.

    Attributes:
        backlink_map: namespace -> backlinks, or an exception to raise
        pages: document -> EditPage, or an exception to raise on fetch
        submit_errors: document -> exception to raise on submit
        threads: discussion threads, or an exception to raise
        fetched: documents fetched, in call order
        submitted: (document, text, token, log) per successful submit
        before_fetch: optional hook called with the document before fetching
    """

    def __init__(
        self,
        backlink_map: Optional[Dict[str, BacklinkEntry]] = None,
        pages: Optional[Dict[str, PageEntry]] = None,
        submit_errors: Optional[Dict[str, Exception]] = None,
        threads: Union[List[DiscussionThread], Exception, None] = None,
    ) -> None:
        self.backlink_map = backlink_map or {}
        self.pages = pages or {}
        self.submit_errors = submit_errors or {}
        self.threads = threads if threads is not None else []
        self.fetched: List[str] = []
        self.submitted: List[Tuple[str, str, str, str]] = []
        self.backlink_calls: List[Tuple[str, str]] = []
        self.discussion_calls = 0
        self.before_fetch: Optional[Callable[[str], None]] = None

    def backlinks(self, title: str, namespace: str) -> List[Backlink]:
        self.backlink_calls.append((title, namespace))
        entry = self.backlink_map.get(namespace, [])
        if isinstance(entry, Exception):
            raise entry
        return list(entry)

    def discussions(self, title: str) -> List[DiscussionThread]:
        self.discussion_calls += 1
        if isinstance(self.threads, Exception):
            raise self.threads
        return list(self.threads)

    def fetch_edit(self, title: str) -> EditPage:
        if self.before_fetch is not None:
            self.before_fetch(title)
        self.fetched.append(title)
        entry = self.pages[title]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def submit_edit(self, title: str, text: str, token: str, log: str) -> None:
        error = self.submit_errors.get(title)
        if error is not None:
            raise error
        self.submitted.append((title, text, token, log))


def link(document: str, kind: str = "link") -> Backlink:
    """Shorthand for a Backlink."""
    return Backlink(document=document, relation_kind=kind)


def page(text: str, token: str = "tok") -> EditPage:
    """Shorthand for an EditPage."""
    return EditPage(text=text, token=token, status="")


@pytest.fixture
def fake_service() -> Callable[..., FakeDocumentService]:
    """Factory for FakeDocumentService instances."""
    return FakeDocumentService


@pytest.fixture
def make_job() -> Callable[..., RenameJob]:
    """Factory for RenameJob with no pacing delay."""

    def _make(**overrides) -> RenameJob:
        values = dict(
            old_title="Old",
            new_title="New",
            keep_alias_for_bare_links=False,
            log_template="[[{old}]] → [[{new}]]",
            namespaces=("main",),
            watch_document=None,
            pacing_seconds=0.0,
            poll_interval=0.05,
        )
        values.update(overrides)
        return RenameJob(**values)

    return _make


@pytest.fixture
def sample_wikitext() -> str:
    """Wikitext mixing every link form the rewriter handles."""
    return (
        "== Intro ==\n"
        "See [[Old]] and [[ Old |the old page]].\n"
        "Already renamed: [[Old|New]].\n"
        "Unrelated: [[Older]], [[Other|Old]].\n"
        "{{include(Old)}}\n"
    )
