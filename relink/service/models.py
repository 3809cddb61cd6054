#!/usr/bin/env python3
"""
models.py
---------
Value types returned by the Document Service.

Each type knows how to build itself from the decoded JSON of its
endpoint and raises DecodeError when the payload does not have the
expected shape.

Types:
    - Backlink: one backlink entry (document + relation kind)
    - DiscussionThread: one discussion thread attached to a document
    - EditPage: editable content of a document plus its edit token
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from typing import Any, List, Optional

# --- Local imports ---
from relink.core.exceptions import DecodeError


# Relation kind of a direct textual link (as opposed to transclusion etc.)
LINK_RELATION = "link"

# Discussion status that ends a watched run
NORMAL_STATUS = "normal"


def _require_str(item: dict, key: str, what: str, default: Optional[str] = None) -> str:
    """Read a string field from a decoded object, raising DecodeError on bad types."""
    value = item.get(key, default)
    if value is None:
        raise DecodeError(f"{what} is missing '{key}'")
    if not isinstance(value, str):
        raise DecodeError(f"{what} field '{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Backlink:
    """
    A recorded reference from ``document`` to the queried title.

    Attributes:
        document: Identifier of the referencing document
        relation_kind: Kind of reference ("link", "include", "file", ...)
    """

    document: str
    relation_kind: str

    @property
    def is_link(self) -> bool:
        """True for direct textual links."""
        return self.relation_kind == LINK_RELATION

    @classmethod
    def list_from_payload(cls, payload: Any) -> List["Backlink"]:
        """
        Parse the body of ``GET backlink/{title}``.

        Args:
            payload: Decoded JSON, expected ``{"backlinks": [...]}``

        Returns:
            List of Backlink values in response order

        Raises:
            DecodeError: If the payload is not shaped as expected
        """
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected backlink response object, got {type(payload).__name__}"
            )
        entries = payload.get("backlinks") or []
        if not isinstance(entries, list):
            raise DecodeError("'backlinks' must be a list")

        backlinks = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise DecodeError(f"Backlink entry must be an object, got {entry!r}")
            backlinks.append(
                cls(
                    document=_require_str(entry, "document", "Backlink entry"),
                    relation_kind=_require_str(entry, "flags", "Backlink entry", default=""),
                )
            )
        return backlinks


@dataclass(frozen=True)
class DiscussionThread:
    """
    A discussion thread attached to a document.

    Attributes:
        slug: Thread identifier
        topic: Thread title
        updated_date: Last update as a unix timestamp
        status: Thread status ("normal", "pause", "close", ...)
    """

    slug: str
    topic: str
    updated_date: int
    status: str

    @property
    def is_normal(self) -> bool:
        return self.status == NORMAL_STATUS

    @classmethod
    def list_from_payload(cls, payload: Any) -> List["DiscussionThread"]:
        """
        Parse the body of ``GET discuss/{title}``.

        Raises:
            DecodeError: If the payload is not a list of thread objects
        """
        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a list of discussion threads, got {type(payload).__name__}"
            )

        threads = []
        for entry in payload:
            if not isinstance(entry, dict):
                raise DecodeError(f"Discussion thread must be an object, got {entry!r}")
            updated = entry.get("updated_date", 0)
            if not isinstance(updated, int) or isinstance(updated, bool):
                raise DecodeError(f"updated_date must be an integer, got {updated!r}")
            threads.append(
                cls(
                    slug=_require_str(entry, "slug", "Discussion thread", default=""),
                    topic=_require_str(entry, "topic", "Discussion thread", default=""),
                    updated_date=updated,
                    status=_require_str(entry, "status", "Discussion thread", default=""),
                )
            )
        return threads


@dataclass(frozen=True)
class EditPage:
    """
    Editable content of a document.

    Attributes:
        text: Current raw wikitext
        token: Edit token that authorizes submitting this document
        status: Service status message (may explain a refusal)
    """

    text: str
    token: str
    status: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "EditPage":
        """
        Parse the body of ``GET edit/{title}``.

        Raises:
            DecodeError: If the payload is not an object with string fields
        """
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected edit response object, got {type(payload).__name__}")
        return cls(
            text=_require_str(payload, "text", "Edit response", default=""),
            token=_require_str(payload, "token", "Edit response", default=""),
            status=_require_str(payload, "status", "Edit response", default=""),
        )
