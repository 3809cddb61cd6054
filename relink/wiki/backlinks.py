#!/usr/bin/env python3
"""
backlinks.py
------------
Backlink discovery across namespaces.

Queries the Document Service once per namespace for documents that
reference a title, keeps direct links only (transclusions, redirects
and file usages are ignored), and merges the results into a single
deduplicated document set.

A failing namespace never aborts collection: the error is logged,
recorded in the result, and the remaining namespaces are still queried.

Usage:
    from relink.wiki.backlinks import BacklinkCollector

    collector = BacklinkCollector(service, logger)
    result = collector.collect("Old Title", ["문서", "틀"])
    for document in result.ordered():
        ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Set

# --- Local imports ---
from relink.core.exceptions import DecodeError, DocumentServiceError
from relink.core.logging_manager import RelinkLogger, safe_logger
from relink.service.client import DocumentService
from relink.wiki.watchdog import Termination


@dataclass
class NamespaceFailure:
    """
    A namespace whose backlinks could not be retrieved.

    Attributes:
        namespace: Namespace name
        error: The exception raised by the Document Service
    """

    namespace: str
    error: DocumentServiceError


@dataclass
class DocumentSet:
    """
    Deduplicated documents referencing a title.

    Attributes:
        documents: Document identifiers, each present once
        failures: Namespaces that were skipped because of errors
        namespaces_queried: Namespaces whose query succeeded
    """

    documents: Set[str] = field(default_factory=set)
    failures: List[NamespaceFailure] = field(default_factory=list)
    namespaces_queried: List[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, document: object) -> bool:
        return document in self.documents

    def ordered(self) -> List[str]:
        """Documents in lexicographic order, the order they are processed in."""
        return sorted(self.documents)


class BacklinkCollector:
    """
    Collects the documents that directly link to a title.

    Attributes:
        service: Document Service used for backlink lookups
        logger: Optional logger
        termination: Optional signal; when set, remaining namespaces are
            not queried
        on_failure: Optional callback invoked for each skipped namespace
    """

    def __init__(
        self,
        service: DocumentService,
        logger: Optional[RelinkLogger] = None,
        termination: Optional[Termination] = None,
        on_failure: Optional[Callable[[NamespaceFailure], None]] = None,
    ) -> None:
        self.service = service
        self.logger = logger
        self.termination = termination
        self.on_failure = on_failure

    def collect(self, title: str, namespaces: Iterable[str]) -> DocumentSet:
        """
        Gather linking documents from every namespace.

        Args:
            title: Title whose backlinks are wanted
            namespaces: Namespaces to query, in order

        Returns:
            DocumentSet with everything accumulated, even if some
            namespaces failed
        """
        log = safe_logger(self.logger)
        result = DocumentSet()

        for namespace in namespaces:
            if self.termination is not None and self.termination.is_set():
                log.log_info("Collection interrupted", {"namespace": namespace})
                break

            try:
                backlinks = self.service.backlinks(title, namespace)
            except DocumentServiceError as e:
                kind = "malformed response" if isinstance(e, DecodeError) else "request failed"
                log.log_warning(
                    f"Skipping namespace '{namespace}': {kind}",
                    {"title": title, "error": str(e)},
                )
                failure = NamespaceFailure(namespace, e)
                result.failures.append(failure)
                if self.on_failure is not None:
                    self.on_failure(failure)
                continue

            linked = [b.document for b in backlinks if b.is_link]
            result.documents.update(linked)
            result.namespaces_queried.append(namespace)
            log.log_debug(
                "Namespace collected",
                {
                    "namespace": namespace,
                    "backlinks": len(backlinks),
                    "links": len(linked),
                    "total": len(result.documents),
                },
            )

        log.log_operation(
            "collect_backlinks",
            {
                "title": title,
                "documents": len(result.documents),
                "failed_namespaces": [f.namespace for f in result.failures],
            },
        )
        return result
