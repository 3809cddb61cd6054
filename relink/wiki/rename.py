#!/usr/bin/env python3
"""
rename.py
---------
Rename propagation engine.

Drives a complete rename run: collects every document that links to the
old title, then for each document fetches its text and edit token,
rewrites the links, and submits the result with the job's edit summary.

Key Features:
    - Independent per-document outcomes: a failed fetch or submission is
      recorded and the loop moves on, nothing is rolled back
    - Permission denials reported separately from other failures
    - Unchanged documents are never submitted
    - Fixed pause after each successful edit
    - Cooperative termination: the shared Termination signal is checked
      before each document and interrupts the pause
    - Dry-run mode: reports what would change without submitting

Usage:
    from relink.wiki.rename import RenameOrchestrator

    orchestrator = RenameOrchestrator(job, service, logger=logger)
    report = orchestrator.run()
    print(report.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

# --- Local imports ---
from relink.core.cli import RenameStats
from relink.core.config import RenameJob
from relink.core.exceptions import DocumentServiceError, EditPermissionError
from relink.core.logging_manager import RelinkLogger, safe_logger
from relink.service.client import DocumentService
from relink.wiki.backlinks import BacklinkCollector, DocumentSet, NamespaceFailure
from relink.wiki.watchdog import Termination, WatchState
from relink.wiki.wikilink import find_links, rewrite_links


# ==================== Data Classes ====================

class Outcome(Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    DENIED = "denied"
    FETCH_FAILED = "fetch_failed"
    SUBMIT_FAILED = "submit_failed"
    WOULD_UPDATE = "would_update"


@dataclass
class DocumentOutcome:
    """
    Result of processing one document.

    Attributes:
        document: Document identifier
        outcome: What happened to it
        index: 1-based position in the processing order
        total: Number of documents in the run
        links: Number of links rewritten (0 unless the text changed)
        detail: Error message for failures, empty otherwise
    """

    document: str
    outcome: Outcome
    index: int
    total: int
    links: int = 0
    detail: str = ""

    @property
    def progress(self) -> str:
        return f"{self.index}/{self.total}"


@dataclass
class RenameReport:
    """
    Report of a rename run.

    Attributes:
        old_title: Title that was renamed
        new_title: Replacement title
        dry_run: Whether submissions were skipped
        stats: Counters per outcome
        outcomes: Per-document outcomes in processing order
        failed_namespaces: Namespaces skipped during collection
        termination_state: Watchdog state that stopped the run, if any
        termination_reason: Human-readable reason for the stop, if any
    """

    old_title: str
    new_title: str
    dry_run: bool = False
    stats: RenameStats = field(default_factory=RenameStats)
    outcomes: List[DocumentOutcome] = field(default_factory=list)
    failed_namespaces: List[str] = field(default_factory=list)
    termination_state: Optional[WatchState] = None
    termination_reason: Optional[str] = None

    @property
    def terminated(self) -> bool:
        return self.termination_state is not None

    def documents(self, outcome: Outcome) -> List[str]:
        """Documents that ended with ``outcome``, in processing order."""
        return [o.document for o in self.outcomes if o.outcome is outcome]

    def record(self, result: DocumentOutcome) -> None:
        """Append an outcome and update the counters."""
        self.outcomes.append(result)
        self.stats.files_processed += 1
        if result.outcome is Outcome.UPDATED:
            self.stats.documents_updated += 1
        elif result.outcome is Outcome.UNCHANGED:
            self.stats.documents_unchanged += 1
        elif result.outcome is Outcome.DENIED:
            self.stats.documents_denied += 1
        elif result.outcome is Outcome.WOULD_UPDATE:
            self.stats.documents_would_update += 1
        else:
            self.stats.errors += 1

    def summary(self) -> str:
        """
        Generate human-readable summary of the run.

        Returns:
            Formatted string listing changed and failed documents
        """
        lines = [f'Renaming links: "{self.old_title}" → "{self.new_title}"', ""]

        icons = {
            Outcome.UPDATED: "✎",
            Outcome.WOULD_UPDATE: "✎",
            Outcome.DENIED: "⊘",
            Outcome.FETCH_FAILED: "✕",
            Outcome.SUBMIT_FAILED: "✕",
        }
        listed = [o for o in self.outcomes if o.outcome in icons]
        if listed:
            heading = "Would update" if self.dry_run else "Documents"
            lines.append(f"{heading} ({len(listed)}):")
            for o in listed:
                suffix = f": {o.detail}" if o.detail else ""
                lines.append(f"  {icons[o.outcome]} {o.document} [{o.outcome.value}]{suffix}")
            lines.append("")

        if self.failed_namespaces:
            lines.append(f"Skipped namespaces: {', '.join(self.failed_namespaces)}")
            lines.append("")

        if self.terminated:
            lines.append(f"Stopped early: {self.termination_reason}")
        lines.append(self.stats.summary())
        return "\n".join(lines)


# ==================== Orchestrator ====================

class RenameOrchestrator:
    """
    Applies a RenameJob to every document that links to the old title.

    Documents are handled strictly one at a time in lexicographic order.

    Attributes:
        job: Immutable job description
        service: Document Service for lookups and edits
        logger: Optional logger
        termination: Shared stop signal (a private one when not given)
        dry_run: Skip submissions and report what would change
        on_outcome: Callback invoked after each document
        on_namespace_failure: Callback invoked for each skipped namespace
        on_collected: Callback invoked once the document set is known
    """

    def __init__(
        self,
        job: RenameJob,
        service: DocumentService,
        logger: Optional[RelinkLogger] = None,
        termination: Optional[Termination] = None,
        dry_run: bool = False,
        on_outcome: Optional[Callable[[DocumentOutcome], None]] = None,
        on_namespace_failure: Optional[Callable[[NamespaceFailure], None]] = None,
        on_collected: Optional[Callable[[DocumentSet], None]] = None,
    ) -> None:
        self.job = job
        self.service = service
        self.logger = logger
        self.termination = termination if termination is not None else Termination()
        self.dry_run = dry_run
        self.on_outcome = on_outcome
        self.on_namespace_failure = on_namespace_failure
        self.on_collected = on_collected

    # ----- Collection -----

    def collect(self) -> DocumentSet:
        """Collect the documents linking to the job's old title."""
        collector = BacklinkCollector(
            self.service,
            logger=self.logger,
            termination=self.termination,
            on_failure=self.on_namespace_failure,
        )
        return collector.collect(self.job.old_title, self.job.namespaces)

    # ----- Per-document processing -----

    def process_document(self, document: str, index: int, total: int) -> DocumentOutcome:
        """
        Fetch, rewrite and submit a single document.

        Never raises for Document Service failures; they become outcomes.

        Args:
            document: Document identifier
            index: 1-based position for progress reporting
            total: Number of documents in the run

        Returns:
            DocumentOutcome describing what happened
        """
        log = safe_logger(self.logger)

        try:
            page = self.service.fetch_edit(document)
        except EditPermissionError as e:
            log.log_warning(f"No edit permission for {document}", {"error": str(e)})
            return DocumentOutcome(document, Outcome.DENIED, index, total, detail=str(e))
        except DocumentServiceError as e:
            log.log_warning(f"Failed to fetch {document}", {"error": str(e)})
            return DocumentOutcome(document, Outcome.FETCH_FAILED, index, total, detail=str(e))

        links = sum(1 for _ in find_links(page.text, self.job.old_title))
        new_text, changed = rewrite_links(
            page.text,
            self.job.old_title,
            self.job.new_title,
            self.job.keep_alias_for_bare_links,
        )
        if not changed:
            log.log_debug("No links to rewrite", {"document": document})
            return DocumentOutcome(document, Outcome.UNCHANGED, index, total)

        if self.dry_run:
            return DocumentOutcome(document, Outcome.WOULD_UPDATE, index, total, links=links)

        try:
            self.service.submit_edit(document, new_text, page.token, self.job.log_message())
        except DocumentServiceError as e:
            log.log_warning(f"Failed to update {document}", {"error": str(e)})
            return DocumentOutcome(
                document, Outcome.SUBMIT_FAILED, index, total, links=links, detail=str(e)
            )

        log.log_operation("document_updated", {"document": document, "links": links})
        return DocumentOutcome(document, Outcome.UPDATED, index, total, links=links)

    # ----- Run -----

    def apply(self, documents: DocumentSet, report: Optional[RenameReport] = None) -> RenameReport:
        """
        Process every document in ``documents`` exactly once.

        Stops before the next document when termination is requested.

        Args:
            documents: Collected document set
            report: Report to fill in (a new one when not given)

        Returns:
            RenameReport with one outcome per visited document
        """
        if report is None:
            report = self._new_report()
        ordered = documents.ordered()
        total = len(ordered)
        report.stats.documents_found = total

        for index, document in enumerate(ordered, start=1):
            if self.termination.is_set():
                safe_logger(self.logger).log_info(
                    "Run terminated", {"remaining": total - index + 1}
                )
                break

            result = self.process_document(document, index, total)
            report.record(result)
            if self.on_outcome is not None:
                self.on_outcome(result)

            if result.outcome is Outcome.UPDATED and self.job.pacing_seconds > 0:
                self.termination.wait(self.job.pacing_seconds)

        self._finish(report)
        return report

    def run(self) -> RenameReport:
        """
        Collect backlinks, then apply the rename to each document.

        Returns:
            RenameReport for the whole run
        """
        log = safe_logger(self.logger)
        log.bind_run(self.job.old_title, self.job.new_title)
        log.log_operation(
            "rename_start",
            {
                "old": self.job.old_title,
                "new": self.job.new_title,
                "keep_alias": self.job.keep_alias_for_bare_links,
                "namespaces": list(self.job.namespaces),
                "dry_run": self.dry_run,
            },
        )

        report = self._new_report()
        documents = self.collect()
        report.failed_namespaces = [f.namespace for f in documents.failures]
        report.stats.namespaces_failed = len(documents.failures)
        if self.on_collected is not None:
            self.on_collected(documents)

        report = self.apply(documents, report)
        log.log_operation("rename_finish", self._report_details(report))
        return report

    # ----- Helpers -----

    def _new_report(self) -> RenameReport:
        return RenameReport(
            old_title=self.job.old_title,
            new_title=self.job.new_title,
            dry_run=self.dry_run,
        )

    def _finish(self, report: RenameReport) -> None:
        if self.termination.is_set():
            report.termination_state = self.termination.state
            report.termination_reason = self.termination.reason

    @staticmethod
    def _report_details(report: RenameReport) -> Dict[str, object]:
        details: Dict[str, object] = report.stats.to_dict()
        if report.terminated:
            details["termination"] = report.termination_state.value
        return details
