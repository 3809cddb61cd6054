#!/usr/bin/env python3
"""
__init__.py
-----------
Rename propagation for wikilinks.

Components:
    - rewrite_links: Pure wikilink rewriter
    - BacklinkCollector: Deduplicated backlink discovery
    - RenameOrchestrator: Per-document fetch/rewrite/submit loop
    - Watchdog / Termination: Discussion watchdog and stop signal
"""
from .wikilink import RewriteResult, WikiLinkOccurrence, find_links, rewrite_links
from .backlinks import BacklinkCollector, DocumentSet
from .rename import DocumentOutcome, Outcome, RenameOrchestrator, RenameReport
from .watchdog import Termination, Watchdog, WatchState

__all__ = [
    "RewriteResult",
    "WikiLinkOccurrence",
    "find_links",
    "rewrite_links",
    "BacklinkCollector",
    "DocumentSet",
    "DocumentOutcome",
    "Outcome",
    "RenameOrchestrator",
    "RenameReport",
    "Termination",
    "Watchdog",
    "WatchState",
]
