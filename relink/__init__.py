"""
relink
======

Rename a title across a wiki: find every document that links to the old
title, rewrite its wikilinks to the new title, and submit the edits,
while a watchdog stops the run when a watched discussion turns normal.

Main Components:
    - wiki: Link rewriter, backlink collector, rename orchestrator, watchdog
    - service: Document Service interface and HTTP client
    - core: Configuration, logging, exceptions, CLI helpers

Primary Interfaces:
    - relink.cli: Command-line entry point (``relink``)
    - relink.wiki.rename.RenameOrchestrator: Programmatic runs
"""

__version__ = "1.0.0"
