#!/usr/bin/env python3
"""
cli.py
------
Shared CLI utilities and statistics for relink commands.

Functions:
    setup_logger: Initialize RelinkLogger for CLI operations

Classes:
    OperationStats: Base class for all statistics
    RenameStats: Per-outcome counters for a rename run

Usage:
    from relink.core.cli import setup_logger, RenameStats

    logger = setup_logger(log_dir, "rename")
    stats = RenameStats()
    stats.documents_updated += 1
    print(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import logging
from pathlib import Path
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional

# --- Local imports ---
from relink.core.logging_manager import RelinkLogger


# ═══════════════════════════════════════════════════════════════════════════
# LOGGER SETUP
# ═══════════════════════════════════════════════════════════════════════════

def setup_logger(
    log_dir: Path, component_name: str, verbose: bool = False
) -> RelinkLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a RelinkLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g., 'rename')
        verbose: Mirror debug records to stderr

    Returns:
        Configured RelinkLogger instance
    """
    operations_log_dir = log_dir / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return RelinkLogger(
        operations_log_dir,
        component_name=component_name,
        console_level=logging.DEBUG if verbose else None,
    )


# ═══════════════════════════════════════════════════════════════════════════
# STATISTICS CLASSES
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class OperationStats:
    """
    Base class for CLI operation statistics.

    Attributes:
        files_processed: Number of documents visited
        errors: Number of errors encountered
        start_time: Operation start timestamp
    """
    files_processed: int = 0
    errors: int = 0
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate statistics on initialization."""
        if self.files_processed < 0:
            raise ValueError(f"files_processed must be non-negative, got {self.files_processed}")
        if self.errors < 0:
            raise ValueError(f"errors must be non-negative, got {self.errors}")

    def duration(self) -> float:
        """
        Get elapsed time in seconds (cached after first call).

        Returns:
            Seconds elapsed since start_time
        """
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        """Get formatted summary string."""
        return (
            f"{self.files_processed} documents processed, "
            f"{self.errors} errors, "
            f"{self.duration():.2f}s"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "files_processed": self.files_processed,
            "errors": self.errors,
            "duration": self.duration(),
        }


@dataclass
class RenameStats(OperationStats):
    """
    Statistics for rename runs.

    ``errors`` counts fetch and submit failures; permission denials are
    tracked separately since they are expected on protected documents.

    Attributes:
        namespaces_failed: Namespaces skipped during backlink collection
        documents_found: Size of the collected document set
        documents_updated: Edits submitted successfully
        documents_unchanged: Documents with nothing to rewrite
        documents_denied: Documents skipped for lack of edit rights
        documents_would_update: Documents that would change (dry run)
    """
    namespaces_failed: int = 0
    documents_found: int = 0
    documents_updated: int = 0
    documents_unchanged: int = 0
    documents_denied: int = 0
    documents_would_update: int = 0

    def summary(self) -> str:
        """Get formatted summary with rename metrics."""
        parts = [
            f"{self.files_processed}/{self.documents_found} documents processed",
            f"{self.documents_updated} updated",
            f"{self.documents_unchanged} unchanged",
            f"{self.documents_denied} denied",
        ]
        if self.documents_would_update:
            parts.append(f"{self.documents_would_update} would update")
        if self.namespaces_failed:
            parts.append(f"{self.namespaces_failed} namespaces failed")
        parts.append(f"{self.errors} errors")
        parts.append(f"{self.duration():.2f}s")
        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with rename metrics."""
        d = super().to_dict()
        d.update({
            "namespaces_failed": self.namespaces_failed,
            "documents_found": self.documents_found,
            "documents_updated": self.documents_updated,
            "documents_unchanged": self.documents_unchanged,
            "documents_denied": self.documents_denied,
            "documents_would_update": self.documents_would_update,
        })
        return d
