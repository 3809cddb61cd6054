#!/usr/bin/env python3
"""
relink CLI
----------

Command-line interface for renaming a title across a wiki.

Commands:
    - init: Capture domain, token and job settings interactively and
      write them to the configuration file
    - rename: Rewrite every link to an old title so it points at a new
      title, watched by the discussion watchdog

Usage:
    # First run: create relink.yaml
    relink init

    # Rename (prompts for anything not given)
    relink rename --old "Old Title" --new "New Title" --keep-alias

    # Preview without submitting edits
    relink rename --old "Old Title" --new "New Title" --dry-run

Exit codes:
    0: All documents processed, or the watched discussion turned normal
    1: Configuration error, or the watchdog failed to poll
"""
from __future__ import annotations

import sys
import click
from pathlib import Path
from typing import Optional

from relink.core.cli_decorators import relink_cli_group
from relink.core.cli_options import config_option, dry_run_option, force_option
from relink.core.config import load_config, save_config
from relink.core.logging_manager import RelinkLogger, handle_cli_error
from relink.service.client import DocumentServiceClient
from relink.wiki.backlinks import DocumentSet, NamespaceFailure
from relink.wiki.rename import DocumentOutcome, Outcome, RenameOrchestrator
from relink.wiki.watchdog import Termination, Watchdog, WatchState


@relink_cli_group("relink")
def cli(ctx: click.Context) -> None:
    """relink - Rename wikilinks across a wiki."""
    pass


# ===== INIT =====


@cli.command()
@config_option
@force_option
@click.pass_context
def init(ctx: click.Context, config_path: str, force: bool) -> None:
    """Create the configuration file interactively."""
    path = Path(config_path)
    if path.exists() and not force:
        click.echo(f"⚠️  {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    data = {
        "domain": click.prompt("Domain (e.g. theseed.io)"),
        "token": click.prompt("API token", hide_input=True),
        "namespaces": click.prompt("Namespaces to search (comma-separated)"),
        "log_template": click.prompt("Edit summary template (use {old} and {new})"),
        "watch_document": click.prompt(
            "Document to watch for an open discussion (blank for none)",
            default="",
            show_default=False,
        ),
    }

    try:
        config = save_config(path, data)
    except Exception as e:
        handle_cli_error(ctx, e, "init", {"config": str(path)})

    ctx.obj["logger"].log_operation(
        "config_saved",
        {"path": str(path), "domain": config.service.domain, "namespaces": list(config.namespaces)},
    )
    click.echo(f"✅ Configuration written to {path}")


# ===== RENAME =====


def _echo_outcome(result: DocumentOutcome, verbose: bool) -> None:
    """Print one per-document line with the running counter."""
    doc, progress = result.document, result.progress
    if result.outcome is Outcome.UPDATED:
        click.echo(f"✎ Updated {doc} ({progress})")
    elif result.outcome is Outcome.WOULD_UPDATE:
        click.echo(f"✎ Would update {doc} ({progress}): {result.links} link(s)")
    elif result.outcome is Outcome.DENIED:
        click.echo(f"⊘ No edit permission for {doc} ({progress})")
    elif result.outcome is Outcome.FETCH_FAILED:
        click.echo(f"✕ Failed to fetch {doc} ({progress}): {result.detail}")
    elif result.outcome is Outcome.SUBMIT_FAILED:
        click.echo(f"✕ Failed to update {doc} ({progress}): {result.detail}")
    elif verbose:
        click.echo(f"· Unchanged {doc} ({progress})")


def _echo_namespace_failure(failure: NamespaceFailure) -> None:
    click.echo(
        f"⚠️  Error fetching backlinks in namespace '{failure.namespace}': {failure.error}"
    )


def _echo_collected(documents: DocumentSet) -> None:
    click.echo(f"🔗 Found {len(documents)} backlinks to process.")


@cli.command()
@config_option
@click.option("--old", "old_title", prompt="Old title", help="Title to rename")
@click.option("--new", "new_title", prompt="New title", help="Replacement title")
@click.option(
    "--keep-alias/--no-keep-alias",
    default=None,
    help="Keep the old title as display text for bare links (prompted if omitted)",
)
@click.option("--no-watch", is_flag=True, help="Run without the discussion watchdog")
@dry_run_option
@click.pass_context
def rename(
    ctx: click.Context,
    config_path: str,
    old_title: str,
    new_title: str,
    keep_alias: Optional[bool],
    no_watch: bool,
    dry_run: bool,
) -> None:
    """Rewrite links to OLD so they point at NEW."""
    logger: RelinkLogger = ctx.obj["logger"]
    verbose: bool = ctx.obj["verbose"]
    context = {"old": old_title, "new": new_title, "config": config_path}

    try:
        config = load_config(Path(config_path))
        if keep_alias is None:
            keep_alias = click.confirm("Keep display text for bare links?", default=True)
        job = config.build_job(old_title.strip(), new_title.strip(), keep_alias)
    except Exception as e:
        handle_cli_error(ctx, e, "rename", context)

    service = DocumentServiceClient(config.service, logger)
    termination = Termination()

    watchdog: Optional[Watchdog] = None
    if job.watch_document and not no_watch:
        watchdog = Watchdog(
            service,
            job.watch_document,
            termination,
            poll_interval=job.poll_interval,
            logger=logger,
        )
        watchdog.start()

    orchestrator = RenameOrchestrator(
        job,
        service,
        logger=logger,
        termination=termination,
        dry_run=dry_run,
        on_outcome=lambda result: _echo_outcome(result, verbose),
        on_namespace_failure=_echo_namespace_failure,
        on_collected=_echo_collected,
    )

    try:
        if dry_run:
            click.echo("🔍 Dry run: no edits will be submitted")
        report = orchestrator.run()
    except Exception as e:
        handle_cli_error(ctx, e, "rename", context)
    finally:
        if watchdog is not None:
            watchdog.stop(timeout=job.poll_interval)

    click.echo("")
    click.echo(report.summary())

    if report.termination_state is WatchState.FAILED:
        click.echo(f"❌ {report.termination_reason}", err=True)
        sys.exit(1)
    if report.termination_state is WatchState.SATISFIED:
        click.echo(f"✅ {report.termination_reason}")


if __name__ == "__main__":
    cli(obj={})
