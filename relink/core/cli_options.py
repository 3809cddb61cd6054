#!/usr/bin/env python3
"""
cli_options.py
-------------------
Reusable Click option decorators for consistent CLI interfaces.

Usage:
    from relink.core.cli_options import config_option, dry_run_option

    @cli.command()
    @config_option
    @dry_run_option
    def rename(config, dry_run):
        pass
"""
import click
from relink.core.paths import CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH


# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURATION OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

config_option = click.option(
    "-c", "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    envvar=CONFIG_ENV_VAR,
    help="Path to the YAML configuration file"
)


# ═══════════════════════════════════════════════════════════════════════════
# RUN OPTIONS
# ═══════════════════════════════════════════════════════════════════════════

dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Preview changes without submitting any edit"
)

force_option = click.option(
    "-f", "--force",
    is_flag=True,
    help="Overwrite an existing configuration file"
)
