#!/usr/bin/env python3
"""
cli_decorators.py
-------------------
Custom Click decorators for relink CLIs.

Provides a decorator factory that sets up consistent CLI groups with
logging, context management, and standard options.

Usage:
    from relink.core.cli_decorators import relink_cli_group

    @relink_cli_group("relink")
    def cli(ctx):
        '''relink - Rename wikilinks across a wiki'''
        pass  # Setup handled automatically
"""
from functools import wraps
from pathlib import Path
from typing import Callable
import click

from relink.core.cli import setup_logger
from relink.core.paths import LOG_DIR, LOG_DIR_ENV_VAR


def relink_cli_group(component_name: str) -> Callable:
    """
    Decorator factory for creating consistent CLI groups.

    Automatically adds:
    - Click group() decorator
    - --log-dir option
    - --verbose option
    - Context object setup with logger

    Args:
        component_name: Component identifier for logging (e.g., "relink")

    Returns:
        Decorator function

    Provides context with:
        ctx.obj["log_dir"]: Path - Log directory
        ctx.obj["verbose"]: bool - Verbose flag
        ctx.obj["logger"]: RelinkLogger - Configured logger instance
    """
    def decorator(f: Callable) -> Callable:
        @click.group()
        @click.option(
            "--log-dir",
            type=click.Path(),
            default=str(LOG_DIR),
            envvar=LOG_DIR_ENV_VAR,
            show_default=True,
            help="Directory for log files"
        )
        @click.option(
            "-v", "--verbose",
            is_flag=True,
            help="Echo log records and tracebacks to stderr"
        )
        @click.pass_context
        @wraps(f)
        def wrapper(ctx: click.Context, log_dir: str, verbose: bool):
            ctx.ensure_object(dict)
            ctx.obj["log_dir"] = Path(log_dir)
            ctx.obj["verbose"] = verbose
            ctx.obj["logger"] = setup_logger(Path(log_dir), component_name, verbose)

            return f(ctx)

        return wrapper
    return decorator
