#!/usr/bin/env python3
"""
paths.py
-------------------
Default locations for relink files.

relink is installed as a console script, so nothing is written next to
the package. Logs go to the per-user application directory reported by
Click (``~/.config/relink/logs`` on Linux, ``~/Library/Application
Support/relink/logs`` on macOS) unless ``--log-dir`` or ``RELINK_LOG_DIR``
says otherwise.

The configuration file lives in the working directory by default
(``relink.yaml``) and can be relocated with the ``RELINK_CONFIG``
environment variable or the ``--config`` CLI option.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path

# --- Third-party imports ---
import click


APP_NAME = "relink"

# ---- Logs ----
LOG_DIR_ENV_VAR = "RELINK_LOG_DIR"
LOG_DIR = Path(click.get_app_dir(APP_NAME)) / "logs"

# ---- Configuration ----
CONFIG_ENV_VAR = "RELINK_CONFIG"
DEFAULT_CONFIG_PATH = Path(os.environ.get(CONFIG_ENV_VAR, "relink.yaml"))
