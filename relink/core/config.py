#!/usr/bin/env python3
"""
config.py
---------
Configuration loading and the immutable rename job value.

Reads the YAML configuration file that holds the Document Service
credentials and the per-wiki job settings, validates it, and builds the
frozen values the rest of the package receives explicitly. Nothing in
the core reads configuration on its own.

Configuration file (``relink.yaml``)::

    domain: wiki.example.org
    token: <api token>
    namespaces: [문서, 틀, 분류]      # or "문서, 틀, 분류"
    log_template: "[[{old}]] -> [[{new}]] link update"
    watch_document: "Project:Bot requests"
    pacing_seconds: 1.0           # optional
    poll_interval: 15.0           # optional
    timeout: 30.0                 # optional

Usage:
    from relink.core.config import load_config

    config = load_config(Path("relink.yaml"))
    job = config.build_job("Old Title", "New Title", keep_alias=True)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

# --- Third-party imports ---
import yaml

# --- Local imports ---
from relink.core.exceptions import ConfigError, ValidationError


# ==================== Constants ====================

DEFAULT_PACING_SECONDS = 1.0
DEFAULT_POLL_INTERVAL = 15.0
DEFAULT_TIMEOUT = 30.0

REQUIRED_FIELDS = ("domain", "token", "namespaces", "log_template")

# Characters that would break the wikilink grammar if present in a title
FORBIDDEN_TITLE_CHARS = ("[", "]", "|")

# Whitespace a wikilink target may be padded with
TITLE_PADDING = " \t\f"


# ==================== Helpers ====================

def parse_namespaces(value: Union[str, List[str], Tuple[str, ...], None]) -> Tuple[str, ...]:
    """
    Normalize a namespace list from config.

    Accepts a YAML list or a comma-separated string. Items are trimmed
    and empty items dropped; order is kept.

    Args:
        value: Raw namespaces value

    Returns:
        Tuple of namespace names

    Raises:
        ConfigError: If value is neither a string nor a list of strings
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(f"Namespace must be a string, got {type(item).__name__}")
            items.append(item)
    else:
        raise ConfigError(
            f"namespaces must be a list or comma-separated string, got {type(value).__name__}"
        )
    return tuple(item.strip() for item in items if item.strip())


def _as_float(
    data: Dict[str, Any], key: str, default: float, allow_zero: bool = True
) -> float:
    """Read an optional non-negative (or strictly positive) number from config data."""
    raw = data.get(key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {raw!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ConfigError(f"{key} must be {bound}, got {value}")
    return value


# ==================== Values ====================

@dataclass(frozen=True)
class ServiceConfig:
    """
    Connection settings for the Document Service.

    Attributes:
        domain: Host name of the wiki (e.g. "theseed.io")
        token: Bearer token used for every request
        timeout: Per-request timeout in seconds
        scheme: URL scheme, "https" unless testing against a local server
    """

    domain: str
    token: str
    timeout: float = DEFAULT_TIMEOUT
    scheme: str = "https"

    @property
    def base_url(self) -> str:
        """Root URL of the API, without trailing slash."""
        return f"{self.scheme}://{self.domain}/api"


@dataclass(frozen=True)
class RenameJob:
    """
    Immutable description of a single rename run.

    Attributes:
        old_title: Title whose links are rewritten
        new_title: Title the links point to afterwards
        keep_alias_for_bare_links: Inject ``|old_title`` into bare links
            so readers keep seeing the old text
        log_template: Edit summary with ``{old}``/``{new}`` placeholders
        namespaces: Namespaces to search for backlinks, in query order
        watch_document: Document whose discussion threads are watched,
            or None to run without a watchdog
        pacing_seconds: Pause after each successful edit
        poll_interval: Seconds between watchdog polls
    """

    old_title: str
    new_title: str
    keep_alias_for_bare_links: bool
    log_template: str
    namespaces: Tuple[str, ...]
    watch_document: Optional[str] = None
    pacing_seconds: float = DEFAULT_PACING_SECONDS
    poll_interval: float = DEFAULT_POLL_INTERVAL

    def __post_init__(self) -> None:
        """Validate job values on construction."""
        for label, title in (("old_title", self.old_title), ("new_title", self.new_title)):
            if not title or not title.strip():
                raise ValidationError(f"{label} must not be empty")
            bad = [c for c in FORBIDDEN_TITLE_CHARS if c in title]
            if bad:
                raise ValidationError(
                    f"{label} contains link delimiter characters {bad}: {title!r}"
                )
        if self.old_title.strip(TITLE_PADDING) == self.new_title.strip(TITLE_PADDING):
            raise ValidationError(
                f"Old and new title name the same link target: {self.old_title!r}, {self.new_title!r}"
            )
        if not self.namespaces:
            raise ValidationError("At least one namespace is required")
        if self.pacing_seconds < 0 or self.poll_interval <= 0:
            raise ValidationError("pacing_seconds must be >= 0 and poll_interval > 0")
        # Lists passed by callers are frozen into a tuple
        object.__setattr__(self, "namespaces", tuple(self.namespaces))

    def log_message(self) -> str:
        """
        Build the edit summary for this job.

        Returns:
            log_template with every ``{old}`` and ``{new}`` substituted
        """
        return self.log_template.replace("{old}", self.old_title).replace(
            "{new}", self.new_title
        )


@dataclass(frozen=True)
class RelinkConfig:
    """
    Parsed configuration file.

    Attributes:
        service: Document Service connection settings
        namespaces: Namespaces to search
        log_template: Edit summary template
        watch_document: Document to watch for discussion status, if any
        pacing_seconds: Pause after each successful edit
        poll_interval: Seconds between watchdog polls
        source: Path the config was loaded from
    """

    service: ServiceConfig
    namespaces: Tuple[str, ...]
    log_template: str
    watch_document: Optional[str] = None
    pacing_seconds: float = DEFAULT_PACING_SECONDS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    source: Optional[Path] = field(default=None, compare=False)

    def build_job(self, old_title: str, new_title: str, keep_alias: bool) -> RenameJob:
        """
        Create the RenameJob for a pair of titles.

        Args:
            old_title: Title being renamed
            new_title: Replacement title
            keep_alias: Whether bare links keep the old title as alias

        Returns:
            Validated RenameJob
        """
        return RenameJob(
            old_title=old_title,
            new_title=new_title,
            keep_alias_for_bare_links=keep_alias,
            log_template=self.log_template,
            namespaces=self.namespaces,
            watch_document=self.watch_document,
            pacing_seconds=self.pacing_seconds,
            poll_interval=self.poll_interval,
        )


# ==================== Load / Save ====================

def config_from_dict(data: Dict[str, Any], source: Optional[Path] = None) -> RelinkConfig:
    """
    Build a RelinkConfig from parsed YAML data.

    Args:
        data: Mapping loaded from the config file
        source: Optional path for error messages

    Returns:
        Validated RelinkConfig

    Raises:
        ConfigError: If required fields are missing or malformed
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    missing = [key for key in REQUIRED_FIELDS if data.get(key) in (None, "")]
    if missing:
        where = f" in {source}" if source else ""
        raise ConfigError(f"Missing required fields{where}: {missing}")

    for key in ("domain", "token", "log_template"):
        if not isinstance(data[key], str):
            raise ConfigError(f"{key} must be a string")

    namespaces = parse_namespaces(data["namespaces"])
    if not namespaces:
        raise ConfigError("namespaces must contain at least one namespace")

    watch_document = data.get("watch_document") or None
    if watch_document is not None and not isinstance(watch_document, str):
        raise ConfigError("watch_document must be a string")

    service = ServiceConfig(
        domain=data["domain"].strip(),
        token=data["token"].strip(),
        timeout=_as_float(data, "timeout", DEFAULT_TIMEOUT, allow_zero=False),
        scheme=str(data.get("scheme") or "https"),
    )
    return RelinkConfig(
        service=service,
        namespaces=namespaces,
        log_template=data["log_template"],
        watch_document=watch_document.strip() if watch_document else None,
        pacing_seconds=_as_float(data, "pacing_seconds", DEFAULT_PACING_SECONDS),
        poll_interval=_as_float(data, "poll_interval", DEFAULT_POLL_INTERVAL, allow_zero=False),
        source=source,
    )


def load_config(path: Path) -> RelinkConfig:
    """
    Load and validate the configuration file.

    Args:
        path: Path to the YAML config file

    Returns:
        Validated RelinkConfig

    Raises:
        ConfigError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path} (run 'relink init' to create it)")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    return config_from_dict(data, source=path)


def save_config(path: Path, data: Dict[str, Any]) -> RelinkConfig:
    """
    Validate and write configuration to a YAML file.

    Args:
        path: Destination path
        data: Raw config mapping (same keys as the file format)

    Returns:
        The validated RelinkConfig that was written

    Raises:
        ConfigError: If the data is invalid or the file cannot be written
    """
    path = Path(path)
    config = config_from_dict(data, source=path)

    payload: Dict[str, Any] = {
        "domain": config.service.domain,
        "token": config.service.token,
        "namespaces": list(config.namespaces),
        "log_template": config.log_template,
    }
    if config.watch_document:
        payload["watch_document"] = config.watch_document
    for key in ("pacing_seconds", "poll_interval", "timeout"):
        if data.get(key) is not None:
            payload[key] = float(data[key])

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(payload, f, allow_unicode=True, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"Cannot write {path}: {e}") from e

    return config
