#!/usr/bin/env python3
"""
test_config.py
--------------
Tests for configuration loading and the RenameJob value.

Usage:
    python -m pytest tests/unit/core/test_config.py -v
"""
# --- Annotations ---
from __future__ import annotations

# --- Third-party imports ---
import pytest
import yaml

# --- Local imports ---
from relink.core.config import (
    DEFAULT_PACING_SECONDS,
    DEFAULT_POLL_INTERVAL,
    RenameJob,
    ServiceConfig,
    config_from_dict,
    load_config,
    parse_namespaces,
    save_config,
)
from relink.core.exceptions import ConfigError, ValidationError


@pytest.fixture
def config_data():
    """Minimal valid config mapping."""
    return {
        "domain": "wiki.example.org",
        "token": "secret",
        "namespaces": ["문서", "틀"],
        "log_template": "[[{old}]] -> [[{new}]]",
    }


class TestParseNamespaces:
    """Tests for parse_namespaces."""

    def test_comma_separated(self):
        assert parse_namespaces(" 문서, 틀 ,,분류 ") == ("문서", "틀", "분류")

    def test_list_keeps_order(self):
        assert parse_namespaces(["b", " a "]) == ("b", "a")

    def test_none_is_empty(self):
        assert parse_namespaces(None) == ()

    @pytest.mark.parametrize("value", [3, {"a": 1}, ["ok", 5]])
    def test_bad_types(self, value):
        with pytest.raises(ConfigError):
            parse_namespaces(value)


class TestConfigFromDict:
    """Tests for config_from_dict."""

    def test_defaults(self, config_data):
        config = config_from_dict(config_data)
        assert config.service == ServiceConfig(domain="wiki.example.org", token="secret")
        assert config.service.base_url == "https://wiki.example.org/api"
        assert config.namespaces == ("문서", "틀")
        assert config.watch_document is None
        assert config.pacing_seconds == DEFAULT_PACING_SECONDS
        assert config.poll_interval == DEFAULT_POLL_INTERVAL

    def test_missing_required_fields(self, config_data):
        del config_data["token"]
        config_data["log_template"] = ""
        with pytest.raises(ConfigError) as exc_info:
            config_from_dict(config_data)
        assert "token" in str(exc_info.value)
        assert "log_template" in str(exc_info.value)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            config_from_dict(["domain"])

    def test_empty_namespace_list(self, config_data):
        config_data["namespaces"] = " , "
        with pytest.raises(ConfigError):
            config_from_dict(config_data)

    def test_bad_number(self, config_data):
        config_data["pacing_seconds"] = "fast"
        with pytest.raises(ConfigError):
            config_from_dict(config_data)

    @pytest.mark.parametrize("key", ["poll_interval", "timeout"])
    def test_zero_interval_rejected(self, config_data, key):
        """A zero poll interval or timeout is an error, not a fallback to the default."""
        config_data[key] = 0
        with pytest.raises(ConfigError) as exc_info:
            config_from_dict(config_data)
        assert key in str(exc_info.value)

    def test_optional_values(self, config_data):
        config_data.update(watch_document=" Project:Requests ", pacing_seconds=0, timeout="5")
        config = config_from_dict(config_data)
        assert config.watch_document == "Project:Requests"
        assert config.pacing_seconds == 0.0
        assert config.service.timeout == 5.0


class TestLoadSave:
    """Tests for reading and writing the YAML file."""

    def test_save_then_load(self, tmp_path, config_data):
        path = tmp_path / "conf" / "relink.yaml"
        config_data["watch_document"] = "Project:Requests"

        saved = save_config(path, config_data)
        loaded = load_config(path)

        assert loaded == saved
        assert loaded.source == path

    def test_saved_file_is_readable_yaml(self, tmp_path, config_data):
        path = tmp_path / "relink.yaml"
        save_config(path, config_data)
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["namespaces"] == ["문서", "틀"]
        assert "watch_document" not in raw

    def test_save_rejects_invalid_data(self, tmp_path):
        path = tmp_path / "relink.yaml"
        with pytest.raises(ConfigError):
            save_config(path, {"domain": "x"})
        assert not path.exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "nope.yaml")
        assert "relink init" in str(exc_info.value)

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "relink.yaml"
        path.write_text("domain: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestRenameJob:
    """Tests for RenameJob validation and helpers."""

    def test_build_job_carries_config(self, config_data):
        config_data["pacing_seconds"] = 2
        job = config_from_dict(config_data).build_job("Old", "New", keep_alias=True)

        assert job.keep_alias_for_bare_links is True
        assert job.namespaces == ("문서", "틀")
        assert job.pacing_seconds == 2.0
        assert job.log_message() == "[[Old]] -> [[New]]"

    def test_namespaces_frozen_to_tuple(self):
        job = RenameJob("Old", "New", False, "{old}", ["main"])
        assert job.namespaces == ("main",)

    @pytest.mark.parametrize("old,new", [
        ("", "New"),
        ("Old", "   "),
        ("Old|x", "New"),
        ("Old", "[[New]]"),
        ("Same", "Same"),
        ("Old", " Old\t"),
    ])
    def test_invalid_titles(self, old, new):
        with pytest.raises(ValidationError):
            RenameJob(old, new, False, "{old}", ("main",))

    def test_requires_namespace(self):
        with pytest.raises(ValidationError):
            RenameJob("Old", "New", False, "{old}", ())

    def test_rejects_non_positive_poll_interval(self):
        with pytest.raises(ValidationError):
            RenameJob("Old", "New", False, "{old}", ("main",), poll_interval=0)

    def test_immutable(self):
        job = RenameJob("Old", "New", False, "{old}", ("main",))
        with pytest.raises(AttributeError):
            job.old_title = "Other"
