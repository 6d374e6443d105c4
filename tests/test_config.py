"""
Tests for configuration loading and page glue.
"""
from datetime import datetime, timezone

import pytest

from command_center.client import LOCAL_API_BASE, REMOTE_API_BASE
from command_center.config import DashboardConfig, ConfigError
from command_center.mission import active_tab, format_clock, MISSION_HTML


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("COMMAND_CENTER_BACKEND", "COMMAND_CENTER_DB", "COMMAND_CENTER_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_file_missing(tmp_path):
    cfg = DashboardConfig.load(str(tmp_path / "missing.yaml"))
    assert cfg.backend == "local"
    assert cfg.storage_key == "fulmen-data"
    assert cfg.request_timeout is None
    assert not cfg.storage_path.startswith("~")


def test_yaml_values_and_unknown_keys(tmp_path):
    path = tmp_path / "cc.yaml"
    path.write_text(
        "backend: remote\n"
        "hostname: hub.example.org\n"
        "request_timeout: 2.5\n"
        "not_a_setting: 1\n"
    )
    cfg = DashboardConfig.load(str(path))
    assert cfg.backend == "remote"
    assert cfg.request_timeout == 2.5
    assert cfg.api_base == REMOTE_API_BASE


def test_malformed_yaml_falls_back(tmp_path):
    path = tmp_path / "cc.yaml"
    path.write_text("backend: [unclosed\n")
    assert DashboardConfig.load(str(path)).backend == "local"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("COMMAND_CENTER_BACKEND", "REMOTE")
    monkeypatch.setenv("COMMAND_CENTER_DB", str(tmp_path / "env.db"))
    monkeypatch.setenv("COMMAND_CENTER_API_KEY", "s3cret")

    cfg = DashboardConfig.load(str(tmp_path / "missing.yaml"))

    assert cfg.backend == "remote"
    assert cfg.storage_path == str(tmp_path / "env.db")
    assert cfg.api_key == "s3cret"
    assert cfg.api_base == LOCAL_API_BASE


def test_unknown_backend_rejected(tmp_path):
    path = tmp_path / "cc.yaml"
    path.write_text("backend: postgres\n")
    with pytest.raises(ConfigError):
        DashboardConfig.load(str(path))


def test_active_tab():
    assert active_tab("mission") == "mission"
    assert active_tab("timeline") == "timeline"
    assert active_tab("nope") == "tasks"
    assert active_tab(None) == "tasks"


def test_format_clock():
    now = datetime(2026, 10, 18, 17, 5, tzinfo=timezone.utc)
    assert format_clock(now, timezone.utc) == "05:05 PM UTC"


def test_mission_content():
    assert "North Star" in MISSION_HTML
    assert MISSION_HTML.count("<li>") == 7
