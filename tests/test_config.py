from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from tripdates.config import AppConfig, build_clock, load_runtime_config
from tripdates.core.clock import FixedClock, SystemClock


def test_yaml_parsing_defaults():
    rc = load_runtime_config()
    assert rc.settings.environment == "dev"
    assert rc.settings.clock.today is None
    assert rc.fixture_path.is_file()
    assert rc.fixture_size > 0
    assert len(rc.fixture_sha256) == 64


def test_env_override_pins_today(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TD_CLOCK__TODAY", "2025-09-19")
    rc = load_runtime_config()
    assert rc.settings.clock.today == date(2025, 9, 19)
    clock = build_clock(rc.settings)
    assert isinstance(clock, FixedClock)
    assert clock.today() == date(2025, 9, 19)


def test_env_override_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TD_ENVIRONMENT", "staging")
    assert load_runtime_config().settings.environment == "staging"


def test_system_clock_when_today_not_pinned():
    clock = build_clock(AppConfig.model_validate({"clock": {"timezone": "Europe/Paris"}}))
    assert clock == SystemClock("Europe/Paris")


def test_unknown_timezone_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TD_CLOCK__TIMEZONE", "Nowhere/Special")
    with pytest.raises(ValueError):
        load_runtime_config()


def test_explicit_config_file(tmp_path: Path):
    fixture = tmp_path / "cases.json"
    fixture.write_text('{"testCases": {}}', encoding="utf-8")
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(f"environment: test\ndata:\n  fixture_path: {fixture}\n", encoding="utf-8")
    rc = load_runtime_config(cfg)
    assert rc.settings.environment == "test"
    assert rc.fixture_path == fixture


def test_config_file_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("debug: true\n", encoding="utf-8")
    monkeypatch.setenv("TD_CONFIG_FILE", str(cfg))
    assert load_runtime_config().settings.debug is True


def test_missing_yaml(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_runtime_config(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path: Path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_runtime_config(cfg)
    cfg.write_text("environment: moon\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_runtime_config(cfg)


def test_missing_fixture(tmp_path: Path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(f"data:\n  fixture_path: {tmp_path / 'absent.json'}\n", encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        load_runtime_config(cfg)


@pytest.mark.asyncio
async def test_app_boot_reads_config(app, client):
    # client fixture ensures startup ran
    rc = app.state.runtime_config
    assert isinstance(rc.settings, AppConfig)
    assert rc.settings.clock.today == date(2025, 9, 19)
