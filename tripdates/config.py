from __future__ import annotations

import hashlib
import os
from datetime import date
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from tripdates.core.clock import Clock, FixedClock, SystemClock


# ----- Models for YAML + env config -----


Environment = Literal["dev", "test", "staging", "prod"]


class ClockSettings(BaseModel):
    # Pin "today" for reproducible runs; null reads the system clock.
    today: date | None = None
    timezone: str | None = None


class DataSettings(BaseModel):
    fixture_path: str = "fixtures/booking_test_data.json"


class AppConfig(BaseModel):
    environment: Environment = "dev"
    debug: bool = False
    clock: ClockSettings = Field(default_factory=ClockSettings)
    data: DataSettings = Field(default_factory=DataSettings)


class EnvOverrides(BaseSettings):
    """Environment overrides with nested keys via TD_<NESTED> variables.

    Example: TD_CLOCK__TODAY=2025-09-19
    """

    environment: Environment | None = None
    debug: bool | None = None
    clock: ClockSettings | None = None
    data: DataSettings | None = None

    model_config = SettingsConfigDict(env_prefix="TD_", env_nested_delimiter="__", extra="ignore")


class RuntimeConfig(BaseModel):
    settings: AppConfig
    project_root: Path
    fixture_path: Path
    fixture_sha256: str
    fixture_size: int


# ----- Loader helpers -----


def _read_yaml(file_path: Path) -> dict:
    if not file_path.exists():
        raise FileNotFoundError(f"Config YAML not found at {file_path}")
    with file_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML root must be a mapping")
    return data


def _sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def _resolve_path(project_root: Path, path_str: str) -> Path:
    p = Path(path_str)
    if not p.is_absolute():
        p = project_root / p
    return p


def _deep_merge(a: dict, b: dict) -> dict:
    out = dict(a)
    for k, v in b.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def build_clock(settings: AppConfig) -> Clock:
    if settings.clock.today is not None:
        return FixedClock(settings.clock.today)
    return SystemClock(settings.clock.timezone)


def load_runtime_config(config_file: str | Path | None = None) -> RuntimeConfig:
    project_root = Path(__file__).resolve().parents[1]

    # Determine YAML path (env overrides default)
    env_path = os.environ.get("TD_CONFIG_FILE")
    cfg_path = Path(config_file) if config_file else (Path(env_path) if env_path else project_root / "configs" / "default.yaml")

    yaml_data = _read_yaml(cfg_path)

    try:
        base = AppConfig.model_validate(yaml_data)
    except ValidationError as e:
        raise ValueError(f"Invalid YAML config: {e}")

    # Env overrides: merge dicts then re-validate
    overrides = EnvOverrides().model_dump(exclude_none=True)
    try:
        merged = AppConfig.model_validate(_deep_merge(base.model_dump(), overrides))
    except ValidationError as e:
        raise ValueError(f"Invalid environment override: {e}")

    # Fail fast on an unknown timezone
    build_clock(merged)

    fixture_path = _resolve_path(project_root, merged.data.fixture_path)
    if not fixture_path.exists():
        raise FileNotFoundError(f"Test data fixture not found at {fixture_path}")
    fixture_bytes = fixture_path.read_bytes()

    return RuntimeConfig(
        settings=merged,
        project_root=project_root,
        fixture_path=fixture_path,
        fixture_sha256=_sha256_bytes(fixture_bytes),
        fixture_size=len(fixture_bytes),
    )
