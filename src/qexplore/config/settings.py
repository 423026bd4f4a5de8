# src/qexplore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/qexplore/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `QEXPLORE_CONFIG_PATH`
- environment variables (e.g., `QEXPLORE_LOG_LEVEL`, `ANU_API_KEY`)

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from qexplore.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `qexplore.config`."""
    text = resources.files("qexplore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "q-explore"
    http_timeout_seconds: float = 30
    log_level: str = "INFO"


class GenerationSettings(BaseModel):
    backend: str = "pseudo"
    radius: float = Field(3000.0, gt=0)
    points: int = Field(10_000, ge=1)
    grid_resolution: int = Field(50, ge=1)
    mode: Literal["standard", "flower_power"] = "standard"
    anomaly_type: Literal["blind_spot", "attractor", "void", "power"] = "attractor"


class GeoSettings(BaseModel):
    earth_radius_m: float = Field(6_371_000.0, gt=0)


class AnuSettings(BaseModel):
    base_url: str = "https://qrng.anu.edu.au/API/jsonI.php"
    api_key: str | None = None
    max_block_size: int = Field(1024, ge=1)


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(7878, ge=1, le=65535)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    geo: GeoSettings = Field(default_factory=GeoSettings)
    anu: AnuSettings = Field(default_factory=AnuSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("QEXPLORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    backend = os.getenv("QEXPLORE_BACKEND")
    if backend:
        data.setdefault("generation", {})["backend"] = backend

    anu_key = os.getenv("ANU_API_KEY")
    if anu_key:
        data.setdefault("anu", {})["api_key"] = anu_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("QEXPLORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
