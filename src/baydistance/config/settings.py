# src/baydistance/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/baydistance/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `OPENAI_API_KEY`, `GOOGLE_MAPS_API_KEY`)
- an external YAML file via `BAYDISTANCE_CONFIG_PATH`

Design rule:
- Tuning knobs live in YAML, not hard-coded in business logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from baydistance.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `baydistance.config`."""
    text = resources.files("baydistance.config").joinpath(filename).read_text(encoding="utf-8")
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
    name: str = "BayDistance"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class EstimationSettings(BaseModel):
    avg_speed_mph: float = Field(30, gt=0)


class RankingSettings(BaseModel):
    default_sort: Literal["alphabet", "distance", "time"] = "alphabet"
    missing_estimates_last: bool = False


class CatalogSettings(BaseModel):
    # None means the packaged Bay Area city list.
    path: str | None = None


class LocationSettings(BaseModel):
    base_url: str = "https://ipinfo.io/json"
    token: str | None = None


class LlmSettings(BaseModel):
    base_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o-mini"
    temperature: float = Field(0.7, ge=0, le=2)
    max_tokens: int = Field(600, ge=1)
    max_recommendations: int = Field(5, ge=1, le=20)
    timeout_seconds: float = 30
    api_key: str | None = None


class PlacesSettings(BaseModel):
    base_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    place_type: str = "parking"
    radius_m: int = Field(1500, ge=1, le=50_000)
    max_results: int = Field(5, ge=1, le=20)
    api_key: str | None = None


class IngestionSettings(BaseModel):
    location: LocationSettings = Field(default_factory=LocationSettings)
    llm: LlmSettings = Field(default_factory=LlmSettings)
    places: PlacesSettings = Field(default_factory=PlacesSettings)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    estimation: EstimationSettings = Field(default_factory=EstimationSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("BAYDISTANCE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    ingestion = data.setdefault("ingestion", {})
    ipinfo_token = os.getenv("IPINFO_TOKEN")
    if ipinfo_token:
        ingestion.setdefault("location", {})["token"] = ipinfo_token

    llm_key = os.getenv("OPENAI_API_KEY")
    if llm_key:
        ingestion.setdefault("llm", {})["api_key"] = llm_key
    llm_model = os.getenv("BAYDISTANCE_LLM_MODEL")
    if llm_model:
        ingestion.setdefault("llm", {})["model"] = llm_model

    maps_key = os.getenv("GOOGLE_MAPS_API_KEY")
    if maps_key:
        ingestion.setdefault("places", {})["api_key"] = maps_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("BAYDISTANCE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
