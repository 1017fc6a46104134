from __future__ import annotations

import pytest

from baydistance.config.overrides import apply_settings_overrides
from baydistance.config.settings import _apply_env_overrides, get_settings


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()
    assert apply_settings_overrides(settings, None) is settings


def test_apply_settings_overrides_can_override_allowed_knobs():
    settings = get_settings()
    overrides = {"estimation": {"avg_speed_mph": 45}, "ingestion": {"places": {"radius_m": 800}}}

    out = apply_settings_overrides(settings, overrides)

    assert out.estimation.avg_speed_mph == 45
    assert out.ingestion.places.radius_m == 800
    # The shared cached settings must stay unchanged.
    assert settings.estimation.avg_speed_mph == 30
    assert settings.ingestion.places.radius_m != 800


def test_apply_settings_overrides_rejects_secrets_with_clear_path():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"ingestion\.llm\.api_key"):
        apply_settings_overrides(settings, {"ingestion": {"llm": {"api_key": "stolen"}}})
    with pytest.raises(ValueError, match=r"catalog"):
        apply_settings_overrides(settings, {"catalog": {"path": "/etc/passwd"}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"settings_overrides key 'ingestion' must be a mapping"):
        apply_settings_overrides(settings, {"ingestion": 1})


def test_apply_settings_overrides_revalidates_ranges():
    settings = get_settings()
    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"estimation": {"avg_speed_mph": 0}})


def test_env_overrides_fill_api_keys(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "maps-test")
    monkeypatch.setenv("BAYDISTANCE_LOG_LEVEL", "DEBUG")

    data = _apply_env_overrides({"app": {"log_level": "INFO"}})

    assert data["app"]["log_level"] == "DEBUG"
    assert data["ingestion"]["llm"]["api_key"] == "sk-test"
    assert data["ingestion"]["places"]["api_key"] == "maps-test"


def test_packaged_defaults():
    settings = get_settings()
    assert settings.ranking.default_sort == "alphabet"
    assert settings.ranking.missing_estimates_last is False
    assert settings.ingestion.location.base_url == "https://ipinfo.io/json"
