from __future__ import annotations

import importlib
import os

import dbdesign.config as config


def test_settings_reads_api_base_url(monkeypatch):
    original_env = os.environ.get("API_BASE_URL")
    monkeypatch.setenv("API_BASE_URL", "https://designs.example.com")
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "5")

    reloaded = importlib.reload(config)

    try:
        assert reloaded.settings.api_base_url == "https://designs.example.com"
        assert reloaded.settings.api_timeout_seconds == 5.0
    finally:
        if original_env is None:
            os.environ.pop("API_BASE_URL", None)
        else:
            os.environ["API_BASE_URL"] = original_env
        monkeypatch.delenv("API_TIMEOUT_SECONDS", raising=False)
        importlib.reload(config)


def test_settings_ignores_unparseable_timeout(monkeypatch):
    monkeypatch.setenv("API_TIMEOUT_SECONDS", "soon")
    assert config.Settings().api_timeout_seconds == 30.0
