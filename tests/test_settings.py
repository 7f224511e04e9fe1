from __future__ import annotations

import pytest
from pydantic import ValidationError

from asciitorus.settings import Settings, get_settings


def test_defaults_match_reference_behaviour():
    settings = Settings()
    assert settings.render.label == "stvn.wang"
    assert settings.render.ramp == "NNN@O$0A869#452I3=7+1/:-.` "
    assert settings.render.background == 242.0
    assert settings.render.max_frame_delta_ms == 34.0
    assert settings.explosion.duration_ms == 1450.0
    assert settings.explosion.max_particles == 2200


def test_nested_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("ASCIITORUS_RENDER__LABEL", "hello")
    monkeypatch.setenv("ASCIITORUS_EXPLOSION__DURATION_MS", "900")
    monkeypatch.setenv("ASCIITORUS_DEBUG", "true")

    settings = Settings()

    assert settings.render.label == "hello"
    assert settings.explosion.duration_ms == 900.0
    assert settings.debug is True


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("ASCIITORUS_EXPLOSION__DURATION_MS", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
