from __future__ import annotations

from pathlib import Path

import pytest

from subtranslate.config import SubtranslateConfig


ENV_NAMES = [
    "PORT",
    "SUBTRANSLATE_TARGET_LANG",
    "SUBTRANSLATE_ENGINE",
    "SUBTRANSLATE_CHUNK_SIZE",
    "SUBTRANSLATE_REQUEST_DELAY",
    "SUBTRANSLATE_CACHE",
    "SUBTRANSLATE_CACHE_DIR",
    "SUBTRANSLATE_CACHE_MAX_AGE_HOURS",
    "SUBTRANSLATE_STRICT",
    "SUBTRANSLATE_WEB_PORT",
    "SUBTRANSLATE_HTTP_PROXY",
    "SUBTRANSLATE_HTTPS_PROXY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = SubtranslateConfig.from_env()
    assert config.target_lang == "he"
    assert config.translation_engine == "google"
    assert config.chunk_size == 2500
    assert config.request_delay == pytest.approx(0.15)
    assert config.cache_backend == "file"
    assert config.cache_dir == Path("cache")
    assert config.cache_max_age_hours == 0.0
    assert config.strict is False
    assert config.web_port == 7000
    assert config.proxies is None


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SUBTRANSLATE_TARGET_LANG", "ru")
    monkeypatch.setenv("SUBTRANSLATE_ENGINE", "None")
    monkeypatch.setenv("SUBTRANSLATE_CHUNK_SIZE", "1000")
    monkeypatch.setenv("SUBTRANSLATE_REQUEST_DELAY", "0")
    monkeypatch.setenv("SUBTRANSLATE_CACHE", "memory")
    monkeypatch.setenv("SUBTRANSLATE_CACHE_DIR", str(tmp_path))
    monkeypatch.setenv("SUBTRANSLATE_CACHE_MAX_AGE_HOURS", "24")
    monkeypatch.setenv("SUBTRANSLATE_STRICT", "yes")
    monkeypatch.setenv("SUBTRANSLATE_HTTPS_PROXY", "http://proxy:3128")

    config = SubtranslateConfig.from_env()

    assert config.target_lang == "ru"
    assert config.translation_engine == "none"
    assert config.chunk_size == 1000
    assert config.request_delay == 0.0
    assert config.cache_backend == "memory"
    assert config.cache_dir == tmp_path
    assert config.cache_max_age_hours == 24.0
    assert config.strict is True
    assert config.proxies == {"https": "http://proxy:3128"}


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("SUBTRANSLATE_CHUNK_SIZE", "lots")
    monkeypatch.setenv("SUBTRANSLATE_REQUEST_DELAY", "soon")
    config = SubtranslateConfig.from_env()
    assert config.chunk_size == 2500
    assert config.request_delay == pytest.approx(0.15)


def test_port_fallback(monkeypatch):
    monkeypatch.setenv("PORT", "10000")
    assert SubtranslateConfig.from_env().web_port == 10000
    monkeypatch.setenv("SUBTRANSLATE_WEB_PORT", "8080")
    assert SubtranslateConfig.from_env().web_port == 8080


def test_overrides_win_unless_none(monkeypatch):
    monkeypatch.setenv("SUBTRANSLATE_TARGET_LANG", "ru")
    config = SubtranslateConfig.from_env(target_lang="es", chunk_size=None, cache_dir="/tmp/x")
    assert config.target_lang == "es"
    assert config.chunk_size == 2500
    assert config.cache_dir == Path("/tmp/x")


def test_unknown_override_is_rejected():
    with pytest.raises(TypeError):
        SubtranslateConfig.from_env(colour="blue")
