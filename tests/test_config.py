"""
Tests for environment configuration and startup settings.
"""

from __future__ import annotations

import pytest

from land_registry.domains.errors import ConfigurationError
from land_registry.utils import config

ENV_KEYS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "DOCUMENT_STORAGE",
    "SUPABASE_DOCUMENT_BUCKET",
    "REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep a developer's .env out of the tests
    monkeypatch.setattr(config, "load_config", lambda: None)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_get_required_missing_raises() -> None:
    with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
        config.get_required("SUPABASE_URL")


def test_get_required_blank_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "   ")
    with pytest.raises(ConfigurationError):
        config.get_required("SUPABASE_URL")


def test_get_optional_int_invalid_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REQUEST_TIMEOUT", "soon")
    assert config.request_timeout() == 30
    monkeypatch.setenv("REQUEST_TIMEOUT", "12")
    assert config.request_timeout() == 12


def test_supabase_url_strips_trailing_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co/")
    assert config.supabase_url() == "https://abc.supabase.co"


def test_load_settings_names_every_missing_variable() -> None:
    with pytest.raises(ConfigurationError) as exc:
        config.load_settings()
    message = str(exc.value)
    for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_SECRET"):
        assert key in message


def test_load_settings_cloudinary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "demo")
    monkeypatch.setenv("CLOUDINARY_API_KEY", "key")
    monkeypatch.setenv("CLOUDINARY_API_SECRET", "secret")

    s = config.load_settings()

    assert s.supabase_url == "https://abc.supabase.co"
    assert s.document_storage == "cloudinary"
    assert s.document_bucket == "land-documents"
    assert (s.cloudinary_cloud_name, s.cloudinary_api_key, s.cloudinary_api_secret) == ("demo", "key", "secret")
    assert s.request_timeout == 30


def test_load_settings_supabase_storage_skips_cloudinary(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_URL", "https://abc.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    monkeypatch.setenv("DOCUMENT_STORAGE", "Supabase")
    monkeypatch.setenv("SUPABASE_DOCUMENT_BUCKET", "deeds")

    s = config.load_settings()

    assert s.document_storage == "supabase"
    assert s.document_bucket == "deeds"
    assert s.cloudinary_api_secret is None


def test_load_settings_rejects_unknown_storage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCUMENT_STORAGE", "s3")
    with pytest.raises(ConfigurationError, match="DOCUMENT_STORAGE"):
        config.load_settings()


def test_get_optional_blank_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_DOCUMENT_BUCKET", "  ")
    assert config.get_optional("SUPABASE_DOCUMENT_BUCKET", "land-documents") == "land-documents"
    assert config.document_bucket() == "land-documents"


def test_get_required_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPABASE_ANON_KEY", " anon ")
    assert config.get_required("SUPABASE_ANON_KEY") == "anon"
    with pytest.raises(ConfigurationError, match="CLOUDINARY_API_KEY"):
        config.get_required("CLOUDINARY_API_KEY")
