"""Tests for configuration helpers."""

from erp_contacts.config import Settings, normalize_origin, normalize_prefix


def test_settings_defaults_match_local_deployment(monkeypatch) -> None:
    monkeypatch.delenv("BACKEND_ORIGIN", raising=False)
    monkeypatch.delenv("FRONTEND_ORIGIN", raising=False)

    settings = Settings(_env_file=None)

    assert settings.backend_origin == "http://localhost:8069"
    assert settings.backend_auth_path == "/web/session/authenticate"
    assert settings.frontend_origin == "http://localhost:5173"
    assert settings.record_resource == "contacts"


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("BACKEND_ORIGIN", "http://erp.internal:8069")
    monkeypatch.setenv("RECORD_RESOURCE", "partners")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.backend_origin == "http://erp.internal:8069"
    assert settings.record_resource == "partners"
    assert settings.log_level == "debug"


def test_normalize_prefix_variants() -> None:
    assert normalize_prefix(None) == ""
    assert normalize_prefix("") == ""
    assert normalize_prefix("/") == ""
    assert normalize_prefix("api") == "/api"
    assert normalize_prefix("/api/") == "/api"


def test_normalize_origin_strips_trailing_slash() -> None:
    assert normalize_origin("http://localhost:8069/") == "http://localhost:8069"
