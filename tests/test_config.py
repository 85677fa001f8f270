import pytest

from core.config import ConfigError, Settings, load_settings

BASE = {"STORE_URL": "postgresql://postgres@db.example.supabase.co:5432/postgres", "STORE_KEY": "k"}


def test_defaults():
    settings = load_settings(environ=BASE, secrets={})
    assert settings.timezone == "UTC"
    assert settings.session_days == 7
    assert settings.log_level == "INFO"
    assert not settings.is_sqlite


def test_missing_required_settings():
    with pytest.raises(ConfigError, match="STORE_URL, STORE_KEY"):
        load_settings(environ={}, secrets={})
    with pytest.raises(ConfigError, match="STORE_KEY"):
        load_settings(environ={"STORE_URL": "x", "STORE_KEY": "  "}, secrets={})


def test_secrets_take_precedence():
    settings = load_settings(
        environ=dict(BASE, APP_TIMEZONE="UTC"),
        secrets={"APP_TIMEZONE": "America/Chicago", "STORE_KEY": "from-secrets"},
    )
    assert settings.timezone == "America/Chicago"
    assert settings.store_key == "from-secrets"


def test_optional_values():
    settings = load_settings(environ=dict(BASE, SESSION_DAYS="14", LOG_LEVEL="debug"), secrets={})
    assert settings.session_days == 14
    assert settings.log_level == "DEBUG"


def test_bad_session_days():
    with pytest.raises(ConfigError, match="SESSION_DAYS"):
        load_settings(environ=dict(BASE, SESSION_DAYS="a week"), secrets={})


def test_sqlite_urls():
    assert Settings("sqlite:///data/admin.db", "").sqlite_path == "data/admin.db"
    assert Settings("sqlite:////var/lib/admin.db", "").sqlite_path == "/var/lib/admin.db"
    assert Settings("sqlite:data/admin.db", "").sqlite_path == "data/admin.db"
    assert Settings("sqlite::memory:", "").sqlite_path == ":memory:"
    assert Settings("sqlite::memory:", "").is_sqlite
