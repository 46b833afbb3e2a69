import pytest
from pydantic import ValidationError

from student_registry.core.config import Settings

ENV_VARS = (
    "DATABASE_URL", "PGHOST", "PGPORT", "PGUSER", "PGPASSWORD", "PGDATABASE", "PGSSL", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _settings():
    return Settings(_env_file=None)


def test_defaults_build_local_url():
    url = _settings().get_database_url()

    assert url.drivername == "postgresql+psycopg2"
    assert url.host == "localhost"
    assert url.port == 5432
    assert url.username == "postgres"
    assert url.password is None
    assert url.database == "postgres"


def test_components_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("PGHOST", "db.internal")
    monkeypatch.setenv("PGPORT", "6543")
    monkeypatch.setenv("PGUSER", "registrar")
    monkeypatch.setenv("PGPASSWORD", "p@ss:word")
    monkeypatch.setenv("PGDATABASE", "school")

    url = _settings().get_database_url()

    assert url.host == "db.internal"
    assert url.port == 6543
    assert url.username == "registrar"
    assert url.password == "p@ss:word"
    assert url.database == "school"


def test_database_url_wins_over_components(monkeypatch):
    monkeypatch.setenv("PGHOST", "ignored")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@cloud.example.com:5433/prod")

    url = _settings().get_database_url()

    assert url.host == "cloud.example.com"
    assert url.database == "prod"


def test_legacy_postgres_scheme_is_normalized(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@cloud.example.com/prod")

    assert _settings().get_database_url().drivername == "postgresql"


def test_empty_database_url_is_ignored(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "  ")

    assert _settings().DATABASE_URL is None


def test_ssl_flag_requires_tls(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@cloud.example.com/prod")
    monkeypatch.setenv("PGSSL", "true")

    assert _settings().get_connect_args() == {"connect_timeout": 10, "sslmode": "require"}


def test_ssl_is_off_by_default():
    assert _settings().get_connect_args() == {"connect_timeout": 10}


def test_sqlite_gets_no_libpq_options(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///students.db")
    monkeypatch.setenv("PGSSL", "true")

    assert _settings().get_connect_args() == {}


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")

    assert _settings().LOG_LEVEL == "DEBUG"


def test_unknown_log_level_is_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        _settings()
