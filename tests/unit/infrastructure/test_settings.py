"""
Tests unitaires pour la configuration.

Teste le chargement depuis l'environnement et la validation.
"""

from pathlib import Path

import pytest

from replica_sync.domain.exceptions import ConfigError
from replica_sync.infrastructure.config.settings import (
    DEFAULT_MAX_OUTPUT_BYTES,
    SyncSettings,
    load_settings,
)

REQUIRED_ENV = {
    "DATABASE_URL_SOURCE": "postgresql://localhost/source",
    "DATABASE_URL_TARGET": "postgresql://localhost/target",
    "SCHEDULE_TIME": "*/5 * * * *",
}

OPTIONAL_ENV = (
    "SCHEDULE_TIMEZONE",
    "RUN_ON_STARTUP",
    "FAILOVER_RETRIES",
    "FAILOVER_RETRY_DELAY_MS",
    "PORT",
    "ARTIFACT_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Environnement sans variables de synchronisation."""
    for name in (*REQUIRED_ENV, *OPTIONAL_ENV):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def required_env(clean_env):
    """Environnement avec les variables obligatoires."""
    for name, value in REQUIRED_ENV.items():
        clean_env.setenv(name, value)
    return clean_env


class TestSyncSettings:
    """Tests pour SyncSettings."""

    def test_default_values(self, required_env):
        """Les variables optionnelles ont des valeurs par defaut."""
        settings = load_settings(_env_file=None)

        assert settings.schedule_timezone == "UTC"
        assert settings.run_on_startup is False
        assert settings.failover_retries == 5
        assert settings.failover_retry_delay_ms == 1000
        assert settings.port == 3000
        assert settings.listen_host == "0.0.0.0"
        assert settings.max_output_bytes == DEFAULT_MAX_OUTPUT_BYTES
        assert settings.dump_command == "pg_dump"
        assert settings.restore_command == "psql"

    def test_reads_environment(self, required_env):
        """Les variables d'environnement sont lues."""
        required_env.setenv("SCHEDULE_TIMEZONE", "America/New_York")
        required_env.setenv("FAILOVER_RETRIES", "7")
        required_env.setenv("FAILOVER_RETRY_DELAY_MS", "250")
        required_env.setenv("PORT", "8080")

        settings = load_settings(_env_file=None)

        assert settings.database_url_source == "postgresql://localhost/source"
        assert settings.schedule_time == "*/5 * * * *"
        assert settings.schedule_timezone == "America/New_York"
        assert settings.failover_retries == 7
        assert settings.failover_retry_delay_ms == 250
        assert settings.port == 8080

    def test_retry_variables_are_independent(self, required_env):
        """FAILOVER_RETRIES seul suffit a changer le nombre de tentatives."""
        required_env.setenv("FAILOVER_RETRIES", "2")

        settings = load_settings(_env_file=None)

        assert settings.failover_retries == 2
        assert settings.failover_retry_delay_ms == 1000

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("TRUE", True), (" true ", True), ("false", False), ("1", False), ("yes", False)],
    )
    def test_run_on_startup_literal_true(self, required_env, raw, expected):
        """Seule la chaine 'true' active le cycle de demarrage."""
        required_env.setenv("RUN_ON_STARTUP", raw)

        assert load_settings(_env_file=None).run_on_startup is expected

    def test_artifact_path_returns_path(self, make_settings):
        """artifact_path retourne un Path."""
        settings = make_settings(artifact_dir="/custom/path")

        assert isinstance(settings.artifact_path, Path)
        assert str(settings.artifact_path) == "/custom/path"

    def test_immutable(self, settings):
        """La configuration est figee apres chargement."""
        with pytest.raises(Exception):
            settings.port = 9999

    def test_reads_env_file(self, clean_env, tmp_path):
        """Un fichier .env est pris en compte."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "DATABASE_URL_SOURCE=postgresql://a/src\n"
            "DATABASE_URL_TARGET=postgresql://b/tgt\n"
            "SCHEDULE_TIME=0 * * * *\n",
            encoding="utf-8",
        )

        settings = SyncSettings(_env_file=str(env_file))

        assert settings.database_url_target == "postgresql://b/tgt"


class TestLoadSettingsErrors:
    """Tests pour les erreurs de configuration."""

    def test_missing_required(self, clean_env):
        """Les variables obligatoires manquantes levent ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            load_settings(_env_file=None)

        assert set(exc_info.value.fields) == {
            "DATABASE_URL_SOURCE",
            "DATABASE_URL_TARGET",
            "SCHEDULE_TIME",
        }

    def test_invalid_cron(self, required_env):
        """Une expression cron invalide leve ConfigError."""
        required_env.setenv("SCHEDULE_TIME", "every day")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(_env_file=None)

        assert "SCHEDULE_TIME" in exc_info.value.fields

    def test_invalid_timezone(self, required_env):
        """Un fuseau inconnu leve ConfigError."""
        required_env.setenv("SCHEDULE_TIMEZONE", "Mars/Olympus")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(_env_file=None)

        assert "SCHEDULE_TIMEZONE" in exc_info.value.fields

    @pytest.mark.parametrize("name,value", [("FAILOVER_RETRIES", "0"), ("FAILOVER_RETRY_DELAY_MS", "-5")])
    def test_invalid_retry_bounds(self, required_env, name, value):
        """Les bornes de retry sont validees."""
        required_env.setenv(name, value)

        with pytest.raises(ConfigError) as exc_info:
            load_settings(_env_file=None)

        assert name in exc_info.value.fields
