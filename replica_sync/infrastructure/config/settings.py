"""
Sync Settings - Configuration de la synchronisation.

Responsabilite unique:
----------------------
Charger et valider la configuration depuis les variables d'env
(et un fichier .env optionnel). Immuable apres construction.

Variables requises:
-------------------
- DATABASE_URL_SOURCE: Base a copier
- DATABASE_URL_TARGET: Base ecrasee par la copie
- SCHEDULE_TIME: Expression cron (5 champs, ou 6 avec les secondes)

Variables optionnelles:
-----------------------
- SCHEDULE_TIMEZONE (defaut: UTC)
- RUN_ON_STARTUP: "true" pour lancer un cycle au demarrage
- FAILOVER_RETRIES (defaut: 5)
- FAILOVER_RETRY_DELAY_MS (defaut: 1000)
- PORT (defaut: 3000)
"""

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from replica_sync.domain.entities.retry_state import DEFAULT_DELAY_MS, DEFAULT_MAX_ATTEMPTS
from replica_sync.domain.exceptions import ConfigError
from replica_sync.infrastructure.scheduling.cron import build_cron_trigger

# ~500 Mo par flux
DEFAULT_MAX_OUTPUT_BYTES = 1024 * 500000


class SyncSettings(BaseSettings):
    """
    Configuration de la synchronisation.

    Chargee depuis les variables d'environnement.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Bases de donnees
    database_url_source: str = Field(min_length=1)
    database_url_target: str = Field(min_length=1)

    # Schedule (cron)
    schedule_time: str = Field(min_length=1)
    schedule_timezone: str = "UTC"
    run_on_startup: bool = False

    # Failover
    failover_retries: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    failover_retry_delay_ms: int = Field(default=DEFAULT_DELAY_MS, ge=0)

    # HTTP
    listen_host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)

    # Commandes
    artifact_dir: str = "."
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, ge=0)
    dump_command: str = "pg_dump"
    restore_command: str = "psql"
    restore_stop_on_error: bool = False

    # Logs
    log_level: str = "INFO"
    json_logs: bool = False

    @field_validator("run_on_startup", mode="before")
    @classmethod
    def _only_literal_true(cls, value: Any) -> Any:
        """Seule la chaine 'true' active le cycle de demarrage."""
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value

    @field_validator("schedule_timezone")
    @classmethod
    def _valid_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Fuseau horaire inconnu: {value}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Niveau de log inconnu: {value}")
        return level

    @model_validator(mode="after")
    def _valid_schedule(self) -> "SyncSettings":
        try:
            build_cron_trigger(self.schedule_time, self.schedule_timezone)
        except ValueError as e:
            raise ValueError(f"SCHEDULE_TIME invalide: {e}") from e
        return self

    @property
    def artifact_path(self) -> Path:
        """Retourne le repertoire des artefacts."""
        return Path(self.artifact_dir)


def load_settings(**overrides: Any) -> SyncSettings:
    """
    Construit la configuration en convertissant les erreurs en ConfigError.

    Args:
        overrides: Valeurs prioritaires sur l'environnement.

    Returns:
        SyncSettings valide.

    Raises:
        ConfigError: Si une variable est manquante ou invalide.
    """
    try:
        return SyncSettings(**overrides)
    except ValidationError as e:
        fields = []
        for error in e.errors():
            loc = error.get("loc") or ("schedule_time",)
            fields.append(str(loc[0]).upper())
        raise ConfigError("Configuration invalide", fields=fields) from e
