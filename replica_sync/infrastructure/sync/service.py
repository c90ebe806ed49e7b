"""
SyncService - Un declenchement de synchronisation.

Responsabilite unique:
----------------------
Creer le Cycle, le faire executer par la politique de retry et
journaliser son issue.

Usage:
------
    service = SyncService(settings)
    cycle = service.sync(trigger="manual")
"""

from typing import Optional

from replica_sync.application.ports.process_runner import ProcessRunner
from replica_sync.domain.entities.cycle import Cycle
from replica_sync.infrastructure.config.settings import SyncSettings
from replica_sync.infrastructure.logging import get_logger
from replica_sync.infrastructure.postgres.commands import redact_url
from replica_sync.infrastructure.process.subprocess_runner import SubprocessRunner
from replica_sync.infrastructure.sync.pipeline import CycleResult, SyncPipeline
from replica_sync.infrastructure.sync.retry import RetryPolicy

logger = get_logger(__name__)


class SyncService:
    """
    Service de synchronisation source -> cible.

    Un appel a `sync` = un Cycle = au plus `failover_retries` tentatives.
    """

    def __init__(
        self,
        settings: SyncSettings,
        pipeline: Optional[SyncPipeline] = None,
        retry_policy: Optional[RetryPolicy] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """
        Initialise le service.

        Args:
            settings: Configuration de la synchronisation.
            pipeline: Pipeline a utiliser (defaut: construit depuis settings).
            retry_policy: Politique de retry (defaut: construite depuis settings).
            runner: Executeur de commandes si le pipeline est construit ici.
        """
        self._settings = settings
        self._pipeline = pipeline or SyncPipeline.from_settings(
            settings,
            runner or SubprocessRunner(),
        )
        self._retry_policy = retry_policy or RetryPolicy.from_settings(settings)

    def sync(self, trigger: str = "schedule") -> Cycle:
        """
        Execute un cycle complet avec retries.

        Args:
            trigger: Origine du declenchement (schedule, startup, manual).

        Returns:
            Cycle termine (succes ou echec).
        """
        settings = self._settings
        cycle = Cycle(
            source_url=settings.database_url_source,
            target_url=settings.database_url_target,
            trigger=trigger,
        )

        logger.info(
            "cycle_started",
            cycle_id=str(cycle.id),
            trigger=trigger,
            source=redact_url(cycle.source_url),
            target=redact_url(cycle.target_url),
        )

        def record(result: CycleResult) -> None:
            cycle.record_attempt(result.artifact_id)

        outcome = self._retry_policy.run_with_retry(
            lambda: self._pipeline.run_cycle(cycle.source_url, cycle.target_url),
            on_attempt=record,
        )

        last = outcome.last_result
        if outcome.success:
            cleanup_warning = str(last.cleanup_error) if last and last.cleanup_error else None
            cycle.succeed(cleanup_warning=cleanup_warning)
            log = logger.warning if cleanup_warning else logger.info
            log(
                "cycle_completed",
                cycle_id=str(cycle.id),
                attempts=cycle.attempts,
                duration_seconds=cycle.duration_seconds,
                cleanup_warning=cleanup_warning,
            )
        else:
            cycle.fail(str(last.error) if last and last.error else "unknown error")
            logger.error(
                "cycle_failed",
                cycle_id=str(cycle.id),
                attempts=cycle.attempts,
                error=cycle.error,
            )

        return cycle
