"""
SyncScheduler - Planificateur des synchronisations.

Responsabilite unique:
----------------------
Declencher SyncService.sync selon l'expression cron configuree,
et une fois au demarrage si RUN_ON_STARTUP=true.

Lock anti-parallele:
--------------------
Un seul cycle en vol par processus: dump, restore et cleanup
partagent le meme artefact. Un declenchement qui trouve un cycle
en cours est ignore (logue en warning), jamais mis en file.

Usage:
------
    scheduler = SyncScheduler(settings)
    scheduler.start()  # Demarre en arriere-plan
    scheduler.stop()   # Arrete le scheduler
"""

import threading
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from replica_sync.domain.entities.cycle import Cycle
from replica_sync.infrastructure.config.settings import SyncSettings
from replica_sync.infrastructure.logging import get_logger
from replica_sync.infrastructure.scheduling.cron import build_cron_trigger
from replica_sync.infrastructure.sync.service import SyncService

logger = get_logger(__name__)

SYNC_JOB_ID = "sync_database"
STARTUP_JOB_ID = "startup_sync"


class SyncScheduler:
    """
    Planificateur de synchronisations.

    Execute les cycles dans un thread d'APScheduler pour que
    l'endpoint HTTP reste disponible pendant un dump ou un restore.
    """

    def __init__(
        self,
        settings: SyncSettings,
        service: Optional[SyncService] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        """
        Initialise le scheduler.

        Args:
            settings: Configuration de la synchronisation.
            service: Service de synchronisation (defaut: construit depuis settings).
            scheduler: Scheduler APScheduler (defaut: BackgroundScheduler).
        """
        self._settings = settings
        self._service = service or SyncService(settings)
        self._scheduler = scheduler or BackgroundScheduler(
            timezone=settings.schedule_timezone,
        )
        self._cycle_lock = threading.Lock()
        self._running = False

    def start(self) -> None:
        """
        Demarre le scheduler.

        Le cycle de demarrage est soumis comme job ponctuel: il ne
        retarde ni l'ouverture du port HTTP ni le premier declenchement cron.
        """
        if self._running:
            logger.warning("scheduler_already_running")
            return

        self._scheduler.add_job(
            self._run_sync,
            trigger=build_cron_trigger(
                self._settings.schedule_time,
                self._settings.schedule_timezone,
            ),
            kwargs={"trigger": "schedule"},
            id=SYNC_JOB_ID,
            name="Synchronisation planifiee",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

        if self._settings.run_on_startup:
            self._scheduler.add_job(
                self._run_sync,
                kwargs={"trigger": "startup"},
                id=STARTUP_JOB_ID,
                name="Synchronisation au demarrage",
                misfire_grace_time=None,
                replace_existing=True,
            )

        self._scheduler.start()
        self._running = True

        logger.info(
            "scheduler_started",
            schedule=self._settings.schedule_time,
            timezone=self._settings.schedule_timezone,
            run_on_startup=self._settings.run_on_startup,
            next_run=str(self.next_run),
        )

    def stop(self, wait: bool = True) -> None:
        """Arrete le scheduler (attend le cycle en cours par defaut)."""
        if not self._running:
            return

        self._scheduler.shutdown(wait=wait)
        self._running = False

        logger.info("scheduler_stopped")

    def run_now(self, trigger: str = "manual") -> Optional[Cycle]:
        """
        Execute un cycle immediatement dans le thread appelant.

        Returns:
            Le Cycle termine, ou None si un cycle etait deja en cours.
        """
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("sync_skipped_overlap", trigger=trigger)
            return None

        try:
            return self._service.sync(trigger=trigger)
        finally:
            self._cycle_lock.release()

    def _run_sync(self, trigger: str) -> None:
        """Execute le cycle planifie."""
        try:
            self.run_now(trigger=trigger)
        except Exception:
            # Un bug dans un cycle ne doit pas tuer les declenchements suivants
            logger.exception("sync_crashed", trigger=trigger)

    @property
    def is_running(self) -> bool:
        """Retourne True si le scheduler est actif."""
        return self._running

    @property
    def is_syncing(self) -> bool:
        """Retourne True si un cycle est en cours."""
        return self._cycle_lock.locked()

    @property
    def next_run(self) -> Optional[datetime]:
        """Retourne la prochaine execution planifiee."""
        if not self._running:
            return None

        job = self._scheduler.get_job(SYNC_JOB_ID)
        if job:
            return job.next_run_time
        return None
