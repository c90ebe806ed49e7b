"""
RetryPolicy - Relance d'un cycle complet apres un echec.

Responsabilite unique:
----------------------
Invoquer le pipeline jusqu'a `max_attempts` fois, en attendant
reellement `delay_ms` entre deux tentatives.

Chaque tentative repart du dump: un nouveau dump d'une source qui a
pu changer est le seul point de reprise sur.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from replica_sync.domain.entities.retry_state import (
    DEFAULT_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    RetryState,
)
from replica_sync.infrastructure.config.settings import SyncSettings
from replica_sync.infrastructure.logging import get_logger
from replica_sync.infrastructure.sync.pipeline import CycleResult

logger = get_logger(__name__)


@dataclass
class RetryOutcome:
    """
    Bilan d'une serie de tentatives.

    Attributes:
        success: True si une tentative a reussi.
        attempts: Nombre de tentatives effectuees.
        last_result: Resultat de la derniere tentative.
    """

    success: bool
    attempts: int
    last_result: Optional[CycleResult] = None

    @property
    def exhausted(self) -> bool:
        return not self.success


class RetryPolicy:
    """
    Boucle de retry bornee avec delai fixe.

    Le delai est une vraie suspension du thread appelant
    (time.sleep par defaut, injectable pour les tests).
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delay_ms: int = DEFAULT_DELAY_MS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        # Valide les bornes des maintenant plutot qu'au premier cycle
        RetryState(max_attempts=max_attempts, delay_ms=delay_ms)
        self.max_attempts = max_attempts
        self.delay_ms = delay_ms
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.failover_retries,
            delay_ms=settings.failover_retry_delay_ms,
        )

    def run_with_retry(
        self,
        pipeline_fn: Callable[[], CycleResult],
        on_attempt: Optional[Callable[[CycleResult], None]] = None,
    ) -> RetryOutcome:
        """
        Execute `pipeline_fn` jusqu'au succes ou a l'epuisement.

        Args:
            pipeline_fn: Un cycle complet (dump -> restore -> cleanup).
            on_attempt: Appele apres chaque tentative avec son resultat.

        Returns:
            RetryOutcome. L'epuisement est logue, jamais leve.
        """
        state = RetryState(max_attempts=self.max_attempts, delay_ms=self.delay_ms)
        result: Optional[CycleResult] = None

        while not state.exhausted:
            attempt = state.consume()
            result = pipeline_fn()
            if on_attempt:
                on_attempt(result)

            if result.success:
                if attempt > 1:
                    logger.info("retry_succeeded", attempt=attempt)
                return RetryOutcome(success=True, attempts=attempt, last_result=result)

            logger.error(
                "attempt_failed",
                attempt=attempt,
                max_attempts=state.max_attempts,
                stage=result.failed_stage.value if result.failed_stage else None,
                error=str(result.error),
            )

            if not state.exhausted:
                logger.warning(
                    "retry_scheduled",
                    delay_ms=state.delay_ms,
                    remaining=state.remaining,
                )
                self._sleep(state.delay_seconds)

        logger.error(
            "retries_exhausted",
            attempts=state.attempts_made,
            error=str(result.error) if result else None,
        )
        return RetryOutcome(success=False, attempts=state.attempts_made, last_result=result)
