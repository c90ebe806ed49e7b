"""
RetryState - Compteur de tentatives d'un cycle.

Reinitialise a chaque cycle, jamais persiste.
"""

from dataclasses import dataclass

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_DELAY_MS = 1000


@dataclass
class RetryState:
    """
    Etat des tentatives pour un cycle.

    Attributes:
        max_attempts: Nombre maximum de tentatives (>= 1).
        delay_ms: Delai entre deux tentatives en millisecondes.
        attempts_made: Tentatives deja effectuees.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay_ms: int = DEFAULT_DELAY_MS
    attempts_made: int = 0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts doit etre >= 1 (recu {self.max_attempts})")
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms doit etre >= 0 (recu {self.delay_ms})")

    def consume(self) -> int:
        """
        Consomme une tentative.

        Returns:
            Numero de la tentative (1-indexe).
        """
        if self.exhausted:
            raise RuntimeError("Plus aucune tentative disponible")
        self.attempts_made += 1
        return self.attempts_made

    @property
    def remaining(self) -> int:
        return self.max_attempts - self.attempts_made

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000
