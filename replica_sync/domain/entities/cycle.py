"""
Cycle Entity - Une execution du pipeline de synchronisation.

Responsabilite unique:
----------------------
Representer un declenchement (planifie ou au demarrage) et ses tentatives.

Cycle de vie:
-------------
Cree au declenchement, possede par l'invocation de retry qui l'a cree,
abandonne en fin de cycle quel que soit le resultat.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from replica_sync.domain.value_objects.artifact_id import ArtifactId


class Stage(Enum):
    """Etapes d'un cycle."""

    DUMP = "dump"
    RESTORE = "restore"
    CLEANUP = "cleanup"


class PipelineState(Enum):
    """Etats de la machine a etats du pipeline."""

    IDLE = "idle"
    DUMPING = "dumping"
    RESTORING = "restoring"
    CLEANING = "cleaning"
    DONE = "done"
    FAILED = "failed"


class CycleOutcome(Enum):
    """Resultat global d'un cycle."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Cycle:
    """
    Entite Cycle.

    Attributes:
        source_url: Chaine de connexion source.
        target_url: Chaine de connexion cible.
        trigger: Origine du declenchement ("schedule", "startup", "manual").
        id: Identifiant unique du cycle.
        outcome: Resultat courant.
        attempts: Nombre de tentatives effectuees.
        artifact_id: Artefact de la derniere tentative.
        error: Message de la derniere erreur.
        cleanup_warning: Message si la suppression de l'artefact a echoue.
        started_at: Date de creation.
        completed_at: Date de fin.
    """

    source_url: str
    target_url: str
    trigger: str = "schedule"
    id: UUID = field(default_factory=uuid4)
    outcome: CycleOutcome = CycleOutcome.PENDING
    attempts: int = 0
    artifact_id: Optional[ArtifactId] = None
    error: Optional[str] = None
    cleanup_warning: Optional[str] = None
    started_at: datetime = field(default_factory=_utcnow)
    completed_at: Optional[datetime] = None

    def record_attempt(self, artifact_id: Optional[ArtifactId]) -> None:
        """Enregistre une tentative et l'artefact qu'elle a utilise."""
        self.attempts += 1
        self.artifact_id = artifact_id

    def succeed(self, cleanup_warning: Optional[str] = None) -> None:
        """Termine le cycle avec succes."""
        self.outcome = CycleOutcome.SUCCESS
        self.error = None
        self.cleanup_warning = cleanup_warning
        self.completed_at = _utcnow()

    def fail(self, error: str) -> None:
        """Termine le cycle en echec (retries epuises)."""
        self.outcome = CycleOutcome.FAILED
        self.error = error
        self.completed_at = _utcnow()

    @property
    def is_finished(self) -> bool:
        return self.outcome is not CycleOutcome.PENDING

    @property
    def duration_seconds(self) -> Optional[float]:
        """Duree totale en secondes."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None
