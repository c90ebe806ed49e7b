"""
Value Object pour l'identifiant de l'artefact de dump.

Un artefact est nomme d'apres l'instant de demarrage du cycle
(ISO-8601 UTC, precision microseconde). Les ':' sont remplaces par
des '-' pour rester un nom de fichier valide partout.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from replica_sync.domain.exceptions import InvalidArtifactIdError

ARTIFACT_SUFFIX = ".sql"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S.%fZ"


@dataclass(frozen=True, slots=True)
class ArtifactId:
    """
    Identifiant d'un artefact de dump.

    Attributes:
        value: Nom de fichier (sans repertoire), suffixe '.sql'.

    Example:
        >>> artifact = ArtifactId("2024-01-15T03-00-00.000000Z.sql")
        >>> artifact.path_in("/tmp")
        PosixPath('/tmp/2024-01-15T03-00-00.000000Z.sql')
    """

    value: str

    def __post_init__(self) -> None:
        """Valide l'identifiant apres initialisation."""
        self._validate(self.value)

    @staticmethod
    def _validate(value: Any) -> None:
        """
        Valide que la valeur est un nom de fichier de dump.

        Raises:
            InvalidArtifactIdError: Si la valeur n'est pas valide.
        """
        if not isinstance(value, str) or not value.endswith(ARTIFACT_SUFFIX):
            raise InvalidArtifactIdError(value)

        if value == ARTIFACT_SUFFIX or "/" in value or "\\" in value:
            raise InvalidArtifactIdError(value)

        if value.startswith("."):
            raise InvalidArtifactIdError(value)

    def path_in(self, directory: str | Path) -> Path:
        """Retourne le chemin de l'artefact dans le repertoire donne."""
        return Path(directory) / self.value

    def __str__(self) -> str:
        return self.value


class ArtifactNamer:
    """
    Generateur d'identifiants d'artefacts.

    Deux appels dans le meme tick d'horloge recoivent un compteur
    ('-1', '-2', ...) pour garantir l'unicite dans le processus.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        """
        Initialise le generateur.

        Args:
            clock: Source de temps (defaut: datetime.now en UTC).
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._last_stamp: Optional[str] = None
        self._counter = 0

    def new_artifact_id(self) -> ArtifactId:
        """
        Genere un nouvel identifiant.

        Returns:
            ArtifactId derive de l'heure courante.
        """
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        stamp = now.strftime(TIMESTAMP_FORMAT)

        with self._lock:
            if stamp == self._last_stamp:
                self._counter += 1
                stamp = f"{stamp}-{self._counter}"
            else:
                self._last_stamp = stamp
                self._counter = 0

        return ArtifactId(f"{stamp}{ARTIFACT_SUFFIX}")


_default_namer = ArtifactNamer()


def new_artifact_id() -> ArtifactId:
    """Genere un identifiant avec le generateur par defaut du processus."""
    return _default_namer.new_artifact_id()
