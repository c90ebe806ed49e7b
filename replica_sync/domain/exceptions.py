"""
Exceptions metier du domaine.

Taxonomie:
----------
- ExecError: commande externe en echec (code retour non nul ou spawn impossible)
- FilesystemError: suppression de l'artefact impossible
- PipelineError: enveloppe les deux precedentes avec l'etape en echec
- ConfigError: configuration manquante ou invalide (fatale au demarrage)
"""

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from replica_sync.domain.entities.cycle import Stage


class DomainException(Exception):
    """Exception de base pour toutes les erreurs du domaine."""

    def __init__(self, message: str, code: str | None = None) -> None:
        """
        Initialise une exception du domaine.

        Args:
            message: Message d'erreur descriptif.
            code: Code d'erreur optionnel pour identification programmatique.
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ExecError(DomainException):
    """Leve quand une commande externe echoue ou ne peut pas etre lancee."""

    def __init__(
        self,
        command: str,
        exit_code: Optional[int],
        stderr: str = "",
    ) -> None:
        if exit_code is None:
            message = f"Impossible de lancer '{command}'"
        else:
            message = f"'{command}' a termine avec le code {exit_code}"
        if stderr:
            message += f": {stderr.strip()}"
        super().__init__(message, code="EXEC_ERROR")
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr

    @property
    def spawn_failed(self) -> bool:
        """True si le processus n'a jamais demarre."""
        return self.exit_code is None


class FilesystemError(DomainException):
    """Leve quand une operation sur l'artefact echoue."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            f"Operation impossible sur '{path}': {reason}",
            code="FILESYSTEM_ERROR"
        )
        self.path = path
        self.reason = reason


class PipelineError(DomainException):
    """Leve quand une etape du pipeline echoue."""

    def __init__(self, stage: "Stage", cause: DomainException) -> None:
        super().__init__(
            f"Etape '{stage.value}' en echec: {cause.message}",
            code="PIPELINE_ERROR"
        )
        self.stage = stage
        self.cause = cause


class ConfigError(DomainException):
    """Leve quand la configuration est absente ou invalide."""

    def __init__(self, message: str, fields: Sequence[str] = ()) -> None:
        if fields:
            message = f"{message} ({', '.join(fields)})"
        super().__init__(message, code="CONFIG_ERROR")
        self.fields = tuple(fields)


class InvalidArtifactIdError(DomainException):
    """Leve quand un identifiant d'artefact est invalide."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Identifiant d'artefact invalide: '{value}'. "
            "Attendu: nom de fichier simple se terminant par '.sql'.",
            code="INVALID_ARTIFACT_ID"
        )
        self.invalid_value = value
