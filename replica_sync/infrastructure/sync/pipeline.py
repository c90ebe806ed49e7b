"""
SyncPipeline - Dump, restore puis suppression de l'artefact.

Responsabilite unique:
----------------------
Executer un cycle complet de copie source -> cible.

Machine a etats:
----------------
    IDLE -> DUMPING -> RESTORING -> CLEANING -> DONE
                 \\           \\
                  -> FAILED    -> FAILED

Une etape ne demarre que si la precedente a reussi. Un echec de
suppression de l'artefact n'annule pas le cycle (les donnees sont deja
copiees): il est remonte a part, en warning.

Usage:
------
    pipeline = SyncPipeline(SubprocessRunner(), artifact_dir=".")
    result = pipeline.run_cycle(source_url, target_url)
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from replica_sync.application.ports.process_runner import ProcessRunner
from replica_sync.domain.entities.cycle import PipelineState, Stage
from replica_sync.domain.exceptions import ExecError, FilesystemError, PipelineError
from replica_sync.domain.value_objects.artifact_id import ArtifactId, ArtifactNamer
from replica_sync.infrastructure.config.settings import DEFAULT_MAX_OUTPUT_BYTES, SyncSettings
from replica_sync.infrastructure.logging import get_logger
from replica_sync.infrastructure.postgres.commands import (
    build_dump_args,
    build_restore_args,
    redact_url,
)

logger = get_logger(__name__)


@dataclass
class CycleResult:
    """
    Resultat d'une tentative de cycle.

    Attributes:
        success: True si dump et restore ont reussi.
        artifact_id: Artefact utilise par la tentative.
        state: Etat final de la machine a etats.
        error: Erreur de l'etape en echec (dump ou restore).
        cleanup_error: Erreur de suppression de l'artefact (warning seulement).
        duration_seconds: Duree de la tentative.
    """

    success: bool
    artifact_id: Optional[ArtifactId] = None
    state: PipelineState = PipelineState.IDLE
    error: Optional[PipelineError] = None
    cleanup_error: Optional[FilesystemError] = None
    duration_seconds: float = 0.0

    @property
    def failed_stage(self) -> Optional[Stage]:
        """Etape en echec, None si succes."""
        return self.error.stage if self.error else None

    @property
    def artifact_orphaned(self) -> bool:
        """True si l'artefact est reste sur disque apres un succes."""
        return self.success and self.cleanup_error is not None


class SyncPipeline:
    """
    Pipeline de synchronisation en trois etapes.

    Les etapes sont strictement sequentielles: chaque commande externe
    bloque le thread appelant jusqu'a sa fin.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        artifact_dir: str | Path = ".",
        namer: Optional[ArtifactNamer] = None,
        dump_command: str = "pg_dump",
        restore_command: str = "psql",
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
        restore_stop_on_error: bool = False,
    ):
        """
        Initialise le pipeline.

        Args:
            runner: Executeur de commandes externes.
            artifact_dir: Repertoire ou ecrire l'artefact.
            namer: Generateur d'identifiants d'artefacts.
            dump_command: Executable de dump.
            restore_command: Executable de restauration.
            max_output_bytes: Plafond de capture par flux.
            restore_stop_on_error: Arreter psql a la premiere erreur SQL.
        """
        self._runner = runner
        self._artifact_dir = Path(artifact_dir)
        self._namer = namer or ArtifactNamer()
        self._dump_command = dump_command
        self._restore_command = restore_command
        self._max_output_bytes = max_output_bytes
        self._restore_stop_on_error = restore_stop_on_error
        self._state = PipelineState.IDLE

    @classmethod
    def from_settings(
        cls,
        settings: SyncSettings,
        runner: ProcessRunner,
        namer: Optional[ArtifactNamer] = None,
    ) -> "SyncPipeline":
        """Construit un pipeline depuis la configuration."""
        return cls(
            runner,
            artifact_dir=settings.artifact_path,
            namer=namer,
            dump_command=settings.dump_command,
            restore_command=settings.restore_command,
            max_output_bytes=settings.max_output_bytes,
            restore_stop_on_error=settings.restore_stop_on_error,
        )

    @property
    def state(self) -> PipelineState:
        """Etat courant (ou final) de la machine a etats."""
        return self._state

    def run_cycle(self, source_url: str, target_url: str) -> CycleResult:
        """
        Execute dump -> restore -> cleanup.

        Args:
            source_url: Chaine de connexion source.
            target_url: Chaine de connexion cible.

        Returns:
            CycleResult; les echecs sont retournes, jamais leves.
        """
        start_time = time.monotonic()
        self._state = PipelineState.IDLE

        artifact_id = self._namer.new_artifact_id()
        artifact_path = artifact_id.path_in(self._artifact_dir)

        # Dump
        self._transition(PipelineState.DUMPING, artifact_id)
        logger.info(
            "dump_started",
            source=redact_url(source_url),
            artifact=str(artifact_path),
        )
        try:
            self._runner.run(
                self._dump_command,
                build_dump_args(source_url, artifact_path),
                self._max_output_bytes,
            )
        except ExecError as e:
            logger.error("dump_failed", artifact=str(artifact_path), error=str(e))
            self._discard_partial(artifact_path)
            return self._failed(Stage.DUMP, e, artifact_id, start_time)
        logger.info("dump_completed", artifact=str(artifact_path))

        # Restore
        self._transition(PipelineState.RESTORING, artifact_id)
        logger.info(
            "restore_started",
            target=redact_url(target_url),
            artifact=str(artifact_path),
        )
        try:
            self._runner.run(
                self._restore_command,
                build_restore_args(
                    target_url,
                    artifact_path,
                    stop_on_error=self._restore_stop_on_error,
                ),
                self._max_output_bytes,
            )
        except ExecError as e:
            logger.error("restore_failed", target=redact_url(target_url), error=str(e))
            self._discard_partial(artifact_path)
            return self._failed(Stage.RESTORE, e, artifact_id, start_time)
        logger.info("restore_completed", target=redact_url(target_url))

        # Cleanup
        self._transition(PipelineState.CLEANING, artifact_id)
        cleanup_error = self._remove_artifact(artifact_path)

        self._transition(PipelineState.DONE, artifact_id)
        return CycleResult(
            success=True,
            artifact_id=artifact_id,
            state=PipelineState.DONE,
            cleanup_error=cleanup_error,
            duration_seconds=time.monotonic() - start_time,
        )

    def _remove_artifact(self, artifact_path: Path) -> Optional[FilesystemError]:
        """Supprime l'artefact; un echec est remonte sans interrompre le cycle."""
        logger.info("cleanup_started", artifact=str(artifact_path))
        try:
            artifact_path.unlink()
        except OSError as e:
            error = FilesystemError(str(artifact_path), e.strerror or str(e))
            logger.warning("cleanup_failed", artifact=str(artifact_path), error=str(error))
            return error

        logger.info("cleanup_completed", artifact=str(artifact_path))
        return None

    def _discard_partial(self, artifact_path: Path) -> None:
        """Retire l'artefact d'une tentative en echec (au plus un sur disque)."""
        try:
            artifact_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(
                "artifact_discard_failed",
                artifact=str(artifact_path),
                error=e.strerror or str(e),
            )

    def _failed(
        self,
        stage: Stage,
        cause: ExecError,
        artifact_id: ArtifactId,
        start_time: float,
    ) -> CycleResult:
        self._transition(PipelineState.FAILED, artifact_id, stage=stage.value)
        return CycleResult(
            success=False,
            artifact_id=artifact_id,
            state=PipelineState.FAILED,
            error=PipelineError(stage, cause),
            duration_seconds=time.monotonic() - start_time,
        )

    def _transition(self, state: PipelineState, artifact_id: ArtifactId, **context) -> None:
        logger.debug(
            "pipeline_transition",
            from_state=self._state.value,
            to_state=state.value,
            artifact=str(artifact_id),
            **context,
        )
        self._state = state
