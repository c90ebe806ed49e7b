"""
SubprocessRunner - Execution de commandes via subprocess.

Responsabilite unique:
----------------------
Lancer une commande, attendre sa fin et capturer stdout/stderr
sans jamais depasser un plafond memoire.

Capture bornee:
---------------
Chaque flux est lu par un thread dedie. Au-dela du plafond, les octets
sont lus puis jetes: le processus enfant ne bloque jamais sur un pipe
plein et la sortie capturee est marquee comme tronquee.

Usage:
------
    runner = SubprocessRunner()
    output = runner.run("pg_dump", ["--dbname=..."], max_output_bytes=1024)
"""

import os
import subprocess
import threading
from typing import IO, Mapping, Optional, Sequence

from replica_sync.application.ports.process_runner import ProcessOutput, ProcessRunner
from replica_sync.domain.exceptions import ExecError
from replica_sync.infrastructure.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 8192


class _BoundedReader(threading.Thread):
    """Draine un flux en ne conservant que les premiers `limit` octets."""

    def __init__(self, stream: IO[bytes], limit: int):
        super().__init__(daemon=True)
        self._stream = stream
        self._limit = limit
        self._chunks: list[bytes] = []
        self._kept = 0
        self.truncated = False

    def run(self) -> None:
        with self._stream:
            while True:
                chunk = self._stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                room = self._limit - self._kept
                if room <= 0:
                    self.truncated = True
                    continue
                if len(chunk) > room:
                    chunk = chunk[:room]
                    self.truncated = True
                self._chunks.append(chunk)
                self._kept += len(chunk)

    def text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")


class SubprocessRunner(ProcessRunner):
    """
    Implementation de ProcessRunner basee sur subprocess.Popen.

    Pas de timeout ni d'annulation: une commande lancee va jusqu'a
    sa fin naturelle.
    """

    def __init__(
        self,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialise le runner.

        Args:
            cwd: Repertoire de travail des commandes (defaut: courant).
            env: Variables ajoutees a l'environnement du processus.
        """
        self._cwd = cwd
        self._env = dict(env) if env else None

    def run(
        self,
        command: str,
        args: Sequence[str],
        max_output_bytes: int,
    ) -> ProcessOutput:
        if max_output_bytes < 0:
            raise ValueError("max_output_bytes doit etre >= 0")

        env = None
        if self._env:
            env = os.environ.copy()
            env.update(self._env)

        logger.debug("process_spawning", command=command, arg_count=len(args))

        try:
            process = subprocess.Popen(
                [command, *args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self._cwd,
                env=env,
            )
        except OSError as e:
            logger.error("process_spawn_failed", command=command, error=str(e))
            raise ExecError(command, None, str(e)) from e

        stdout_reader = _BoundedReader(process.stdout, max_output_bytes)
        stderr_reader = _BoundedReader(process.stderr, max_output_bytes)
        stdout_reader.start()
        stderr_reader.start()

        exit_code = process.wait()
        stdout_reader.join()
        stderr_reader.join()

        truncated = stdout_reader.truncated or stderr_reader.truncated
        if truncated:
            logger.warning(
                "process_output_truncated",
                command=command,
                max_output_bytes=max_output_bytes,
            )

        stderr = stderr_reader.text()
        if exit_code != 0:
            raise ExecError(command, exit_code, stderr)

        return ProcessOutput(
            exit_code=exit_code,
            stdout=stdout_reader.text(),
            stderr=stderr,
            truncated=truncated,
        )
