"""
Point d'entree du processus de synchronisation.

Usage:
------
    python -m replica_sync
    # ou, une fois installe:
    replica-sync

Comportement:
-------------
1. Charge la configuration (ConfigError -> code retour 2)
2. Configure les logs
3. Ouvre le port HTTP (echec -> code retour 1)
4. Demarre le scheduler (+ cycle au demarrage si RUN_ON_STARTUP=true)
5. Sert l'endpoint de liveness jusqu'a l'arret du processus

Les echecs de synchronisation ne terminent jamais le processus.
"""

import socket
import sys
from typing import Optional

import uvicorn

from replica_sync import __version__
from replica_sync.domain.exceptions import ConfigError
from replica_sync.infrastructure.config.settings import SyncSettings, load_settings
from replica_sync.infrastructure.logging import configure_logging, get_logger
from replica_sync.infrastructure.sync.scheduler import SyncScheduler
from replica_sync.presentation.api.main import create_app

logger = get_logger("replica_sync")

EXIT_BIND_FAILED = 1
EXIT_CONFIG_INVALID = 2


def bind_socket(host: str, port: int) -> socket.socket:
    """
    Ouvre le socket d'ecoute avant de demarrer quoi que ce soit.

    Raises:
        OSError: Si l'adresse est deja utilisee ou interdite.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def serve(settings: SyncSettings, sock: socket.socket) -> None:
    """Sert l'application FastAPI sur le socket deja ouvert."""
    config = uvicorn.Config(
        create_app(),
        host=settings.listen_host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )
    uvicorn.Server(config).run(sockets=[sock])


def main(settings: Optional[SyncSettings] = None) -> int:
    """
    Lance le processus.

    Returns:
        Code retour du processus.
    """
    if settings is None:
        try:
            settings = load_settings()
        except ConfigError as e:
            configure_logging()
            logger.error("config_invalid", error=str(e), fields=list(e.fields))
            return EXIT_CONFIG_INVALID

    configure_logging(json_logs=settings.json_logs, log_level=settings.log_level)
    logger.info("replica_sync_starting", version=__version__)

    try:
        sock = bind_socket(settings.listen_host, settings.port)
    except OSError as e:
        logger.error(
            "server_bind_failed",
            host=settings.listen_host,
            port=settings.port,
            error=str(e),
        )
        return EXIT_BIND_FAILED

    scheduler = SyncScheduler(settings)
    scheduler.start()

    try:
        logger.info("server_listening", host=settings.listen_host, port=settings.port)
        serve(settings, sock)
    finally:
        scheduler.stop()
        sock.close()

    return 0


def cli() -> None:
    """Point d'entree console."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
