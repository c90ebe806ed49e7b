"""
Logging Config - Configuration structlog.

Responsabilite unique:
----------------------
Configurer structlog (timestamp, niveau, logger, message) pour la console
et journaliser les requetes HTTP du serveur de liveness.

Modes:
------
- Development: Pretty print, couleurs
- Production: JSON, timestamp ISO

Usage:
------
    from replica_sync.infrastructure.logging import configure_logging, get_logger

    configure_logging(json_logs=True)
    logger = get_logger("replica_sync")
    logger.info("started", version="1.0")
"""

import logging
import sys
import time
from typing import Optional

import structlog


def configure_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
) -> None:
    """
    Configure le logging global.

    Args:
        json_logs: True pour JSON (production), False pour pretty.
        log_level: Niveau minimum (DEBUG, INFO, WARNING, ERROR).
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )

    # APScheduler logue chaque execution de job en INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Retourne un logger structure.

    Args:
        name: Nom du logger (module name).

    Returns:
        Logger structlog.
    """
    return structlog.get_logger(name)


class RequestLogger:
    """
    Middleware FastAPI: une ligne par requete.

    Les sondes de liveness interrogent GET / en boucle, la ligne est
    donc emise en DEBUG sauf pour les reponses en erreur.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or get_logger("replica_sync.http")

    async def __call__(self, request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)

        log = self._logger.debug if response.status_code < 400 else self._logger.warning
        log(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
