"""
Logging Infrastructure - Logging structure avec structlog.

Responsabilite:
---------------
Fournir une ligne de log horodatee par transition d'etape, retry
et epuisement des tentatives.

Usage:
------
    from replica_sync.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("dump_started", artifact="2024-01-15T03-00-00.000000Z.sql")
"""

from replica_sync.infrastructure.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
