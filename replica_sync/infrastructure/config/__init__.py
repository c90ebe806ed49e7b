"""
Config Infrastructure - Configuration chargee depuis l'environnement.
"""

from replica_sync.infrastructure.config.settings import SyncSettings, load_settings

__all__ = ["SyncSettings", "load_settings"]
